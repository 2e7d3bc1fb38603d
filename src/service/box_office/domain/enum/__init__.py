"""Box Office Domain Enums"""

from src.service.box_office.domain.enum.booking_status import (
    BookingStatus,
    CheckInMethod,
    RegistrationType,
)
from src.service.box_office.domain.enum.event_status import EventStatus, EventType

__all__ = ['BookingStatus', 'CheckInMethod', 'EventStatus', 'EventType', 'RegistrationType']
