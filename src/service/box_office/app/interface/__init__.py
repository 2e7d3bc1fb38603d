"""Application layer interfaces (Ports)"""

from src.service.box_office.app.interface.i_booking_command_repo import IBookingCommandRepo
from src.service.box_office.app.interface.i_booking_query_repo import IBookingQueryRepo
from src.service.box_office.app.interface.i_event_command_repo import IEventCommandRepo
from src.service.box_office.app.interface.i_event_query_repo import IEventQueryRepo
from src.service.box_office.app.interface.i_notification_dispatcher import (
    INotificationDispatcher,
)

__all__ = [
    'IBookingCommandRepo',
    'IBookingQueryRepo',
    'IEventCommandRepo',
    'IEventQueryRepo',
    'INotificationDispatcher',
]
