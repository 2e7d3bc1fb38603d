from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from src.platform.types import UtilsUUID7
from src.service.box_office.domain.entity.booking_entity import Booking
from src.service.box_office.domain.enum.booking_status import (
    BookingStatus,
    CheckInMethod,
    RegistrationType,
)


class BookingCreateRequest(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            'example': {
                'event_id': '01234567-89ab-7def-0123-456789abcdef',
                'user_id': 42,
                'quantity': 2,
                'registration_type': 'purchase',
            }
        }
    )

    event_id: UtilsUUID7
    user_id: int
    quantity: int
    registration_type: RegistrationType = RegistrationType.RSVP


class BookingCancelRequest(BaseModel):
    user_id: Optional[int] = None


class BookingResponse(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            'example': {
                'id': '01234567-89ab-7def-0123-456789abcdef',
                'event_id': '01234567-89ab-7def-0123-456789abcde0',
                'user_id': 42,
                'ticket_id': 'TK-M5X2A1B3-9QZ0LK',
                'quantity': 2,
                'total_price': 5000,
                'registration_type': 'purchase',
                'status': 'confirmed',
                'checked_in': False,
                'created_at': '2026-01-10T10:30:00Z',
            }
        }
    )

    id: UtilsUUID7
    event_id: UtilsUUID7
    user_id: int
    ticket_id: str
    quantity: int
    total_price: int
    registration_type: RegistrationType
    status: BookingStatus
    checked_in: bool
    checked_in_at: Optional[datetime] = None
    checked_in_by: Optional[int] = None
    check_in_method: Optional[CheckInMethod] = None
    created_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, booking: Booking) -> 'BookingResponse':
        return cls(
            id=booking.id,
            event_id=booking.event_id,
            user_id=booking.user_id,
            ticket_id=booking.ticket_id,
            quantity=booking.quantity,
            total_price=booking.total_price,
            registration_type=booking.registration_type,
            status=booking.status,
            checked_in=booking.is_checked_in,
            checked_in_at=booking.checked_in_at,
            checked_in_by=booking.checked_in_by,
            check_in_method=booking.check_in_method,
            created_at=booking.created_at,
            cancelled_at=booking.cancelled_at,
        )


class CredentialResponse(BaseModel):
    booking_id: UtilsUUID7
    event_id: UtilsUUID7
    ticket_id: str
    status: BookingStatus
    credential: str
