"""
Row <-> entity conversion

SQLAlchemy with as_uuid=True returns stdlib uuid.UUID; the domain uses
uuid_utils.UUID, so ids are converted through their string form both ways.
"""

import uuid
from typing import Any, Optional

from uuid_utils import UUID

from src.service.box_office.domain.entity.booking_entity import Booking
from src.service.box_office.domain.entity.event_entity import Event
from src.service.box_office.domain.enum.booking_status import (
    BookingStatus,
    CheckInMethod,
    RegistrationType,
)
from src.service.box_office.domain.enum.event_status import EventStatus, EventType
from src.service.box_office.driven_adapter.model.booking_model import BookingModel
from src.service.box_office.driven_adapter.model.event_model import EventModel


def to_pg_uuid(value: Any) -> uuid.UUID:
    return uuid.UUID(str(value))


def event_to_entity(db_event: EventModel) -> Event:
    return Event(
        id=UUID(str(db_event.id)),
        organiser_id=db_event.organiser_id,
        name=db_event.name,
        description=db_event.description,
        starts_at=db_event.starts_at,
        ends_at=db_event.ends_at,
        total_tickets=db_event.total_tickets,
        available_tickets=db_event.available_tickets,
        sold_tickets=db_event.sold_tickets,
        price=db_event.price,
        type=EventType(db_event.type),
        status=EventStatus(db_event.status),
        version=db_event.version,
        created_at=db_event.created_at,
        updated_at=db_event.updated_at,
        archived_at=db_event.archived_at,
    )


def event_to_model(event: Event) -> EventModel:
    return EventModel(
        id=to_pg_uuid(event.id),
        organiser_id=event.organiser_id,
        name=event.name,
        description=event.description,
        starts_at=event.starts_at,
        ends_at=event.ends_at,
        total_tickets=event.total_tickets,
        available_tickets=event.available_tickets,
        sold_tickets=event.sold_tickets,
        price=event.price,
        type=event.type.value,
        status=event.status.value,
        version=event.version,
        created_at=event.created_at,
        updated_at=event.updated_at,
        archived_at=event.archived_at,
    )


def _check_in_method(value: Optional[str]) -> Optional[CheckInMethod]:
    return CheckInMethod(value) if value else None


def booking_to_entity(db_booking: BookingModel) -> Booking:
    return Booking(
        id=UUID(str(db_booking.id)),
        event_id=UUID(str(db_booking.event_id)),
        user_id=db_booking.user_id,
        ticket_id=db_booking.ticket_id,
        quantity=db_booking.quantity,
        total_price=db_booking.total_price,
        registration_type=RegistrationType(db_booking.registration_type),
        status=BookingStatus(db_booking.status),
        checked_in_at=db_booking.checked_in_at,
        checked_in_by=db_booking.checked_in_by,
        check_in_method=_check_in_method(db_booking.check_in_method),
        created_at=db_booking.created_at,
        updated_at=db_booking.updated_at,
        cancelled_at=db_booking.cancelled_at,
    )


def booking_to_model(booking: Booking) -> BookingModel:
    return BookingModel(
        id=to_pg_uuid(booking.id),
        event_id=to_pg_uuid(booking.event_id),
        user_id=booking.user_id,
        ticket_id=booking.ticket_id,
        quantity=booking.quantity,
        total_price=booking.total_price,
        registration_type=booking.registration_type.value,
        status=booking.status.value,
        checked_in_at=booking.checked_in_at,
        checked_in_by=booking.checked_in_by,
        check_in_method=booking.check_in_method.value if booking.check_in_method else None,
        created_at=booking.created_at,
        updated_at=booking.updated_at,
        cancelled_at=booking.cancelled_at,
    )
