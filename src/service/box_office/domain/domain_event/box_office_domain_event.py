"""
Box Office Domain Events

Emitted after a unit of work commits and handed to the notification
dispatcher. Delivery is best effort; nothing here is part of a transaction.
"""

from datetime import datetime, timezone

import attrs
from uuid_utils import UUID

from src.service.box_office.domain.entity.booking_entity import Booking
from src.service.box_office.domain.entity.event_entity import Event
from src.service.box_office.domain.enum.booking_status import RegistrationType
from src.service.box_office.domain.enum.event_status import EventStatus


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@attrs.frozen
class BookingCreatedDomainEvent:
    """Fired when a booking is confirmed"""

    booking_id: UUID
    event_id: UUID
    user_id: int
    ticket_id: str
    quantity: int
    total_price: int
    registration_type: RegistrationType
    event_name: str
    starts_at: datetime
    occurred_at: datetime = attrs.field(factory=_utc_now)

    @classmethod
    def from_booking(cls, *, booking: Booking, event: Event) -> 'BookingCreatedDomainEvent':
        return cls(
            booking_id=booking.id,
            event_id=booking.event_id,
            user_id=booking.user_id,
            ticket_id=booking.ticket_id,
            quantity=booking.quantity,
            total_price=booking.total_price,
            registration_type=booking.registration_type,
            event_name=event.name,
            starts_at=event.starts_at,
        )


@attrs.frozen
class EventChangedDomainEvent:
    """Fired when an organiser edits the details attendees care about"""

    event_id: UUID
    name: str
    starts_at: datetime
    ends_at: datetime
    status: EventStatus
    changed_fields: tuple[str, ...]
    occurred_at: datetime = attrs.field(factory=_utc_now)

    @classmethod
    def from_event(
        cls, *, event: Event, changed_fields: tuple[str, ...]
    ) -> 'EventChangedDomainEvent':
        return cls(
            event_id=event.id,
            name=event.name,
            starts_at=event.starts_at,
            ends_at=event.ends_at,
            status=event.status,
            changed_fields=changed_fields,
        )


@attrs.frozen
class EventCancelledDomainEvent:
    event_id: UUID
    name: str
    occurred_at: datetime = attrs.field(factory=_utc_now)

    @classmethod
    def from_event(cls, *, event: Event) -> 'EventCancelledDomainEvent':
        return cls(event_id=event.id, name=event.name)
