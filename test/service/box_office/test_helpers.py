"""Shared builders for box office tests."""

from datetime import datetime, timedelta, timezone
from typing import Optional

import attrs
from uuid_utils import UUID

from src.service.box_office.domain.entity.booking_entity import Booking
from src.service.box_office.domain.entity.event_entity import Event
from src.service.box_office.domain.enum.booking_status import BookingStatus, RegistrationType
from src.service.box_office.domain.enum.event_status import EventStatus
from src.service.box_office.driven_adapter.memory.in_memory_store import InMemoryStore


ORGANISER_ID = 1
STAFF_ID = 7
ANOTHER_STAFF_ID = 8
USER_ID = 42
ANOTHER_USER_ID = 43


def build_event(
    *,
    total_tickets: int = 10,
    price: int = 0,
    status: EventStatus = EventStatus.PUBLISHED,
    organiser_id: int = ORGANISER_ID,
    starts_at: Optional[datetime] = None,
    ends_at: Optional[datetime] = None,
    name: str = 'Friday Jazz Night',
) -> Event:
    start = starts_at or datetime.now(timezone.utc) + timedelta(days=7)
    event = Event.create(
        organiser_id=organiser_id,
        name=name,
        description='Live quartet',
        starts_at=start,
        ends_at=ends_at or start + timedelta(hours=4),
        total_tickets=total_tickets,
        price=price,
    )
    return attrs.evolve(event, status=status)


def build_booking(
    *,
    event_id: UUID,
    user_id: int = USER_ID,
    quantity: int = 1,
    status: BookingStatus = BookingStatus.CONFIRMED,
    registration_type: RegistrationType = RegistrationType.PURCHASE,
    unit_price: int = 0,
) -> Booking:
    booking = Booking.create(
        event_id=event_id,
        user_id=user_id,
        quantity=quantity,
        registration_type=registration_type,
        unit_price=unit_price,
        max_quantity=100,
    )
    return attrs.evolve(booking, status=status)


class EventSeeder:
    """Put events and bookings into an InMemoryStore with consistent counters"""

    def __init__(self, *, store: InMemoryStore) -> None:
        self.store = store

    def event(self, **kwargs) -> Event:
        event = build_event(**kwargs)
        self.store.events[str(event.id)] = event
        return event

    def booking(self, *, event: Event, **kwargs) -> Booking:
        booking = build_booking(event_id=event.id, unit_price=event.price, **kwargs)
        if booking.status in (BookingStatus.CONFIRMED, BookingStatus.USED):
            current = self.store.events[str(event.id)]
            self.store.events[str(event.id)] = attrs.evolve(
                current,
                available_tickets=current.available_tickets - booking.quantity,
                sold_tickets=current.sold_tickets + booking.quantity,
                version=current.version + 1,
            )
        if booking.status == BookingStatus.USED:
            booking = attrs.evolve(
                booking,
                checked_in_at=datetime.now(timezone.utc),
                checked_in_by=STAFF_ID,
            )
        self.store.bookings[str(booking.id)] = booking
        return booking

    def current_event(self, event_id: UUID) -> Event:
        return self.store.events[str(event_id)]

    def current_booking(self, booking_id: UUID) -> Booking:
        return self.store.bookings[str(booking_id)]
