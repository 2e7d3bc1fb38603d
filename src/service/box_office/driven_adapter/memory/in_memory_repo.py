from datetime import datetime, timezone
from typing import List, Optional

import anyio.lowlevel
import attrs
from uuid_utils import UUID

from src.platform.logging.loguru_io import Logger
from src.service.box_office.app.dto.report_dto import StatusTally
from src.service.box_office.app.interface.i_booking_command_repo import IBookingCommandRepo
from src.service.box_office.app.interface.i_booking_query_repo import IBookingQueryRepo
from src.service.box_office.app.interface.i_event_command_repo import IEventCommandRepo
from src.service.box_office.app.interface.i_event_query_repo import IEventQueryRepo
from src.service.box_office.domain.entity.booking_entity import Booking
from src.service.box_office.domain.entity.event_entity import Event
from src.service.box_office.domain.enum.booking_status import BookingStatus, RegistrationType
from src.service.box_office.driven_adapter.memory.in_memory_store import InMemoryStore, UndoLog


_ACTIVE_STATUSES = (BookingStatus.CONFIRMED, BookingStatus.USED)


def _newest_first(bookings: List[Booking]) -> List[Booking]:
    epoch = datetime.min.replace(tzinfo=timezone.utc)
    return sorted(bookings, key=lambda b: (b.created_at or epoch, str(b.id)), reverse=True)


# =============================================================================
# Events
# =============================================================================


class InMemoryEventCommandRepo(IEventCommandRepo):
    def __init__(self, *, store: InMemoryStore, undo_log: UndoLog) -> None:
        self.store = store
        self.undo_log = undo_log

    @Logger.io
    async def create(self, *, event: Event) -> Event:
        await anyio.lowlevel.checkpoint()
        key = str(event.id)
        self.store.events[key] = attrs.evolve(event)
        self.undo_log.append(lambda: self.store.events.pop(key, None))
        return attrs.evolve(event)

    @Logger.io
    async def update(self, *, event: Event) -> Optional[Event]:
        await anyio.lowlevel.checkpoint()
        key = str(event.id)
        previous = self.store.events.get(key)
        if previous is None or previous.version != event.version:
            return None

        stored = attrs.evolve(
            event, version=previous.version + 1, updated_at=datetime.now(timezone.utc)
        )
        self.store.events[key] = stored

        def undo() -> None:
            latest = self.store.events.get(key)
            if latest is not None:
                # Keep counters written by other units of work meanwhile
                self.store.events[key] = attrs.evolve(
                    previous,
                    available_tickets=latest.available_tickets,
                    sold_tickets=latest.sold_tickets,
                    version=latest.version + 1,
                )

        self.undo_log.append(undo)
        return attrs.evolve(stored)

    @Logger.io
    async def compare_and_set_inventory(
        self,
        *,
        event_id: UUID,
        expected_version: int,
        available_tickets: int,
        sold_tickets: int,
    ) -> Optional[int]:
        await anyio.lowlevel.checkpoint()
        key = str(event_id)
        current = self.store.events.get(key)
        if current is None or current.version != expected_version:
            return None

        delta_available = available_tickets - current.available_tickets
        delta_sold = sold_tickets - current.sold_tickets
        new_version = current.version + 1
        self.store.events[key] = attrs.evolve(
            current,
            available_tickets=available_tickets,
            sold_tickets=sold_tickets,
            version=new_version,
            updated_at=datetime.now(timezone.utc),
        )

        def undo() -> None:
            latest = self.store.events.get(key)
            if latest is not None:
                self.store.events[key] = attrs.evolve(
                    latest,
                    available_tickets=latest.available_tickets - delta_available,
                    sold_tickets=latest.sold_tickets - delta_sold,
                    version=latest.version + 1,
                )

        self.undo_log.append(undo)
        return new_version


class InMemoryEventQueryRepo(IEventQueryRepo):
    def __init__(self, *, store: InMemoryStore) -> None:
        self.store = store

    @Logger.io
    async def get_by_id(self, *, event_id: UUID) -> Optional[Event]:
        await anyio.lowlevel.checkpoint()
        event = self.store.events.get(str(event_id))
        return attrs.evolve(event) if event is not None else None

    @Logger.io
    async def list_by_organiser(self, *, organiser_id: int) -> List[Event]:
        await anyio.lowlevel.checkpoint()
        events = [e for e in self.store.events.values() if e.organiser_id == organiser_id]
        return [attrs.evolve(e) for e in sorted(events, key=lambda e: e.starts_at)]


# =============================================================================
# Bookings
# =============================================================================


class InMemoryBookingCommandRepo(IBookingCommandRepo):
    def __init__(self, *, store: InMemoryStore, undo_log: UndoLog) -> None:
        self.store = store
        self.undo_log = undo_log

    @Logger.io
    async def create(self, *, booking: Booking) -> Booking:
        await anyio.lowlevel.checkpoint()
        key = str(booking.id)
        self.store.bookings[key] = attrs.evolve(booking)
        self.undo_log.append(lambda: self.store.bookings.pop(key, None))
        return attrs.evolve(booking)

    @Logger.io
    async def compare_and_set_status(
        self, *, booking: Booking, expected_status: BookingStatus
    ) -> bool:
        await anyio.lowlevel.checkpoint()
        key = str(booking.id)
        previous = self.store.bookings.get(key)
        if previous is None or previous.status != expected_status:
            return False

        self.store.bookings[key] = attrs.evolve(
            previous,
            status=booking.status,
            checked_in_at=booking.checked_in_at,
            checked_in_by=booking.checked_in_by,
            check_in_method=booking.check_in_method,
            cancelled_at=booking.cancelled_at,
            updated_at=booking.updated_at or datetime.now(timezone.utc),
        )

        def undo() -> None:
            latest = self.store.bookings.get(key)
            if latest is not None and latest.status == booking.status:
                self.store.bookings[key] = previous

        self.undo_log.append(undo)
        return True


class InMemoryBookingQueryRepo(IBookingQueryRepo):
    def __init__(self, *, store: InMemoryStore) -> None:
        self.store = store

    @Logger.io
    async def get_by_id(self, *, booking_id: UUID) -> Optional[Booking]:
        await anyio.lowlevel.checkpoint()
        booking = self.store.bookings.get(str(booking_id))
        return attrs.evolve(booking) if booking is not None else None

    @Logger.io
    async def list_by_event(
        self, *, event_id: UUID, status: Optional[BookingStatus] = None
    ) -> List[Booking]:
        await anyio.lowlevel.checkpoint()
        bookings = [
            attrs.evolve(b)
            for b in self.store.bookings.values()
            if str(b.event_id) == str(event_id) and (status is None or b.status == status)
        ]
        return _newest_first(bookings)

    @Logger.io
    async def list_by_user(self, *, user_id: int) -> List[Booking]:
        await anyio.lowlevel.checkpoint()
        return _newest_first(
            [attrs.evolve(b) for b in self.store.bookings.values() if b.user_id == user_id]
        )

    @Logger.io
    async def get_active_by_user_and_event(
        self,
        *,
        user_id: int,
        event_id: UUID,
        registration_type: Optional[RegistrationType] = None,
    ) -> Optional[Booking]:
        await anyio.lowlevel.checkpoint()
        matches = [
            b
            for b in self.store.bookings.values()
            if b.user_id == user_id
            and str(b.event_id) == str(event_id)
            and b.status in _ACTIVE_STATUSES
            and (registration_type is None or b.registration_type == registration_type)
        ]
        if not matches:
            return None
        return attrs.evolve(_newest_first(matches)[0])

    @Logger.io
    async def tally_by_status(self, *, event_ids: List[UUID]) -> dict[BookingStatus, StatusTally]:
        await anyio.lowlevel.checkpoint()
        wanted = {str(event_id) for event_id in event_ids}
        tallies: dict[BookingStatus, StatusTally] = {}
        for booking in self.store.bookings.values():
            if str(booking.event_id) not in wanted:
                continue
            tally = tallies.get(booking.status, StatusTally())
            tallies[booking.status] = StatusTally(
                bookings=tally.bookings + 1, tickets=tally.tickets + booking.quantity
            )
        return tallies

    @Logger.io
    async def count_created_between(
        self, *, event_ids: List[UUID], start: datetime, end: datetime
    ) -> int:
        await anyio.lowlevel.checkpoint()
        wanted = {str(event_id) for event_id in event_ids}
        return sum(
            1
            for b in self.store.bookings.values()
            if str(b.event_id) in wanted and b.created_at is not None and start <= b.created_at < end
        )
