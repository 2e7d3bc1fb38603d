"""
In-memory store for single-process runs and tests

Writes are applied to the shared store immediately, in the same event-loop
step as the compare-and-set check, so concurrent coroutines observe the same
conflicts a database would report. Each unit of work keeps an undo log and
replays it on rollback. Uncommitted writes are visible to other units of work
(no isolation); the compare-and-set guards still hold.
"""

from typing import Callable, Dict, List

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.service.box_office.domain.entity.booking_entity import Booking
from src.service.box_office.domain.entity.event_entity import Event


UndoLog = List[Callable[[], None]]


class InMemoryStore:
    def __init__(self) -> None:
        self.events: Dict[str, Event] = {}
        self.bookings: Dict[str, Booking] = {}

    def clear(self) -> None:
        self.events.clear()
        self.bookings.clear()


class InMemoryUnitOfWork(AbstractUnitOfWork):
    def __init__(self, *, store: InMemoryStore) -> None:
        self.store = store
        self._undo_log: UndoLog = []

    async def __aenter__(self) -> AbstractUnitOfWork:
        from src.service.box_office.driven_adapter.memory.in_memory_repo import (
            InMemoryBookingCommandRepo,
            InMemoryBookingQueryRepo,
            InMemoryEventCommandRepo,
            InMemoryEventQueryRepo,
        )

        self._undo_log = []
        self.event_command_repo = InMemoryEventCommandRepo(
            store=self.store, undo_log=self._undo_log
        )
        self.event_query_repo = InMemoryEventQueryRepo(store=self.store)
        self.booking_command_repo = InMemoryBookingCommandRepo(
            store=self.store, undo_log=self._undo_log
        )
        self.booking_query_repo = InMemoryBookingQueryRepo(store=self.store)
        return await super().__aenter__()

    async def _commit(self) -> None:
        self._undo_log.clear()

    async def rollback(self) -> None:
        while self._undo_log:
            undo = self._undo_log.pop()
            undo()
