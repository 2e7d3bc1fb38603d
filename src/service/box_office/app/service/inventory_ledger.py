"""
Inventory Ledger

The only writer of an event's available/sold counters. Every change is a
compare-and-set on the event version read in the same unit of work; a
conflict re-reads and retries with bounded exponential backoff and jitter.
"""

import random
from typing import Literal

import anyio
from opentelemetry import trace
from uuid_utils import UUID

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.box_office_metrics import metrics
from src.service.box_office.app.dto.inventory_dto import InventorySnapshot, Reservation
from src.service.box_office.domain.entity.event_entity import Event
from src.service.box_office.domain.exception import (
    EventNotFoundError,
    InvalidQuantityError,
    InventoryContentionError,
    OutOfStockError,
)


_Operation = Literal['reserve', 'release']


class InventoryLedger:
    def __init__(
        self,
        *,
        max_attempts: int,
        backoff_base_seconds: float,
        backoff_max_seconds: float,
    ) -> None:
        if max_attempts < 1:
            raise ValueError('max_attempts must be at least 1')
        self.max_attempts = max_attempts
        self.backoff_base_seconds = backoff_base_seconds
        self.backoff_max_seconds = backoff_max_seconds
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def reserve(
        self, *, uow: AbstractUnitOfWork, event_id: UUID, quantity: int
    ) -> Reservation:
        """
        Take `quantity` tickets from the event's available pool.

        Raises:
            InvalidQuantityError: quantity < 1
            EventNotFoundError: no such event
            EventNotOnSaleError: the event read (first or on retry) is not published
            OutOfStockError: not enough tickets left, or attempts exhausted
        """
        return await self._apply(uow=uow, event_id=event_id, quantity=quantity, operation='reserve')

    @Logger.io
    async def release(
        self, *, uow: AbstractUnitOfWork, event_id: UUID, quantity: int
    ) -> Reservation:
        """
        Return `quantity` tickets to the available pool.

        Raises:
            InvalidQuantityError: quantity < 1
            EventNotFoundError: no such event
            InvalidTransitionError: the release would push available above total
            InventoryContentionError: attempts exhausted
        """
        return await self._apply(uow=uow, event_id=event_id, quantity=quantity, operation='release')

    @Logger.io
    async def snapshot(self, *, uow: AbstractUnitOfWork, event_id: UUID) -> InventorySnapshot:
        event = await self._load_event(uow=uow, event_id=event_id)
        return InventorySnapshot.from_event(event=event)

    async def _apply(
        self,
        *,
        uow: AbstractUnitOfWork,
        event_id: UUID,
        quantity: int,
        operation: _Operation,
    ) -> Reservation:
        if quantity < 1:
            raise InvalidQuantityError('Quantity must be at least 1')

        with self.tracer.start_as_current_span(
            f'ledger.{operation}',
            attributes={'event.id': str(event_id), 'ledger.quantity': quantity},
        ) as span:
            for attempt in range(self.max_attempts):
                event = await self._load_event(uow=uow, event_id=event_id)
                updated = (
                    event.reserve(quantity=quantity)
                    if operation == 'reserve'
                    else event.release(quantity=quantity)
                )

                new_version = await uow.event_command_repo.compare_and_set_inventory(
                    event_id=event_id,
                    expected_version=event.version,
                    available_tickets=updated.available_tickets,
                    sold_tickets=updated.sold_tickets,
                )
                if new_version is not None:
                    span.set_attribute('ledger.attempts', attempt + 1)
                    metrics.update_tickets_available(
                        event_id=str(event_id), available=updated.available_tickets
                    )
                    Logger.base.info(
                        f'📦 [LEDGER] {operation} {quantity} on event {event_id}: '
                        f'available={updated.available_tickets} sold={updated.sold_tickets} '
                        f'v{new_version}'
                    )
                    return Reservation(
                        event_id=event_id,
                        quantity=quantity,
                        available_after=updated.available_tickets,
                        sold_after=updated.sold_tickets,
                        version=new_version,
                    )

                metrics.record_ledger_conflict(operation=operation)
                Logger.base.debug(
                    f'🔁 [LEDGER] Version conflict on event {event_id} '
                    f'(attempt {attempt + 1}/{self.max_attempts})'
                )
                if attempt + 1 < self.max_attempts:
                    await anyio.sleep(self.backoff_delay(attempt=attempt))

            metrics.record_ledger_exhausted(operation=operation)
            Logger.base.warning(
                f'⚠️ [LEDGER] {operation} on event {event_id} gave up after '
                f'{self.max_attempts} attempts'
            )
            if operation == 'reserve':
                raise OutOfStockError(
                    f'Could not reserve {quantity} tickets for event {event_id} under contention'
                )
            raise InventoryContentionError(
                f'Could not release {quantity} tickets for event {event_id} under contention'
            )

    def backoff_delay(self, *, attempt: int) -> float:
        ceiling = min(self.backoff_max_seconds, self.backoff_base_seconds * (2**attempt))
        return random.uniform(ceiling / 2, ceiling)

    @staticmethod
    async def _load_event(*, uow: AbstractUnitOfWork, event_id: UUID) -> Event:
        event = await uow.event_query_repo.get_by_id(event_id=event_id)
        if event is None:
            raise EventNotFoundError(f'Event {event_id} not found')
        return event
