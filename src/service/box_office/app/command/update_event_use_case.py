from datetime import datetime
from typing import Callable, Optional, Self

import anyio
from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.logging.loguru_io import Logger
from src.service.box_office.app.interface.i_notification_dispatcher import (
    INotificationDispatcher,
)
from src.service.box_office.app.service.inventory_ledger import InventoryLedger
from src.service.box_office.app.service.notification_helper import dispatch_after_commit
from src.service.box_office.domain.domain_event.box_office_domain_event import (
    EventCancelledDomainEvent,
    EventChangedDomainEvent,
)
from src.service.box_office.domain.entity.event_entity import Event
from src.service.box_office.domain.exception import (
    EventNotFoundError,
    InventoryContentionError,
)


_NOTIFIED_FIELDS = ('name', 'description', 'starts_at', 'ends_at', 'price')


class UpdateEventUseCase:
    """
    Organiser-side event lifecycle: edit, resize (draft only), publish,
    cancel, archive.

    Each operation reads the event, applies the domain transition and writes
    it back conditioned on the version it read. A concurrent writer (usually
    the ledger) makes the write miss; the transition is then re-applied to a
    fresh read with the ledger's backoff, and InventoryContentionError is
    raised only once the ledger's attempt budget is spent.
    """

    def __init__(
        self,
        *,
        uow_factory: UnitOfWorkFactory,
        notification_dispatcher: INotificationDispatcher,
        ledger: InventoryLedger,
    ) -> None:
        self.uow_factory = uow_factory
        self.notification_dispatcher = notification_dispatcher
        self.ledger = ledger
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work_factory]),
        notification_dispatcher: INotificationDispatcher = Depends(
            Provide[Container.notification_dispatcher]
        ),
        ledger: InventoryLedger = Depends(Provide[Container.inventory_ledger]),
    ) -> Self:
        return cls(
            uow_factory=uow_factory,
            notification_dispatcher=notification_dispatcher,
            ledger=ledger,
        )

    @Logger.io
    async def update_details(
        self,
        *,
        event_id: UUID,
        name: Optional[str] = None,
        description: Optional[str] = None,
        starts_at: Optional[datetime] = None,
        ends_at: Optional[datetime] = None,
        price: Optional[int] = None,
    ) -> Event:
        previous, updated = await self._transition(
            event_id=event_id,
            operation='update_details',
            apply=lambda event: event.update_details(
                name=name,
                description=description,
                starts_at=starts_at,
                ends_at=ends_at,
                price=price,
            ),
        )
        changed = tuple(
            field
            for field in _NOTIFIED_FIELDS
            if getattr(previous, field) != getattr(updated, field)
        )
        if changed:
            await dispatch_after_commit(
                notification=self.notification_dispatcher.event_changed(
                    event=EventChangedDomainEvent.from_event(event=updated, changed_fields=changed)
                ),
                description=f'event_changed for {event_id}',
            )
        return updated

    @Logger.io
    async def set_total_tickets(self, *, event_id: UUID, total_tickets: int) -> Event:
        _, updated = await self._transition(
            event_id=event_id,
            operation='set_total_tickets',
            apply=lambda event: event.set_total_tickets(total_tickets=total_tickets),
        )
        return updated

    @Logger.io
    async def publish(self, *, event_id: UUID) -> Event:
        _, updated = await self._transition(
            event_id=event_id, operation='publish', apply=lambda event: event.publish()
        )
        return updated

    @Logger.io
    async def cancel_event(self, *, event_id: UUID) -> Event:
        _, updated = await self._transition(
            event_id=event_id, operation='cancel_event', apply=lambda event: event.cancel()
        )
        await dispatch_after_commit(
            notification=self.notification_dispatcher.event_cancelled(
                event=EventCancelledDomainEvent.from_event(event=updated)
            ),
            description=f'event_cancelled for {event_id}',
        )
        return updated

    @Logger.io
    async def archive_event(self, *, event_id: UUID) -> Event:
        _, updated = await self._transition(
            event_id=event_id, operation='archive_event', apply=lambda event: event.archive()
        )
        return updated

    async def _transition(
        self,
        *,
        event_id: UUID,
        operation: str,
        apply: Callable[[Event], Event],
    ) -> tuple[Event, Event]:
        with self.tracer.start_as_current_span(
            f'use_case.{operation}', attributes={'event.id': str(event_id)}
        ) as span:
            attempts = self.ledger.max_attempts
            for attempt in range(attempts):
                async with self.uow_factory() as uow:
                    previous = await uow.event_query_repo.get_by_id(event_id=event_id)
                    if previous is None:
                        raise EventNotFoundError(f'Event {event_id} not found')

                    stored = await uow.event_command_repo.update(event=apply(previous))
                    if stored is not None:
                        await uow.commit()

                if stored is not None:
                    span.set_attribute('use_case.attempts', attempt + 1)
                    Logger.base.info(
                        f'🎪 [UPDATE-EVENT] {operation} on event {event_id}: '
                        f'{previous.status} -> {stored.status} (v{stored.version})'
                    )
                    return previous, stored

                Logger.base.debug(
                    f'🔁 [UPDATE-EVENT] Version conflict on {operation} for event {event_id} '
                    f'(attempt {attempt + 1}/{attempts})'
                )
                if attempt + 1 < attempts:
                    await anyio.sleep(self.ledger.backoff_delay(attempt=attempt))

            raise InventoryContentionError(
                f'Event {event_id} kept changing while applying {operation}, retry'
            )
