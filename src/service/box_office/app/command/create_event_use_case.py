from datetime import datetime
from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.logging.loguru_io import Logger
from src.service.box_office.domain.entity.event_entity import Event
from src.service.box_office.domain.enum.event_status import EventType


class CreateEventUseCase:
    def __init__(self, *, uow_factory: UnitOfWorkFactory) -> None:
        self.uow_factory = uow_factory
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work_factory]),
    ) -> Self:
        return cls(uow_factory=uow_factory)

    @Logger.io
    async def create_event(
        self,
        *,
        organiser_id: int,
        name: str,
        description: str = '',
        starts_at: datetime,
        ends_at: datetime,
        total_tickets: int,
        price: int = 0,
        type: Optional[EventType] = None,
    ) -> Event:
        """Create a draft event whose counters start at `total_tickets` available."""
        with self.tracer.start_as_current_span('use_case.create_event'):
            event = Event.create(
                organiser_id=organiser_id,
                name=name,
                description=description,
                starts_at=starts_at,
                ends_at=ends_at,
                total_tickets=total_tickets,
                price=price,
                type=type,
            )
            async with self.uow_factory() as uow:
                event = await uow.event_command_repo.create(event=event)
                await uow.commit()

            Logger.base.info(
                f'🎪 [CREATE-EVENT] Draft event {event.id} "{event.name}" '
                f'with {event.total_tickets} tickets for organiser {organiser_id}'
            )
            return event
