from typing import List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.logging.loguru_io import Logger
from src.service.box_office.domain.entity.event_entity import Event
from src.service.box_office.domain.exception import EventNotFoundError


class GetEventUseCase:
    def __init__(self, *, uow_factory: UnitOfWorkFactory) -> None:
        self.uow_factory = uow_factory

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work_factory]),
    ) -> Self:
        return cls(uow_factory=uow_factory)

    @Logger.io
    async def get_event(self, *, event_id: UUID) -> Event:
        async with self.uow_factory() as uow:
            event = await uow.event_query_repo.get_by_id(event_id=event_id)

        if event is None:
            raise EventNotFoundError(f'Event {event_id} not found')
        return event

    @Logger.io
    async def list_organiser_events(self, *, organiser_id: int) -> List[Event]:
        async with self.uow_factory() as uow:
            return await uow.event_query_repo.list_by_organiser(organiser_id=organiser_id)
