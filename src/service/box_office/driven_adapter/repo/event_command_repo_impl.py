from typing import Optional

import attrs
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import func
from uuid_utils import UUID

from src.platform.logging.loguru_io import Logger
from src.service.box_office.app.interface.i_event_command_repo import IEventCommandRepo
from src.service.box_office.domain.entity.event_entity import Event
from src.service.box_office.driven_adapter.model.event_model import EventModel
from src.service.box_office.driven_adapter.repo.model_mapper import event_to_model, to_pg_uuid


class EventCommandRepoImpl(IEventCommandRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def create(self, *, event: Event) -> Event:
        self.session.add(event_to_model(event))
        await self.session.flush()
        return event

    @Logger.io
    async def update(self, *, event: Event) -> Optional[Event]:
        stmt = (
            update(EventModel)
            .where(EventModel.id == to_pg_uuid(event.id), EventModel.version == event.version)
            .values(
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
                archived_at=event.archived_at,
                version=EventModel.version + 1,
                updated_at=func.now(),
            )
            .returning(EventModel.version, EventModel.updated_at)
            .execution_options(synchronize_session=False)
        )
        row = (await self.session.execute(stmt)).one_or_none()
        if row is None:
            return None
        return attrs.evolve(event, version=row.version, updated_at=row.updated_at)

    @Logger.io
    async def compare_and_set_inventory(
        self,
        *,
        event_id: UUID,
        expected_version: int,
        available_tickets: int,
        sold_tickets: int,
    ) -> Optional[int]:
        # Row lock taken by the UPDATE serialises concurrent writers; the loser
        # re-evaluates the version predicate after the winner commits
        stmt = (
            update(EventModel)
            .where(EventModel.id == to_pg_uuid(event_id), EventModel.version == expected_version)
            .values(
                available_tickets=available_tickets,
                sold_tickets=sold_tickets,
                version=EventModel.version + 1,
                updated_at=func.now(),
            )
            .returning(EventModel.version)
            .execution_options(synchronize_session=False)
        )
        return (await self.session.execute(stmt)).scalar_one_or_none()
