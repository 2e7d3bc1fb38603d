from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from uuid_utils import UUID

from src.platform.logging.loguru_io import Logger
from src.service.box_office.app.interface.i_event_query_repo import IEventQueryRepo
from src.service.box_office.domain.entity.event_entity import Event
from src.service.box_office.driven_adapter.model.event_model import EventModel
from src.service.box_office.driven_adapter.repo.model_mapper import event_to_entity, to_pg_uuid


class EventQueryRepoImpl(IEventQueryRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def get_by_id(self, *, event_id: UUID) -> Optional[Event]:
        # populate_existing: the identity map must not hide counters written by
        # the compare-and-set UPDATE statements
        result = await self.session.execute(
            select(EventModel)
            .where(EventModel.id == to_pg_uuid(event_id))
            .execution_options(populate_existing=True)
        )
        db_event = result.scalar_one_or_none()
        return event_to_entity(db_event) if db_event else None

    @Logger.io
    async def list_by_organiser(self, *, organiser_id: int) -> List[Event]:
        result = await self.session.execute(
            select(EventModel)
            .where(EventModel.organiser_id == organiser_id)
            .order_by(EventModel.starts_at)
            .execution_options(populate_existing=True)
        )
        return [event_to_entity(db_event) for db_event in result.scalars().all()]
