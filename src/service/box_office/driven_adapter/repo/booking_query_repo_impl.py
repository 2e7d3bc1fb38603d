from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from uuid_utils import UUID

from src.platform.logging.loguru_io import Logger
from src.service.box_office.app.dto.report_dto import StatusTally
from src.service.box_office.app.interface.i_booking_query_repo import IBookingQueryRepo
from src.service.box_office.domain.entity.booking_entity import Booking
from src.service.box_office.domain.enum.booking_status import BookingStatus, RegistrationType
from src.service.box_office.driven_adapter.model.booking_model import BookingModel
from src.service.box_office.driven_adapter.repo.model_mapper import booking_to_entity, to_pg_uuid


_ACTIVE_STATUSES = (BookingStatus.CONFIRMED.value, BookingStatus.USED.value)


class BookingQueryRepoImpl(IBookingQueryRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def get_by_id(self, *, booking_id: UUID) -> Optional[Booking]:
        result = await self.session.execute(
            select(BookingModel)
            .where(BookingModel.id == to_pg_uuid(booking_id))
            .execution_options(populate_existing=True)
        )
        db_booking = result.scalar_one_or_none()
        return booking_to_entity(db_booking) if db_booking else None

    @Logger.io
    async def list_by_event(
        self, *, event_id: UUID, status: Optional[BookingStatus] = None
    ) -> List[Booking]:
        stmt = select(BookingModel).where(BookingModel.event_id == to_pg_uuid(event_id))
        if status is not None:
            stmt = stmt.where(BookingModel.status == status.value)
        result = await self.session.execute(
            stmt.order_by(BookingModel.created_at.desc(), BookingModel.id.desc()).execution_options(
                populate_existing=True
            )
        )
        return [booking_to_entity(db_booking) for db_booking in result.scalars().all()]

    @Logger.io
    async def list_by_user(self, *, user_id: int) -> List[Booking]:
        result = await self.session.execute(
            select(BookingModel)
            .where(BookingModel.user_id == user_id)
            .order_by(BookingModel.created_at.desc(), BookingModel.id.desc())
            .execution_options(populate_existing=True)
        )
        return [booking_to_entity(db_booking) for db_booking in result.scalars().all()]

    @Logger.io
    async def get_active_by_user_and_event(
        self,
        *,
        user_id: int,
        event_id: UUID,
        registration_type: Optional[RegistrationType] = None,
    ) -> Optional[Booking]:
        stmt = select(BookingModel).where(
            BookingModel.user_id == user_id,
            BookingModel.event_id == to_pg_uuid(event_id),
            BookingModel.status.in_(_ACTIVE_STATUSES),
        )
        if registration_type is not None:
            stmt = stmt.where(BookingModel.registration_type == registration_type.value)
        result = await self.session.execute(
            stmt.order_by(BookingModel.created_at.desc()).limit(1)
        )
        db_booking = result.scalar_one_or_none()
        return booking_to_entity(db_booking) if db_booking else None

    @Logger.io
    async def tally_by_status(self, *, event_ids: List[UUID]) -> dict[BookingStatus, StatusTally]:
        if not event_ids:
            return {}
        result = await self.session.execute(
            select(
                BookingModel.status,
                func.count(BookingModel.id),
                func.coalesce(func.sum(BookingModel.quantity), 0),
            )
            .where(BookingModel.event_id.in_([to_pg_uuid(event_id) for event_id in event_ids]))
            .group_by(BookingModel.status)
        )
        return {
            BookingStatus(status): StatusTally(bookings=int(bookings), tickets=int(tickets))
            for status, bookings, tickets in result.all()
        }

    @Logger.io
    async def count_created_between(
        self, *, event_ids: List[UUID], start: datetime, end: datetime
    ) -> int:
        if not event_ids:
            return 0
        result = await self.session.execute(
            select(func.count(BookingModel.id)).where(
                BookingModel.event_id.in_([to_pg_uuid(event_id) for event_id in event_ids]),
                BookingModel.created_at >= start,
                BookingModel.created_at < end,
            )
        )
        return int(result.scalar_one())
