from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import func

from src.platform.logging.loguru_io import Logger
from src.service.box_office.app.interface.i_booking_command_repo import IBookingCommandRepo
from src.service.box_office.domain.entity.booking_entity import Booking
from src.service.box_office.domain.enum.booking_status import BookingStatus
from src.service.box_office.driven_adapter.model.booking_model import BookingModel
from src.service.box_office.driven_adapter.repo.model_mapper import booking_to_model, to_pg_uuid


class BookingCommandRepoImpl(IBookingCommandRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def create(self, *, booking: Booking) -> Booking:
        self.session.add(booking_to_model(booking))
        await self.session.flush()
        return booking

    @Logger.io
    async def compare_and_set_status(
        self, *, booking: Booking, expected_status: BookingStatus
    ) -> bool:
        stmt = (
            update(BookingModel)
            .where(
                BookingModel.id == to_pg_uuid(booking.id),
                BookingModel.status == expected_status.value,
            )
            .values(
                status=booking.status.value,
                checked_in_at=booking.checked_in_at,
                checked_in_by=booking.checked_in_by,
                check_in_method=booking.check_in_method.value if booking.check_in_method else None,
                cancelled_at=booking.cancelled_at,
                updated_at=func.now(),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1  # type: ignore[attr-defined]
