from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.logging.loguru_io import Logger
from src.service.box_office.domain.entity.booking_entity import Booking
from src.service.box_office.domain.enum.booking_status import BookingStatus
from src.service.box_office.domain.exception import (
    BookingNotFoundError,
    InvalidTransitionError,
)


class RevertCheckInUseCase:
    """
    Administrative override: used -> confirmed, clearing the check-in stamps.

    Not part of the door flow; a scanner can never undo a check-in.
    """

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
    async def revert_check_in(self, *, booking_id: UUID, admin_id: int) -> Booking:
        with self.tracer.start_as_current_span(
            'use_case.revert_check_in', attributes={'booking.id': str(booking_id)}
        ):
            async with self.uow_factory() as uow:
                booking = await uow.booking_query_repo.get_by_id(booking_id=booking_id)
                if booking is None:
                    raise BookingNotFoundError(f'Booking {booking_id} not found')

                reverted = booking.revert_check_in()
                won = await uow.booking_command_repo.compare_and_set_status(
                    booking=reverted, expected_status=BookingStatus.USED
                )
                if not won:
                    raise InvalidTransitionError(f'Booking {booking_id} is no longer checked in')
                await uow.commit()

            Logger.base.warning(
                f'↩️ [REVERT-CHECK-IN] Admin {admin_id} reverted check-in of booking {booking_id} '
                f'(was by staff {booking.checked_in_by} at {booking.checked_in_at})'
            )
            return reverted
