from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import CustomBaseError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.box_office_metrics import metrics
from src.service.box_office.app.service.inventory_ledger import InventoryLedger
from src.service.box_office.domain.entity.booking_entity import Booking
from src.service.box_office.domain.enum.booking_status import BookingStatus
from src.service.box_office.domain.exception import (
    BookingNotFoundError,
    InvalidTransitionError,
)


class CancelBookingUseCase:
    """
    Cancel a confirmed booking and give its tickets back

    confirmed -> cancelled is a compare-and-set on the booking status, and the
    release runs in the same unit of work. Anything but a confirmed booking is
    an InvalidTransition on every call, with inventory untouched.
    """

    def __init__(self, *, uow_factory: UnitOfWorkFactory, ledger: InventoryLedger) -> None:
        self.uow_factory = uow_factory
        self.ledger = ledger
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work_factory]),
        ledger: InventoryLedger = Depends(Provide[Container.inventory_ledger]),
    ) -> Self:
        return cls(uow_factory=uow_factory, ledger=ledger)

    @Logger.io
    async def cancel_booking(self, *, booking_id: UUID, user_id: Optional[int] = None) -> Booking:
        """
        Args:
            booking_id: Booking to cancel
            user_id: When given, the booking must belong to this user

        Raises:
            BookingNotFoundError: no such booking (or not the caller's)
            InvalidTransitionError: booking is not confirmed
            InventoryContentionError: release could not get through
        """
        with self.tracer.start_as_current_span(
            'use_case.cancel_booking', attributes={'booking.id': str(booking_id)}
        ):
            try:
                cancelled = await self._cancel(booking_id=booking_id, user_id=user_id)
            except CustomBaseError as e:
                metrics.record_cancellation(result=str(getattr(e, 'code', 'rejected')))
                raise

            metrics.record_cancellation(result='cancelled')
            Logger.base.info(
                f'🚫 [CANCEL-BOOKING] Booking {booking_id} cancelled, '
                f'{cancelled.quantity} tickets released to event {cancelled.event_id}'
            )
            return cancelled

    async def _cancel(self, *, booking_id: UUID, user_id: Optional[int]) -> Booking:
        async with self.uow_factory() as uow:
            booking = await uow.booking_query_repo.get_by_id(booking_id=booking_id)
            if booking is None or (user_id is not None and booking.user_id != user_id):
                raise BookingNotFoundError(f'Booking {booking_id} not found')

            cancelled = booking.cancel()
            won = await uow.booking_command_repo.compare_and_set_status(
                booking=cancelled, expected_status=BookingStatus.CONFIRMED
            )
            if not won:
                raise InvalidTransitionError(f'Booking {booking_id} is no longer confirmed')

            await self.ledger.release(uow=uow, event_id=booking.event_id, quantity=booking.quantity)
            await uow.commit()

        return cancelled
