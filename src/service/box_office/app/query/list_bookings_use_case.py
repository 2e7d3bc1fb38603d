from typing import List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.logging.loguru_io import Logger
from src.service.box_office.domain.entity.booking_entity import Booking
from src.service.box_office.domain.enum.booking_status import BookingStatus
from src.service.box_office.domain.exception import EventNotFoundError


class ListBookingsUseCase:
    """Attendee list for organisers and "my tickets" for users, newest first."""

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
    async def list_event_bookings(
        self, *, event_id: UUID, status: Optional[BookingStatus] = None
    ) -> List[Booking]:
        async with self.uow_factory() as uow:
            event = await uow.event_query_repo.get_by_id(event_id=event_id)
            if event is None:
                raise EventNotFoundError(f'Event {event_id} not found')
            return await uow.booking_query_repo.list_by_event(event_id=event_id, status=status)

    @Logger.io
    async def list_user_bookings(self, *, user_id: int) -> List[Booking]:
        async with self.uow_factory() as uow:
            return await uow.booking_query_repo.list_by_user(user_id=user_id)
