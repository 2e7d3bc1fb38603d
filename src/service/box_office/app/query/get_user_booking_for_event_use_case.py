from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.logging.loguru_io import Logger
from src.service.box_office.domain.entity.booking_entity import Booking


class GetUserBookingForEventUseCase:
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
    async def get_user_booking(self, *, user_id: int, event_id: UUID) -> Optional[Booking]:
        """The user's active (confirmed or used) booking for the event, or None."""
        async with self.uow_factory() as uow:
            return await uow.booking_query_repo.get_active_by_user_and_event(
                user_id=user_id, event_id=event_id
            )
