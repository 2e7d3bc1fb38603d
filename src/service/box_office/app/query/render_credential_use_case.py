from typing import Self

import attrs
from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.logging.loguru_io import Logger
from src.service.box_office.domain.enum.booking_status import BookingStatus
from src.service.box_office.domain.exception import BookingNotFoundError
from src.service.box_office.domain.ticket_credential_codec import TicketCredentialCodec


@attrs.define(frozen=True)
class RenderedCredential:
    booking_id: UUID
    event_id: UUID
    ticket_id: str
    status: BookingStatus
    credential: str


class RenderCredentialUseCase:
    """Regenerate the scannable credential of a booking; nothing is stored."""

    def __init__(self, *, uow_factory: UnitOfWorkFactory, codec: TicketCredentialCodec) -> None:
        self.uow_factory = uow_factory
        self.codec = codec

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work_factory]),
        codec: TicketCredentialCodec = Depends(Provide[Container.ticket_credential_codec]),
    ) -> Self:
        return cls(uow_factory=uow_factory, codec=codec)

    @Logger.io
    async def render(self, *, booking_id: UUID) -> RenderedCredential:
        async with self.uow_factory() as uow:
            booking = await uow.booking_query_repo.get_by_id(booking_id=booking_id)

        if booking is None:
            raise BookingNotFoundError(f'Booking {booking_id} not found')

        return RenderedCredential(
            booking_id=booking.id,
            event_id=booking.event_id,
            ticket_id=booking.ticket_id,
            status=booking.status,
            credential=self.codec.encode(
                event_id=booking.event_id, booking_id=booking.id, ticket_id=booking.ticket_id
            ),
        )
