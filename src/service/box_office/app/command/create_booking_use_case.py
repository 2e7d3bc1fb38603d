import time
from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
from uuid_utils import UUID

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import CustomBaseError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.box_office_metrics import metrics
from src.service.box_office.app.interface.i_notification_dispatcher import (
    INotificationDispatcher,
)
from src.service.box_office.app.service.inventory_ledger import InventoryLedger
from src.service.box_office.app.service.notification_helper import dispatch_after_commit
from src.service.box_office.domain.domain_event.box_office_domain_event import (
    BookingCreatedDomainEvent,
)
from src.service.box_office.domain.entity.booking_entity import Booking
from src.service.box_office.domain.enum.booking_status import RegistrationType
from src.service.box_office.domain.exception import (
    DuplicateRsvpError,
    EventNotFoundError,
    EventNotOnSaleError,
)


class CreateBookingUseCase:
    """
    Create a confirmed booking

    Flow (one unit of work):
    1. Event must exist and be published
    2. Quantity within [1, MAX_TICKETS_PER_BOOKING]
    3. At most one active RSVP per (user, event)
    4. Ledger reserves the tickets (compare-and-set on the event counters)
    5. Booking inserted as confirmed, then commit

    Any failure before commit rolls the whole unit of work back, so an
    OutOfStock leaves neither a booking nor a counter change behind.
    booking_created is dispatched after commit and never undoes the booking.
    """

    def __init__(
        self,
        *,
        uow_factory: UnitOfWorkFactory,
        ledger: InventoryLedger,
        notification_dispatcher: INotificationDispatcher,
        max_tickets_per_booking: int,
    ) -> None:
        self.uow_factory = uow_factory
        self.ledger = ledger
        self.notification_dispatcher = notification_dispatcher
        self.max_tickets_per_booking = max_tickets_per_booking
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work_factory]),
        ledger: InventoryLedger = Depends(Provide[Container.inventory_ledger]),
        notification_dispatcher: INotificationDispatcher = Depends(
            Provide[Container.notification_dispatcher]
        ),
        settings: Settings = Depends(Provide[Container.config_service]),
    ) -> Self:
        return cls(
            uow_factory=uow_factory,
            ledger=ledger,
            notification_dispatcher=notification_dispatcher,
            max_tickets_per_booking=settings.MAX_TICKETS_PER_BOOKING,
        )

    @Logger.io
    async def create_booking(
        self,
        *,
        event_id: UUID,
        user_id: int,
        quantity: int,
        registration_type: RegistrationType,
    ) -> Booking:
        started = time.perf_counter()
        with self.tracer.start_as_current_span(
            'use_case.create_booking',
            attributes={
                'event.id': str(event_id),
                'booking.quantity': quantity,
                'booking.registration_type': registration_type.value,
            },
        ):
            try:
                booking, event = await self._create(
                    event_id=event_id,
                    user_id=user_id,
                    quantity=quantity,
                    registration_type=registration_type,
                )
            except CustomBaseError as e:
                metrics.record_booking(
                    registration_type=registration_type.value,
                    result=str(getattr(e, 'code', 'rejected')),
                    duration=time.perf_counter() - started,
                )
                raise

            metrics.record_booking(
                registration_type=registration_type.value,
                result='confirmed',
                duration=time.perf_counter() - started,
            )
            Logger.base.info(
                f'🎟️ [CREATE-BOOKING] Booking {booking.id} confirmed: '
                f'{quantity} x event {event_id} for user {user_id} ({booking.ticket_id})'
            )

            await dispatch_after_commit(
                notification=self.notification_dispatcher.booking_created(
                    event=BookingCreatedDomainEvent.from_booking(booking=booking, event=event)
                ),
                description=f'booking_created for {booking.id}',
            )
            return booking

    async def _create(
        self,
        *,
        event_id: UUID,
        user_id: int,
        quantity: int,
        registration_type: RegistrationType,
    ):
        async with self.uow_factory() as uow:
            event = await uow.event_query_repo.get_by_id(event_id=event_id)
            if event is None:
                raise EventNotFoundError(f'Event {event_id} not found')
            if not event.is_on_sale:
                raise EventNotOnSaleError(f'Event {event_id} is {event.status}, not on sale')

            booking = Booking.create(
                event_id=event.id,
                user_id=user_id,
                quantity=quantity,
                registration_type=registration_type,
                unit_price=event.price,
                max_quantity=self.max_tickets_per_booking,
            )

            if registration_type == RegistrationType.RSVP:
                existing = await uow.booking_query_repo.get_active_by_user_and_event(
                    user_id=user_id, event_id=event_id, registration_type=RegistrationType.RSVP
                )
                if existing is not None:
                    raise DuplicateRsvpError(
                        f'User {user_id} already holds RSVP {existing.id} for event {event_id}'
                    )

            await self.ledger.reserve(uow=uow, event_id=event_id, quantity=quantity)
            booking = await uow.booking_command_repo.create(booking=booking)
            await uow.commit()

        return booking, event
