from datetime import datetime, timedelta, timezone
from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
from uuid_utils import UUID

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork, UnitOfWorkFactory
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.box_office_metrics import metrics
from src.service.box_office.app.dto.check_in_result import CheckInResult
from src.service.box_office.domain.entity.booking_entity import Booking
from src.service.box_office.domain.enum.booking_status import BookingStatus, CheckInMethod
from src.service.box_office.domain.exception import (
    AlreadyUsedError,
    CheckInRejectedError,
    EventExpiredError,
    MalformedCredentialError,
    TicketCancelledError,
    UnknownTicketError,
    WrongEventError,
)
from src.service.box_office.domain.ticket_credential_codec import (
    Parsed,
    TicketCredentialCodec,
)


def _parse_id(raw: str) -> Optional[UUID]:
    try:
        return UUID(raw)
    except ValueError:
        return None


class CheckInUseCase:
    """
    Door check-in validator

    Steps:
    1. Decode the credential (QR flow only)
    2. Load the booking; missing, ticket_id mismatch or a credential naming
       another event than the booking is UnknownTicket
    3. Booking must belong to the scanner's event
    4. cancelled -> TicketCancelled, used -> AlreadyUsed (original stamps)
    5. Optional guard: event ended -> EventExpired
    6. Compare-and-set confirmed -> used with the check-in stamps

    Two scanners racing on one credential both reach step 6; the store lets
    exactly one transition through and the other re-reads and reports
    AlreadyUsed. Every outcome is a CheckInResult; nothing is raised for an
    expected rejection.
    """

    def __init__(
        self,
        *,
        uow_factory: UnitOfWorkFactory,
        codec: TicketCredentialCodec,
        reject_after_event_end: bool = False,
        grace_minutes: int = 0,
    ) -> None:
        self.uow_factory = uow_factory
        self.codec = codec
        self.reject_after_event_end = reject_after_event_end
        self.grace = timedelta(minutes=grace_minutes)
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work_factory]),
        codec: TicketCredentialCodec = Depends(Provide[Container.ticket_credential_codec]),
        settings: Settings = Depends(Provide[Container.config_service]),
    ) -> Self:
        return cls(
            uow_factory=uow_factory,
            codec=codec,
            reject_after_event_end=settings.CHECK_IN_REJECT_AFTER_EVENT_END,
            grace_minutes=settings.CHECK_IN_GRACE_MINUTES,
        )

    @Logger.io
    async def check_in(
        self,
        *,
        raw_payload: str,
        scanner_event_id: UUID,
        staff_id: int,
        method: CheckInMethod = CheckInMethod.QR,
    ) -> CheckInResult:
        with self.tracer.start_as_current_span(
            'use_case.check_in',
            attributes={'event.id': str(scanner_event_id), 'check_in.method': method.value},
        ):
            try:
                booking_id, ticket_id, credential_event_id = self._decode(
                    raw_payload=raw_payload
                )
                checked_in = await self._redeem(
                    booking_id=booking_id,
                    ticket_id=ticket_id,
                    credential_event_id=credential_event_id,
                    scanner_event_id=scanner_event_id,
                    staff_id=staff_id,
                    method=method,
                )
            except CheckInRejectedError as e:
                return self._rejected(error=e, method=method)
            return self._accepted(booking=checked_in, method=method)

    @Logger.io
    async def check_in_booking(
        self,
        *,
        booking_id: UUID,
        scanner_event_id: UUID,
        staff_id: int,
        method: CheckInMethod = CheckInMethod.MANUAL,
    ) -> CheckInResult:
        """Check in by booking reference (manual entry, self check-in); skips decoding."""
        with self.tracer.start_as_current_span(
            'use_case.check_in_booking',
            attributes={'booking.id': str(booking_id), 'check_in.method': method.value},
        ):
            try:
                checked_in = await self._redeem(
                    booking_id=booking_id,
                    ticket_id=None,
                    credential_event_id=None,
                    scanner_event_id=scanner_event_id,
                    staff_id=staff_id,
                    method=method,
                )
            except CheckInRejectedError as e:
                return self._rejected(error=e, method=method)
            return self._accepted(booking=checked_in, method=method)

    @Logger.io
    async def preview(self, *, raw_payload: str, scanner_event_id: UUID) -> CheckInResult:
        """Validate a credential without redeeming it."""
        try:
            booking_id, ticket_id, credential_event_id = self._decode(raw_payload=raw_payload)
            async with self.uow_factory() as uow:
                booking = await self._load_admissible(
                    uow=uow,
                    booking_id=booking_id,
                    ticket_id=ticket_id,
                    credential_event_id=credential_event_id,
                    scanner_event_id=scanner_event_id,
                )
        except CheckInRejectedError as e:
            return CheckInResult.reject(error=e)
        return CheckInResult(
            accepted=True, code=None, message='Valid ticket, not yet checked in', booking=booking
        )

    # =========================================================================
    # Steps
    # =========================================================================

    def _decode(self, *, raw_payload: str) -> tuple[UUID, str, UUID]:
        """
        Returns:
            (booking_id, ticket_id, event_id) as carried by the credential
        """
        decoded = self.codec.decode(raw_payload)
        if not isinstance(decoded, Parsed):
            raise MalformedCredentialError('Credential could not be read')
        booking_id = _parse_id(decoded.booking_id)
        event_id = _parse_id(decoded.event_id)
        if booking_id is None or event_id is None:
            raise UnknownTicketError('Ticket not recognised')
        return booking_id, decoded.ticket_id, event_id

    async def _redeem(
        self,
        *,
        booking_id: UUID,
        ticket_id: Optional[str],
        credential_event_id: Optional[UUID],
        scanner_event_id: UUID,
        staff_id: int,
        method: CheckInMethod,
    ) -> Booking:
        async with self.uow_factory() as uow:
            booking = await self._load_admissible(
                uow=uow,
                booking_id=booking_id,
                ticket_id=ticket_id,
                credential_event_id=credential_event_id,
                scanner_event_id=scanner_event_id,
            )

            checked_in = booking.check_in(staff_id=staff_id, method=method)
            won = await uow.booking_command_repo.compare_and_set_status(
                booking=checked_in, expected_status=BookingStatus.CONFIRMED
            )
            if not won:
                # Lost the race: report whatever the winner left behind
                current = await uow.booking_query_repo.get_by_id(booking_id=booking_id)
                if current is not None and current.status == BookingStatus.CANCELLED:
                    raise TicketCancelledError('Ticket has been cancelled', booking=current)
                raise AlreadyUsedError('Ticket already checked in', booking=current)

            await uow.commit()

        return checked_in

    async def _load_admissible(
        self,
        *,
        uow: AbstractUnitOfWork,
        booking_id: UUID,
        ticket_id: Optional[str],
        credential_event_id: Optional[UUID],
        scanner_event_id: UUID,
    ) -> Booking:
        booking = await uow.booking_query_repo.get_by_id(booking_id=booking_id)
        if booking is None or (ticket_id is not None and booking.ticket_id != ticket_id):
            raise UnknownTicketError('Ticket not recognised')
        # A credential naming another event than its booking was not issued by us
        if credential_event_id is not None and str(booking.event_id) != str(credential_event_id):
            raise UnknownTicketError('Ticket not recognised')

        if str(booking.event_id) != str(scanner_event_id):
            raise WrongEventError('Ticket is for a different event', booking=booking)

        if booking.status == BookingStatus.CANCELLED:
            raise TicketCancelledError('Ticket has been cancelled', booking=booking)
        if booking.status == BookingStatus.USED:
            raise AlreadyUsedError('Ticket already checked in', booking=booking)

        if self.reject_after_event_end:
            event = await uow.event_query_repo.get_by_id(event_id=booking.event_id)
            if event is not None and event.has_ended(
                now=datetime.now(timezone.utc), grace=self.grace
            ):
                raise EventExpiredError('Event has already ended', booking=booking)

        return booking

    # =========================================================================
    # Outcomes
    # =========================================================================

    def _accepted(self, *, booking: Booking, method: CheckInMethod) -> CheckInResult:
        metrics.record_check_in(method=method.value, result='accepted')
        Logger.base.info(
            f'✅ [CHECK-IN] Booking {booking.id} checked in by staff {booking.checked_in_by} '
            f'via {method.value}'
        )
        return CheckInResult.accept(booking=booking)

    def _rejected(self, *, error: CheckInRejectedError, method: CheckInMethod) -> CheckInResult:
        metrics.record_check_in(method=method.value, result=error.code.value)
        Logger.base.info(f'⛔ [CHECK-IN] Rejected ({error.code.value}): {error.message}')
        return CheckInResult.reject(error=error)
