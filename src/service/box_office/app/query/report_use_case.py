from datetime import datetime, timezone
from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.logging.loguru_io import Logger
from src.service.box_office.app.dto.inventory_dto import InventorySnapshot
from src.service.box_office.app.dto.report_dto import (
    EventReport,
    OrganiserReport,
    StatusTally,
    check_in_rate,
)
from src.service.box_office.domain.enum.booking_status import BookingStatus
from src.service.box_office.domain.exception import EventNotFoundError


def _month_bounds(now: datetime) -> tuple[datetime, datetime]:
    start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if start.month == 12:
        end = start.replace(year=start.year + 1, month=1)
    else:
        end = start.replace(month=start.month + 1)
    return start, end


class ReportUseCase:
    """Read-only aggregates over bookings; no write path."""

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
    async def get_event_report(self, *, event_id: UUID) -> EventReport:
        with self.tracer.start_as_current_span(
            'use_case.get_event_report', attributes={'event.id': str(event_id)}
        ):
            async with self.uow_factory() as uow:
                event = await uow.event_query_repo.get_by_id(event_id=event_id)
                if event is None:
                    raise EventNotFoundError(f'Event {event_id} not found')
                tallies = await uow.booking_query_repo.tally_by_status(event_ids=[event_id])

            return EventReport.from_tallies(
                inventory=InventorySnapshot.from_event(event=event), tallies=tallies
            )

    @Logger.io
    async def get_organiser_report(
        self, *, organiser_id: int, now: Optional[datetime] = None
    ) -> OrganiserReport:
        moment = now or datetime.now(timezone.utc)
        month_start, month_end = _month_bounds(moment)

        with self.tracer.start_as_current_span(
            'use_case.get_organiser_report', attributes={'organiser.id': organiser_id}
        ):
            async with self.uow_factory() as uow:
                events = await uow.event_query_repo.list_by_organiser(organiser_id=organiser_id)
                event_ids = [event.id for event in events]
                tallies = await uow.booking_query_repo.tally_by_status(event_ids=event_ids)
                created_this_month = await uow.booking_query_repo.count_created_between(
                    event_ids=event_ids, start=month_start, end=month_end
                )

        confirmed = tallies.get(BookingStatus.CONFIRMED, StatusTally()).bookings
        used = tallies.get(BookingStatus.USED, StatusTally()).bookings
        cancelled = tallies.get(BookingStatus.CANCELLED, StatusTally()).bookings
        return OrganiserReport(
            organiser_id=organiser_id,
            generated_at=moment,
            events_total=len(events),
            bookings_total=confirmed + used + cancelled,
            confirmed=confirmed,
            used=used,
            cancelled=cancelled,
            created_this_month=created_this_month,
            check_in_rate=check_in_rate(checked_in=used, confirmed_total=confirmed + used),
        )
