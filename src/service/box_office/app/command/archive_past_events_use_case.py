from datetime import datetime, timedelta, timezone
from typing import List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
from uuid_utils import UUID

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.logging.loguru_io import Logger
from src.service.box_office.domain.enum.event_status import EventStatus


class ArchivePastEventsUseCase:
    """
    Soft-delete an organiser's events once `ends_at + ARCHIVE_BUFFER_HOURS`
    has passed. Bookings stay attached to the archived event.
    """

    def __init__(self, *, uow_factory: UnitOfWorkFactory, buffer_hours: int) -> None:
        self.uow_factory = uow_factory
        self.buffer = timedelta(hours=buffer_hours)
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work_factory]),
        settings: Settings = Depends(Provide[Container.config_service]),
    ) -> Self:
        return cls(uow_factory=uow_factory, buffer_hours=settings.ARCHIVE_BUFFER_HOURS)

    @Logger.io
    async def archive_past_events(
        self, *, organiser_id: int, now: Optional[datetime] = None
    ) -> List[UUID]:
        """
        Returns:
            Ids of the events archived by this call
        """
        moment = now or datetime.now(timezone.utc)
        archived: List[UUID] = []

        with self.tracer.start_as_current_span(
            'use_case.archive_past_events', attributes={'organiser.id': organiser_id}
        ):
            async with self.uow_factory() as uow:
                events = await uow.event_query_repo.list_by_organiser(organiser_id=organiser_id)
                for event in events:
                    if event.status == EventStatus.ARCHIVED:
                        continue
                    if not event.has_ended(now=moment, grace=self.buffer):
                        continue
                    stored = await uow.event_command_repo.update(event=event.archive(now=moment))
                    if stored is None:
                        # Changed underneath; the next sweep picks it up
                        Logger.base.warning(f'🗄️ [ARCHIVE] Skipped event {event.id}, version moved')
                        continue
                    archived.append(event.id)
                await uow.commit()

            Logger.base.info(
                f'🗄️ [ARCHIVE] Archived {len(archived)} events for organiser {organiser_id}'
            )
            return archived
