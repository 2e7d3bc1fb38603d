from fastapi import APIRouter, Depends

from src.platform.logging.loguru_io import Logger
from src.platform.types import UtilsUUID7
from src.service.box_office.app.query.report_use_case import ReportUseCase
from src.service.box_office.driving_adapter.schema.report_schema import (
    EventReportResponse,
    OrganiserReportResponse,
)


router = APIRouter()


@router.get('/event/{event_id}')
@Logger.io
async def get_event_report(
    event_id: UtilsUUID7,
    use_case: ReportUseCase = Depends(ReportUseCase.depends),
) -> EventReportResponse:
    return EventReportResponse.from_report(await use_case.get_event_report(event_id=event_id))


@router.get('/organiser/{organiser_id}')
@Logger.io
async def get_organiser_report(
    organiser_id: int,
    use_case: ReportUseCase = Depends(ReportUseCase.depends),
) -> OrganiserReportResponse:
    report = await use_case.get_organiser_report(organiser_id=organiser_id)
    return OrganiserReportResponse.from_report(report)
