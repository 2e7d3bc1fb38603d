from datetime import datetime

from pydantic import BaseModel

from src.platform.types import UtilsUUID7
from src.service.box_office.app.dto.report_dto import EventReport, OrganiserReport
from src.service.box_office.driving_adapter.schema.event_schema import InventoryResponse


class EventReportResponse(BaseModel):
    event_id: UtilsUUID7
    bookings_by_status: dict[str, int]
    tickets_by_status: dict[str, int]
    checked_in: int
    confirmed_total: int
    not_checked_in: int
    check_in_rate: float
    inventory: InventoryResponse

    @classmethod
    def from_report(cls, report: EventReport) -> 'EventReportResponse':
        return cls(
            event_id=report.event_id,
            bookings_by_status={s.value: n for s, n in report.bookings_by_status.items()},
            tickets_by_status={s.value: n for s, n in report.tickets_by_status.items()},
            checked_in=report.checked_in,
            confirmed_total=report.confirmed_total,
            not_checked_in=report.not_checked_in,
            check_in_rate=report.check_in_rate,
            inventory=InventoryResponse.from_snapshot(report.inventory),
        )


class OrganiserReportResponse(BaseModel):
    organiser_id: int
    generated_at: datetime
    events_total: int
    bookings_total: int
    confirmed: int
    used: int
    cancelled: int
    created_this_month: int
    check_in_rate: float

    @classmethod
    def from_report(cls, report: OrganiserReport) -> 'OrganiserReportResponse':
        return cls(
            organiser_id=report.organiser_id,
            generated_at=report.generated_at,
            events_total=report.events_total,
            bookings_total=report.bookings_total,
            confirmed=report.confirmed,
            used=report.used,
            cancelled=report.cancelled,
            created_this_month=report.created_this_month,
            check_in_rate=report.check_in_rate,
        )
