from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from src.platform.types import UtilsUUID7
from src.service.box_office.app.dto.check_in_result import CheckInResult
from src.service.box_office.domain.enum.booking_status import CheckInMethod
from src.service.box_office.domain.exception import ErrorCode
from src.service.box_office.driving_adapter.schema.booking_schema import BookingResponse


class CheckInRequest(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            'example': {
                'raw_payload': 'TK1.WyIwMTlh...',
                'scanner_event_id': '01234567-89ab-7def-0123-456789abcdef',
                'staff_id': 7,
            }
        }
    )

    raw_payload: str
    scanner_event_id: UtilsUUID7
    staff_id: int
    method: CheckInMethod = CheckInMethod.QR


class ManualCheckInRequest(BaseModel):
    booking_id: UtilsUUID7
    scanner_event_id: UtilsUUID7
    staff_id: int
    method: CheckInMethod = CheckInMethod.MANUAL


class CheckInPreviewRequest(BaseModel):
    raw_payload: str
    scanner_event_id: UtilsUUID7


class RevertCheckInRequest(BaseModel):
    admin_id: int


class CheckInResponse(BaseModel):
    accepted: bool
    code: Optional[ErrorCode] = None
    message: str
    booking: Optional[BookingResponse] = None
    checked_in_at: Optional[datetime] = None
    checked_in_by: Optional[int] = None
    check_in_method: Optional[CheckInMethod] = None

    @classmethod
    def from_result(cls, result: CheckInResult) -> 'CheckInResponse':
        return cls(
            accepted=result.accepted,
            code=result.code,
            message=result.message,
            booking=BookingResponse.from_entity(result.booking) if result.booking else None,
            checked_in_at=result.checked_in_at,
            checked_in_by=result.checked_in_by,
            check_in_method=result.check_in_method,
        )
