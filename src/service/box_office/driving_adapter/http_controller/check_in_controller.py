from fastapi import APIRouter, Depends

from src.platform.logging.loguru_io import Logger
from src.platform.types import UtilsUUID7
from src.service.box_office.app.command.check_in_use_case import CheckInUseCase
from src.service.box_office.app.command.revert_check_in_use_case import RevertCheckInUseCase
from src.service.box_office.driving_adapter.schema.booking_schema import BookingResponse
from src.service.box_office.driving_adapter.schema.check_in_schema import (
    CheckInPreviewRequest,
    CheckInRequest,
    CheckInResponse,
    ManualCheckInRequest,
    RevertCheckInRequest,
)


router = APIRouter()


# Rejections are results, not errors: every scan answers 200 with `accepted`
@router.post('')
@Logger.io
async def check_in(
    request: CheckInRequest,
    use_case: CheckInUseCase = Depends(CheckInUseCase.depends),
) -> CheckInResponse:
    result = await use_case.check_in(
        raw_payload=request.raw_payload,
        scanner_event_id=request.scanner_event_id,
        staff_id=request.staff_id,
        method=request.method,
    )
    return CheckInResponse.from_result(result)


@router.post('/booking')
@Logger.io
async def check_in_booking(
    request: ManualCheckInRequest,
    use_case: CheckInUseCase = Depends(CheckInUseCase.depends),
) -> CheckInResponse:
    result = await use_case.check_in_booking(
        booking_id=request.booking_id,
        scanner_event_id=request.scanner_event_id,
        staff_id=request.staff_id,
        method=request.method,
    )
    return CheckInResponse.from_result(result)


@router.post('/preview')
@Logger.io
async def preview_check_in(
    request: CheckInPreviewRequest,
    use_case: CheckInUseCase = Depends(CheckInUseCase.depends),
) -> CheckInResponse:
    result = await use_case.preview(
        raw_payload=request.raw_payload, scanner_event_id=request.scanner_event_id
    )
    return CheckInResponse.from_result(result)


@router.post('/booking/{booking_id}/revert')
@Logger.io
async def revert_check_in(
    booking_id: UtilsUUID7,
    request: RevertCheckInRequest,
    use_case: RevertCheckInUseCase = Depends(RevertCheckInUseCase.depends),
) -> BookingResponse:
    booking = await use_case.revert_check_in(booking_id=booking_id, admin_id=request.admin_id)
    return BookingResponse.from_entity(booking)
