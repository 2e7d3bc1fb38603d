from typing import List, Optional

from fastapi import APIRouter, Depends, status
from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.platform.types import UtilsUUID7
from src.service.box_office.app.command.cancel_booking_use_case import CancelBookingUseCase
from src.service.box_office.app.command.create_booking_use_case import CreateBookingUseCase
from src.service.box_office.app.query.get_booking_use_case import GetBookingUseCase
from src.service.box_office.app.query.list_bookings_use_case import ListBookingsUseCase
from src.service.box_office.app.query.render_credential_use_case import RenderCredentialUseCase
from src.service.box_office.driving_adapter.schema.booking_schema import (
    BookingCancelRequest,
    BookingCreateRequest,
    BookingResponse,
    CredentialResponse,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_booking(
    request: BookingCreateRequest,
    use_case: CreateBookingUseCase = Depends(CreateBookingUseCase.depends),
) -> BookingResponse:
    with tracer.start_as_current_span('controller.create_booking') as span:
        span.set_attribute('event_id', str(request.event_id))
        span.set_attribute('user_id', request.user_id)

        booking = await use_case.create_booking(
            event_id=request.event_id,
            user_id=request.user_id,
            quantity=request.quantity,
            registration_type=request.registration_type,
        )
        span.set_attribute('booking.id', str(booking.id))
        return BookingResponse.from_entity(booking)


@router.get('')
@Logger.io
async def list_user_bookings(
    user_id: int,
    use_case: ListBookingsUseCase = Depends(ListBookingsUseCase.depends),
) -> List[BookingResponse]:
    bookings = await use_case.list_user_bookings(user_id=user_id)
    return [BookingResponse.from_entity(booking) for booking in bookings]


@router.get('/{booking_id}')
@Logger.io
async def get_booking(
    booking_id: UtilsUUID7,
    use_case: GetBookingUseCase = Depends(GetBookingUseCase.depends),
) -> BookingResponse:
    booking = await use_case.get_booking_status(booking_id=booking_id)
    return BookingResponse.from_entity(booking)


@router.patch('/{booking_id}/cancel', status_code=status.HTTP_200_OK)
@Logger.io
async def cancel_booking(
    booking_id: UtilsUUID7,
    request: Optional[BookingCancelRequest] = None,
    use_case: CancelBookingUseCase = Depends(CancelBookingUseCase.depends),
) -> BookingResponse:
    booking = await use_case.cancel_booking(
        booking_id=booking_id, user_id=request.user_id if request else None
    )
    return BookingResponse.from_entity(booking)


@router.get('/{booking_id}/credential')
@Logger.io
async def render_credential(
    booking_id: UtilsUUID7,
    use_case: RenderCredentialUseCase = Depends(RenderCredentialUseCase.depends),
) -> CredentialResponse:
    rendered = await use_case.render(booking_id=booking_id)
    return CredentialResponse(
        booking_id=rendered.booking_id,
        event_id=rendered.event_id,
        ticket_id=rendered.ticket_id,
        status=rendered.status,
        credential=rendered.credential,
    )
