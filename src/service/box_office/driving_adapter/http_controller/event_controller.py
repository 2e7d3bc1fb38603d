from typing import List, Optional

from fastapi import APIRouter, Depends, status

from src.platform.logging.loguru_io import Logger
from src.platform.types import UtilsUUID7
from src.service.box_office.app.command.archive_past_events_use_case import (
    ArchivePastEventsUseCase,
)
from src.service.box_office.app.command.create_event_use_case import CreateEventUseCase
from src.service.box_office.app.command.update_event_use_case import UpdateEventUseCase
from src.service.box_office.app.query.get_event_inventory_use_case import (
    GetEventInventoryUseCase,
)
from src.service.box_office.app.query.get_event_use_case import GetEventUseCase
from src.service.box_office.app.query.get_user_booking_for_event_use_case import (
    GetUserBookingForEventUseCase,
)
from src.service.box_office.app.query.list_bookings_use_case import ListBookingsUseCase
from src.service.box_office.domain.enum.booking_status import BookingStatus
from src.service.box_office.driving_adapter.schema.booking_schema import BookingResponse
from src.service.box_office.driving_adapter.schema.event_schema import (
    ArchiveResultResponse,
    EventCreateRequest,
    EventResponse,
    EventTotalTicketsRequest,
    EventUpdateRequest,
    InventoryResponse,
)


router = APIRouter()


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_event(
    request: EventCreateRequest,
    use_case: CreateEventUseCase = Depends(CreateEventUseCase.depends),
) -> EventResponse:
    event = await use_case.create_event(
        organiser_id=request.organiser_id,
        name=request.name,
        description=request.description,
        starts_at=request.starts_at,
        ends_at=request.ends_at,
        total_tickets=request.total_tickets,
        price=request.price,
        type=request.type,
    )
    return EventResponse.from_entity(event)


@router.get('')
@Logger.io
async def list_organiser_events(
    organiser_id: int,
    use_case: GetEventUseCase = Depends(GetEventUseCase.depends),
) -> List[EventResponse]:
    events = await use_case.list_organiser_events(organiser_id=organiser_id)
    return [EventResponse.from_entity(event) for event in events]


@router.get('/{event_id}')
@Logger.io
async def get_event(
    event_id: UtilsUUID7,
    use_case: GetEventUseCase = Depends(GetEventUseCase.depends),
) -> EventResponse:
    return EventResponse.from_entity(await use_case.get_event(event_id=event_id))


@router.patch('/{event_id}')
@Logger.io
async def update_event(
    event_id: UtilsUUID7,
    request: EventUpdateRequest,
    use_case: UpdateEventUseCase = Depends(UpdateEventUseCase.depends),
) -> EventResponse:
    event = await use_case.update_details(
        event_id=event_id,
        name=request.name,
        description=request.description,
        starts_at=request.starts_at,
        ends_at=request.ends_at,
        price=request.price,
    )
    return EventResponse.from_entity(event)


@router.put('/{event_id}/total_tickets')
@Logger.io
async def set_total_tickets(
    event_id: UtilsUUID7,
    request: EventTotalTicketsRequest,
    use_case: UpdateEventUseCase = Depends(UpdateEventUseCase.depends),
) -> EventResponse:
    event = await use_case.set_total_tickets(
        event_id=event_id, total_tickets=request.total_tickets
    )
    return EventResponse.from_entity(event)


@router.post('/{event_id}/publish')
@Logger.io
async def publish_event(
    event_id: UtilsUUID7,
    use_case: UpdateEventUseCase = Depends(UpdateEventUseCase.depends),
) -> EventResponse:
    return EventResponse.from_entity(await use_case.publish(event_id=event_id))


@router.post('/{event_id}/cancel')
@Logger.io
async def cancel_event(
    event_id: UtilsUUID7,
    use_case: UpdateEventUseCase = Depends(UpdateEventUseCase.depends),
) -> EventResponse:
    return EventResponse.from_entity(await use_case.cancel_event(event_id=event_id))


@router.post('/{event_id}/archive')
@Logger.io
async def archive_event(
    event_id: UtilsUUID7,
    use_case: UpdateEventUseCase = Depends(UpdateEventUseCase.depends),
) -> EventResponse:
    return EventResponse.from_entity(await use_case.archive_event(event_id=event_id))


@router.post('/organiser/{organiser_id}/archive_past')
@Logger.io
async def archive_past_events(
    organiser_id: int,
    use_case: ArchivePastEventsUseCase = Depends(ArchivePastEventsUseCase.depends),
) -> ArchiveResultResponse:
    archived = await use_case.archive_past_events(organiser_id=organiser_id)
    return ArchiveResultResponse(archived_event_ids=archived)


@router.get('/{event_id}/inventory')
@Logger.io
async def get_event_inventory(
    event_id: UtilsUUID7,
    use_case: GetEventInventoryUseCase = Depends(GetEventInventoryUseCase.depends),
) -> InventoryResponse:
    snapshot = await use_case.get_inventory(event_id=event_id)
    return InventoryResponse.from_snapshot(snapshot)


@router.get('/{event_id}/booking')
@Logger.io
async def list_event_bookings(
    event_id: UtilsUUID7,
    booking_status: Optional[BookingStatus] = None,
    use_case: ListBookingsUseCase = Depends(ListBookingsUseCase.depends),
) -> List[BookingResponse]:
    bookings = await use_case.list_event_bookings(event_id=event_id, status=booking_status)
    return [BookingResponse.from_entity(booking) for booking in bookings]


@router.get('/{event_id}/booking/user/{user_id}')
@Logger.io
async def get_user_booking_for_event(
    event_id: UtilsUUID7,
    user_id: int,
    use_case: GetUserBookingForEventUseCase = Depends(GetUserBookingForEventUseCase.depends),
) -> Optional[BookingResponse]:
    booking = await use_case.get_user_booking(user_id=user_id, event_id=event_id)
    return BookingResponse.from_entity(booking) if booking else None
