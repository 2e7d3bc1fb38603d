from datetime import datetime
from typing import Optional

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field

from src.platform.types import UtilsUUID7
from src.service.box_office.app.dto.inventory_dto import InventorySnapshot
from src.service.box_office.domain.entity.event_entity import Event
from src.service.box_office.domain.enum.event_status import EventStatus, EventType


class EventCreateRequest(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            'example': {
                'organiser_id': 1,
                'name': 'Friday Jazz Night',
                'description': 'Live quartet, doors at 19:00',
                'starts_at': '2026-11-06T19:00:00Z',
                'ends_at': '2026-11-06T23:00:00Z',
                'total_tickets': 120,
                'price': 2500,
            }
        }
    )

    organiser_id: int
    name: str = Field(min_length=1)
    description: str = ''
    starts_at: AwareDatetime
    ends_at: AwareDatetime
    total_tickets: int = Field(ge=0)
    price: int = Field(default=0, ge=0)
    type: Optional[EventType] = None


class EventUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    starts_at: Optional[AwareDatetime] = None
    ends_at: Optional[AwareDatetime] = None
    price: Optional[int] = Field(default=None, ge=0)


class EventTotalTicketsRequest(BaseModel):
    total_tickets: int = Field(ge=0)


class EventResponse(BaseModel):
    id: UtilsUUID7
    organiser_id: int
    name: str
    description: str
    starts_at: datetime
    ends_at: datetime
    total_tickets: int
    available_tickets: int
    sold_tickets: int
    price: int
    type: EventType
    status: EventStatus
    version: int
    archived_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, event: Event) -> 'EventResponse':
        return cls(
            id=event.id,
            organiser_id=event.organiser_id,
            name=event.name,
            description=event.description,
            starts_at=event.starts_at,
            ends_at=event.ends_at,
            total_tickets=event.total_tickets,
            available_tickets=event.available_tickets,
            sold_tickets=event.sold_tickets,
            price=event.price,
            type=event.type,
            status=event.status,
            version=event.version,
            archived_at=event.archived_at,
        )


class InventoryResponse(BaseModel):
    event_id: UtilsUUID7
    status: EventStatus
    total_tickets: int
    available_tickets: int
    sold_tickets: int
    version: int

    @classmethod
    def from_snapshot(cls, snapshot: InventorySnapshot) -> 'InventoryResponse':
        return cls(
            event_id=snapshot.event_id,
            status=snapshot.status,
            total_tickets=snapshot.total_tickets,
            available_tickets=snapshot.available_tickets,
            sold_tickets=snapshot.sold_tickets,
            version=snapshot.version,
        )


class ArchiveResultResponse(BaseModel):
    archived_event_ids: list[UtilsUUID7]
