"""Inventory ledger DTOs."""

import attrs
from uuid_utils import UUID

from src.service.box_office.domain.entity.event_entity import Event
from src.service.box_office.domain.enum.event_status import EventStatus


@attrs.define(frozen=True)
class Reservation:
    """Outcome of a successful reserve or release on an event's counters."""

    event_id: UUID
    quantity: int
    available_after: int
    sold_after: int
    version: int


@attrs.define(frozen=True)
class InventorySnapshot:
    event_id: UUID
    status: EventStatus
    total_tickets: int
    available_tickets: int
    sold_tickets: int
    version: int

    @classmethod
    def from_event(cls, *, event: Event) -> 'InventorySnapshot':
        return cls(
            event_id=event.id,
            status=event.status,
            total_tickets=event.total_tickets,
            available_tickets=event.available_tickets,
            sold_tickets=event.sold_tickets,
            version=event.version,
        )
