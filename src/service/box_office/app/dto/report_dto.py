"""Reporting DTOs."""

from datetime import datetime

import attrs
from uuid_utils import UUID

from src.service.box_office.app.dto.inventory_dto import InventorySnapshot
from src.service.box_office.domain.enum.booking_status import BookingStatus


@attrs.define(frozen=True)
class StatusTally:
    bookings: int = 0
    tickets: int = 0


def check_in_rate(*, checked_in: int, confirmed_total: int) -> float:
    if confirmed_total == 0:
        return 0.0
    return checked_in / confirmed_total


@attrs.define(frozen=True)
class EventReport:
    event_id: UUID
    bookings_by_status: dict[BookingStatus, int]
    tickets_by_status: dict[BookingStatus, int]
    checked_in: int
    confirmed_total: int
    not_checked_in: int
    check_in_rate: float
    inventory: InventorySnapshot

    @classmethod
    def from_tallies(
        cls,
        *,
        inventory: InventorySnapshot,
        tallies: dict[BookingStatus, StatusTally],
    ) -> 'EventReport':
        bookings = {status: tallies.get(status, StatusTally()).bookings for status in BookingStatus}
        tickets = {status: tallies.get(status, StatusTally()).tickets for status in BookingStatus}
        checked_in = bookings[BookingStatus.USED]
        confirmed_total = bookings[BookingStatus.CONFIRMED] + checked_in
        return cls(
            event_id=inventory.event_id,
            bookings_by_status=bookings,
            tickets_by_status=tickets,
            checked_in=checked_in,
            confirmed_total=confirmed_total,
            not_checked_in=confirmed_total - checked_in,
            check_in_rate=check_in_rate(checked_in=checked_in, confirmed_total=confirmed_total),
            inventory=inventory,
        )


@attrs.define(frozen=True)
class OrganiserReport:
    organiser_id: int
    generated_at: datetime
    events_total: int
    bookings_total: int
    confirmed: int
    used: int
    cancelled: int
    created_this_month: int
    check_in_rate: float
