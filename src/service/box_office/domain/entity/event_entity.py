from datetime import datetime, timedelta, timezone
from typing import Optional

import attrs
import uuid_utils
from uuid_utils import UUID

from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.service.box_office.domain.enum.event_status import EventStatus, EventType
from src.service.box_office.domain.exception import (
    EventNotOnSaleError,
    InvalidQuantityError,
    InvalidTransitionError,
    OutOfStockError,
)


def _validate_non_empty_string(instance: object, attribute: attrs.Attribute, value: str) -> None:
    if not value or not value.strip():
        raise DomainError(f'Event {attribute.name} cannot be empty')


def _validate_non_negative(instance: object, attribute: attrs.Attribute, value: int) -> None:
    if value < 0:
        raise DomainError(f'Event {attribute.name} cannot be negative')


def _as_utc(value: datetime) -> datetime:
    # Naive times are taken as UTC; aware times are shifted to UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@attrs.define
class Event:
    """
    Event aggregate

    Counters obey `available_tickets + sold_tickets == total_tickets`.
    `version` is the optimistic concurrency token; the store bumps it on
    every write.
    """

    id: UUID
    organiser_id: int
    name: str = attrs.field(validator=_validate_non_empty_string)
    description: str
    starts_at: datetime = attrs.field(converter=_as_utc)
    ends_at: datetime = attrs.field(converter=_as_utc)
    total_tickets: int = attrs.field(validator=_validate_non_negative)
    available_tickets: int = attrs.field(validator=_validate_non_negative)
    sold_tickets: int = attrs.field(validator=_validate_non_negative)
    price: int = attrs.field(default=0, validator=_validate_non_negative)
    type: EventType = EventType.FREE
    status: EventStatus = EventStatus.DRAFT
    version: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    archived_at: Optional[datetime] = None

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        organiser_id: int,
        name: str,
        description: str = '',
        starts_at: datetime,
        ends_at: datetime,
        total_tickets: int,
        price: int = 0,
        type: Optional[EventType] = None,
    ) -> 'Event':
        starts_at, ends_at = _as_utc(starts_at), _as_utc(ends_at)
        if ends_at < starts_at:
            raise DomainError('Event cannot end before it starts')
        event_type = type or (EventType.PAID if price > 0 else EventType.FREE)
        if event_type == EventType.FREE and price > 0:
            raise DomainError('Free events cannot have a price')

        now = datetime.now(timezone.utc)
        return cls(
            id=uuid_utils.uuid7(),
            organiser_id=organiser_id,
            name=name,
            description=description,
            starts_at=starts_at,
            ends_at=ends_at,
            total_tickets=total_tickets,
            available_tickets=total_tickets,
            sold_tickets=0,
            price=price,
            type=event_type,
            status=EventStatus.DRAFT,
            version=0,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_on_sale(self) -> bool:
        return self.status == EventStatus.PUBLISHED

    def has_ended(self, *, now: datetime, grace: timedelta = timedelta(0)) -> bool:
        return _as_utc(now) > self.ends_at + grace

    # =========================================================================
    # Inventory arithmetic (persisted by the ledger via compare-and-set)
    # =========================================================================

    def reserve(self, *, quantity: int) -> 'Event':
        if quantity < 1:
            raise InvalidQuantityError('Quantity must be at least 1')
        # Checked against the same version the ledger compares, so a concurrent
        # cancel or archive turns a retried reserve into a rejection
        if not self.is_on_sale:
            raise EventNotOnSaleError(f'Event {self.id} is {self.status}, not on sale')
        if self.available_tickets < quantity:
            raise OutOfStockError(
                f'Only {self.available_tickets} tickets left for event {self.id}, '
                f'requested {quantity}'
            )
        return attrs.evolve(
            self,
            available_tickets=self.available_tickets - quantity,
            sold_tickets=self.sold_tickets + quantity,
        )

    def release(self, *, quantity: int) -> 'Event':
        if quantity < 1:
            raise InvalidQuantityError('Quantity must be at least 1')
        if self.sold_tickets < quantity or self.available_tickets + quantity > self.total_tickets:
            raise InvalidTransitionError(
                f'Releasing {quantity} tickets would exceed the total of event {self.id}'
            )
        return attrs.evolve(
            self,
            available_tickets=self.available_tickets + quantity,
            sold_tickets=self.sold_tickets - quantity,
        )

    # =========================================================================
    # Lifecycle
    # =========================================================================

    @Logger.io
    def update_details(
        self,
        *,
        name: Optional[str] = None,
        description: Optional[str] = None,
        starts_at: Optional[datetime] = None,
        ends_at: Optional[datetime] = None,
        price: Optional[int] = None,
    ) -> 'Event':
        if self.status not in (EventStatus.DRAFT, EventStatus.PUBLISHED):
            raise InvalidTransitionError(f'Cannot edit a {self.status} event')
        new_starts_at = _as_utc(starts_at) if starts_at else self.starts_at
        new_ends_at = _as_utc(ends_at) if ends_at else self.ends_at
        if new_ends_at < new_starts_at:
            raise DomainError('Event cannot end before it starts')
        new_price = self.price if price is None else price
        if self.type == EventType.FREE and new_price > 0:
            raise DomainError('Free events cannot have a price')
        return attrs.evolve(
            self,
            name=self.name if name is None else name,
            description=self.description if description is None else description,
            starts_at=new_starts_at,
            ends_at=new_ends_at,
            price=new_price,
            updated_at=datetime.now(timezone.utc),
        )

    @Logger.io
    def set_total_tickets(self, *, total_tickets: int) -> 'Event':
        if self.status != EventStatus.DRAFT:
            raise InvalidTransitionError('Total tickets can only change while the event is a draft')
        return attrs.evolve(
            self,
            total_tickets=total_tickets,
            available_tickets=total_tickets - self.sold_tickets,
            updated_at=datetime.now(timezone.utc),
        )

    @Logger.io
    def publish(self) -> 'Event':
        if self.status != EventStatus.DRAFT:
            raise InvalidTransitionError(f'Cannot publish a {self.status} event')
        return attrs.evolve(
            self, status=EventStatus.PUBLISHED, updated_at=datetime.now(timezone.utc)
        )

    @Logger.io
    def cancel(self) -> 'Event':
        if self.status not in (EventStatus.DRAFT, EventStatus.PUBLISHED):
            raise InvalidTransitionError(f'Cannot cancel a {self.status} event')
        return attrs.evolve(
            self, status=EventStatus.CANCELLED, updated_at=datetime.now(timezone.utc)
        )

    @Logger.io
    def archive(self, *, now: Optional[datetime] = None) -> 'Event':
        if self.status == EventStatus.ARCHIVED:
            raise InvalidTransitionError('Event is already archived')
        archived_at = _as_utc(now) if now else datetime.now(timezone.utc)
        return attrs.evolve(
            self, status=EventStatus.ARCHIVED, archived_at=archived_at, updated_at=archived_at
        )
