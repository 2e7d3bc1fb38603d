from datetime import datetime, timezone
from typing import Optional

import attrs
import uuid_utils
from uuid_utils import UUID

from src.platform.logging.loguru_io import Logger
from src.service.box_office.domain.enum.booking_status import (
    BookingStatus,
    CheckInMethod,
    RegistrationType,
)
from src.service.box_office.domain.exception import (
    InvalidQuantityError,
    InvalidTransitionError,
)
from src.service.box_office.domain.value_object.ticket_id import mint_ticket_id


@attrs.define
class Booking:
    id: UUID
    event_id: UUID
    user_id: int
    ticket_id: str
    quantity: int
    total_price: int
    registration_type: RegistrationType
    status: BookingStatus = BookingStatus.CONFIRMED
    checked_in_at: Optional[datetime] = None
    checked_in_by: Optional[int] = None
    check_in_method: Optional[CheckInMethod] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        event_id: UUID,
        user_id: int,
        quantity: int,
        registration_type: RegistrationType,
        unit_price: int,
        max_quantity: int,
    ) -> 'Booking':
        if quantity < 1:
            raise InvalidQuantityError('Quantity must be at least 1')
        if quantity > max_quantity:
            raise InvalidQuantityError(f'Maximum {max_quantity} tickets per booking')

        now = datetime.now(timezone.utc)
        total_price = unit_price * quantity if registration_type == RegistrationType.PURCHASE else 0
        return cls(
            id=uuid_utils.uuid7(),
            event_id=event_id,
            user_id=user_id,
            ticket_id=mint_ticket_id(now=now),
            quantity=quantity,
            total_price=total_price,
            registration_type=registration_type,
            status=BookingStatus.CONFIRMED,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_checked_in(self) -> bool:
        return self.status == BookingStatus.USED

    @property
    def is_active(self) -> bool:
        return self.status in (BookingStatus.CONFIRMED, BookingStatus.USED)

    @Logger.io
    def cancel(self, *, now: Optional[datetime] = None) -> 'Booking':
        if self.status != BookingStatus.CONFIRMED:
            raise InvalidTransitionError(f'Cannot cancel a {self.status} booking')
        cancelled_at = now or datetime.now(timezone.utc)
        return attrs.evolve(
            self,
            status=BookingStatus.CANCELLED,
            cancelled_at=cancelled_at,
            updated_at=cancelled_at,
        )

    @Logger.io
    def check_in(
        self, *, staff_id: int, method: CheckInMethod, now: Optional[datetime] = None
    ) -> 'Booking':
        if self.status != BookingStatus.CONFIRMED:
            raise InvalidTransitionError(f'Cannot check in a {self.status} booking')
        checked_in_at = now or datetime.now(timezone.utc)
        return attrs.evolve(
            self,
            status=BookingStatus.USED,
            checked_in_at=checked_in_at,
            checked_in_by=staff_id,
            check_in_method=method,
            updated_at=checked_in_at,
        )

    @Logger.io
    def revert_check_in(self, *, now: Optional[datetime] = None) -> 'Booking':
        if self.status != BookingStatus.USED:
            raise InvalidTransitionError(f'Cannot revert check-in of a {self.status} booking')
        return attrs.evolve(
            self,
            status=BookingStatus.CONFIRMED,
            checked_in_at=None,
            checked_in_by=None,
            check_in_method=None,
            updated_at=now or datetime.now(timezone.utc),
        )
