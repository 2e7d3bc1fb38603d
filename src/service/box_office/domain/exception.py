"""
Box Office error kinds

Every kind is a CustomBaseError carrying a machine-readable `code`; its
`to_payload` gives the HTTP body `{"detail": ..., "code": ...}`.
Check-in rejections additionally carry the booking they were raised for.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, ClassVar, Optional

from src.platform.exception.exceptions import (
    ConflictError,
    CustomBaseError,
    DomainError,
    NotFoundError,
)


if TYPE_CHECKING:
    from src.service.box_office.domain.entity.booking_entity import Booking


class ErrorCode(StrEnum):
    OUT_OF_STOCK = 'out_of_stock'
    INVALID_TRANSITION = 'invalid_transition'
    MALFORMED_CREDENTIAL = 'malformed_credential'
    UNKNOWN_TICKET = 'unknown_ticket'
    WRONG_EVENT = 'wrong_event'
    ALREADY_USED = 'already_used'
    TICKET_CANCELLED = 'ticket_cancelled'
    EVENT_EXPIRED = 'event_expired'
    EVENT_NOT_FOUND = 'event_not_found'
    BOOKING_NOT_FOUND = 'booking_not_found'
    INVALID_QUANTITY = 'invalid_quantity'
    EVENT_NOT_ON_SALE = 'event_not_on_sale'
    DUPLICATE_RSVP = 'duplicate_rsvp'
    INVENTORY_CONTENTION = 'inventory_contention'


# =============================================================================
# Ledger / state machine errors (raised to the caller)
# =============================================================================


class OutOfStockError(ConflictError):
    code = ErrorCode.OUT_OF_STOCK


class InvalidTransitionError(ConflictError):
    code = ErrorCode.INVALID_TRANSITION


class InventoryContentionError(ConflictError):
    code = ErrorCode.INVENTORY_CONTENTION


class EventNotOnSaleError(ConflictError):
    code = ErrorCode.EVENT_NOT_ON_SALE


class DuplicateRsvpError(ConflictError):
    code = ErrorCode.DUPLICATE_RSVP


class InvalidQuantityError(DomainError):
    code = ErrorCode.INVALID_QUANTITY


class EventNotFoundError(NotFoundError):
    code = ErrorCode.EVENT_NOT_FOUND


class BookingNotFoundError(NotFoundError):
    code = ErrorCode.BOOKING_NOT_FOUND


# =============================================================================
# Check-in rejections (converted into CheckInResult values)
# =============================================================================


class CheckInRejectedError(CustomBaseError):
    code: ClassVar[ErrorCode]
    default_status_code = 409

    def __init__(self, message: str, *, booking: Optional[Booking] = None) -> None:
        super().__init__(message)
        self.booking = booking


class MalformedCredentialError(CheckInRejectedError):
    code = ErrorCode.MALFORMED_CREDENTIAL
    default_status_code = 400


class UnknownTicketError(CheckInRejectedError):
    code = ErrorCode.UNKNOWN_TICKET
    default_status_code = 404


class WrongEventError(CheckInRejectedError):
    code = ErrorCode.WRONG_EVENT


class AlreadyUsedError(CheckInRejectedError):
    code = ErrorCode.ALREADY_USED


class TicketCancelledError(CheckInRejectedError):
    code = ErrorCode.TICKET_CANCELLED


class EventExpiredError(CheckInRejectedError):
    code = ErrorCode.EVENT_EXPIRED
