"""Check-in outcome DTO."""

from datetime import datetime
from typing import Optional

import attrs

from src.service.box_office.domain.entity.booking_entity import Booking
from src.service.box_office.domain.enum.booking_status import CheckInMethod
from src.service.box_office.domain.exception import CheckInRejectedError, ErrorCode


@attrs.define(frozen=True)
class CheckInResult:
    """
    Every check-in attempt ends in one of these; expected rejections are
    values, not exceptions.

    For an accepted scan the stamps are the ones just written. For an
    ALREADY_USED rejection they are the stamps of the original check-in.
    """

    accepted: bool
    code: Optional[ErrorCode]
    message: str
    booking: Optional[Booking] = None
    checked_in_at: Optional[datetime] = None
    checked_in_by: Optional[int] = None
    check_in_method: Optional[CheckInMethod] = None

    @classmethod
    def accept(cls, *, booking: Booking, message: str = 'Checked in') -> 'CheckInResult':
        return cls(
            accepted=True,
            code=None,
            message=message,
            booking=booking,
            checked_in_at=booking.checked_in_at,
            checked_in_by=booking.checked_in_by,
            check_in_method=booking.check_in_method,
        )

    @classmethod
    def reject(cls, *, error: CheckInRejectedError) -> 'CheckInResult':
        booking = error.booking
        return cls(
            accepted=False,
            code=error.code,
            message=error.message,
            booking=booking,
            checked_in_at=booking.checked_in_at if booking else None,
            checked_in_by=booking.checked_in_by if booking else None,
            check_in_method=booking.check_in_method if booking else None,
        )
