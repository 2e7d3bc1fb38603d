"""
Booking Status Enum - Domain Value Object

confirmed is the only non-terminal state. checked-in is represented by `used`,
never by a separate flag.
"""

from enum import StrEnum


class BookingStatus(StrEnum):
    CONFIRMED = 'confirmed'
    CANCELLED = 'cancelled'
    USED = 'used'


class RegistrationType(StrEnum):
    RSVP = 'rsvp'
    PURCHASE = 'purchase'


class CheckInMethod(StrEnum):
    APP = 'app'
    MANUAL = 'manual'
    QR = 'qr'
