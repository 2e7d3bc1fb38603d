"""
Unit tests for the Booking entity state machine

confirmed -> cancelled, confirmed -> used, and the admin-only used -> confirmed.
Everything else is an InvalidTransition.
"""

from datetime import datetime, timezone

import pytest
import uuid_utils

from src.service.box_office.domain.entity.booking_entity import Booking
from src.service.box_office.domain.enum.booking_status import (
    BookingStatus,
    CheckInMethod,
    RegistrationType,
)
from src.service.box_office.domain.exception import (
    InvalidQuantityError,
    InvalidTransitionError,
)
from test.service.box_office.test_helpers import STAFF_ID, USER_ID, build_booking


@pytest.mark.unit
class TestBookingCreate:
    def test_create_confirmed_booking_with_ticket_id(self):
        booking = Booking.create(
            event_id=uuid_utils.uuid7(),
            user_id=USER_ID,
            quantity=2,
            registration_type=RegistrationType.PURCHASE,
            unit_price=2500,
            max_quantity=10,
        )

        assert booking.status == BookingStatus.CONFIRMED
        assert booking.total_price == 5000
        assert booking.ticket_id.startswith('TK-')
        assert booking.checked_in_at is None
        assert not booking.is_checked_in

    def test_rsvp_is_free(self):
        booking = Booking.create(
            event_id=uuid_utils.uuid7(),
            user_id=USER_ID,
            quantity=1,
            registration_type=RegistrationType.RSVP,
            unit_price=2500,
            max_quantity=10,
        )

        assert booking.total_price == 0

    @pytest.mark.parametrize('quantity', [0, -3, 11])
    def test_quantity_out_of_range(self, quantity: int):
        with pytest.raises(InvalidQuantityError):
            Booking.create(
                event_id=uuid_utils.uuid7(),
                user_id=USER_ID,
                quantity=quantity,
                registration_type=RegistrationType.PURCHASE,
                unit_price=0,
                max_quantity=10,
            )


@pytest.mark.unit
class TestBookingTransitions:
    @pytest.fixture
    def confirmed(self) -> Booking:
        return build_booking(event_id=uuid_utils.uuid7())

    def test_cancel_confirmed(self, confirmed: Booking):
        cancelled = confirmed.cancel()

        assert cancelled.status == BookingStatus.CANCELLED
        assert cancelled.cancelled_at is not None
        assert not cancelled.is_active

    @pytest.mark.parametrize('status', [BookingStatus.CANCELLED, BookingStatus.USED])
    def test_cancel_non_confirmed_is_invalid(self, status: BookingStatus):
        booking = build_booking(event_id=uuid_utils.uuid7(), status=status)

        with pytest.raises(InvalidTransitionError):
            booking.cancel()

    def test_check_in_stamps_staff_time_and_method(self, confirmed: Booking):
        now = datetime(2026, 11, 6, 19, 5, tzinfo=timezone.utc)

        used = confirmed.check_in(staff_id=STAFF_ID, method=CheckInMethod.QR, now=now)

        assert used.status == BookingStatus.USED
        assert used.is_checked_in
        assert used.checked_in_at == now
        assert used.checked_in_by == STAFF_ID
        assert used.check_in_method == CheckInMethod.QR

    def test_check_in_cancelled_is_invalid(self):
        booking = build_booking(event_id=uuid_utils.uuid7(), status=BookingStatus.CANCELLED)

        with pytest.raises(InvalidTransitionError):
            booking.check_in(staff_id=STAFF_ID, method=CheckInMethod.MANUAL)

    def test_revert_check_in_clears_stamps(self, confirmed: Booking):
        used = confirmed.check_in(staff_id=STAFF_ID, method=CheckInMethod.APP)

        reverted = used.revert_check_in()

        assert reverted.status == BookingStatus.CONFIRMED
        assert reverted.checked_in_at is None
        assert reverted.checked_in_by is None
        assert reverted.check_in_method is None

    def test_revert_of_confirmed_is_invalid(self, confirmed: Booking):
        with pytest.raises(InvalidTransitionError):
            confirmed.revert_check_in()
