"""
Unit tests for CreateBookingUseCase

Key points:
1. Happy path reserves through the ledger and persists a confirmed booking
2. Fail fast: unknown event, event not on sale, bad quantity, duplicate RSVP
3. OutOfStock leaves neither a booking nor a counter change behind
4. Notification is after commit and its failure never undoes the booking
5. A cancel landing mid-booking turns the reserve into EventNotOnSale
"""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest
import uuid_utils

from src.service.box_office.app.command.create_booking_use_case import CreateBookingUseCase
from src.service.box_office.app.command.update_event_use_case import UpdateEventUseCase
from src.service.box_office.domain.domain_event.box_office_domain_event import (
    BookingCreatedDomainEvent,
)
from src.service.box_office.domain.enum.booking_status import BookingStatus, RegistrationType
from src.service.box_office.domain.enum.event_status import EventStatus
from src.service.box_office.domain.exception import (
    DuplicateRsvpError,
    EventNotFoundError,
    EventNotOnSaleError,
    InvalidQuantityError,
    OutOfStockError,
)
from test.service.box_office.test_helpers import ANOTHER_USER_ID, USER_ID


@pytest.fixture
def use_case(uow_factory, ledger, notification_dispatcher) -> CreateBookingUseCase:
    return CreateBookingUseCase(
        uow_factory=uow_factory,
        ledger=ledger,
        notification_dispatcher=notification_dispatcher,
        max_tickets_per_booking=10,
    )


class TestCreateBooking:
    @pytest.mark.asyncio
    async def test_purchase_confirms_and_reserves(self, use_case, seed, notification_dispatcher):
        """
        Given: a published paid event with 10 tickets
        When: a user buys 2
        Then:
          - the booking is confirmed with a ticket id and total price
          - available drops to 8
          - booking_created is dispatched
        """
        event = seed.event(total_tickets=10, price=2500)

        booking = await use_case.create_booking(
            event_id=event.id,
            user_id=USER_ID,
            quantity=2,
            registration_type=RegistrationType.PURCHASE,
        )

        assert booking.status == BookingStatus.CONFIRMED
        assert booking.total_price == 5000
        assert booking.ticket_id.startswith('TK-')
        assert seed.current_booking(booking.id).status == BookingStatus.CONFIRMED
        assert seed.current_event(event.id).available_tickets == 8

        notification_dispatcher.booking_created.assert_awaited_once()
        notified = notification_dispatcher.booking_created.await_args.kwargs['event']
        assert isinstance(notified, BookingCreatedDomainEvent)
        assert notified.booking_id == booking.id
        assert notified.event_name == event.name

    @pytest.mark.asyncio
    async def test_unknown_event(self, use_case):
        with pytest.raises(EventNotFoundError):
            await use_case.create_booking(
                event_id=uuid_utils.uuid7(),
                user_id=USER_ID,
                quantity=1,
                registration_type=RegistrationType.RSVP,
            )

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        'status', [EventStatus.DRAFT, EventStatus.CANCELLED, EventStatus.ARCHIVED]
    )
    async def test_event_not_on_sale(self, use_case, seed, status):
        event = seed.event(status=status)

        with pytest.raises(EventNotOnSaleError):
            await use_case.create_booking(
                event_id=event.id,
                user_id=USER_ID,
                quantity=1,
                registration_type=RegistrationType.RSVP,
            )

    @pytest.mark.asyncio
    @pytest.mark.parametrize('quantity', [0, 11])
    async def test_quantity_out_of_range(self, use_case, seed, quantity):
        event = seed.event(total_tickets=50)

        with pytest.raises(InvalidQuantityError):
            await use_case.create_booking(
                event_id=event.id,
                user_id=USER_ID,
                quantity=quantity,
                registration_type=RegistrationType.PURCHASE,
            )

        assert seed.current_event(event.id).available_tickets == 50

    @pytest.mark.asyncio
    async def test_second_rsvp_for_same_event_is_rejected(self, use_case, seed):
        event = seed.event(total_tickets=10)
        seed.booking(event=event, registration_type=RegistrationType.RSVP)

        with pytest.raises(DuplicateRsvpError):
            await use_case.create_booking(
                event_id=event.id,
                user_id=USER_ID,
                quantity=1,
                registration_type=RegistrationType.RSVP,
            )

        assert seed.current_event(event.id).available_tickets == 9

    @pytest.mark.asyncio
    async def test_rsvp_allowed_again_after_cancellation(self, use_case, seed):
        event = seed.event(total_tickets=10)
        seed.booking(
            event=event,
            registration_type=RegistrationType.RSVP,
            status=BookingStatus.CANCELLED,
        )

        booking = await use_case.create_booking(
            event_id=event.id,
            user_id=USER_ID,
            quantity=1,
            registration_type=RegistrationType.RSVP,
        )

        assert booking.status == BookingStatus.CONFIRMED

    @pytest.mark.asyncio
    async def test_out_of_stock_leaves_no_trace(self, use_case, seed, store, notification_dispatcher):
        event = seed.event(total_tickets=1)

        with pytest.raises(OutOfStockError):
            await use_case.create_booking(
                event_id=event.id,
                user_id=USER_ID,
                quantity=2,
                registration_type=RegistrationType.PURCHASE,
            )

        assert store.bookings == {}
        assert seed.current_event(event.id).available_tickets == 1
        notification_dispatcher.booking_created.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_notification_failure_keeps_booking(self, use_case, seed, notification_dispatcher):
        event = seed.event(total_tickets=5)
        notification_dispatcher.booking_created = AsyncMock(side_effect=RuntimeError('smtp down'))

        booking = await use_case.create_booking(
            event_id=event.id,
            user_id=USER_ID,
            quantity=1,
            registration_type=RegistrationType.PURCHASE,
        )

        assert seed.current_booking(booking.id).status == BookingStatus.CONFIRMED
        assert seed.current_event(event.id).available_tickets == 4

    @pytest.mark.asyncio
    async def test_last_ticket_race_has_one_winner(self, use_case, seed, store):
        """
        Given: an event with exactly 1 ticket
        When: two users book 1 ticket at the same time
        Then: one booking is confirmed, the other gets OutOfStock, available ends at 0
        """
        event = seed.event(total_tickets=1)

        results = await asyncio.gather(
            use_case.create_booking(
                event_id=event.id,
                user_id=USER_ID,
                quantity=1,
                registration_type=RegistrationType.PURCHASE,
            ),
            use_case.create_booking(
                event_id=event.id,
                user_id=ANOTHER_USER_ID,
                quantity=1,
                registration_type=RegistrationType.PURCHASE,
            ),
            return_exceptions=True,
        )

        confirmed = [r for r in results if not isinstance(r, Exception)]
        failed = [r for r in results if isinstance(r, Exception)]
        assert len(confirmed) == 1
        assert len(failed) == 1
        assert isinstance(failed[0], OutOfStockError)
        assert len(store.bookings) == 1
        assert seed.current_event(event.id).available_tickets == 0

    @pytest.mark.asyncio
    async def test_no_overselling_under_load(self, use_case, seed, store):
        event = seed.event(total_tickets=12)

        results = await asyncio.gather(
            *(
                use_case.create_booking(
                    event_id=event.id,
                    user_id=1000 + i,
                    quantity=1 + i % 3,
                    registration_type=RegistrationType.PURCHASE,
                )
                for i in range(20)
            ),
            return_exceptions=True,
        )

        assert all(
            not isinstance(r, Exception) or isinstance(r, OutOfStockError) for r in results
        )
        sold = sum(b.quantity for b in store.bookings.values())
        stored = seed.current_event(event.id)
        assert sold <= event.total_tickets
        assert stored.sold_tickets == sold
        assert stored.available_tickets == event.total_tickets - sold


class TestCreateBookingRacingCancel:
    @pytest.fixture
    def update_event(self, uow_factory, ledger, notification_dispatcher) -> UpdateEventUseCase:
        return UpdateEventUseCase(
            uow_factory=uow_factory,
            notification_dispatcher=notification_dispatcher,
            ledger=ledger,
        )

    @pytest.mark.asyncio
    async def test_cancel_after_on_sale_check_rejects_booking(
        self, use_case, update_event, ledger, seed, store
    ):
        """
        Given: a booking has passed the on-sale check
        When: the organiser cancels the event before the ledger reserves
        Then: the booking fails with EventNotOnSale and nothing is sold
        """
        event = seed.event(total_tickets=5)
        reserve = ledger.reserve

        async def cancel_then_reserve(**kwargs):
            await update_event.cancel_event(event_id=event.id)
            return await reserve(**kwargs)

        with patch.object(ledger, 'reserve', new=cancel_then_reserve):
            with pytest.raises(EventNotOnSaleError):
                await use_case.create_booking(
                    event_id=event.id,
                    user_id=USER_ID,
                    quantity=2,
                    registration_type=RegistrationType.PURCHASE,
                )

        stored = seed.current_event(event.id)
        assert stored.status == EventStatus.CANCELLED
        assert stored.sold_tickets == 0
        assert stored.available_tickets == 5
        assert len(store.bookings) == 0

    @pytest.mark.asyncio
    async def test_bookings_racing_cancel_stay_consistent(
        self, use_case, update_event, seed, store
    ):
        """
        Given: an event with 20 tickets
        When: 15 bookings and a cancel run at the same time
        Then:
          - the cancel goes through
          - every failed booking is EventNotOnSale or OutOfStock
          - sold equals the tickets held by the bookings that did land
        """
        event = seed.event(total_tickets=20)

        bookings = [
            use_case.create_booking(
                event_id=event.id,
                user_id=2000 + i,
                quantity=1 + i % 2,
                registration_type=RegistrationType.PURCHASE,
            )
            for i in range(15)
        ]
        results = await asyncio.gather(
            *bookings[:7],
            update_event.cancel_event(event_id=event.id),
            *bookings[7:],
            return_exceptions=True,
        )

        cancel_result = results[7]
        booking_results = results[:7] + results[8:]
        assert not isinstance(cancel_result, Exception)
        assert all(
            not isinstance(r, Exception) or isinstance(r, (EventNotOnSaleError, OutOfStockError))
            for r in booking_results
        )
        landed = [r for r in booking_results if not isinstance(r, Exception)]
        assert len(store.bookings) == len(landed)
        sold = sum(b.quantity for b in store.bookings.values())
        stored = seed.current_event(event.id)
        assert stored.status == EventStatus.CANCELLED
        assert stored.sold_tickets == sold
        assert stored.available_tickets == event.total_tickets - sold
