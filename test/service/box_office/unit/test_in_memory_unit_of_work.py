"""
Unit tests for the in-memory store

Key points:
1. Compare-and-set writes fail on a stale version or status
2. Rollback replays the undo log without clobbering other units of work
3. Reads hand out copies, never the stored objects
"""

import pytest

from src.service.box_office.domain.enum.booking_status import BookingStatus, CheckInMethod
from test.service.box_office.test_helpers import STAFF_ID, build_event


@pytest.mark.unit
class TestInMemoryEventRepo:
    @pytest.mark.asyncio
    async def test_create_then_get_returns_copy(self, uow_factory):
        event = build_event()

        async with uow_factory() as uow:
            await uow.event_command_repo.create(event=event)
            await uow.commit()

        async with uow_factory() as uow:
            loaded = await uow.event_query_repo.get_by_id(event_id=event.id)

        assert loaded == event
        assert loaded is not event

    @pytest.mark.asyncio
    async def test_create_without_commit_is_rolled_back(self, uow_factory, store):
        async with uow_factory() as uow:
            await uow.event_command_repo.create(event=build_event())

        assert store.events == {}

    @pytest.mark.asyncio
    async def test_compare_and_set_inventory_rejects_stale_version(self, uow_factory, seed):
        event = seed.event(total_tickets=5)

        async with uow_factory() as uow:
            first = await uow.event_command_repo.compare_and_set_inventory(
                event_id=event.id,
                expected_version=event.version,
                available_tickets=4,
                sold_tickets=1,
            )
            stale = await uow.event_command_repo.compare_and_set_inventory(
                event_id=event.id,
                expected_version=event.version,
                available_tickets=3,
                sold_tickets=2,
            )
            await uow.commit()

        assert first == event.version + 1
        assert stale is None
        assert seed.current_event(event.id).available_tickets == 4

    @pytest.mark.asyncio
    async def test_rollback_keeps_other_units_of_work_changes(self, uow_factory, seed):
        """
        Given: UoW A reserves 2 tickets but never commits
        When: UoW B reserves 1 ticket and commits before A rolls back
        Then: only B's ticket stays sold
        """
        event = seed.event(total_tickets=10)

        uow_a = uow_factory()
        await uow_a.__aenter__()
        await uow_a.event_command_repo.compare_and_set_inventory(
            event_id=event.id, expected_version=event.version, available_tickets=8, sold_tickets=2
        )

        async with uow_factory() as uow_b:
            current = await uow_b.event_query_repo.get_by_id(event_id=event.id)
            await uow_b.event_command_repo.compare_and_set_inventory(
                event_id=event.id,
                expected_version=current.version,
                available_tickets=current.available_tickets - 1,
                sold_tickets=current.sold_tickets + 1,
            )
            await uow_b.commit()

        await uow_a.__aexit__(None, None, None)

        stored = seed.current_event(event.id)
        assert stored.available_tickets == 9
        assert stored.sold_tickets == 1
        assert stored.available_tickets + stored.sold_tickets == stored.total_tickets

    @pytest.mark.asyncio
    async def test_update_requires_matching_version(self, uow_factory, seed):
        event = seed.event()

        async with uow_factory() as uow:
            stored = await uow.event_command_repo.update(event=event)
            stale = await uow.event_command_repo.update(event=event)
            await uow.commit()

        assert stored.version == event.version + 1
        assert stale is None


@pytest.mark.unit
class TestInMemoryBookingRepo:
    @pytest.mark.asyncio
    async def test_compare_and_set_status_only_from_expected(self, uow_factory, seed):
        event = seed.event()
        booking = seed.booking(event=event)
        used = booking.check_in(staff_id=STAFF_ID, method=CheckInMethod.QR)

        async with uow_factory() as uow:
            won = await uow.booking_command_repo.compare_and_set_status(
                booking=used, expected_status=BookingStatus.CONFIRMED
            )
            lost = await uow.booking_command_repo.compare_and_set_status(
                booking=used, expected_status=BookingStatus.CONFIRMED
            )
            await uow.commit()

        assert won is True
        assert lost is False
        stored = seed.current_booking(booking.id)
        assert stored.status == BookingStatus.USED
        assert stored.checked_in_by == STAFF_ID

    @pytest.mark.asyncio
    async def test_status_change_rolled_back_without_commit(self, uow_factory, seed):
        event = seed.event()
        booking = seed.booking(event=event)

        async with uow_factory() as uow:
            await uow.booking_command_repo.compare_and_set_status(
                booking=booking.cancel(), expected_status=BookingStatus.CONFIRMED
            )

        assert seed.current_booking(booking.id).status == BookingStatus.CONFIRMED

    @pytest.mark.asyncio
    async def test_list_and_tally(self, uow_factory, seed):
        event = seed.event(total_tickets=10)
        other_event = seed.event(total_tickets=10)
        seed.booking(event=event, quantity=2)
        seed.booking(event=event, quantity=1, status=BookingStatus.USED)
        seed.booking(event=event, quantity=3, status=BookingStatus.CANCELLED)
        seed.booking(event=other_event, quantity=1)

        async with uow_factory() as uow:
            all_bookings = await uow.booking_query_repo.list_by_event(event_id=event.id)
            used = await uow.booking_query_repo.list_by_event(
                event_id=event.id, status=BookingStatus.USED
            )
            tallies = await uow.booking_query_repo.tally_by_status(event_ids=[event.id])

        assert len(all_bookings) == 3
        assert [b.status for b in used] == [BookingStatus.USED]
        assert tallies[BookingStatus.CONFIRMED].tickets == 2
        assert tallies[BookingStatus.USED].bookings == 1
        assert tallies[BookingStatus.CANCELLED].tickets == 3

    @pytest.mark.asyncio
    async def test_get_active_by_user_and_event_ignores_cancelled(self, uow_factory, seed):
        event = seed.event()
        cancelled = seed.booking(event=event, status=BookingStatus.CANCELLED)

        async with uow_factory() as uow:
            active = await uow.booking_query_repo.get_active_by_user_and_event(
                user_id=cancelled.user_id, event_id=event.id
            )

        assert active is None

    @pytest.mark.asyncio
    async def test_reads_are_copies(self, uow_factory, seed):
        event = seed.event()
        booking = seed.booking(event=event)

        async with uow_factory() as uow:
            loaded = await uow.booking_query_repo.get_by_id(booking_id=booking.id)

        loaded.status = BookingStatus.CANCELLED
        assert seed.current_booking(booking.id).status == BookingStatus.CONFIRMED

