"""
Unit tests for InMemoryNotificationDispatcher

Notifications fan out to every subscriber of the event they concern; a full
subscriber stream drops rather than blocks.
"""

from anyio import fail_after
from anyio.streams.memory import MemoryObjectReceiveStream
import pytest

from src.service.box_office.domain.domain_event.box_office_domain_event import (
    BookingCreatedDomainEvent,
    EventCancelledDomainEvent,
)
from src.service.box_office.driven_adapter.notification.in_memory_notification_dispatcher import (
    InMemoryNotificationDispatcher,
)
from test.service.box_office.test_helpers import build_booking, build_event


class TestInMemoryNotificationDispatcher:
    @pytest.fixture
    def dispatcher(self) -> InMemoryNotificationDispatcher:
        return InMemoryNotificationDispatcher(max_buffer_size=2)

    @pytest.fixture
    def event(self):
        return build_event()

    @pytest.fixture
    def booking_created(self, event) -> BookingCreatedDomainEvent:
        booking = build_booking(event_id=event.id)
        return BookingCreatedDomainEvent.from_booking(booking=booking, event=event)

    @pytest.mark.asyncio
    async def test_subscribe_returns_stream(self, dispatcher, event):
        stream = await dispatcher.subscribe(event_id=event.id)

        assert isinstance(stream, MemoryObjectReceiveStream)

    @pytest.mark.asyncio
    async def test_notification_reaches_every_subscriber(self, dispatcher, event, booking_created):
        stream1 = await dispatcher.subscribe(event_id=event.id)
        stream2 = await dispatcher.subscribe(event_id=event.id)

        await dispatcher.booking_created(event=booking_created)

        with fail_after(1.0):
            assert await stream1.receive() == booking_created
            assert await stream2.receive() == booking_created

    @pytest.mark.asyncio
    async def test_other_events_are_not_delivered(self, dispatcher, event):
        other = build_event()
        stream = await dispatcher.subscribe(event_id=other.id)

        await dispatcher.event_cancelled(event=EventCancelledDomainEvent.from_event(event=event))

        assert stream.statistics().current_buffer_used == 0

    @pytest.mark.asyncio
    async def test_no_subscribers_is_a_no_op(self, dispatcher, booking_created):
        await dispatcher.booking_created(event=booking_created)

    @pytest.mark.asyncio
    async def test_full_stream_drops_instead_of_blocking(self, dispatcher, event, booking_created):
        stream = await dispatcher.subscribe(event_id=event.id)

        for _ in range(5):
            await dispatcher.booking_created(event=booking_created)

        assert stream.statistics().current_buffer_used == 2

    @pytest.mark.asyncio
    async def test_unsubscribe_closes_and_forgets_stream(self, dispatcher, event, booking_created):
        stream = await dispatcher.subscribe(event_id=event.id)

        await dispatcher.unsubscribe(event_id=event.id, stream=stream)
        await dispatcher.booking_created(event=booking_created)

        assert dispatcher._subscribers == {}
