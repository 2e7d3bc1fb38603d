"""
In-memory Notification Dispatcher

Logs every notification and fans it out to in-process subscribers of the
event it concerns. Delivery channels (email, push) subscribe here; they are
not part of this service.
"""

from typing import Dict, List, Union

from anyio import WouldBlock, create_memory_object_stream
from anyio.streams.memory import MemoryObjectReceiveStream, MemoryObjectSendStream
from uuid_utils import UUID

from src.platform.logging.loguru_io import Logger
from src.service.box_office.app.interface.i_notification_dispatcher import (
    INotificationDispatcher,
)
from src.service.box_office.domain.domain_event.box_office_domain_event import (
    BookingCreatedDomainEvent,
    EventCancelledDomainEvent,
    EventChangedDomainEvent,
)


Notification = Union[BookingCreatedDomainEvent, EventChangedDomainEvent, EventCancelledDomainEvent]

_StreamPair = tuple[
    MemoryObjectSendStream[Notification], MemoryObjectReceiveStream[Notification]
]


class InMemoryNotificationDispatcher(INotificationDispatcher):
    """
    In-memory pub/sub keyed by event id

    Memory Management:
    - Stream max buffer: `max_buffer_size` notifications per subscriber
    - Drop policy: a full stream drops the notification (send_nowait raises WouldBlock)
    - Cleanup: empty subscriber lists are removed on unsubscribe
    """

    def __init__(self, *, max_buffer_size: int = 10) -> None:
        self.max_buffer_size = max_buffer_size
        self._subscribers: Dict[str, List[_StreamPair]] = {}

    async def booking_created(self, *, event: BookingCreatedDomainEvent) -> None:
        Logger.base.info(
            f'📨 [NOTIFY] booking_created booking={event.booking_id} event={event.event_id} '
            f'user={event.user_id} qty={event.quantity}'
        )
        await self._broadcast(event_id=event.event_id, notification=event)

    async def event_changed(self, *, event: EventChangedDomainEvent) -> None:
        Logger.base.info(
            f'📨 [NOTIFY] event_changed event={event.event_id} fields={list(event.changed_fields)}'
        )
        await self._broadcast(event_id=event.event_id, notification=event)

    async def event_cancelled(self, *, event: EventCancelledDomainEvent) -> None:
        Logger.base.info(f'📨 [NOTIFY] event_cancelled event={event.event_id}')
        await self._broadcast(event_id=event.event_id, notification=event)

    async def subscribe(self, *, event_id: UUID) -> MemoryObjectReceiveStream[Notification]:
        send_stream, receive_stream = create_memory_object_stream[Notification](
            max_buffer_size=self.max_buffer_size
        )
        self._subscribers.setdefault(str(event_id), []).append((send_stream, receive_stream))
        Logger.base.debug(
            f'📡 [NOTIFY] Subscribed to event {event_id} '
            f'(total subscribers: {len(self._subscribers[str(event_id)])})'
        )
        return receive_stream

    async def unsubscribe(
        self, *, event_id: UUID, stream: MemoryObjectReceiveStream[Notification]
    ) -> None:
        subscribers = self._subscribers.get(str(event_id))
        if not subscribers:
            return

        for i, (send_stream, receive_stream) in enumerate(subscribers):
            if receive_stream is stream:
                await send_stream.aclose()
                await receive_stream.aclose()
                subscribers.pop(i)
                break

        if not subscribers:
            del self._subscribers[str(event_id)]

    async def _broadcast(self, *, event_id: UUID, notification: Notification) -> None:
        subscribers = self._subscribers.get(str(event_id))
        if not subscribers:
            return

        delivered = 0
        dropped = 0
        for send_stream, _ in subscribers:
            try:
                send_stream.send_nowait(notification)
                delivered += 1
            except WouldBlock:
                dropped += 1
                Logger.base.warning(
                    f'⚠️ [NOTIFY] Stream full for event {event_id}, '
                    f'dropping {type(notification).__name__}'
                )

        Logger.base.debug(
            f'📡 [NOTIFY] Broadcast to event {event_id}: delivered={delivered}, dropped={dropped}'
        )
