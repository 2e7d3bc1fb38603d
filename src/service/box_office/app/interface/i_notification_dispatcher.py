"""
Notification Dispatcher Interface

Called after the triggering transaction has committed. Implementations may
fail; callers log the failure and move on.
"""

from abc import ABC, abstractmethod

from src.service.box_office.domain.domain_event.box_office_domain_event import (
    BookingCreatedDomainEvent,
    EventCancelledDomainEvent,
    EventChangedDomainEvent,
)


class INotificationDispatcher(ABC):
    @abstractmethod
    async def booking_created(self, *, event: BookingCreatedDomainEvent) -> None:
        pass

    @abstractmethod
    async def event_changed(self, *, event: EventChangedDomainEvent) -> None:
        pass

    @abstractmethod
    async def event_cancelled(self, *, event: EventCancelledDomainEvent) -> None:
        pass
