from src.service.box_office.domain.domain_event.box_office_domain_event import (
    BookingCreatedDomainEvent,
    EventCancelledDomainEvent,
    EventChangedDomainEvent,
)

__all__ = [
    'BookingCreatedDomainEvent',
    'EventCancelledDomainEvent',
    'EventChangedDomainEvent',
]
