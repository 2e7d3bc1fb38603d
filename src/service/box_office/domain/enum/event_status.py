"""
Event Status Enum - Domain Value Object

draft -> published -> (cancelled | archived); archived is a soft delete.
"""

from enum import StrEnum


class EventStatus(StrEnum):
    DRAFT = 'draft'
    PUBLISHED = 'published'
    ARCHIVED = 'archived'
    CANCELLED = 'cancelled'


class EventType(StrEnum):
    FREE = 'free'
    PAID = 'paid'
