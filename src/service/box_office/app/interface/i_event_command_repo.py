from abc import ABC, abstractmethod
from typing import Optional

from uuid_utils import UUID

from src.service.box_office.domain.entity.event_entity import Event


class IEventCommandRepo(ABC):
    """
    Repository interface for event writes.

    Every write is conditioned on the version the caller read and bumps it,
    so a stale writer never overwrites a newer record.
    """

    @abstractmethod
    async def create(self, *, event: Event) -> Event:
        pass

    @abstractmethod
    async def update(self, *, event: Event) -> Optional[Event]:
        """
        Persist `event` if the stored version still equals `event.version`.

        Returns:
            The stored event with its bumped version, or None when another
            writer got there first
        """
        pass

    @abstractmethod
    async def compare_and_set_inventory(
        self,
        *,
        event_id: UUID,
        expected_version: int,
        available_tickets: int,
        sold_tickets: int,
    ) -> Optional[int]:
        """
        Write the counters of one event atomically.

        Args:
            event_id: Event ID
            expected_version: Version the counters were computed from
            available_tickets: New available count
            sold_tickets: New sold count

        Returns:
            The new version, or None when the stored version has moved on
        """
        pass
