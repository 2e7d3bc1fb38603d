from abc import ABC, abstractmethod
from typing import List, Optional

from uuid_utils import UUID

from src.service.box_office.domain.entity.event_entity import Event


class IEventQueryRepo(ABC):
    """Repository interface for event read operations"""

    @abstractmethod
    async def get_by_id(self, *, event_id: UUID) -> Optional[Event]:
        """Always returns the latest stored state, never a cached copy"""
        pass

    @abstractmethod
    async def list_by_organiser(self, *, organiser_id: int) -> List[Event]:
        pass
