from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from uuid_utils import UUID

from src.service.box_office.app.dto.report_dto import StatusTally
from src.service.box_office.domain.entity.booking_entity import Booking
from src.service.box_office.domain.enum.booking_status import BookingStatus, RegistrationType


class IBookingQueryRepo(ABC):
    """Repository interface for booking read operations"""

    @abstractmethod
    async def get_by_id(self, *, booking_id: UUID) -> Optional[Booking]:
        pass

    @abstractmethod
    async def list_by_event(
        self, *, event_id: UUID, status: Optional[BookingStatus] = None
    ) -> List[Booking]:
        """Bookings of one event, newest first"""
        pass

    @abstractmethod
    async def list_by_user(self, *, user_id: int) -> List[Booking]:
        """Bookings of one user, newest first"""
        pass

    @abstractmethod
    async def get_active_by_user_and_event(
        self,
        *,
        user_id: int,
        event_id: UUID,
        registration_type: Optional[RegistrationType] = None,
    ) -> Optional[Booking]:
        """The user's confirmed or used booking for the event, if any"""
        pass

    @abstractmethod
    async def tally_by_status(self, *, event_ids: List[UUID]) -> dict[BookingStatus, StatusTally]:
        """Booking and ticket counts per status across the given events"""
        pass

    @abstractmethod
    async def count_created_between(
        self, *, event_ids: List[UUID], start: datetime, end: datetime
    ) -> int:
        pass
