from abc import ABC, abstractmethod

from src.service.box_office.domain.entity.booking_entity import Booking
from src.service.box_office.domain.enum.booking_status import BookingStatus


class IBookingCommandRepo(ABC):
    """
    Repository interface for booking writes.

    Status changes are compare-and-set on the current status, which is what
    makes check-in exactly-once and cancellation single-shot.
    """

    @abstractmethod
    async def create(self, *, booking: Booking) -> Booking:
        pass

    @abstractmethod
    async def compare_and_set_status(
        self, *, booking: Booking, expected_status: BookingStatus
    ) -> bool:
        """
        Store the status and audit fields of `booking` if the stored status
        still equals `expected_status`.

        Returns:
            True when this call performed the transition
        """
        pass
