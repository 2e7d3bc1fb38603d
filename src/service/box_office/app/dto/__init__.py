"""Application layer DTOs"""

from src.service.box_office.app.dto.check_in_result import CheckInResult
from src.service.box_office.app.dto.inventory_dto import InventorySnapshot, Reservation
from src.service.box_office.app.dto.report_dto import EventReport, OrganiserReport, StatusTally

__all__ = [
    'CheckInResult',
    'EventReport',
    'InventorySnapshot',
    'OrganiserReport',
    'Reservation',
    'StatusTally',
]
