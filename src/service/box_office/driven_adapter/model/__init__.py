from src.service.box_office.driven_adapter.model.booking_model import BookingModel
from src.service.box_office.driven_adapter.model.event_model import EventModel

__all__ = ['BookingModel', 'EventModel']
