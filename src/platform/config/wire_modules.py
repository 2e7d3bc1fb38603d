"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.box_office.app.command import (
    archive_past_events_use_case,
    cancel_booking_use_case,
    check_in_use_case,
    create_booking_use_case,
    create_event_use_case,
    revert_check_in_use_case,
    update_event_use_case,
)
from src.service.box_office.app.query import (
    get_booking_use_case,
    get_event_inventory_use_case,
    get_event_use_case,
    get_user_booking_for_event_use_case,
    list_bookings_use_case,
    render_credential_use_case,
    report_use_case,
)


WIRE_MODULES: list[ModuleType] = [
    create_booking_use_case,
    cancel_booking_use_case,
    check_in_use_case,
    revert_check_in_use_case,
    create_event_use_case,
    update_event_use_case,
    archive_past_events_use_case,
    get_booking_use_case,
    list_bookings_use_case,
    get_user_booking_for_event_use_case,
    render_credential_use_case,
    get_event_use_case,
    get_event_inventory_use_case,
    report_use_case,
]
