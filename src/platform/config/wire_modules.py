"""
Wire Modules Configuration

Modules whose ``Provide[...]`` markers need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.lab_booking.app.command import (
    add_lab_equipment_use_case,
    approve_booking_use_case,
    book_seat_use_case,
    cancel_booking_use_case,
    create_lab_use_case,
    create_session_use_case,
    delete_account_use_case,
    delete_lab_equipment_use_case,
    mark_attendance_use_case,
    reject_booking_use_case,
    remove_session_use_case,
    send_session_reminders_use_case,
    set_lab_layout_use_case,
    switch_seat_use_case,
    sync_account_use_case,
    unbook_seat_use_case,
    update_ban_status_use_case,
    update_booking_details_use_case,
    update_lab_equipment_use_case,
    update_roles_use_case,
    update_session_equipment_use_case,
    update_session_use_case,
)
from src.service.lab_booking.app.query import (
    attendance_query_use_case,
    booking_query_use_case,
    lab_query_use_case,
    session_query_use_case,
    user_query_use_case,
)
from src.service.lab_booking.driving_adapter.http_controller.auth import role_auth


WIRE_MODULES: list[ModuleType] = [
    # labs and sessions
    create_lab_use_case,
    set_lab_layout_use_case,
    add_lab_equipment_use_case,
    update_lab_equipment_use_case,
    delete_lab_equipment_use_case,
    create_session_use_case,
    update_session_use_case,
    remove_session_use_case,
    update_session_equipment_use_case,
    # bookings
    book_seat_use_case,
    unbook_seat_use_case,
    switch_seat_use_case,
    cancel_booking_use_case,
    approve_booking_use_case,
    reject_booking_use_case,
    update_booking_details_use_case,
    # attendance and accounts
    mark_attendance_use_case,
    update_ban_status_use_case,
    sync_account_use_case,
    update_roles_use_case,
    delete_account_use_case,
    send_session_reminders_use_case,
    # queries
    lab_query_use_case,
    session_query_use_case,
    booking_query_use_case,
    attendance_query_use_case,
    user_query_use_case,
    role_auth,
]
