"""Lab Booking Domain Value Objects"""

from src.service.lab_booking.domain.value_object.caller import Caller
from src.service.lab_booking.domain.value_object.lab_layout import (
    EDGE_SEAT_NAME,
    LabLayout,
    RowConfig,
    SeatPosition,
    normalize_seat_name,
)

__all__ = [
    'EDGE_SEAT_NAME',
    'Caller',
    'LabLayout',
    'RowConfig',
    'SeatPosition',
    'normalize_seat_name',
]
