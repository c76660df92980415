"""
Database Models

Import all models here to ensure they are registered with SQLAlchemy
"""

from src.service.lab_booking.driven_adapter.model.attendance_model import AttendanceModel
from src.service.lab_booking.driven_adapter.model.equipment_model import (
    EquipmentBookingModel,
    EquipmentModel,
    SessionEquipmentModel,
)
from src.service.lab_booking.driven_adapter.model.lab_model import LabModel
from src.service.lab_booking.driven_adapter.model.lab_session_model import LabSessionModel
from src.service.lab_booking.driven_adapter.model.lab_user_model import LabUserModel
from src.service.lab_booking.driven_adapter.model.seat_booking_model import SeatBookingModel
from src.service.lab_booking.driven_adapter.model.seat_model import SeatModel

__all__ = [
    'AttendanceModel',
    'EquipmentBookingModel',
    'EquipmentModel',
    'LabModel',
    'LabSessionModel',
    'LabUserModel',
    'SeatBookingModel',
    'SeatModel',
    'SessionEquipmentModel',
]
