"""Lab Booking Domain Enums"""

from src.service.lab_booking.domain.enum.attendance_status import AttendanceStatus
from src.service.lab_booking.domain.enum.booking_status import BookingStatus
from src.service.lab_booking.domain.enum.unit_type import UnitType
from src.service.lab_booking.domain.enum.user_role import UserRole

__all__ = ['AttendanceStatus', 'BookingStatus', 'UnitType', 'UserRole']
