from datetime import datetime
from typing import Optional

import attrs

from src.service.lab_booking.app.dto.notification_dto import EquipmentLine
from src.service.lab_booking.domain.enum.booking_status import BookingStatus
from src.service.lab_booking.domain.enum.unit_type import UnitType


@attrs.frozen
class OccupiedSeat:
    booking_id: int
    seat_name: str
    user_id: str
    user_name: str
    status: BookingStatus


@attrs.frozen
class BookingView:
    """A booking joined with its session, lab, owner and equipment."""

    booking_id: int
    session_id: int
    lab_id: int
    lab_name: str
    seat_name: str
    user_id: str
    user_name: str
    status: BookingStatus
    start_at: datetime
    end_at: datetime
    notes: Optional[str] = None
    equipment: tuple[EquipmentLine, ...] = ()


@attrs.frozen
class SessionEquipmentView:
    equipment_id: int
    name: str
    unit_type: UnitType
    total: int
    available: int
    reserved: int

    @property
    def remaining(self) -> int:
        return self.available - self.reserved
