from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from src.service.lab_booking.domain.enum.booking_status import BookingStatus
from src.service.lab_booking.driving_adapter.http_controller.schema.session_schema import (
    EquipmentLineRequest,
)


class SeatBookingResponse(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            'example': {
                'id': 12,
                'session_id': 3,
                'seat_id': 8,
                'user_id': 'user_2abc',
                'name': 'B3',
                'status': 'CONFIRMED',
                'notes': None,
                'created_at': '2025-03-01T10:30:00Z',
            }
        },
    )

    id: int
    session_id: int
    seat_id: int
    user_id: str
    name: str
    status: BookingStatus
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


class EquipmentLineResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    amount: int
    unit_type: str


class BookingViewResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

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
    equipment: List[EquipmentLineResponse] = []


class BookingDetailsRequest(BaseModel):
    notes: Optional[str] = None
    equipment: List[EquipmentLineRequest] = []
