from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from src.service.lab_booking.domain.enum.booking_status import BookingStatus
from src.service.lab_booking.domain.enum.unit_type import UnitType


class SessionWindowRequest(BaseModel):
    lab_id: int
    start_at: datetime
    end_at: datetime

    class Config:
        json_schema_extra = {
            'example': {
                'lab_id': 1,
                'start_at': '2025-03-10T09:00:00Z',
                'end_at': '2025-03-10T11:00:00Z',
            }
        }


class SessionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    lab_id: int
    start_at: datetime
    end_at: datetime
    capacity: int
    created_by_id: str


class OccupiedSeatResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    booking_id: int
    seat_name: str
    user_id: str
    user_name: str
    status: BookingStatus


class EquipmentLineRequest(BaseModel):
    equipment_id: int
    amount: int


class BookSeatRequest(BaseModel):
    lab_id: int
    seat_name: str
    notes: Optional[str] = None
    equipment: List[EquipmentLineRequest] = []

    class Config:
        json_schema_extra = {
            'examples': [
                {'lab_id': 1, 'seat_name': 'B3'},
                {
                    'lab_id': 1,
                    'seat_name': 'Edge',
                    'notes': 'Bringing my own goggles',
                    'equipment': [{'equipment_id': 1, 'amount': 2}],
                },
            ]
        }


class UnbookSeatRequest(BaseModel):
    lab_id: int
    seat_name: str
    is_teacher_acting: bool = False


class SwitchSeatRequest(BaseModel):
    lab_id: int
    new_seat_name: str


class EquipmentOfferRequest(BaseModel):
    equipment_id: int
    available: int


class SessionEquipmentUpdateRequest(BaseModel):
    deletions: List[int] = []
    additions: List[EquipmentOfferRequest] = []
    updates: List[EquipmentOfferRequest] = []

    class Config:
        json_schema_extra = {
            'example': {
                'deletions': [3],
                'additions': [{'equipment_id': 1, 'available': 5}],
                'updates': [],
            }
        }


class SessionEquipmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    equipment_id: int
    name: str
    unit_type: UnitType
    total: int
    available: int
    reserved: int
    remaining: int = Field(description='available - reserved')
