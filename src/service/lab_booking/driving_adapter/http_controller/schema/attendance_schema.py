from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from src.service.lab_booking.domain.enum.attendance_status import AttendanceStatus
from src.service.lab_booking.driving_adapter.http_controller.schema.user_schema import (
    UserResponse,
)


class MarkAttendanceRequest(BaseModel):
    user_id: str
    status: AttendanceStatus
    notes: Optional[str] = None

    class Config:
        json_schema_extra = {'example': {'user_id': 'user_2abc', 'status': 'PRESENT'}}


class BulkAttendanceRequest(BaseModel):
    attendances: List[MarkAttendanceRequest]


class AttendanceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    session_id: int
    status: AttendanceStatus
    marked_by: str
    marked_at: datetime
    notes: Optional[str] = None


class AttendanceStatsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_sessions: int
    present: int
    absent: int
    excused: int
    attendance_rate: Optional[float] = None


class RosterEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    booking_id: int
    seat_name: str
    user_id: str
    user_name: str
    email: Optional[str] = None
    is_banned: bool
    attendance: Optional[AttendanceResponse] = None


class SessionRosterResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    session_id: int
    lab_name: str
    start_at: datetime
    end_at: datetime
    teacher_name: Optional[str] = None
    total_booked: int
    students: List[RosterEntryResponse]
    stats: AttendanceStatsResponse


class AttendanceRecordResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    attendance: AttendanceResponse
    lab_name: str
    start_at: datetime
    end_at: datetime


class AttendanceHistoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user: Optional[UserResponse] = None
    records: List[AttendanceRecordResponse]
    stats: AttendanceStatsResponse


class SessionNeedingAttendanceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    session_id: int
    lab_name: str
    start_at: datetime
    end_at: datetime
    total_booked: int
    total_marked: int
    unmarked: int


class StudentSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user: UserResponse
    total_bookings: int
    stats: AttendanceStatsResponse


class BanStatusRequest(BaseModel):
    is_banned: bool
    ban_reason: Optional[str] = None
