from datetime import datetime
from typing import Optional

import attrs

from src.service.lab_booking.domain.enum.attendance_status import AttendanceStatus


@attrs.define
class Attendance:
    user_id: str
    session_id: int
    status: AttendanceStatus
    marked_by: str
    marked_at: datetime
    notes: Optional[str] = None
