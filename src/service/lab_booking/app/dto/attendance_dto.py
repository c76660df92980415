from datetime import datetime
from typing import Iterable, Optional

import attrs

from src.service.lab_booking.domain.entity.attendance_entity import Attendance
from src.service.lab_booking.domain.entity.lab_user_entity import LabUser
from src.service.lab_booking.domain.enum.attendance_status import AttendanceStatus


@attrs.frozen
class AttendanceStats:
    total_sessions: int = 0
    present: int = 0
    absent: int = 0
    excused: int = 0

    @classmethod
    def of(cls, records: Iterable[Attendance]) -> 'AttendanceStats':
        statuses = [record.status for record in records]
        return cls(
            total_sessions=len(statuses),
            present=statuses.count(AttendanceStatus.PRESENT),
            absent=statuses.count(AttendanceStatus.ABSENT),
            excused=statuses.count(AttendanceStatus.EXCUSED),
        )

    @property
    def attendance_rate(self) -> Optional[float]:
        """Percentage of sessions attended or excused; None without records"""
        if not self.total_sessions:
            return None
        return (self.present + self.excused) / self.total_sessions * 100


@attrs.frozen
class RosterEntry:
    booking_id: int
    seat_name: str
    user_id: str
    user_name: str
    email: Optional[str]
    is_banned: bool
    attendance: Optional[Attendance] = None


@attrs.frozen
class SessionRoster:
    session_id: int
    lab_name: str
    start_at: datetime
    end_at: datetime
    teacher_name: Optional[str]
    students: tuple[RosterEntry, ...]
    stats: AttendanceStats

    @property
    def total_booked(self) -> int:
        return len(self.students)


@attrs.frozen
class AttendanceRecordView:
    attendance: Attendance
    lab_name: str
    start_at: datetime
    end_at: datetime


@attrs.frozen
class AttendanceHistory:
    user: Optional[LabUser]
    records: tuple[AttendanceRecordView, ...]
    stats: AttendanceStats


@attrs.frozen
class SessionNeedingAttendance:
    session_id: int
    lab_name: str
    start_at: datetime
    end_at: datetime
    total_booked: int
    total_marked: int

    @property
    def unmarked(self) -> int:
        return self.total_booked - self.total_marked


@attrs.frozen
class StudentAttendanceSummary:
    user: LabUser
    total_bookings: int
    stats: AttendanceStats
