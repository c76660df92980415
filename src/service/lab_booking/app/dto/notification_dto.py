"""
Notification payloads.

Assembled inside the transaction from committed-to-be state so the dispatcher
never has to touch the database after commit.
"""

from datetime import datetime
from enum import StrEnum
from typing import Optional

import attrs

from src.service.lab_booking.domain.enum.booking_status import BookingStatus


class BookingChange(StrEnum):
    APPROVED = 'APPROVED'
    REJECTED = 'REJECTED'
    CANCELLED = 'CANCELLED'


@attrs.frozen
class EquipmentLine:
    name: str
    amount: int
    unit_type: str = 'UNIT'


@attrs.frozen
class BookingNotice:
    booking_id: int
    student_email: Optional[str]
    student_name: str
    lab_name: str
    seat_name: str
    start_at: datetime
    end_at: datetime
    status: BookingStatus
    notes: Optional[str] = None
    equipment: tuple[EquipmentLine, ...] = ()
    teacher_email: Optional[str] = None
    teacher_name: Optional[str] = None


@attrs.frozen
class StudentReminder:
    student_email: str
    student_name: str
    lab_name: str
    seat_name: str
    start_at: datetime
    end_at: datetime
    equipment: tuple[EquipmentLine, ...] = ()


@attrs.frozen
class SummaryStudent:
    name: str
    email: Optional[str]
    seat_name: str
    notes: Optional[str] = None
    equipment: tuple[EquipmentLine, ...] = ()


@attrs.frozen
class TeacherSummary:
    teacher_email: str
    teacher_name: str
    lab_name: str
    start_at: datetime
    end_at: datetime
    students: tuple[SummaryStudent, ...] = ()

    @property
    def total_equipment(self) -> tuple[EquipmentLine, ...]:
        totals: dict[tuple[str, str], int] = {}
        for student in self.students:
            for line in student.equipment:
                key = (line.name, line.unit_type)
                totals[key] = totals.get(key, 0) + line.amount
        return tuple(
            EquipmentLine(name=name, amount=amount, unit_type=unit_type)
            for (name, unit_type), amount in sorted(totals.items())
        )
