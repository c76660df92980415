from datetime import datetime
from typing import Optional

import attrs

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger
from src.service.lab_booking.domain.booking_errors import (
    InvalidLabConfigError,
    LockedOutError,
)
from src.service.lab_booking.domain.booking_policy import (
    as_utc,
    is_locked_out,
    validate_session_window,
)


@attrs.define
class LabSession:
    lab_id: int
    start_at: datetime = attrs.field(converter=as_utc)
    end_at: datetime = attrs.field(converter=as_utc)
    # denormalized count of unbooked seats
    capacity: int = 0
    created_by_id: str = ''
    id: Optional[int] = None
    student_reminder_sent_at: Optional[datetime] = None
    teacher_reminder_sent_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        lab_id: int,
        start_at: datetime,
        end_at: datetime,
        total_seats: int,
        created_by_id: str,
    ) -> 'LabSession':
        validate_session_window(start_at, end_at)
        if total_seats <= 0:
            raise InvalidLabConfigError('lab layout has no seats')
        return cls(
            lab_id=lab_id,
            start_at=start_at,
            end_at=end_at,
            capacity=total_seats,
            created_by_id=created_by_id,
        )

    def reschedule(self, *, start_at: datetime, end_at: datetime) -> 'LabSession':
        validate_session_window(start_at, end_at)
        return attrs.evolve(self, start_at=start_at, end_at=end_at)

    def is_locked_out(self, now: datetime) -> bool:
        return is_locked_out(self.start_at, now)

    def ensure_open(self, now: datetime) -> None:
        """
        Raises:
            LockedOutError: the lockout window before start has begun
        """
        if self.is_locked_out(now):
            raise LockedOutError(minutes=settings.LOCKOUT_MINUTES)

    def has_ended(self, now: datetime) -> bool:
        return self.end_at < as_utc(now)
