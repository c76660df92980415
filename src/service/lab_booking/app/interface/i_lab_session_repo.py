from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Literal, Optional

from src.service.lab_booking.domain.entity.lab_session_entity import LabSession


ReminderKind = Literal['student', 'teacher']


class ILabSessionRepo(ABC):
    @abstractmethod
    async def get_by_id(self, *, session_id: int) -> Optional[LabSession]:
        pass

    @abstractmethod
    async def find_overlapping(
        self,
        *,
        lab_id: int,
        start_at: datetime,
        end_at: datetime,
        exclude_id: Optional[int] = None,
    ) -> List[LabSession]:
        """Sessions with ``start_at <= end AND end_at >= start`` (touching counts)"""
        pass

    @abstractmethod
    async def create(self, *, session: LabSession) -> LabSession:
        pass

    @abstractmethod
    async def update_window(
        self, *, session_id: int, start_at: datetime, end_at: datetime
    ) -> LabSession:
        pass

    @abstractmethod
    async def try_decrement_capacity(self, *, session_id: int) -> bool:
        """
        Compare-and-set ``capacity = capacity - 1 WHERE capacity > 0``.

        Returns:
            True when exactly one row was updated, False when the session is full
        """
        pass

    @abstractmethod
    async def increment_capacity(self, *, session_id: int, amount: int = 1) -> None:
        pass

    @abstractmethod
    async def set_capacity(self, *, session_id: int, capacity: int) -> None:
        pass

    @abstractmethod
    async def recount_capacity(self, *, lab_id: int, after: datetime, total_seats: int) -> int:
        """
        Set ``capacity = max(total_seats - bookings, 0)`` on every session of the
        lab starting after ``after``, counting bookings in the same statement.

        Returns:
            Number of sessions recounted
        """
        pass

    @abstractmethod
    async def delete(self, *, session_id: int) -> None:
        pass

    @abstractmethod
    async def list_starting_between(
        self, *, start: datetime, end: datetime, lab_id: Optional[int] = None
    ) -> List[LabSession]:
        """``start <= start_at < end`` ordered by start_at"""
        pass

    @abstractmethod
    async def list_by_creator(self, *, user_id: str) -> List[LabSession]:
        pass

    @abstractmethod
    async def list_ended_before(self, *, before: datetime, limit: int) -> List[LabSession]:
        """Most recently ended first"""
        pass

    @abstractmethod
    async def list_reminder_candidates(
        self, *, kind: ReminderKind, start: datetime, end: datetime
    ) -> List[LabSession]:
        """Sessions starting within [start, end] whose reminder of ``kind`` was not sent"""
        pass

    @abstractmethod
    async def claim_reminder(self, *, session_id: int, kind: ReminderKind, now: datetime) -> bool:
        """
        Conditionally stamp the reminder timestamp if still unset.

        Returns:
            True if this caller claimed the reminder
        """
        pass
