from abc import ABC, abstractmethod
from typing import Dict, List

from src.service.lab_booking.domain.entity.attendance_entity import Attendance


class IAttendanceRepo(ABC):
    @abstractmethod
    async def upsert(self, *, attendance: Attendance) -> Attendance:
        """Insert or overwrite the record keyed by (user_id, session_id)"""
        pass

    @abstractmethod
    async def list_by_session(self, *, session_id: int) -> List[Attendance]:
        pass

    @abstractmethod
    async def list_by_user(self, *, user_id: str) -> List[Attendance]:
        pass

    @abstractmethod
    async def count_by_sessions(self, *, session_ids: List[int]) -> Dict[int, int]:
        pass

    @abstractmethod
    async def delete_by_session(self, *, session_id: int) -> None:
        pass

    @abstractmethod
    async def delete_by_user(self, *, user_id: str) -> None:
        pass
