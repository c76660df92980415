from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from src.service.lab_booking.domain.entity.lab_user_entity import LabUser
from src.service.lab_booking.domain.enum.user_role import UserRole


class ILabUserRepo(ABC):
    @abstractmethod
    async def get_by_id(self, *, user_id: str) -> Optional[LabUser]:
        pass

    @abstractmethod
    async def get_many(self, *, user_ids: List[str]) -> Dict[str, LabUser]:
        pass

    @abstractmethod
    async def list_all(self, *, role: Optional[UserRole] = None) -> List[LabUser]:
        pass

    @abstractmethod
    async def save(self, *, user: LabUser) -> LabUser:
        """Insert or update by id"""
        pass

    @abstractmethod
    async def delete(self, *, user_id: str) -> None:
        pass
