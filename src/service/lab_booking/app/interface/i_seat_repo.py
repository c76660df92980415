from abc import ABC, abstractmethod
from typing import List, Optional

from src.service.lab_booking.domain.entity.seat_entity import Seat


class ISeatRepo(ABC):
    @abstractmethod
    async def get_by_name(self, *, lab_id: int, name: str) -> Optional[Seat]:
        pass

    @abstractmethod
    async def get_or_create(
        self, *, lab_id: int, name: str, row: Optional[int], col: Optional[int]
    ) -> Seat:
        """
        Return the seat record for (lab_id, name), inserting it if missing.

        A concurrent insert of the same seat is absorbed: the uniqueness
        violation rolls back to a savepoint and the existing row is returned.
        An inactive seat is reactivated with the given row/col.
        """
        pass

    @abstractmethod
    async def list_by_lab(self, *, lab_id: int, active_only: bool = True) -> List[Seat]:
        """Ordered by row then column, edge seat last"""
        pass

    @abstractmethod
    async def deactivate(self, *, seat_ids: List[int]) -> None:
        pass
