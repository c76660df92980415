from abc import ABC, abstractmethod
from typing import Optional

from src.service.lab_booking.domain.entity.lab_entity import Lab


class ILabRepo(ABC):
    @abstractmethod
    async def get_by_id(self, *, lab_id: int) -> Optional[Lab]:
        pass

    @abstractmethod
    async def get_for_update(self, *, lab_id: int) -> Optional[Lab]:
        """
        Load the lab and hold a row lock on it until the transaction ends.

        Session create/update on one lab serialize on this lock.
        """
        pass

    @abstractmethod
    async def get_for_share(self, *, lab_id: int) -> Optional[Lab]:
        """
        Load the lab under a shared row lock held until the transaction ends.

        Seat booking changes take this lock, a layout change takes the
        exclusive one, so the two never interleave.
        """
        pass

    @abstractmethod
    async def find_by_name(self, *, name: str) -> Optional[Lab]:
        """Case-insensitive substring match; first lab by id wins"""
        pass

    @abstractmethod
    async def create(self, *, lab: Lab) -> Lab:
        pass

    @abstractmethod
    async def update_row_config(self, *, lab_id: int, row_config: str) -> Lab:
        pass
