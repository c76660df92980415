from abc import ABC, abstractmethod
from typing import List, Optional

from src.service.lab_booking.domain.entity.equipment_entity import (
    Equipment,
    EquipmentBooking,
    SessionEquipment,
)


class IEquipmentRepo(ABC):
    # ---- lab inventory ----

    @abstractmethod
    async def get_by_id(self, *, equipment_id: int) -> Optional[Equipment]:
        pass

    @abstractmethod
    async def list_by_lab(self, *, lab_id: int) -> List[Equipment]:
        """Ordered by total, largest first"""
        pass

    @abstractmethod
    async def create(self, *, equipment: Equipment) -> Equipment:
        pass

    @abstractmethod
    async def update(self, *, equipment: Equipment) -> Equipment:
        pass

    @abstractmethod
    async def delete(self, *, equipment_id: int) -> None:
        pass

    # ---- per-session offers ----

    @abstractmethod
    async def get_offer(
        self, *, session_id: int, equipment_id: int, for_update: bool = False
    ) -> Optional[SessionEquipment]:
        pass

    @abstractmethod
    async def list_offers_by_session(self, *, session_id: int) -> List[SessionEquipment]:
        pass

    @abstractmethod
    async def list_offers_by_equipment(self, *, equipment_id: int) -> List[SessionEquipment]:
        pass

    @abstractmethod
    async def save_offer(self, *, offer: SessionEquipment) -> SessionEquipment:
        """Insert or update the (session_id, equipment_id) row"""
        pass

    @abstractmethod
    async def delete_offer(self, *, session_id: int, equipment_id: int) -> None:
        pass

    @abstractmethod
    async def delete_offers_by_session(self, *, session_id: int) -> None:
        pass

    @abstractmethod
    async def delete_offers_by_equipment(self, *, equipment_id: int) -> None:
        pass

    # ---- reservations ----

    @abstractmethod
    async def create_booking(self, *, booking: EquipmentBooking) -> EquipmentBooking:
        pass

    @abstractmethod
    async def list_bookings_by_seat_bookings(
        self, *, seat_booking_ids: List[int]
    ) -> List[EquipmentBooking]:
        pass

    @abstractmethod
    async def delete_bookings_by_seat_bookings(self, *, seat_booking_ids: List[int]) -> None:
        pass

    @abstractmethod
    async def delete_bookings_by_session(self, *, session_id: int) -> None:
        pass
