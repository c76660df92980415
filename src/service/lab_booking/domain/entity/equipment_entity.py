from datetime import datetime
from typing import Optional

import attrs

from src.platform.exception.exceptions import DomainError
from src.service.lab_booking.domain.booking_errors import (
    BelowReservedError,
    ExceedsInventoryError,
    InsufficientEquipmentError,
)
from src.service.lab_booking.domain.enum.unit_type import UnitType


@attrs.define
class Equipment:
    """Lab-wide inventory item."""

    lab_id: int
    name: str
    total: int
    unit_type: UnitType = UnitType.UNIT
    expiration_date: Optional[datetime] = None
    created_by: Optional[str] = None
    id: Optional[int] = None

    @classmethod
    def create(
        cls,
        *,
        lab_id: int,
        name: str,
        total: int,
        unit_type: UnitType = UnitType.UNIT,
        expiration_date: Optional[datetime] = None,
        created_by: Optional[str] = None,
    ) -> 'Equipment':
        name = (name or '').strip()
        if not name:
            raise DomainError('Equipment name is required')
        if total < 0:
            raise DomainError('Equipment total cannot be negative')
        return cls(
            lab_id=lab_id,
            name=name,
            total=total,
            unit_type=unit_type,
            expiration_date=expiration_date,
            created_by=created_by,
        )


@attrs.define
class SessionEquipment:
    """
    Amount of an equipment item offered in one session.

    Invariant: ``0 <= reserved <= available <= Equipment.total``.
    """

    session_id: int
    equipment_id: int
    available: int
    reserved: int = 0

    @property
    def remaining(self) -> int:
        return self.available - self.reserved

    @classmethod
    def offer(cls, *, session_id: int, equipment: Equipment, available: int) -> 'SessionEquipment':
        offer = cls(session_id=session_id, equipment_id=equipment.id or 0, available=0)
        return offer.with_available(available, equipment=equipment)

    def with_available(self, available: int, *, equipment: Equipment) -> 'SessionEquipment':
        if available < 0:
            raise DomainError('Available amount cannot be negative')
        if available > equipment.total:
            raise ExceedsInventoryError(
                f'Only {equipment.total} {equipment.name} exist in this lab, '
                f'cannot offer {available}'
            )
        if available < self.reserved:
            raise BelowReservedError(
                f'{self.reserved} {equipment.name} are already reserved, '
                f'cannot lower availability to {available}'
            )
        return attrs.evolve(self, available=available)

    def reserve(self, amount: int, *, equipment_name: str) -> 'SessionEquipment':
        if amount <= 0:
            raise DomainError('Equipment amount must be positive')
        if self.remaining < amount:
            raise InsufficientEquipmentError(equipment_name, self.remaining, amount)
        return attrs.evolve(self, reserved=self.reserved + amount)

    def release(self, amount: int) -> 'SessionEquipment':
        return attrs.evolve(self, reserved=max(self.reserved - amount, 0))


@attrs.define
class EquipmentBooking:
    user_id: str
    session_id: int
    equipment_id: int
    seat_booking_id: int
    amount: int
    actual_used: Optional[int] = None
    id: Optional[int] = None
