from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.lab_booking.app.interface.i_equipment_repo import IEquipmentRepo
from src.service.lab_booking.domain.booking_policy import as_utc
from src.service.lab_booking.domain.entity.equipment_entity import (
    Equipment,
    EquipmentBooking,
    SessionEquipment,
)
from src.service.lab_booking.domain.enum.unit_type import UnitType
from src.service.lab_booking.driven_adapter.model.equipment_model import (
    EquipmentBookingModel,
    EquipmentModel,
    SessionEquipmentModel,
)


class EquipmentRepoImpl(IEquipmentRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _to_equipment(model: EquipmentModel) -> Equipment:
        return Equipment(
            id=model.id,
            lab_id=model.lab_id,
            name=model.name,
            total=model.total,
            unit_type=UnitType(model.unit_type),
            expiration_date=as_utc(model.expiration_date) if model.expiration_date else None,
            created_by=model.created_by,
        )

    @staticmethod
    def _to_offer(model: SessionEquipmentModel) -> SessionEquipment:
        return SessionEquipment(
            session_id=model.session_id,
            equipment_id=model.equipment_id,
            available=model.available,
            reserved=model.reserved,
        )

    @staticmethod
    def _to_booking(model: EquipmentBookingModel) -> EquipmentBooking:
        return EquipmentBooking(
            id=model.id,
            user_id=model.user_id,
            session_id=model.session_id,
            equipment_id=model.equipment_id,
            seat_booking_id=model.seat_booking_id,
            amount=model.amount,
            actual_used=model.actual_used,
        )

    # ---- lab inventory ----

    @Logger.io
    async def get_by_id(self, *, equipment_id: int) -> Optional[Equipment]:
        model = await self.session.get(EquipmentModel, equipment_id)
        return self._to_equipment(model) if model else None

    @Logger.io
    async def list_by_lab(self, *, lab_id: int) -> List[Equipment]:
        result = await self.session.execute(
            select(EquipmentModel)
            .where(EquipmentModel.lab_id == lab_id)
            .order_by(EquipmentModel.total.desc(), EquipmentModel.id)
        )
        return [self._to_equipment(model) for model in result.scalars().all()]

    @Logger.io
    async def create(self, *, equipment: Equipment) -> Equipment:
        model = EquipmentModel(
            lab_id=equipment.lab_id,
            name=equipment.name,
            total=equipment.total,
            unit_type=equipment.unit_type.value,
            expiration_date=equipment.expiration_date,
            created_by=equipment.created_by,
        )
        self.session.add(model)
        await self.session.flush()
        await self.session.refresh(model)
        return self._to_equipment(model)

    @Logger.io
    async def update(self, *, equipment: Equipment) -> Equipment:
        model = await self.session.get(EquipmentModel, equipment.id)
        if model is None:
            raise NotFoundError('Equipment not found')
        model.name = equipment.name
        model.total = equipment.total
        model.unit_type = equipment.unit_type.value
        model.expiration_date = equipment.expiration_date
        await self.session.flush()
        return self._to_equipment(model)

    @Logger.io
    async def delete(self, *, equipment_id: int) -> None:
        await self.session.execute(
            delete(EquipmentModel)
            .where(EquipmentModel.id == equipment_id)
            .execution_options(synchronize_session=False)
        )

    # ---- per-session offers ----

    @Logger.io
    async def get_offer(
        self, *, session_id: int, equipment_id: int, for_update: bool = False
    ) -> Optional[SessionEquipment]:
        stmt = select(SessionEquipmentModel).where(
            SessionEquipmentModel.session_id == session_id,
            SessionEquipmentModel.equipment_id == equipment_id,
        )
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.session.execute(stmt.execution_options(populate_existing=True))
        model = result.scalar_one_or_none()
        return self._to_offer(model) if model else None

    @Logger.io
    async def list_offers_by_session(self, *, session_id: int) -> List[SessionEquipment]:
        result = await self.session.execute(
            select(SessionEquipmentModel)
            .where(SessionEquipmentModel.session_id == session_id)
            .order_by(SessionEquipmentModel.equipment_id)
            .execution_options(populate_existing=True)
        )
        return [self._to_offer(model) for model in result.scalars().all()]

    @Logger.io
    async def list_offers_by_equipment(self, *, equipment_id: int) -> List[SessionEquipment]:
        result = await self.session.execute(
            select(SessionEquipmentModel)
            .where(SessionEquipmentModel.equipment_id == equipment_id)
            .execution_options(populate_existing=True)
        )
        return [self._to_offer(model) for model in result.scalars().all()]

    @Logger.io
    async def save_offer(self, *, offer: SessionEquipment) -> SessionEquipment:
        model = await self.session.get(
            SessionEquipmentModel, (offer.session_id, offer.equipment_id)
        )
        if model is None:
            model = SessionEquipmentModel(
                session_id=offer.session_id,
                equipment_id=offer.equipment_id,
                available=offer.available,
                reserved=offer.reserved,
            )
            self.session.add(model)
        else:
            model.available = offer.available
            model.reserved = offer.reserved
        await self.session.flush()
        return self._to_offer(model)

    @Logger.io
    async def delete_offer(self, *, session_id: int, equipment_id: int) -> None:
        await self.session.execute(
            delete(SessionEquipmentModel)
            .where(
                SessionEquipmentModel.session_id == session_id,
                SessionEquipmentModel.equipment_id == equipment_id,
            )
            .execution_options(synchronize_session=False)
        )

    @Logger.io
    async def delete_offers_by_session(self, *, session_id: int) -> None:
        await self.session.execute(
            delete(SessionEquipmentModel)
            .where(SessionEquipmentModel.session_id == session_id)
            .execution_options(synchronize_session=False)
        )

    @Logger.io
    async def delete_offers_by_equipment(self, *, equipment_id: int) -> None:
        await self.session.execute(
            delete(SessionEquipmentModel)
            .where(SessionEquipmentModel.equipment_id == equipment_id)
            .execution_options(synchronize_session=False)
        )

    # ---- reservations ----

    @Logger.io
    async def create_booking(self, *, booking: EquipmentBooking) -> EquipmentBooking:
        model = EquipmentBookingModel(
            user_id=booking.user_id,
            session_id=booking.session_id,
            equipment_id=booking.equipment_id,
            seat_booking_id=booking.seat_booking_id,
            amount=booking.amount,
            actual_used=booking.actual_used,
        )
        self.session.add(model)
        await self.session.flush()
        return self._to_booking(model)

    @Logger.io
    async def list_bookings_by_seat_bookings(
        self, *, seat_booking_ids: List[int]
    ) -> List[EquipmentBooking]:
        if not seat_booking_ids:
            return []
        result = await self.session.execute(
            select(EquipmentBookingModel)
            .where(EquipmentBookingModel.seat_booking_id.in_(seat_booking_ids))
            .order_by(EquipmentBookingModel.id)
        )
        return [self._to_booking(model) for model in result.scalars().all()]

    @Logger.io
    async def delete_bookings_by_seat_bookings(self, *, seat_booking_ids: List[int]) -> None:
        if not seat_booking_ids:
            return
        await self.session.execute(
            delete(EquipmentBookingModel)
            .where(EquipmentBookingModel.seat_booking_id.in_(seat_booking_ids))
            .execution_options(synchronize_session=False)
        )

    @Logger.io
    async def delete_bookings_by_session(self, *, session_id: int) -> None:
        await self.session.execute(
            delete(EquipmentBookingModel)
            .where(EquipmentBookingModel.session_id == session_id)
            .execution_options(synchronize_session=False)
        )
