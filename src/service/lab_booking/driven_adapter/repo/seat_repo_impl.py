from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.lab_booking.app.interface.i_seat_repo import ISeatRepo
from src.service.lab_booking.domain.entity.seat_entity import Seat
from src.service.lab_booking.driven_adapter.model.seat_model import SeatModel


class SeatRepoImpl(ISeatRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _to_entity(model: SeatModel) -> Seat:
        return Seat(
            id=model.id,
            lab_id=model.lab_id,
            name=model.name,
            row=model.row,
            col=model.col,
            is_active=model.is_active,
        )

    async def _get_model(self, *, lab_id: int, name: str) -> Optional[SeatModel]:
        result = await self.session.execute(
            select(SeatModel)
            .where(SeatModel.lab_id == lab_id, SeatModel.name == name)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    @Logger.io
    async def get_by_name(self, *, lab_id: int, name: str) -> Optional[Seat]:
        model = await self._get_model(lab_id=lab_id, name=name)
        return self._to_entity(model) if model else None

    @Logger.io
    async def get_or_create(
        self, *, lab_id: int, name: str, row: Optional[int], col: Optional[int]
    ) -> Seat:
        model = await self._get_model(lab_id=lab_id, name=name)
        if model is None:
            try:
                async with self.session.begin_nested():
                    model = SeatModel(lab_id=lab_id, name=name, row=row, col=col, is_active=True)
                    self.session.add(model)
                    await self.session.flush()
            except IntegrityError:
                # another transaction created the same seat first
                Logger.base.info(f'🪑 [SEAT] {name} in lab {lab_id} created concurrently, reusing')
                model = await self._get_model(lab_id=lab_id, name=name)
                if model is None:
                    raise

        if not model.is_active or model.row != row or model.col != col:
            model.is_active = True
            model.row = row
            model.col = col
            await self.session.flush()

        return self._to_entity(model)

    @Logger.io
    async def list_by_lab(self, *, lab_id: int, active_only: bool = True) -> List[Seat]:
        stmt = select(SeatModel).where(SeatModel.lab_id == lab_id)
        if active_only:
            stmt = stmt.where(SeatModel.is_active.is_(True))
        # edge seat (null row) last
        stmt = stmt.order_by(SeatModel.row.is_(None), SeatModel.row, SeatModel.col)
        result = await self.session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars().all()]

    @Logger.io
    async def deactivate(self, *, seat_ids: List[int]) -> None:
        if not seat_ids:
            return
        await self.session.execute(
            update(SeatModel)
            .where(SeatModel.id.in_(seat_ids))
            .values(is_active=False)
            .execution_options(synchronize_session=False)
        )
