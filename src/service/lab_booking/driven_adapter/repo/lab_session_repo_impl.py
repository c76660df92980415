from datetime import datetime
from typing import List, Optional

from sqlalchemy import case, delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.lab_booking.app.interface.i_lab_session_repo import (
    ILabSessionRepo,
    ReminderKind,
)
from src.service.lab_booking.domain.booking_policy import as_utc
from src.service.lab_booking.domain.entity.lab_session_entity import LabSession
from src.service.lab_booking.driven_adapter.model.lab_session_model import LabSessionModel
from src.service.lab_booking.driven_adapter.model.seat_booking_model import SeatBookingModel


class LabSessionRepoImpl(ILabSessionRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _to_entity(model: LabSessionModel) -> LabSession:
        return LabSession(
            id=model.id,
            lab_id=model.lab_id,
            start_at=model.start_at,
            end_at=model.end_at,
            capacity=model.capacity,
            created_by_id=model.created_by_id,
            student_reminder_sent_at=(
                as_utc(model.student_reminder_sent_at) if model.student_reminder_sent_at else None
            ),
            teacher_reminder_sent_at=(
                as_utc(model.teacher_reminder_sent_at) if model.teacher_reminder_sent_at else None
            ),
            created_at=as_utc(model.created_at) if model.created_at else None,
        )

    @staticmethod
    def _reminder_column(kind: ReminderKind):
        if kind == 'student':
            return LabSessionModel.student_reminder_sent_at
        return LabSessionModel.teacher_reminder_sent_at

    async def _list(self, stmt) -> List[LabSession]:
        result = await self.session.execute(stmt.execution_options(populate_existing=True))
        return [self._to_entity(model) for model in result.scalars().all()]

    @Logger.io
    async def get_by_id(self, *, session_id: int) -> Optional[LabSession]:
        result = await self.session.execute(
            select(LabSessionModel)
            .where(LabSessionModel.id == session_id)
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    @Logger.io
    async def find_overlapping(
        self,
        *,
        lab_id: int,
        start_at: datetime,
        end_at: datetime,
        exclude_id: Optional[int] = None,
    ) -> List[LabSession]:
        stmt = select(LabSessionModel).where(
            LabSessionModel.lab_id == lab_id,
            LabSessionModel.start_at <= as_utc(end_at),
            LabSessionModel.end_at >= as_utc(start_at),
        )
        if exclude_id is not None:
            stmt = stmt.where(LabSessionModel.id != exclude_id)
        return await self._list(stmt)

    @Logger.io
    async def create(self, *, session: LabSession) -> LabSession:
        model = LabSessionModel(
            lab_id=session.lab_id,
            start_at=session.start_at,
            end_at=session.end_at,
            capacity=session.capacity,
            created_by_id=session.created_by_id,
        )
        self.session.add(model)
        await self.session.flush()
        await self.session.refresh(model)
        return self._to_entity(model)

    @Logger.io
    async def update_window(
        self, *, session_id: int, start_at: datetime, end_at: datetime
    ) -> LabSession:
        model = await self.session.get(LabSessionModel, session_id, populate_existing=True)
        if model is None:
            raise NotFoundError('Session not found')
        model.start_at = as_utc(start_at)
        model.end_at = as_utc(end_at)
        await self.session.flush()
        return self._to_entity(model)

    @Logger.io
    async def try_decrement_capacity(self, *, session_id: int) -> bool:
        result = await self.session.execute(
            update(LabSessionModel)
            .where(LabSessionModel.id == session_id, LabSessionModel.capacity > 0)
            .values(capacity=LabSessionModel.capacity - 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    @Logger.io
    async def increment_capacity(self, *, session_id: int, amount: int = 1) -> None:
        await self.session.execute(
            update(LabSessionModel)
            .where(LabSessionModel.id == session_id)
            .values(capacity=LabSessionModel.capacity + amount)
            .execution_options(synchronize_session=False)
        )

    @Logger.io
    async def set_capacity(self, *, session_id: int, capacity: int) -> None:
        await self.session.execute(
            update(LabSessionModel)
            .where(LabSessionModel.id == session_id)
            .values(capacity=capacity)
            .execution_options(synchronize_session=False)
        )

    @Logger.io
    async def recount_capacity(self, *, lab_id: int, after: datetime, total_seats: int) -> int:
        booked = (
            select(func.count(SeatBookingModel.id))
            .where(SeatBookingModel.session_id == LabSessionModel.id)
            .correlate(LabSessionModel)
            .scalar_subquery()
        )
        result = await self.session.execute(
            update(LabSessionModel)
            .where(LabSessionModel.lab_id == lab_id, LabSessionModel.start_at > as_utc(after))
            .values(capacity=case((booked >= total_seats, 0), else_=total_seats - booked))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    @Logger.io
    async def delete(self, *, session_id: int) -> None:
        await self.session.execute(
            delete(LabSessionModel)
            .where(LabSessionModel.id == session_id)
            .execution_options(synchronize_session=False)
        )

    @Logger.io
    async def list_starting_between(
        self, *, start: datetime, end: datetime, lab_id: Optional[int] = None
    ) -> List[LabSession]:
        stmt = select(LabSessionModel).where(
            LabSessionModel.start_at >= as_utc(start), LabSessionModel.start_at < as_utc(end)
        )
        if lab_id is not None:
            stmt = stmt.where(LabSessionModel.lab_id == lab_id)
        return await self._list(stmt.order_by(LabSessionModel.start_at))

    @Logger.io
    async def list_by_creator(self, *, user_id: str) -> List[LabSession]:
        return await self._list(
            select(LabSessionModel).where(LabSessionModel.created_by_id == user_id)
        )

    @Logger.io
    async def list_ended_before(self, *, before: datetime, limit: int) -> List[LabSession]:
        return await self._list(
            select(LabSessionModel)
            .where(LabSessionModel.end_at < as_utc(before))
            .order_by(LabSessionModel.end_at.desc())
            .limit(limit)
        )

    @Logger.io
    async def list_reminder_candidates(
        self, *, kind: ReminderKind, start: datetime, end: datetime
    ) -> List[LabSession]:
        column = self._reminder_column(kind)
        return await self._list(
            select(LabSessionModel)
            .where(
                LabSessionModel.start_at >= as_utc(start),
                LabSessionModel.start_at <= as_utc(end),
                column.is_(None),
            )
            .order_by(LabSessionModel.start_at)
        )

    @Logger.io
    async def claim_reminder(self, *, session_id: int, kind: ReminderKind, now: datetime) -> bool:
        column = self._reminder_column(kind)
        result = await self.session.execute(
            update(LabSessionModel)
            .where(LabSessionModel.id == session_id, column.is_(None))
            .values({column: as_utc(now)})
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
