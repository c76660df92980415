from datetime import datetime
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.lab_booking.app.interface.i_seat_booking_repo import ISeatBookingRepo
from src.service.lab_booking.domain.booking_errors import AlreadyBookedError, SeatTakenError
from src.service.lab_booking.domain.booking_policy import as_utc
from src.service.lab_booking.domain.entity.seat_booking_entity import SeatBooking
from src.service.lab_booking.domain.enum.booking_status import BookingStatus
from src.service.lab_booking.driven_adapter.model.lab_session_model import LabSessionModel
from src.service.lab_booking.driven_adapter.model.seat_booking_model import (
    UQ_SESSION_USER,
    SeatBookingModel,
)


def _is_user_conflict(exc: IntegrityError) -> bool:
    # PostgreSQL reports the constraint name, SQLite the column list
    message = str(exc.orig)
    return UQ_SESSION_USER in message or 'seat_booking.user_id' in message


class SeatBookingRepoImpl(ISeatBookingRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _to_entity(model: SeatBookingModel) -> SeatBooking:
        return SeatBooking(
            id=model.id,
            session_id=model.session_id,
            seat_id=model.seat_id,
            user_id=model.user_id,
            name=model.name,
            status=BookingStatus(model.status),
            notes=model.notes,
            created_at=as_utc(model.created_at) if model.created_at else None,
        )

    async def _one(self, stmt) -> Optional[SeatBooking]:
        result = await self.session.execute(stmt.execution_options(populate_existing=True))
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def _list(self, stmt) -> List[SeatBooking]:
        result = await self.session.execute(stmt.execution_options(populate_existing=True))
        return [self._to_entity(model) for model in result.scalars().all()]

    async def _get_model(self, booking_id: int) -> SeatBookingModel:
        model = await self.session.get(SeatBookingModel, booking_id, populate_existing=True)
        if model is None:
            raise NotFoundError('Booking not found')
        return model

    @Logger.io
    async def get_by_id(self, *, booking_id: int) -> Optional[SeatBooking]:
        return await self._one(select(SeatBookingModel).where(SeatBookingModel.id == booking_id))

    @Logger.io
    async def find_by_session_and_user(
        self, *, session_id: int, user_id: str
    ) -> Optional[SeatBooking]:
        return await self._one(
            select(SeatBookingModel).where(
                SeatBookingModel.session_id == session_id, SeatBookingModel.user_id == user_id
            )
        )

    @Logger.io
    async def find_by_session_and_seat(
        self, *, session_id: int, seat_id: int
    ) -> Optional[SeatBooking]:
        return await self._one(
            select(SeatBookingModel).where(
                SeatBookingModel.session_id == session_id, SeatBookingModel.seat_id == seat_id
            )
        )

    @Logger.io
    async def create(self, *, booking: SeatBooking) -> SeatBooking:
        model = SeatBookingModel(
            session_id=booking.session_id,
            seat_id=booking.seat_id,
            user_id=booking.user_id,
            name=booking.name,
            status=booking.status.value,
            notes=booking.notes,
        )
        self.session.add(model)
        try:
            await self.session.flush()
        except IntegrityError as e:
            if _is_user_conflict(e):
                raise AlreadyBookedError() from e
            raise SeatTakenError(booking.name) from e
        await self.session.refresh(model)
        return self._to_entity(model)

    @Logger.io
    async def list_matching(
        self, *, session_id: int, seat_id: int, name: str, user_id: Optional[str] = None
    ) -> List[SeatBooking]:
        stmt = select(SeatBookingModel).where(
            SeatBookingModel.session_id == session_id,
            SeatBookingModel.seat_id == seat_id,
            SeatBookingModel.name == name,
        )
        if user_id is not None:
            stmt = stmt.where(SeatBookingModel.user_id == user_id)
        return await self._list(stmt)

    @Logger.io
    async def move_to_seat(self, *, booking_id: int, seat_id: int, name: str) -> SeatBooking:
        model = await self._get_model(booking_id)
        model.seat_id = seat_id
        model.name = name
        try:
            await self.session.flush()
        except IntegrityError as e:
            raise SeatTakenError(name) from e
        return self._to_entity(model)

    @Logger.io
    async def update_status(self, *, booking_id: int, status: BookingStatus) -> SeatBooking:
        model = await self._get_model(booking_id)
        model.status = status.value
        await self.session.flush()
        return self._to_entity(model)

    @Logger.io
    async def update_notes(self, *, booking_id: int, notes: Optional[str]) -> SeatBooking:
        model = await self._get_model(booking_id)
        model.notes = notes
        await self.session.flush()
        return self._to_entity(model)

    @Logger.io
    async def delete(self, *, booking_ids: List[int]) -> None:
        if not booking_ids:
            return
        await self.session.execute(
            delete(SeatBookingModel)
            .where(SeatBookingModel.id.in_(booking_ids))
            .execution_options(synchronize_session=False)
        )

    @Logger.io
    async def list_by_session(
        self, *, session_id: int, status: Optional[BookingStatus] = None
    ) -> List[SeatBooking]:
        stmt = select(SeatBookingModel).where(SeatBookingModel.session_id == session_id)
        if status is not None:
            stmt = stmt.where(SeatBookingModel.status == status.value)
        return await self._list(stmt.order_by(SeatBookingModel.id))

    @Logger.io
    async def list_by_user(self, *, user_id: str) -> List[SeatBooking]:
        return await self._list(
            select(SeatBookingModel)
            .join(LabSessionModel, LabSessionModel.id == SeatBookingModel.session_id)
            .where(SeatBookingModel.user_id == user_id)
            .order_by(LabSessionModel.start_at.desc())
        )

    @Logger.io
    async def list_pending(self) -> List[SeatBooking]:
        return await self._list(
            select(SeatBookingModel)
            .where(SeatBookingModel.status == BookingStatus.PENDING_APPROVAL.value)
            .order_by(SeatBookingModel.created_at, SeatBookingModel.id)
        )

    @Logger.io
    async def list_by_lab_starting_after(
        self, *, lab_id: int, after: datetime
    ) -> List[SeatBooking]:
        return await self._list(
            select(SeatBookingModel)
            .join(LabSessionModel, LabSessionModel.id == SeatBookingModel.session_id)
            .where(LabSessionModel.lab_id == lab_id, LabSessionModel.start_at > as_utc(after))
            .order_by(LabSessionModel.start_at, SeatBookingModel.id)
        )
