from typing import Dict, List

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.lab_booking.app.interface.i_attendance_repo import IAttendanceRepo
from src.service.lab_booking.domain.booking_policy import as_utc
from src.service.lab_booking.domain.entity.attendance_entity import Attendance
from src.service.lab_booking.domain.enum.attendance_status import AttendanceStatus
from src.service.lab_booking.driven_adapter.model.attendance_model import AttendanceModel


class AttendanceRepoImpl(IAttendanceRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _to_entity(model: AttendanceModel) -> Attendance:
        return Attendance(
            user_id=model.user_id,
            session_id=model.session_id,
            status=AttendanceStatus(model.status),
            marked_by=model.marked_by,
            marked_at=as_utc(model.marked_at),
            notes=model.notes,
        )

    @Logger.io
    async def upsert(self, *, attendance: Attendance) -> Attendance:
        model = await self.session.get(
            AttendanceModel, (attendance.user_id, attendance.session_id)
        )
        if model is None:
            model = AttendanceModel(user_id=attendance.user_id, session_id=attendance.session_id)
            self.session.add(model)
        model.status = attendance.status.value
        model.marked_by = attendance.marked_by
        model.marked_at = attendance.marked_at
        model.notes = attendance.notes
        await self.session.flush()
        return self._to_entity(model)

    @Logger.io
    async def list_by_session(self, *, session_id: int) -> List[Attendance]:
        result = await self.session.execute(
            select(AttendanceModel).where(AttendanceModel.session_id == session_id)
        )
        return [self._to_entity(model) for model in result.scalars().all()]

    @Logger.io
    async def list_by_user(self, *, user_id: str) -> List[Attendance]:
        result = await self.session.execute(
            select(AttendanceModel).where(AttendanceModel.user_id == user_id)
        )
        return [self._to_entity(model) for model in result.scalars().all()]

    @Logger.io
    async def count_by_sessions(self, *, session_ids: List[int]) -> Dict[int, int]:
        if not session_ids:
            return {}
        result = await self.session.execute(
            select(AttendanceModel.session_id, func.count())
            .where(AttendanceModel.session_id.in_(session_ids))
            .group_by(AttendanceModel.session_id)
        )
        return {session_id: count for session_id, count in result.all()}

    @Logger.io
    async def delete_by_session(self, *, session_id: int) -> None:
        await self.session.execute(
            delete(AttendanceModel)
            .where(AttendanceModel.session_id == session_id)
            .execution_options(synchronize_session=False)
        )

    @Logger.io
    async def delete_by_user(self, *, user_id: str) -> None:
        await self.session.execute(
            delete(AttendanceModel)
            .where(AttendanceModel.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
