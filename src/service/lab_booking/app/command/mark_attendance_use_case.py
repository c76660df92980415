from typing import List, Optional, Self, Sequence

import attrs
from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.lab_booking.domain.booking_policy import utc_now
from src.service.lab_booking.domain.entity.attendance_entity import Attendance
from src.service.lab_booking.domain.enum.attendance_status import AttendanceStatus
from src.service.lab_booking.domain.value_object.caller import Caller


@attrs.frozen
class AttendanceMark:
    user_id: str
    status: AttendanceStatus
    notes: Optional[str] = None


class MarkAttendanceUseCase:
    """Record (or overwrite) attendance for students of a session."""

    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    @inject
    def depends(
        cls, uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work])
    ) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def execute(
        self,
        *,
        session_id: int,
        user_id: str,
        status: AttendanceStatus,
        caller: Caller,
        notes: Optional[str] = None,
    ) -> Attendance:
        marked = await self.execute_bulk(
            session_id=session_id,
            marks=[AttendanceMark(user_id=user_id, status=status, notes=notes)],
            caller=caller,
        )
        return marked[0]

    @Logger.io
    async def execute_bulk(
        self, *, session_id: int, marks: Sequence[AttendanceMark], caller: Caller
    ) -> List[Attendance]:
        caller.ensure_staff('mark attendance')

        async with self.uow:
            if not await self.uow.session_repo.get_by_id(session_id=session_id):
                raise NotFoundError('Session not found')

            now = utc_now()
            results = []
            for mark in marks:
                results.append(
                    await self.uow.attendance_repo.upsert(
                        attendance=Attendance(
                            user_id=mark.user_id,
                            session_id=session_id,
                            status=mark.status,
                            marked_by=caller.user_id,
                            marked_at=now,
                            notes=mark.notes or None,
                        )
                    )
                )
            await self.uow.commit()

        Logger.base.info(
            f'📋 [ATTENDANCE] {len(results)} marks in session {session_id} by {caller.user_id}'
        )
        return results
