from typing import Dict, List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.lab_booking.app.dto.attendance_dto import (
    AttendanceHistory,
    AttendanceRecordView,
    AttendanceStats,
    RosterEntry,
    SessionNeedingAttendance,
    SessionRoster,
    StudentAttendanceSummary,
)
from src.service.lab_booking.domain.booking_policy import utc_now
from src.service.lab_booking.domain.entity.attendance_entity import Attendance
from src.service.lab_booking.domain.entity.lab_entity import Lab
from src.service.lab_booking.domain.enum.booking_status import BookingStatus
from src.service.lab_booking.domain.enum.user_role import UserRole
from src.service.lab_booking.domain.value_object.caller import Caller


NEEDING_ATTENDANCE_LIMIT = 50


class AttendanceQueryUseCase:
    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    @inject
    def depends(
        cls, uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work])
    ) -> Self:
        return cls(uow=uow)

    async def _lab_name(self, lab_id: int, cache: Dict[int, Optional[Lab]]) -> str:
        if lab_id not in cache:
            cache[lab_id] = await self.uow.lab_repo.get_by_id(lab_id=lab_id)
        lab = cache[lab_id]
        return lab.name if lab else ''

    async def _history(self, records: List[Attendance]) -> tuple[AttendanceRecordView, ...]:
        labs: Dict[int, Optional[Lab]] = {}
        views = []
        for record in sorted(records, key=lambda r: r.marked_at, reverse=True):
            session = await self.uow.session_repo.get_by_id(session_id=record.session_id)
            if session is None:
                continue
            views.append(
                AttendanceRecordView(
                    attendance=record,
                    lab_name=await self._lab_name(session.lab_id, labs),
                    start_at=session.start_at,
                    end_at=session.end_at,
                )
            )
        return tuple(views)

    @Logger.io
    async def session_roster(self, *, session_id: int, caller: Caller) -> SessionRoster:
        """Confirmed bookings of a session next to whatever attendance is recorded"""
        caller.ensure_staff('view attendance')

        async with self.uow:
            session = await self.uow.session_repo.get_by_id(session_id=session_id)
            if not session:
                raise NotFoundError('Session not found')
            lab = await self.uow.lab_repo.get_by_id(lab_id=session.lab_id)
            bookings = await self.uow.seat_booking_repo.list_by_session(
                session_id=session_id, status=BookingStatus.CONFIRMED
            )
            records = await self.uow.attendance_repo.list_by_session(session_id=session_id)
            users = await self.uow.user_repo.get_many(
                user_ids=[b.user_id for b in bookings] + [session.created_by_id]
            )

        by_user = {record.user_id: record for record in records}
        teacher = users.get(session.created_by_id)
        students = []
        for booking in bookings:
            user = users.get(booking.user_id)
            students.append(
                RosterEntry(
                    booking_id=booking.id or 0,
                    seat_name=booking.name,
                    user_id=booking.user_id,
                    user_name=user.display_name if user else booking.user_id,
                    email=user.email if user else None,
                    is_banned=user.is_banned if user else False,
                    attendance=by_user.get(booking.user_id),
                )
            )

        return SessionRoster(
            session_id=session_id,
            lab_name=lab.name if lab else '',
            start_at=session.start_at,
            end_at=session.end_at,
            teacher_name=teacher.display_name if teacher else None,
            students=tuple(students),
            stats=AttendanceStats.of(records),
        )

    @Logger.io
    async def student_history(self, *, user_id: str, caller: Caller) -> AttendanceHistory:
        caller.ensure_staff('view student history')

        async with self.uow:
            user = await self.uow.user_repo.get_by_id(user_id=user_id)
            if not user:
                raise NotFoundError('User not found')
            records = await self.uow.attendance_repo.list_by_user(user_id=user_id)
            views = await self._history(records)

        return AttendanceHistory(user=user, records=views, stats=AttendanceStats.of(records))

    @Logger.io
    async def my_history(self, *, caller: Caller) -> AttendanceHistory:
        async with self.uow:
            records = await self.uow.attendance_repo.list_by_user(user_id=caller.user_id)
            views = await self._history(records)

        return AttendanceHistory(user=None, records=views, stats=AttendanceStats.of(records))

    @Logger.io
    async def sessions_needing_attendance(
        self, *, caller: Caller, limit: int = NEEDING_ATTENDANCE_LIMIT
    ) -> List[SessionNeedingAttendance]:
        """Ended sessions where fewer students are marked than confirmed bookings exist"""
        caller.ensure_staff('view attendance')

        async with self.uow:
            sessions = await self.uow.session_repo.list_ended_before(
                before=utc_now(), limit=limit
            )
            labs: Dict[int, Optional[Lab]] = {}
            pending = []
            for session in sessions:
                bookings = await self.uow.seat_booking_repo.list_by_session(
                    session_id=session.id or 0, status=BookingStatus.CONFIRMED
                )
                records = await self.uow.attendance_repo.list_by_session(
                    session_id=session.id or 0
                )
                booked = {booking.user_id for booking in bookings}
                marked = {record.user_id for record in records}
                if len(booked) <= len(marked):
                    continue
                pending.append(
                    SessionNeedingAttendance(
                        session_id=session.id or 0,
                        lab_name=await self._lab_name(session.lab_id, labs),
                        start_at=session.start_at,
                        end_at=session.end_at,
                        total_booked=len(bookings),
                        total_marked=len(records),
                    )
                )
        return pending

    @Logger.io
    async def students_overview(self, *, caller: Caller) -> List[StudentAttendanceSummary]:
        caller.ensure_staff('view students')

        async with self.uow:
            students = await self.uow.user_repo.list_all(role=UserRole.STUDENT)
            summaries = []
            for student in students:
                records = await self.uow.attendance_repo.list_by_user(user_id=student.id)
                bookings = await self.uow.seat_booking_repo.list_by_user(user_id=student.id)
                summaries.append(
                    StudentAttendanceSummary(
                        user=student,
                        total_bookings=len(bookings),
                        stats=AttendanceStats.of(records),
                    )
                )
        return summaries
