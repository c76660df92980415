from datetime import datetime, timedelta
from typing import Dict, List, Optional, Self

import attrs
from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.lab_booking_metrics import metrics
from src.service.lab_booking.app.dto.notification_dto import (
    EquipmentLine,
    StudentReminder,
    SummaryStudent,
    TeacherSummary,
)
from src.service.lab_booking.app.interface.i_notification_dispatcher import (
    INotificationDispatcher,
)
from src.service.lab_booking.app.service.booking_notice_builder import equipment_lines
from src.service.lab_booking.domain.booking_policy import utc_now
from src.service.lab_booking.domain.entity.lab_session_entity import LabSession
from src.service.lab_booking.domain.entity.seat_booking_entity import SeatBooking
from src.service.lab_booking.domain.enum.booking_status import BookingStatus


@attrs.frozen
class ReminderScanResult:
    student_sessions: int = 0
    student_emails_sent: int = 0
    teacher_sessions: int = 0
    teacher_emails_sent: int = 0
    failures: int = 0


class SendSessionRemindersUseCase:
    """
    Periodic scan that mails students about 3 hours before their session and
    the session creator about 15 minutes before it.

    Each session is claimed (``*_reminder_sent_at`` set where still null) and
    the claim committed before any mail goes out, so overlapping scans never
    send the same reminder twice.
    """

    def __init__(
        self, *, uow: AbstractUnitOfWork, notification_dispatcher: INotificationDispatcher
    ) -> None:
        self.uow = uow
        self.notification_dispatcher = notification_dispatcher

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work]),
        notification_dispatcher: INotificationDispatcher = Depends(
            Provide[Container.notification_dispatcher]
        ),
    ) -> Self:
        return cls(uow=uow, notification_dispatcher=notification_dispatcher)

    async def _confirmed_bookings(
        self, session: LabSession
    ) -> tuple[List[SeatBooking], Dict[int, tuple[EquipmentLine, ...]]]:
        bookings = await self.uow.seat_booking_repo.list_by_session(
            session_id=session.id or 0, status=BookingStatus.CONFIRMED
        )
        reserved = await self.uow.equipment_repo.list_bookings_by_seat_bookings(
            seat_booking_ids=[booking.id for booking in bookings if booking.id is not None]
        )
        lines: Dict[int, tuple[EquipmentLine, ...]] = {}
        for booking in bookings:
            lines[booking.id or 0] = await equipment_lines(
                self.uow, [item for item in reserved if item.seat_booking_id == booking.id]
            )
        return bookings, lines

    async def _student_reminders(self, session: LabSession) -> List[StudentReminder]:
        lab = await self.uow.lab_repo.get_by_id(lab_id=session.lab_id)
        bookings, lines = await self._confirmed_bookings(session)
        users = await self.uow.user_repo.get_many(user_ids=[b.user_id for b in bookings])

        reminders = []
        for booking in bookings:
            student = users.get(booking.user_id)
            if not student or not student.email:
                Logger.base.warning(
                    f'⚠️ [REMINDER] No e-mail for {booking.user_id}, session {session.id}'
                )
                continue
            reminders.append(
                StudentReminder(
                    student_email=student.email,
                    student_name=student.display_name,
                    lab_name=lab.name if lab else '',
                    seat_name=booking.name,
                    start_at=session.start_at,
                    end_at=session.end_at,
                    equipment=lines.get(booking.id or 0, ()),
                )
            )
        return reminders

    async def _teacher_summary(self, session: LabSession) -> TeacherSummary:
        lab = await self.uow.lab_repo.get_by_id(lab_id=session.lab_id)
        bookings, lines = await self._confirmed_bookings(session)
        users = await self.uow.user_repo.get_many(
            user_ids=[b.user_id for b in bookings] + [session.created_by_id]
        )
        teacher = users.get(session.created_by_id)

        students = []
        for booking in bookings:
            student = users.get(booking.user_id)
            students.append(
                SummaryStudent(
                    name=student.display_name if student else booking.user_id,
                    email=student.email if student else None,
                    seat_name=booking.name,
                    notes=booking.notes,
                    equipment=lines.get(booking.id or 0, ()),
                )
            )
        return TeacherSummary(
            teacher_email=teacher.email if teacher else '',
            teacher_name=teacher.display_name if teacher else session.created_by_id,
            lab_name=lab.name if lab else '',
            start_at=session.start_at,
            end_at=session.end_at,
            students=tuple(students),
        )

    @Logger.io
    async def execute(self, *, now: Optional[datetime] = None) -> ReminderScanResult:
        now = now or utc_now()
        tolerance = timedelta(minutes=settings.REMINDER_TOLERANCE_MINUTES)
        student_at = now + timedelta(minutes=settings.STUDENT_REMINDER_LEAD_MINUTES)
        teacher_at = now + timedelta(minutes=settings.TEACHER_REMINDER_LEAD_MINUTES)

        try:
            async with self.uow:
                student_sessions = 0
                reminders: List[StudentReminder] = []
                for session in await self.uow.session_repo.list_reminder_candidates(
                    kind='student', start=student_at - tolerance, end=student_at + tolerance
                ):
                    if not await self.uow.session_repo.claim_reminder(
                        session_id=session.id or 0, kind='student', now=now
                    ):
                        continue
                    student_sessions += 1
                    reminders.extend(await self._student_reminders(session))

                summaries: List[TeacherSummary] = []
                for session in await self.uow.session_repo.list_reminder_candidates(
                    kind='teacher', start=teacher_at - tolerance, end=teacher_at + tolerance
                ):
                    if not await self.uow.session_repo.claim_reminder(
                        session_id=session.id or 0, kind='teacher', now=now
                    ):
                        continue
                    summaries.append(await self._teacher_summary(session))

                await self.uow.commit()
        except Exception:
            metrics.record_reminder_scan(result='error')
            raise

        student_sent = 0
        teacher_sent = 0
        failures = 0
        for reminder in reminders:
            if await self.notification_dispatcher.send_student_reminder(reminder=reminder):
                student_sent += 1
            else:
                failures += 1
        for summary in summaries:
            if await self.notification_dispatcher.send_teacher_summary(summary=summary):
                teacher_sent += 1
            else:
                failures += 1

        metrics.record_reminder_scan(result='ok')
        result = ReminderScanResult(
            student_sessions=student_sessions,
            student_emails_sent=student_sent,
            teacher_sessions=len(summaries),
            teacher_emails_sent=teacher_sent,
            failures=failures,
        )
        Logger.base.info(f'⏰ [REMINDER] Scan finished: {result}')
        return result
