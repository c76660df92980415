from typing import Awaitable, Callable, Optional

from anyio.abc import TaskGroup

from src.platform.logging.loguru_io import Logger
from src.platform.metrics.lab_booking_metrics import metrics
from src.service.lab_booking.app.dto.notification_dto import (
    BookingChange,
    BookingNotice,
    StudentReminder,
    TeacherSummary,
)
from src.service.lab_booking.app.interface.i_email_sender import IEmailSender
from src.service.lab_booking.app.interface.i_notification_dispatcher import (
    INotificationDispatcher,
)
from src.service.lab_booking.domain.enum.booking_status import BookingStatus
from src.service.lab_booking.driven_adapter.notification import email_templates
from src.service.lab_booking.driven_adapter.notification.email_templates import RenderedEmail


class NotificationDispatcherImpl(INotificationDispatcher):
    """
    Best-effort e-mail dispatch.

    Booking-lifecycle messages are fire-and-forget: when the app runs inside a
    task group (``container.task_group``) they are scheduled there and the
    request returns immediately, otherwise they are awaited inline. Reminder
    messages are always awaited so the scan can count results. No method
    raises on rendering or delivery failure.
    """

    def __init__(
        self,
        *,
        email_sender: IEmailSender,
        task_group_provider: Optional[Callable[[], Optional[TaskGroup]]] = None,
    ) -> None:
        self.email_sender = email_sender
        self.task_group_provider = task_group_provider

    async def _deliver(
        self, *, kind: str, to: Optional[str], render: Callable[[], RenderedEmail]
    ) -> bool:
        if not to:
            Logger.base.warning(f'⚠️ [MAIL] No recipient address for {kind}, skipped')
            metrics.record_email(kind=kind, result='skipped')
            return False
        try:
            email = render()
            await self.email_sender.send_email(
                to=to, subject=email.subject, html=email.html, text=email.text
            )
        except Exception as e:
            Logger.base.error(f'❌ [MAIL] {kind} to {to} failed: {type(e).__name__}: {e}')
            metrics.record_email(kind=kind, result='failed')
            return False
        metrics.record_email(kind=kind, result='sent')
        return True

    async def _dispatch(self, send: Callable[[], Awaitable[bool]]) -> None:
        task_group = self.task_group_provider() if self.task_group_provider else None
        if task_group is not None:
            task_group.start_soon(send)
        else:
            await send()

    @Logger.io
    async def send_booking_confirmation(self, *, notice: BookingNotice) -> None:
        await self._dispatch(
            lambda: self._deliver(
                kind='booking_confirmation',
                to=notice.student_email,
                render=lambda: email_templates.booking_confirmation(notice),
            )
        )

    @Logger.io
    async def send_booking_status_change(
        self, *, notice: BookingNotice, change: BookingChange
    ) -> None:
        await self._dispatch(
            lambda: self._deliver(
                kind=f'booking_{change.value.lower()}',
                to=notice.student_email,
                render=lambda: email_templates.booking_status_change(notice, change),
            )
        )

    @Logger.io
    async def send_teacher_request(self, *, notice: BookingNotice) -> None:
        if notice.status != BookingStatus.PENDING_APPROVAL:
            return
        await self._dispatch(
            lambda: self._deliver(
                kind='teacher_request',
                to=notice.teacher_email,
                render=lambda: email_templates.teacher_request(notice),
            )
        )

    @Logger.io
    async def send_student_reminder(self, *, reminder: StudentReminder) -> bool:
        return await self._deliver(
            kind='student_reminder',
            to=reminder.student_email,
            render=lambda: email_templates.student_reminder(reminder),
        )

    @Logger.io
    async def send_teacher_summary(self, *, summary: TeacherSummary) -> bool:
        return await self._deliver(
            kind='teacher_summary',
            to=summary.teacher_email,
            render=lambda: email_templates.teacher_summary(summary),
        )
