from abc import ABC, abstractmethod

from src.service.lab_booking.app.dto.notification_dto import (
    BookingChange,
    BookingNotice,
    StudentReminder,
    TeacherSummary,
)


class INotificationDispatcher(ABC):
    """
    Outbound booking notifications.

    Called only after the transaction committed. Implementations never raise:
    delivery failures are logged and swallowed so they cannot undo a booking.
    """

    @abstractmethod
    async def send_booking_confirmation(self, *, notice: BookingNotice) -> None:
        pass

    @abstractmethod
    async def send_booking_status_change(
        self, *, notice: BookingNotice, change: BookingChange
    ) -> None:
        pass

    @abstractmethod
    async def send_teacher_request(self, *, notice: BookingNotice) -> None:
        pass

    @abstractmethod
    async def send_student_reminder(self, *, reminder: StudentReminder) -> bool:
        """Returns False when the message could not be sent"""
        pass

    @abstractmethod
    async def send_teacher_summary(self, *, summary: TeacherSummary) -> bool:
        pass
