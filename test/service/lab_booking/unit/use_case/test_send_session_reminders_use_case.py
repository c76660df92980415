from datetime import timedelta

import pytest

from src.service.lab_booking.app.command.send_session_reminders_use_case import (
    SendSessionRemindersUseCase,
)
from src.service.lab_booking.domain.entity.lab_user_entity import LabUser
from test.service.lab_booking.unit.helpers import (
    NOW,
    FakeUnitOfWork,
    make_booking,
    make_lab,
    make_session,
    mock_dispatcher,
)


@pytest.fixture
def uow() -> FakeUnitOfWork:
    uow = FakeUnitOfWork()
    uow.lab_repo.get_by_id.return_value = make_lab()
    uow.session_repo.claim_reminder.return_value = True
    uow.seat_booking_repo.list_by_session.return_value = [
        make_booking(),
        make_booking(booking_id=501, seat_id=101, user_id='student_2', name='A2'),
    ]
    uow.user_repo.get_many.return_value = {
        'student_1': LabUser(id='student_1', email='s1@lab.local', first_name='Sam'),
        'student_2': LabUser(id='student_2', email='', first_name='Kim'),
        'teacher_1': LabUser(id='teacher_1', email='t1@lab.local', first_name='Tess'),
    }
    return uow


@pytest.fixture
def dispatcher():
    dispatcher = mock_dispatcher()
    dispatcher.send_student_reminder.return_value = True
    dispatcher.send_teacher_summary.return_value = True
    return dispatcher


@pytest.fixture
def use_case(uow, dispatcher) -> SendSessionRemindersUseCase:
    return SendSessionRemindersUseCase(uow=uow, notification_dispatcher=dispatcher)


def _candidates(student=(), teacher=()):
    async def list_reminder_candidates(*, kind, start, end):
        return list(student if kind == 'student' else teacher)

    return list_reminder_candidates


@pytest.mark.unit
class TestSendSessionReminders:
    async def test_student_window_is_three_hours_ahead(self, use_case, uow):
        await use_case.execute(now=NOW)

        calls = {
            call.kwargs['kind']: call.kwargs
            for call in uow.session_repo.list_reminder_candidates.await_args_list
        }
        assert calls['student']['start'] == NOW + timedelta(minutes=175)
        assert calls['student']['end'] == NOW + timedelta(minutes=185)
        assert calls['teacher']['start'] == NOW + timedelta(minutes=10)
        assert calls['teacher']['end'] == NOW + timedelta(minutes=20)

    async def test_mails_students_with_an_address(self, use_case, uow, dispatcher):
        """
        Given: a session 3 hours away with two confirmed bookings, one student without e-mail
        When: the scan runs
        Then: one reminder is sent and the session is claimed before sending
        """
        # Arrange
        uow.session_repo.list_reminder_candidates.side_effect = _candidates(
            student=[make_session(starts_in=timedelta(hours=3))]
        )

        # Act
        result = await use_case.execute(now=NOW)

        # Assert
        assert result.student_sessions == 1
        assert result.student_emails_sent == 1
        assert result.failures == 0
        uow.session_repo.claim_reminder.assert_awaited_once_with(
            session_id=10, kind='student', now=NOW
        )
        assert uow.committed
        reminder = dispatcher.send_student_reminder.await_args.kwargs['reminder']
        assert reminder.student_email == 's1@lab.local'
        assert reminder.seat_name == 'A1'

    async def test_teacher_summary_lists_every_student(self, use_case, uow, dispatcher):
        uow.session_repo.list_reminder_candidates.side_effect = _candidates(
            teacher=[make_session(starts_in=timedelta(minutes=15))]
        )

        result = await use_case.execute(now=NOW)

        assert result.teacher_sessions == 1
        assert result.teacher_emails_sent == 1
        summary = dispatcher.send_teacher_summary.await_args.kwargs['summary']
        assert summary.teacher_email == 't1@lab.local'
        assert [student.seat_name for student in summary.students] == ['A1', 'A2']

    async def test_already_claimed_sessions_are_skipped(self, use_case, uow, dispatcher):
        uow.session_repo.list_reminder_candidates.side_effect = _candidates(
            student=[make_session(starts_in=timedelta(hours=3))]
        )
        uow.session_repo.claim_reminder.return_value = False

        result = await use_case.execute(now=NOW)

        assert result.student_sessions == 0
        dispatcher.send_student_reminder.assert_not_awaited()

    async def test_failed_sends_are_counted(self, use_case, uow, dispatcher):
        uow.session_repo.list_reminder_candidates.side_effect = _candidates(
            student=[make_session(starts_in=timedelta(hours=3))],
            teacher=[make_session(session_id=12, starts_in=timedelta(minutes=15))],
        )
        dispatcher.send_student_reminder.return_value = False
        dispatcher.send_teacher_summary.return_value = False

        result = await use_case.execute(now=NOW)

        assert result.student_emails_sent == 0
        assert result.teacher_emails_sent == 0
        assert result.failures == 2
