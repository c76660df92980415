#!/usr/bin/env python3
"""
Session Reminder Job
Run one reminder scan outside the web process (cron, systemd timer, ...)

Same work as GET /api/cron/session-reminders: students booked into sessions
starting in about three hours get a reminder, session owners starting in
about fifteen minutes get the roster. Each session is claimed once, so
overlapping runs never send twice.

Exit status is 1 when the scan itself fails; individual e-mail failures are
only counted.
"""

import anyio

from src.platform.config.di import container
from src.platform.database.orm_db_setting import dispose_engine
from src.platform.logging.loguru_io import Logger
from src.service.lab_booking.app.command.send_session_reminders_use_case import (
    SendSessionRemindersUseCase,
)


async def main() -> None:
    use_case = SendSessionRemindersUseCase(
        uow=container.unit_of_work(),
        notification_dispatcher=container.notification_dispatcher(),
    )
    try:
        result = await use_case.execute()
    except Exception as e:
        Logger.base.error(f'❌ [REMINDER] Scan failed: {e}')
        raise SystemExit(1)
    finally:
        await dispose_engine()

    print(
        f'📬 students: {result.student_emails_sent} mails / {result.student_sessions} sessions, '
        f'teachers: {result.teacher_emails_sent} mails / {result.teacher_sessions} sessions, '
        f'failures: {result.failures}'
    )


if __name__ == '__main__':
    anyio.run(main)
