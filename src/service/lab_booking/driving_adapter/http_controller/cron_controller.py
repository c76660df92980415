from typing import Optional

from fastapi import APIRouter, Depends, Header
from pydantic import BaseModel, ConfigDict

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import AuthenticationError
from src.platform.logging.loguru_io import Logger
from src.service.lab_booking.app.command.send_session_reminders_use_case import (
    SendSessionRemindersUseCase,
)


router = APIRouter()


class ReminderScanResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    student_sessions: int
    student_emails_sent: int
    teacher_sessions: int
    teacher_emails_sent: int
    failures: int


def verify_cron_secret(authorization: Optional[str] = Header(None)) -> None:
    secret = settings.CRON_SECRET.get_secret_value()
    if secret and authorization != f'Bearer {secret}':
        raise AuthenticationError('Unauthorized')


@router.get('/session-reminders', dependencies=[Depends(verify_cron_secret)])
@Logger.io
async def run_session_reminders(
    use_case: SendSessionRemindersUseCase = Depends(SendSessionRemindersUseCase.depends),
) -> ReminderScanResponse:
    result = await use_case.execute()
    return ReminderScanResponse.model_validate(result)
