from datetime import datetime, timedelta
from typing import Optional

from src.platform.config.di import container
from src.service.lab_booking.app.command.book_seat_use_case import BookSeatUseCase
from src.service.lab_booking.app.command.create_session_use_case import CreateSessionUseCase
from src.service.lab_booking.app.command.unbook_seat_use_case import UnbookSeatUseCase
from src.service.lab_booking.app.query.session_query_use_case import SessionQueryUseCase
from src.service.lab_booking.domain.booking_policy import utc_now
from src.service.lab_booking.domain.entity.lab_session_entity import LabSession
from src.service.lab_booking.domain.entity.lab_user_entity import LabUser
from src.service.lab_booking.domain.enum.user_role import UserRole
from src.service.lab_booking.domain.value_object.caller import Caller


USERS = [
    LabUser(id='admin_1', email='admin@lab.local', first_name='Ada', role=UserRole.ADMIN),
    LabUser(id='teacher_1', email='tess@lab.local', first_name='Tess', role=UserRole.TEACHER),
    LabUser(id='student_1', email='sam@lab.local', first_name='Sam', last_name='Student'),
    LabUser(id='student_2', email='ana@lab.local', first_name='Ana', last_name='Lopez'),
    LabUser(id='student_banned', email='ben@lab.local', first_name='Ben', is_banned=True),
]


def book_seat_use_case() -> BookSeatUseCase:
    return BookSeatUseCase(
        uow=container.unit_of_work(),
        seat_identity_resolver=container.seat_identity_resolver(),
        equipment_ledger=container.equipment_ledger(),
        notification_dispatcher=container.notification_dispatcher(),
    )


def unbook_seat_use_case() -> UnbookSeatUseCase:
    return UnbookSeatUseCase(
        uow=container.unit_of_work(),
        equipment_ledger=container.equipment_ledger(),
        notification_dispatcher=container.notification_dispatcher(),
    )


async def get_session(session_id: int) -> LabSession:
    return await SessionQueryUseCase(uow=container.unit_of_work()).get_session(
        session_id=session_id
    )


def starting_in(delta: timedelta) -> datetime:
    return (utc_now() + delta).replace(microsecond=0)


async def create_session(
    *,
    lab_id: int,
    caller: Caller,
    start_at: Optional[datetime] = None,
    starts_in: timedelta = timedelta(days=1),
    duration: timedelta = timedelta(minutes=55),
) -> LabSession:
    start_at = start_at or starting_in(starts_in)
    return await CreateSessionUseCase(uow=container.unit_of_work()).execute(
        lab_id=lab_id, start_at=start_at, end_at=start_at + duration, caller=caller
    )
