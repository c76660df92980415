from typing import List

from fastapi import APIRouter, Depends

from src.platform.logging.loguru_io import Logger
from src.service.lab_booking.app.command.update_ban_status_use_case import (
    UpdateBanStatusUseCase,
)
from src.service.lab_booking.app.query.attendance_query_use_case import AttendanceQueryUseCase
from src.service.lab_booking.domain.value_object.caller import Caller
from src.service.lab_booking.driving_adapter.http_controller.auth.role_auth import (
    get_current_caller,
    require_staff,
)
from src.service.lab_booking.driving_adapter.http_controller.schema.attendance_schema import (
    AttendanceHistoryResponse,
    BanStatusRequest,
    SessionNeedingAttendanceResponse,
    StudentSummaryResponse,
)
from src.service.lab_booking.driving_adapter.http_controller.schema.user_schema import (
    UserResponse,
)


router = APIRouter()


@router.get('/sessions/needing')
@Logger.io
async def list_sessions_needing_attendance(
    caller: Caller = Depends(require_staff),
    use_case: AttendanceQueryUseCase = Depends(AttendanceQueryUseCase.depends),
) -> List[SessionNeedingAttendanceResponse]:
    sessions = await use_case.sessions_needing_attendance(caller=caller)
    return [SessionNeedingAttendanceResponse.model_validate(item) for item in sessions]


@router.get('/students')
@Logger.io
async def list_students(
    caller: Caller = Depends(require_staff),
    use_case: AttendanceQueryUseCase = Depends(AttendanceQueryUseCase.depends),
) -> List[StudentSummaryResponse]:
    summaries = await use_case.students_overview(caller=caller)
    return [StudentSummaryResponse.model_validate(summary) for summary in summaries]


@router.get('/students/{user_id}')
@Logger.io
async def get_student_history(
    user_id: str,
    caller: Caller = Depends(require_staff),
    use_case: AttendanceQueryUseCase = Depends(AttendanceQueryUseCase.depends),
) -> AttendanceHistoryResponse:
    history = await use_case.student_history(user_id=user_id, caller=caller)
    return AttendanceHistoryResponse.model_validate(history)


@router.put('/students/{user_id}/ban')
@Logger.io
async def update_ban_status(
    user_id: str,
    request: BanStatusRequest,
    caller: Caller = Depends(require_staff),
    use_case: UpdateBanStatusUseCase = Depends(UpdateBanStatusUseCase.depends),
) -> UserResponse:
    user = await use_case.execute(
        user_id=user_id, is_banned=request.is_banned, reason=request.ban_reason, caller=caller
    )
    return UserResponse.model_validate(user)


@router.get('/me')
@Logger.io
async def get_my_attendance(
    caller: Caller = Depends(get_current_caller),
    use_case: AttendanceQueryUseCase = Depends(AttendanceQueryUseCase.depends),
) -> AttendanceHistoryResponse:
    history = await use_case.my_history(caller=caller)
    return AttendanceHistoryResponse.model_validate(history)
