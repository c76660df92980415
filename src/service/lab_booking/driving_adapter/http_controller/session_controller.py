from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.service.lab_booking.app.command.book_seat_use_case import BookSeatUseCase
from src.service.lab_booking.app.command.create_session_use_case import CreateSessionUseCase
from src.service.lab_booking.app.command.mark_attendance_use_case import (
    AttendanceMark,
    MarkAttendanceUseCase,
)
from src.service.lab_booking.app.command.remove_session_use_case import RemoveSessionUseCase
from src.service.lab_booking.app.command.switch_seat_use_case import SwitchSeatUseCase
from src.service.lab_booking.app.command.unbook_seat_use_case import UnbookSeatUseCase
from src.service.lab_booking.app.command.update_session_equipment_use_case import (
    UpdateSessionEquipmentUseCase,
)
from src.service.lab_booking.app.command.update_session_use_case import UpdateSessionUseCase
from src.service.lab_booking.app.dto.equipment_dto import EquipmentOffer, EquipmentRequest
from src.service.lab_booking.app.query.attendance_query_use_case import AttendanceQueryUseCase
from src.service.lab_booking.app.query.session_query_use_case import SessionQueryUseCase
from src.service.lab_booking.domain.value_object.caller import Caller
from src.service.lab_booking.driving_adapter.http_controller.auth.role_auth import (
    get_current_caller,
    require_staff,
)
from src.service.lab_booking.driving_adapter.http_controller.schema.attendance_schema import (
    AttendanceResponse,
    BulkAttendanceRequest,
    MarkAttendanceRequest,
    SessionRosterResponse,
)
from src.service.lab_booking.driving_adapter.http_controller.schema.booking_schema import (
    SeatBookingResponse,
)
from src.service.lab_booking.driving_adapter.http_controller.schema.session_schema import (
    BookSeatRequest,
    OccupiedSeatResponse,
    SessionEquipmentResponse,
    SessionEquipmentUpdateRequest,
    SessionResponse,
    SessionWindowRequest,
    SwitchSeatRequest,
    UnbookSeatRequest,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


# ---- session lifecycle ----


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_session(
    request: SessionWindowRequest,
    caller: Caller = Depends(require_staff),
    use_case: CreateSessionUseCase = Depends(CreateSessionUseCase.depends),
) -> SessionResponse:
    session = await use_case.execute(
        lab_id=request.lab_id, start_at=request.start_at, end_at=request.end_at, caller=caller
    )
    return SessionResponse.model_validate(session)


@router.get('')
@Logger.io
async def list_sessions(
    day: datetime = Query(..., description='Start of the day to list, with its UTC offset'),
    lab_id: Optional[int] = None,
    caller: Caller = Depends(get_current_caller),
    use_case: SessionQueryUseCase = Depends(SessionQueryUseCase.depends),
) -> List[SessionResponse]:
    if lab_id is None:
        sessions = await use_case.list_all_sessions(day_start=day)
    else:
        sessions = await use_case.list_sessions(lab_id=lab_id, day_start=day)
    return [SessionResponse.model_validate(session) for session in sessions]


@router.get('/{session_id}')
@Logger.io
async def get_session(
    session_id: int,
    caller: Caller = Depends(get_current_caller),
    use_case: SessionQueryUseCase = Depends(SessionQueryUseCase.depends),
) -> SessionResponse:
    return SessionResponse.model_validate(await use_case.get_session(session_id=session_id))


@router.put('/{session_id}')
@Logger.io
async def update_session(
    session_id: int,
    request: SessionWindowRequest,
    caller: Caller = Depends(require_staff),
    use_case: UpdateSessionUseCase = Depends(UpdateSessionUseCase.depends),
) -> SessionResponse:
    session = await use_case.execute(
        session_id=session_id,
        lab_id=request.lab_id,
        start_at=request.start_at,
        end_at=request.end_at,
        caller=caller,
    )
    return SessionResponse.model_validate(session)


@router.delete('/{session_id}', status_code=status.HTTP_204_NO_CONTENT)
@Logger.io
async def remove_session(
    session_id: int,
    caller: Caller = Depends(require_staff),
    use_case: RemoveSessionUseCase = Depends(RemoveSessionUseCase.depends),
) -> None:
    await use_case.execute(session_id=session_id, caller=caller)


@router.get('/{session_id}/seats')
@Logger.io
async def list_occupied_seats(
    session_id: int,
    lab_id: int,
    caller: Caller = Depends(get_current_caller),
    use_case: SessionQueryUseCase = Depends(SessionQueryUseCase.depends),
) -> List[OccupiedSeatResponse]:
    seats = await use_case.list_occupied_seats(lab_id=lab_id, session_id=session_id)
    return [OccupiedSeatResponse.model_validate(seat) for seat in seats]


# ---- equipment offers ----


@router.get('/{session_id}/equipment')
@Logger.io
async def get_session_equipment(
    session_id: int,
    caller: Caller = Depends(get_current_caller),
    use_case: SessionQueryUseCase = Depends(SessionQueryUseCase.depends),
) -> List[SessionEquipmentResponse]:
    views = await use_case.get_session_equipment(session_id=session_id)
    return [SessionEquipmentResponse.model_validate(view) for view in views]


@router.put('/{session_id}/equipment')
@Logger.io
async def update_session_equipment(
    session_id: int,
    request: SessionEquipmentUpdateRequest,
    caller: Caller = Depends(require_staff),
    use_case: UpdateSessionEquipmentUseCase = Depends(UpdateSessionEquipmentUseCase.depends),
    query_use_case: SessionQueryUseCase = Depends(SessionQueryUseCase.depends),
) -> List[SessionEquipmentResponse]:
    await use_case.execute(
        session_id=session_id,
        caller=caller,
        deletions=request.deletions,
        additions=[
            EquipmentOffer(equipment_id=item.equipment_id, available=item.available)
            for item in request.additions
        ],
        updates=[
            EquipmentOffer(equipment_id=item.equipment_id, available=item.available)
            for item in request.updates
        ],
    )
    views = await query_use_case.get_session_equipment(session_id=session_id)
    return [SessionEquipmentResponse.model_validate(view) for view in views]


# ---- seat booking ----


@router.post('/{session_id}/booking', status_code=status.HTTP_201_CREATED)
@Logger.io
async def book_seat(
    session_id: int,
    request: BookSeatRequest,
    caller: Caller = Depends(get_current_caller),
    use_case: BookSeatUseCase = Depends(BookSeatUseCase.depends),
) -> SeatBookingResponse:
    with tracer.start_as_current_span('controller.book_seat') as span:
        span.set_attribute('session.id', session_id)
        span.set_attribute('seat.name', request.seat_name)
        span.set_attribute('user.id', caller.user_id)

        booking = await use_case.execute(
            session_id=session_id,
            lab_id=request.lab_id,
            seat_name=request.seat_name,
            caller=caller,
            notes=request.notes,
            equipment=[
                EquipmentRequest(equipment_id=item.equipment_id, amount=item.amount)
                for item in request.equipment
            ],
        )
        span.set_attribute('booking.id', booking.id or 0)
        return SeatBookingResponse.model_validate(booking)


@router.post('/{session_id}/booking/release')
@Logger.io
async def unbook_seat(
    session_id: int,
    request: UnbookSeatRequest,
    caller: Caller = Depends(get_current_caller),
    use_case: UnbookSeatUseCase = Depends(UnbookSeatUseCase.depends),
) -> List[SeatBookingResponse]:
    removed = await use_case.execute(
        session_id=session_id,
        lab_id=request.lab_id,
        seat_name=request.seat_name,
        caller=caller,
        is_teacher_acting=request.is_teacher_acting,
    )
    return [SeatBookingResponse.model_validate(booking) for booking in removed]


@router.patch('/{session_id}/booking')
@Logger.io
async def switch_seat(
    session_id: int,
    request: SwitchSeatRequest,
    caller: Caller = Depends(get_current_caller),
    use_case: SwitchSeatUseCase = Depends(SwitchSeatUseCase.depends),
) -> SeatBookingResponse:
    booking = await use_case.execute(
        session_id=session_id,
        lab_id=request.lab_id,
        new_seat_name=request.new_seat_name,
        caller=caller,
    )
    return SeatBookingResponse.model_validate(booking)


# ---- attendance ----


@router.get('/{session_id}/attendance')
@Logger.io
async def get_session_attendance(
    session_id: int,
    caller: Caller = Depends(require_staff),
    use_case: AttendanceQueryUseCase = Depends(AttendanceQueryUseCase.depends),
) -> SessionRosterResponse:
    roster = await use_case.session_roster(session_id=session_id, caller=caller)
    return SessionRosterResponse.model_validate(roster)


@router.post('/{session_id}/attendance')
@Logger.io
async def mark_attendance(
    session_id: int,
    request: MarkAttendanceRequest,
    caller: Caller = Depends(require_staff),
    use_case: MarkAttendanceUseCase = Depends(MarkAttendanceUseCase.depends),
) -> AttendanceResponse:
    attendance = await use_case.execute(
        session_id=session_id,
        user_id=request.user_id,
        status=request.status,
        notes=request.notes,
        caller=caller,
    )
    return AttendanceResponse.model_validate(attendance)


@router.put('/{session_id}/attendance')
@Logger.io
async def mark_bulk_attendance(
    session_id: int,
    request: BulkAttendanceRequest,
    caller: Caller = Depends(require_staff),
    use_case: MarkAttendanceUseCase = Depends(MarkAttendanceUseCase.depends),
) -> List[AttendanceResponse]:
    results = await use_case.execute_bulk(
        session_id=session_id,
        marks=[
            AttendanceMark(user_id=item.user_id, status=item.status, notes=item.notes)
            for item in request.attendances
        ],
        caller=caller,
    )
    return [AttendanceResponse.model_validate(attendance) for attendance in results]
