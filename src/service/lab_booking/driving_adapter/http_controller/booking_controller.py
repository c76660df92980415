from typing import List

from fastapi import APIRouter, Depends

from src.platform.logging.loguru_io import Logger
from src.service.lab_booking.app.command.approve_booking_use_case import ApproveBookingUseCase
from src.service.lab_booking.app.command.cancel_booking_use_case import CancelBookingUseCase
from src.service.lab_booking.app.command.reject_booking_use_case import RejectBookingUseCase
from src.service.lab_booking.app.command.update_booking_details_use_case import (
    UpdateBookingDetailsUseCase,
)
from src.service.lab_booking.app.dto.equipment_dto import EquipmentRequest
from src.service.lab_booking.app.query.booking_query_use_case import BookingQueryUseCase
from src.service.lab_booking.domain.value_object.caller import Caller
from src.service.lab_booking.driving_adapter.http_controller.auth.role_auth import (
    get_current_caller,
    require_staff,
)
from src.service.lab_booking.driving_adapter.http_controller.schema.booking_schema import (
    BookingDetailsRequest,
    BookingViewResponse,
    SeatBookingResponse,
)


router = APIRouter()


@router.get('/my_booking')
@Logger.io
async def list_my_bookings(
    caller: Caller = Depends(get_current_caller),
    use_case: BookingQueryUseCase = Depends(BookingQueryUseCase.depends),
) -> List[BookingViewResponse]:
    views = await use_case.list_my_bookings(caller=caller)
    return [BookingViewResponse.model_validate(view) for view in views]


@router.get('/pending')
@Logger.io
async def list_pending_bookings(
    caller: Caller = Depends(require_staff),
    use_case: BookingQueryUseCase = Depends(BookingQueryUseCase.depends),
) -> List[BookingViewResponse]:
    views = await use_case.list_pending(caller=caller)
    return [BookingViewResponse.model_validate(view) for view in views]


@router.patch('/{booking_id}')
@Logger.io
async def update_booking_details(
    booking_id: int,
    request: BookingDetailsRequest,
    caller: Caller = Depends(get_current_caller),
    use_case: UpdateBookingDetailsUseCase = Depends(UpdateBookingDetailsUseCase.depends),
) -> SeatBookingResponse:
    booking = await use_case.execute(
        booking_id=booking_id,
        caller=caller,
        notes=request.notes,
        equipment=[
            EquipmentRequest(equipment_id=item.equipment_id, amount=item.amount)
            for item in request.equipment
        ],
    )
    return SeatBookingResponse.model_validate(booking)


@router.post('/{booking_id}/cancel')
@Logger.io
async def cancel_booking(
    booking_id: int,
    caller: Caller = Depends(get_current_caller),
    use_case: CancelBookingUseCase = Depends(CancelBookingUseCase.depends),
) -> SeatBookingResponse:
    booking = await use_case.execute(booking_id=booking_id, caller=caller)
    return SeatBookingResponse.model_validate(booking)


@router.post('/{booking_id}/approve')
@Logger.io
async def approve_booking(
    booking_id: int,
    caller: Caller = Depends(require_staff),
    use_case: ApproveBookingUseCase = Depends(ApproveBookingUseCase.depends),
) -> SeatBookingResponse:
    booking = await use_case.execute(booking_id=booking_id, caller=caller)
    return SeatBookingResponse.model_validate(booking)


@router.post('/{booking_id}/reject')
@Logger.io
async def reject_booking(
    booking_id: int,
    caller: Caller = Depends(require_staff),
    use_case: RejectBookingUseCase = Depends(RejectBookingUseCase.depends),
) -> SeatBookingResponse:
    booking = await use_case.execute(booking_id=booking_id, caller=caller)
    return SeatBookingResponse.model_validate(booking)
