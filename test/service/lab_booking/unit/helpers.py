from datetime import datetime, timedelta, timezone
import inspect
from typing import List, Optional
from unittest.mock import DEFAULT, AsyncMock, Mock

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.service.lab_booking.app.interface.i_attendance_repo import IAttendanceRepo
from src.service.lab_booking.app.interface.i_equipment_repo import IEquipmentRepo
from src.service.lab_booking.app.interface.i_lab_repo import ILabRepo
from src.service.lab_booking.app.interface.i_lab_session_repo import ILabSessionRepo
from src.service.lab_booking.app.interface.i_lab_user_repo import ILabUserRepo
from src.service.lab_booking.app.interface.i_notification_dispatcher import (
    INotificationDispatcher,
)
from src.service.lab_booking.app.interface.i_seat_booking_repo import ISeatBookingRepo
from src.service.lab_booking.app.interface.i_seat_repo import ISeatRepo
from src.service.lab_booking.domain.entity.lab_entity import Lab
from src.service.lab_booking.domain.entity.lab_session_entity import LabSession
from src.service.lab_booking.domain.entity.seat_booking_entity import SeatBooking
from src.service.lab_booking.domain.entity.seat_entity import Seat
from src.service.lab_booking.domain.enum.booking_status import BookingStatus
from src.service.lab_booking.domain.value_object.lab_layout import LabLayout


NOW = datetime(2025, 3, 3, 8, 0, tzinfo=timezone.utc)


class FakeUnitOfWork(AbstractUnitOfWork):
    """
    Unit of work whose repositories are AsyncMocks.

    Lookups return None / empty by default; tests configure what they need.
    """

    def __init__(self) -> None:
        self.lab_repo: Mock = AsyncMock(spec=ILabRepo)
        self.seat_repo: Mock = AsyncMock(spec=ISeatRepo)
        self.session_repo: Mock = AsyncMock(spec=ILabSessionRepo)
        self.seat_booking_repo: Mock = AsyncMock(spec=ISeatBookingRepo)
        self.equipment_repo: Mock = AsyncMock(spec=IEquipmentRepo)
        self.attendance_repo: Mock = AsyncMock(spec=IAttendanceRepo)
        self.user_repo: Mock = AsyncMock(spec=ILabUserRepo)
        self.committed = False
        self.rolled_back = False

        self.seat_booking_repo.find_by_session_and_user.return_value = None
        self.seat_booking_repo.find_by_session_and_seat.return_value = None
        self.seat_booking_repo.list_by_lab_starting_after.return_value = []
        self.seat_booking_repo.list_by_session.return_value = []
        self.session_repo.find_overlapping.return_value = []
        self.session_repo.list_reminder_candidates.return_value = []
        self.session_repo.recount_capacity.return_value = 0
        self.equipment_repo.get_by_id.return_value = None
        self.equipment_repo.get_offer.return_value = None
        self.equipment_repo.list_bookings_by_seat_bookings.return_value = []
        self.user_repo.get_many.return_value = {}
        self.seat_repo.list_by_lab.return_value = []

    async def _commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True


def mock_dispatcher() -> Mock:
    return AsyncMock(spec=INotificationDispatcher)


def track_await_order(**mocks: Mock) -> List[str]:
    """Labels of the given async mocks in the order they are awaited; results are kept"""
    order: List[str] = []
    for label, mock in mocks.items():

        async def record(*args, _label=label, _previous=mock.side_effect, **kwargs):
            order.append(_label)
            if _previous is None:
                return DEFAULT
            result = _previous(*args, **kwargs)
            return await result if inspect.isawaitable(result) else result

        mock.side_effect = record
    return order


def make_lab(*, lab_id: int = 1, name: str = 'Physics', layout: Optional[LabLayout] = None) -> Lab:
    return Lab(name=name, row_config=(layout or LabLayout.default()).to_json(), id=lab_id)


def make_session(
    *,
    session_id: int = 10,
    lab_id: int = 1,
    starts_in: timedelta = timedelta(hours=2),
    capacity: int = 19,
    created_by_id: str = 'teacher_1',
) -> LabSession:
    start_at = NOW + starts_in
    return LabSession(
        lab_id=lab_id,
        start_at=start_at,
        end_at=start_at + timedelta(minutes=55),
        capacity=capacity,
        created_by_id=created_by_id,
        id=session_id,
    )


def make_seat(*, seat_id: int = 100, lab_id: int = 1, name: str = 'A1') -> Seat:
    return Seat(lab_id=lab_id, name=name, row=1, col=1, id=seat_id)


def make_booking(
    *,
    booking_id: int = 500,
    session_id: int = 10,
    seat_id: int = 100,
    user_id: str = 'student_1',
    name: str = 'A1',
    status: BookingStatus = BookingStatus.CONFIRMED,
) -> SeatBooking:
    return SeatBooking(
        session_id=session_id,
        seat_id=seat_id,
        user_id=user_id,
        name=name,
        status=status,
        id=booking_id,
    )
