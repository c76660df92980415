"""
Unit tests for BookSeatUseCase

The repositories are AsyncMocks; the seat resolver and the equipment ledger
are the real services running against them.
"""

from datetime import timedelta
from unittest.mock import patch

import attrs
import pytest

from src.platform.exception.exceptions import NotFoundError
from src.service.lab_booking.app.command.book_seat_use_case import BookSeatUseCase
from src.service.lab_booking.app.dto.equipment_dto import EquipmentRequest
from src.service.lab_booking.app.service.equipment_ledger import EquipmentReservationLedger
from src.service.lab_booking.app.service.seat_identity_resolver import SeatIdentityResolver
from src.service.lab_booking.domain.booking_errors import (
    AlreadyBookedError,
    InsufficientEquipmentError,
    InvalidSeatError,
    LockedOutError,
    SeatTakenError,
    SessionFullError,
)
from src.service.lab_booking.domain.entity.equipment_entity import Equipment, SessionEquipment
from src.service.lab_booking.domain.entity.lab_user_entity import LabUser
from src.service.lab_booking.domain.enum.booking_status import BookingStatus
from src.service.lab_booking.domain.enum.user_role import UserRole
from test.service.lab_booking.unit.helpers import (
    NOW,
    FakeUnitOfWork,
    make_booking,
    make_lab,
    make_seat,
    make_session,
    mock_dispatcher,
    track_await_order,
)


@pytest.fixture(autouse=True)
def frozen_clock():
    with patch(
        'src.service.lab_booking.app.command.book_seat_use_case.utc_now', return_value=NOW
    ):
        yield


@pytest.fixture
def uow() -> FakeUnitOfWork:
    uow = FakeUnitOfWork()
    uow.lab_repo.get_for_share.return_value = make_lab()
    uow.session_repo.get_by_id.return_value = make_session()
    uow.seat_repo.get_or_create.return_value = make_seat(name='B3')
    uow.session_repo.try_decrement_capacity.return_value = True

    async def create(*, booking):
        return attrs.evolve(booking, id=500)

    uow.seat_booking_repo.create.side_effect = create
    uow.user_repo.get_many.return_value = {
        'student_1': LabUser(id='student_1', email='student@lab.local', first_name='Sam'),
        'teacher_1': LabUser(
            id='teacher_1', email='teacher@lab.local', first_name='Tess', role=UserRole.TEACHER
        ),
    }
    return uow


@pytest.fixture
def dispatcher():
    return mock_dispatcher()


@pytest.fixture
def use_case(uow, dispatcher) -> BookSeatUseCase:
    return BookSeatUseCase(
        uow=uow,
        seat_identity_resolver=SeatIdentityResolver(),
        equipment_ledger=EquipmentReservationLedger(),
        notification_dispatcher=dispatcher,
    )


@pytest.mark.unit
class TestBookSeatSuccess:
    async def test_books_seat_and_commits(self, use_case, uow, student):
        """
        Given: a session two hours away with free seats
        When: a student books "b3"
        Then: the seat is resolved by its canonical name and the booking is confirmed
        """
        # Act
        booking = await use_case.execute(
            session_id=10, lab_id=1, seat_name='b3', caller=student, notes=' near window '
        )

        # Assert
        assert booking.id == 500
        assert booking.status == BookingStatus.CONFIRMED
        assert booking.notes == 'near window'
        uow.seat_repo.get_or_create.assert_awaited_once_with(lab_id=1, name='B3', row=2, col=3)
        uow.session_repo.try_decrement_capacity.assert_awaited_once_with(session_id=10)
        assert uow.committed

    async def test_holds_shared_lab_lock_before_taking_capacity(self, use_case, uow, student):
        """
        Given: a bookable session
        When: a student books a seat
        Then: the lab row is share-locked before capacity is decremented
        """
        # Arrange
        order = track_await_order(
            lock=uow.lab_repo.get_for_share, capacity=uow.session_repo.try_decrement_capacity
        )

        # Act
        await use_case.execute(session_id=10, lab_id=1, seat_name='B3', caller=student)

        # Assert
        assert order == ['lock', 'capacity']
        uow.lab_repo.get_for_share.assert_awaited_once_with(lab_id=1)
        uow.lab_repo.get_by_id.assert_not_awaited()

    async def test_notifications_follow_commit(self, use_case, uow, dispatcher, student):
        """
        Given: a successful booking
        When: notifications are sent
        Then: they are sent only after the transaction committed
        """
        # Arrange
        committed_at_send = []

        async def record(*, notice):
            committed_at_send.append(uow.committed)

        dispatcher.send_booking_confirmation.side_effect = record

        # Act
        await use_case.execute(session_id=10, lab_id=1, seat_name='B3', caller=student)

        # Assert
        assert committed_at_send == [True]
        notice = dispatcher.send_booking_confirmation.await_args.kwargs['notice']
        assert notice.student_email == 'student@lab.local'
        assert notice.teacher_email == 'teacher@lab.local'
        assert notice.seat_name == 'B3'

    async def test_banned_caller_gets_pending_booking(
        self, use_case, uow, dispatcher, banned_student
    ):
        """
        Given: a banned student
        When: they book a free seat
        Then: the seat is taken (capacity decremented) but pending approval,
        and the session creator is asked to decide
        """
        # Act
        booking = await use_case.execute(
            session_id=10, lab_id=1, seat_name='B3', caller=banned_student
        )

        # Assert
        assert booking.status == BookingStatus.PENDING_APPROVAL
        uow.session_repo.try_decrement_capacity.assert_awaited_once()
        notice = dispatcher.send_teacher_request.await_args.kwargs['notice']
        assert notice.status == BookingStatus.PENDING_APPROVAL

    async def test_reserves_requested_equipment(self, use_case, uow, student):
        """
        Given: 5 microscopes offered, 3 already reserved
        When: the student books with 2 microscopes
        Then: the offer is saved with 5 reserved and an equipment booking is created
        """
        # Arrange
        uow.equipment_repo.get_offer.return_value = SessionEquipment(
            session_id=10, equipment_id=3, available=5, reserved=3
        )
        uow.equipment_repo.get_by_id.return_value = Equipment(
            lab_id=1, name='Microscope', total=8, id=3
        )

        async def create_booking(*, booking):
            return attrs.evolve(booking, id=900)

        uow.equipment_repo.create_booking.side_effect = create_booking

        # Act
        await use_case.execute(
            session_id=10,
            lab_id=1,
            seat_name='B3',
            caller=student,
            equipment=[EquipmentRequest(equipment_id=3, amount=2)],
        )

        # Assert
        saved = uow.equipment_repo.save_offer.await_args.kwargs['offer']
        assert saved.reserved == 5
        created = uow.equipment_repo.create_booking.await_args.kwargs['booking']
        assert created.seat_booking_id == 500
        assert created.amount == 2


@pytest.mark.unit
class TestBookSeatRejections:
    async def test_unknown_lab(self, use_case, uow, student):
        uow.lab_repo.get_for_share.return_value = None

        with pytest.raises(NotFoundError):
            await use_case.execute(session_id=10, lab_id=1, seat_name='A1', caller=student)

    async def test_session_of_another_lab(self, use_case, uow, student):
        uow.session_repo.get_by_id.return_value = make_session(lab_id=2)

        with pytest.raises(NotFoundError):
            await use_case.execute(session_id=10, lab_id=1, seat_name='A1', caller=student)

    async def test_seat_outside_layout(self, use_case, uow, student):
        with pytest.raises(InvalidSeatError):
            await use_case.execute(session_id=10, lab_id=1, seat_name='D1', caller=student)
        uow.seat_repo.get_or_create.assert_not_awaited()

    async def test_locked_out_applies_to_staff_too(self, use_case, uow, teacher):
        """
        Given: a session starting in 10 minutes
        When: a teacher books a seat
        Then: LockedOutError, nothing is written
        """
        # Arrange
        uow.session_repo.get_by_id.return_value = make_session(starts_in=timedelta(minutes=10))

        # Act & Assert
        with pytest.raises(LockedOutError):
            await use_case.execute(session_id=10, lab_id=1, seat_name='A1', caller=teacher)
        uow.seat_booking_repo.create.assert_not_awaited()
        assert not uow.committed

    async def test_already_booked(self, use_case, uow, dispatcher, student):
        uow.seat_booking_repo.find_by_session_and_user.return_value = make_booking()

        with pytest.raises(AlreadyBookedError):
            await use_case.execute(session_id=10, lab_id=1, seat_name='B3', caller=student)
        uow.session_repo.try_decrement_capacity.assert_not_awaited()
        dispatcher.send_booking_confirmation.assert_not_awaited()

    async def test_seat_taken(self, use_case, uow, student):
        uow.seat_booking_repo.find_by_session_and_seat.return_value = make_booking(
            user_id='student_2', name='B3'
        )

        with pytest.raises(SeatTakenError) as exc_info:
            await use_case.execute(session_id=10, lab_id=1, seat_name='B3', caller=student)
        assert 'B3' in exc_info.value.message

    async def test_session_full(self, use_case, uow, student):
        uow.session_repo.try_decrement_capacity.return_value = False

        with pytest.raises(SessionFullError):
            await use_case.execute(session_id=10, lab_id=1, seat_name='B3', caller=student)
        uow.seat_booking_repo.create.assert_not_awaited()
        assert not uow.committed

    async def test_insufficient_equipment_aborts_booking(
        self, use_case, uow, dispatcher, student
    ):
        """
        Given: 5 microscopes offered, 3 reserved
        When: the student asks for 3
        Then: InsufficientEquipmentError, no commit, no e-mail
        """
        # Arrange
        uow.equipment_repo.get_offer.return_value = SessionEquipment(
            session_id=10, equipment_id=3, available=5, reserved=3
        )
        uow.equipment_repo.get_by_id.return_value = Equipment(
            lab_id=1, name='Microscope', total=8, id=3
        )

        # Act & Assert
        with pytest.raises(InsufficientEquipmentError):
            await use_case.execute(
                session_id=10,
                lab_id=1,
                seat_name='B3',
                caller=student,
                equipment=[EquipmentRequest(equipment_id=3, amount=3)],
            )
        assert not uow.committed
        assert uow.rolled_back
        dispatcher.send_booking_confirmation.assert_not_awaited()

    async def test_equipment_not_offered(self, use_case, uow, student):
        uow.equipment_repo.get_offer.return_value = None

        with pytest.raises(NotFoundError):
            await use_case.execute(
                session_id=10,
                lab_id=1,
                seat_name='B3',
                caller=student,
                equipment=[EquipmentRequest(equipment_id=42, amount=1)],
            )
