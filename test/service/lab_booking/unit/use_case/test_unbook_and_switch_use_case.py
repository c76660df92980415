from datetime import timedelta
from unittest.mock import patch

import attrs
import pytest

from src.platform.exception.exceptions import DomainError, ForbiddenError, NotFoundError
from src.service.lab_booking.app.command.reject_booking_use_case import RejectBookingUseCase
from src.service.lab_booking.app.command.switch_seat_use_case import SwitchSeatUseCase
from src.service.lab_booking.app.command.unbook_seat_use_case import UnbookSeatUseCase
from src.service.lab_booking.app.dto.notification_dto import BookingChange
from src.service.lab_booking.app.service.equipment_ledger import EquipmentReservationLedger
from src.service.lab_booking.app.service.seat_identity_resolver import SeatIdentityResolver
from src.service.lab_booking.domain.booking_errors import LockedOutError, SeatTakenError
from src.service.lab_booking.domain.entity.equipment_entity import (
    EquipmentBooking,
    SessionEquipment,
)
from src.service.lab_booking.domain.enum.booking_status import BookingStatus
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
    with (
        patch('src.service.lab_booking.app.command.unbook_seat_use_case.utc_now', return_value=NOW),
        patch('src.service.lab_booking.app.command.switch_seat_use_case.utc_now', return_value=NOW),
    ):
        yield


@pytest.fixture
def uow() -> FakeUnitOfWork:
    uow = FakeUnitOfWork()
    uow.lab_repo.get_for_share.return_value = make_lab()
    uow.session_repo.get_by_id.return_value = make_session()
    uow.seat_repo.get_by_name.return_value = make_seat(name='B3')
    uow.seat_booking_repo.list_matching.return_value = [make_booking(name='B3')]
    return uow


@pytest.fixture
def dispatcher():
    return mock_dispatcher()


@pytest.fixture
def unbook(uow, dispatcher) -> UnbookSeatUseCase:
    return UnbookSeatUseCase(
        uow=uow,
        equipment_ledger=EquipmentReservationLedger(),
        notification_dispatcher=dispatcher,
    )


@pytest.mark.unit
class TestUnbookSeat:
    async def test_student_frees_own_seat(self, unbook, uow, dispatcher, student):
        """
        Given: the student holds B3 with 2 microscopes reserved
        When: they unbook "b3"
        Then: the reservation goes back to the offer, the booking is deleted,
        capacity grows by one and a cancellation e-mail is queued after commit
        """
        # Arrange
        uow.equipment_repo.list_bookings_by_seat_bookings.return_value = [
            EquipmentBooking(
                user_id='student_1', session_id=10, equipment_id=3, seat_booking_id=500, amount=2
            )
        ]
        uow.equipment_repo.get_offer.return_value = SessionEquipment(
            session_id=10, equipment_id=3, available=5, reserved=5
        )

        # Act
        removed = await unbook.execute(session_id=10, lab_id=1, seat_name='b3', caller=student)

        # Assert
        assert [booking.id for booking in removed] == [500]
        uow.seat_booking_repo.list_matching.assert_awaited_once_with(
            session_id=10, seat_id=100, name='B3', user_id='student_1'
        )
        assert uow.equipment_repo.save_offer.await_args.kwargs['offer'].reserved == 3
        uow.seat_booking_repo.delete.assert_awaited_once_with(booking_ids=[500])
        uow.session_repo.increment_capacity.assert_awaited_once_with(session_id=10, amount=1)
        assert uow.committed
        assert dispatcher.send_booking_status_change.await_args.kwargs['change'] == (
            BookingChange.CANCELLED
        )

    async def test_holds_shared_lab_lock_before_releasing_capacity(self, unbook, uow, student):
        # Arrange
        order = track_await_order(
            lock=uow.lab_repo.get_for_share, capacity=uow.session_repo.increment_capacity
        )

        # Act
        await unbook.execute(session_id=10, lab_id=1, seat_name='B3', caller=student)

        # Assert
        assert order == ['lock', 'capacity']
        uow.lab_repo.get_for_share.assert_awaited_once_with(lab_id=1)

    async def test_teacher_frees_any_booking_inside_lockout(self, unbook, uow, teacher):
        """
        Given: a session starting in 5 minutes
        When: a teacher frees B3 on behalf of the student
        Then: the lockout does not apply and no user filter is used
        """
        # Arrange
        uow.session_repo.get_by_id.return_value = make_session(starts_in=timedelta(minutes=5))

        # Act
        await unbook.execute(
            session_id=10, lab_id=1, seat_name='B3', caller=teacher, is_teacher_acting=True
        )

        # Assert
        assert uow.seat_booking_repo.list_matching.await_args.kwargs['user_id'] is None
        assert uow.committed

    async def test_student_locked_out(self, unbook, uow, student):
        uow.session_repo.get_by_id.return_value = make_session(starts_in=timedelta(minutes=5))

        with pytest.raises(LockedOutError):
            await unbook.execute(session_id=10, lab_id=1, seat_name='B3', caller=student)
        uow.seat_booking_repo.delete.assert_not_awaited()

    async def test_student_cannot_act_as_teacher(self, unbook, student):
        with pytest.raises(ForbiddenError):
            await unbook.execute(
                session_id=10, lab_id=1, seat_name='B3', caller=student, is_teacher_acting=True
            )

    async def test_nothing_to_free(self, unbook, uow, student):
        uow.seat_booking_repo.list_matching.return_value = []

        with pytest.raises(NotFoundError):
            await unbook.execute(session_id=10, lab_id=1, seat_name='B3', caller=student)
        uow.session_repo.increment_capacity.assert_not_awaited()

    async def test_unknown_seat_label(self, unbook, uow, student):
        uow.seat_repo.get_by_name.return_value = None

        with pytest.raises(NotFoundError):
            await unbook.execute(session_id=10, lab_id=1, seat_name='Z9', caller=student)


@pytest.mark.unit
class TestSwitchSeat:
    @pytest.fixture
    def switch(self, uow) -> SwitchSeatUseCase:
        uow.seat_booking_repo.find_by_session_and_user.return_value = make_booking(name='A1')
        uow.seat_repo.get_or_create.return_value = make_seat(seat_id=101, name='C2')

        async def move_to_seat(*, booking_id, seat_id, name):
            return attrs.evolve(make_booking(booking_id=booking_id), seat_id=seat_id, name=name)

        uow.seat_booking_repo.move_to_seat.side_effect = move_to_seat
        return SwitchSeatUseCase(uow=uow, seat_identity_resolver=SeatIdentityResolver())

    async def test_moves_booking(self, switch, uow, student):
        moved = await switch.execute(session_id=10, lab_id=1, new_seat_name='c2', caller=student)

        assert moved.name == 'C2'
        assert moved.seat_id == 101
        assert uow.committed

    async def test_move_holds_shared_lab_lock(self, switch, uow, student):
        order = track_await_order(
            lock=uow.lab_repo.get_for_share, move=uow.seat_booking_repo.move_to_seat
        )

        await switch.execute(session_id=10, lab_id=1, new_seat_name='c2', caller=student)

        assert order == ['lock', 'move']
        uow.lab_repo.get_by_id.assert_not_awaited()

    async def test_same_seat_is_a_no_op(self, switch, uow, student):
        result = await switch.execute(session_id=10, lab_id=1, new_seat_name='a1', caller=student)

        assert result.name == 'A1'
        uow.seat_booking_repo.move_to_seat.assert_not_awaited()

    async def test_target_taken(self, switch, uow, student):
        uow.seat_booking_repo.find_by_session_and_seat.return_value = make_booking(
            booking_id=501, user_id='student_2', name='C2'
        )

        with pytest.raises(SeatTakenError):
            await switch.execute(session_id=10, lab_id=1, new_seat_name='C2', caller=student)

    async def test_without_booking(self, switch, uow, student):
        uow.seat_booking_repo.find_by_session_and_user.return_value = None

        with pytest.raises(NotFoundError):
            await switch.execute(session_id=10, lab_id=1, new_seat_name='C2', caller=student)


@pytest.mark.unit
class TestRejectBooking:
    @pytest.fixture
    def reject(self, uow, dispatcher) -> RejectBookingUseCase:
        return RejectBookingUseCase(
            uow=uow,
            equipment_ledger=EquipmentReservationLedger(),
            notification_dispatcher=dispatcher,
        )

    async def test_reject_frees_the_seat(self, reject, uow, dispatcher, teacher):
        """
        Given: a pending booking
        When: a teacher rejects it
        Then: the row is deleted, capacity restored, and the student is told
        """
        # Arrange
        uow.seat_booking_repo.get_by_id.return_value = make_booking(
            status=BookingStatus.PENDING_APPROVAL
        )

        # Act
        rejected = await reject.execute(booking_id=500, caller=teacher)

        # Assert
        assert rejected.status == BookingStatus.REJECTED
        uow.seat_booking_repo.delete.assert_awaited_once_with(booking_ids=[500])
        uow.session_repo.increment_capacity.assert_awaited_once_with(session_id=10, amount=1)
        assert dispatcher.send_booking_status_change.await_args.kwargs['change'] == (
            BookingChange.REJECTED
        )

    async def test_reject_holds_shared_lab_lock_before_releasing_capacity(
        self, reject, uow, teacher
    ):
        # Arrange
        uow.seat_booking_repo.get_by_id.return_value = make_booking(
            status=BookingStatus.PENDING_APPROVAL
        )
        order = track_await_order(
            lock=uow.lab_repo.get_for_share, capacity=uow.session_repo.increment_capacity
        )

        # Act
        await reject.execute(booking_id=500, caller=teacher)

        # Assert
        assert order == ['lock', 'capacity']
        uow.lab_repo.get_for_share.assert_awaited_once_with(lab_id=1)

    async def test_confirmed_booking_cannot_be_rejected(self, reject, uow, teacher):
        uow.seat_booking_repo.get_by_id.return_value = make_booking()

        with pytest.raises(DomainError):
            await reject.execute(booking_id=500, caller=teacher)
        uow.seat_booking_repo.delete.assert_not_awaited()

    async def test_students_cannot_reject(self, reject, student):
        with pytest.raises(ForbiddenError):
            await reject.execute(booking_id=500, caller=student)
