from datetime import timedelta
from unittest.mock import patch

import attrs
import pytest

from src.platform.exception.exceptions import ForbiddenError, NotFoundError
from src.service.lab_booking.app.command.create_session_use_case import CreateSessionUseCase
from src.service.lab_booking.app.command.set_lab_layout_use_case import SetLabLayoutUseCase
from src.service.lab_booking.domain.booking_errors import (
    InvalidSessionWindowError,
    LayoutConflictError,
    SessionOverlapError,
)
from src.service.lab_booking.domain.entity.lab_user_entity import LabUser
from src.service.lab_booking.domain.value_object.lab_layout import LabLayout, RowConfig
from test.service.lab_booking.unit.helpers import (
    NOW,
    FakeUnitOfWork,
    make_booking,
    make_lab,
    make_seat,
    make_session,
    track_await_order,
)


@pytest.fixture
def uow() -> FakeUnitOfWork:
    uow = FakeUnitOfWork()
    uow.lab_repo.get_for_update.return_value = make_lab()

    async def create(*, session):
        return attrs.evolve(session, id=11)

    uow.session_repo.create.side_effect = create
    return uow


@pytest.mark.unit
class TestCreateSession:
    @pytest.fixture
    def use_case(self, uow) -> CreateSessionUseCase:
        return CreateSessionUseCase(uow=uow)

    async def test_capacity_matches_layout(self, use_case, uow, teacher):
        """
        Given: the default 19-seat layout
        When: a teacher creates a 55-minute session
        Then: the session starts with capacity 19 and records its creator
        """
        # Act
        session = await use_case.execute(
            lab_id=1, start_at=NOW, end_at=NOW + timedelta(minutes=55), caller=teacher
        )

        # Assert
        assert session.id == 11
        assert session.capacity == 19
        assert session.created_by_id == 'teacher_1'
        uow.session_repo.find_overlapping.assert_awaited_once_with(
            lab_id=1, start_at=NOW, end_at=NOW + timedelta(minutes=55)
        )
        assert uow.committed

    async def test_overlap_rejected(self, use_case, uow, teacher):
        uow.session_repo.find_overlapping.return_value = [make_session()]

        with pytest.raises(SessionOverlapError):
            await use_case.execute(
                lab_id=1, start_at=NOW, end_at=NOW + timedelta(hours=1), caller=teacher
            )
        uow.session_repo.create.assert_not_awaited()

    async def test_window_too_short(self, use_case, teacher):
        with pytest.raises(InvalidSessionWindowError):
            await use_case.execute(
                lab_id=1, start_at=NOW, end_at=NOW + timedelta(minutes=3), caller=teacher
            )

    async def test_unknown_lab(self, use_case, uow, teacher):
        uow.lab_repo.get_for_update.return_value = None

        with pytest.raises(NotFoundError):
            await use_case.execute(
                lab_id=9, start_at=NOW, end_at=NOW + timedelta(hours=1), caller=teacher
            )

    async def test_students_cannot_create(self, use_case, uow, student):
        with pytest.raises(ForbiddenError):
            await use_case.execute(
                lab_id=1, start_at=NOW, end_at=NOW + timedelta(hours=1), caller=student
            )
        uow.lab_repo.get_for_update.assert_not_awaited()


@pytest.mark.unit
class TestSetLabLayout:
    @pytest.fixture(autouse=True)
    def frozen_clock(self):
        with patch(
            'src.service.lab_booking.app.command.set_lab_layout_use_case.utc_now',
            return_value=NOW,
        ):
            yield

    @pytest.fixture
    def use_case(self, uow) -> SetLabLayoutUseCase:
        async def update_row_config(*, lab_id, row_config):
            return attrs.evolve(make_lab(lab_id=lab_id), row_config=row_config)

        uow.lab_repo.update_row_config.side_effect = update_row_config
        return SetLabLayoutUseCase(uow=uow)

    async def test_conflict_names_every_orphaned_booking(self, use_case, uow, teacher):
        """
        Given: an upcoming booking on C2 by Ana Lopez
        When: the layout shrinks to rows A and B
        Then: LayoutConflictError naming "Ana Lopez (C2)" and nothing is saved
        """
        # Arrange
        uow.seat_booking_repo.list_by_lab_starting_after.return_value = [
            make_booking(name='A1'),
            make_booking(booking_id=501, user_id='student_2', name='C2'),
        ]
        uow.user_repo.get_many.return_value = {
            'student_2': LabUser(id='student_2', first_name='Ana', last_name='Lopez')
        }
        layout = LabLayout(rows=(RowConfig('A', 6), RowConfig('B', 6)), edge_seat=True)

        # Act
        with pytest.raises(LayoutConflictError) as exc_info:
            await use_case.execute(lab_id=1, layout=layout, caller=teacher)

        # Assert
        assert exc_info.value.affected == ['Ana Lopez (C2)']
        assert 'Ana Lopez (C2)' in exc_info.value.message
        uow.lab_repo.update_row_config.assert_not_awaited()
        assert not uow.committed

    async def test_recounts_upcoming_sessions(self, use_case, uow, teacher):
        """
        Given: one upcoming session with 2 bookings and a stale seat C6
        When: the layout becomes rows A(4) and C(5) without the edge seat
        Then: seats are materialized, C6 deactivated and capacity recounted against 9 seats
        """
        # Arrange
        uow.seat_booking_repo.list_by_lab_starting_after.return_value = [
            make_booking(name='A1'),
            make_booking(booking_id=501, user_id='student_2', name='C2'),
        ]
        uow.seat_repo.list_by_lab.return_value = [
            make_seat(seat_id=100, name='A1'),
            make_seat(seat_id=118, name='C6'),
        ]
        uow.session_repo.recount_capacity.return_value = 1
        layout = LabLayout(rows=(RowConfig('A', 4), RowConfig('C', 5)), edge_seat=False)

        # Act
        lab = await use_case.execute(lab_id=1, layout=layout, caller=teacher)

        # Assert
        assert lab.layout == layout
        assert uow.seat_repo.get_or_create.await_count == 9
        uow.seat_repo.deactivate.assert_awaited_once_with(seat_ids=[118])
        uow.session_repo.recount_capacity.assert_awaited_once_with(
            lab_id=1, after=NOW, total_seats=9
        )
        assert uow.committed

    async def test_exclusive_lab_lock_precedes_scan_and_recount(self, use_case, uow, teacher):
        """
        Given: a layout change
        When: it runs
        Then: the lab row is locked for update before upcoming bookings are read
        and before capacity is recounted
        """
        # Arrange
        order = track_await_order(
            lock=uow.lab_repo.get_for_update,
            scan=uow.seat_booking_repo.list_by_lab_starting_after,
            recount=uow.session_repo.recount_capacity,
        )

        # Act
        await use_case.execute(lab_id=1, layout=LabLayout.default(), caller=teacher)

        # Assert
        assert order == ['lock', 'scan', 'recount']
        uow.session_repo.set_capacity.assert_not_awaited()

    async def test_students_cannot_change_layout(self, use_case, student):
        with pytest.raises(ForbiddenError):
            await use_case.execute(lab_id=1, layout=LabLayout.default(), caller=student)
