"""
Booking engine against the real repositories.

Covers the capacity bookkeeping, duplicate guards, banned-user approval flow
and the equipment ledger inside one transaction per operation.
"""

import asyncio

import pytest

from src.platform.config.di import container
from src.service.lab_booking.app.command.add_lab_equipment_use_case import (
    AddLabEquipmentUseCase,
)
from src.service.lab_booking.app.command.approve_booking_use_case import ApproveBookingUseCase
from src.service.lab_booking.app.command.cancel_booking_use_case import CancelBookingUseCase
from src.service.lab_booking.app.command.set_lab_layout_use_case import SetLabLayoutUseCase
from src.service.lab_booking.app.command.update_session_equipment_use_case import (
    UpdateSessionEquipmentUseCase,
)
from src.service.lab_booking.app.dto.equipment_dto import EquipmentOffer, EquipmentRequest
from src.service.lab_booking.app.query.session_query_use_case import SessionQueryUseCase
from src.service.lab_booking.domain.booking_errors import (
    AlreadyBookedError,
    InsufficientEquipmentError,
    LayoutConflictError,
    SeatTakenError,
    SessionFullError,
)
from src.service.lab_booking.domain.enum.booking_status import BookingStatus
from src.service.lab_booking.domain.value_object.lab_layout import LabLayout, RowConfig
from test.service.lab_booking.integration.helpers import (
    book_seat_use_case,
    get_session,
    unbook_seat_use_case,
)


@pytest.mark.integration
class TestSeatBookingFlow:
    async def test_book_guard_and_unbook(
        self, upcoming_session, physics_lab, student, another_student
    ):
        """
        Given: the Physics lab (19 seats) with a session tomorrow
        When: a student books B3, tries a second seat, another student tries B3,
        and the first student unbooks
        Then: capacity goes 19 -> 18 -> 19 and both duplicates are refused
        """
        # Arrange
        session_id, lab_id = upcoming_session.id, physics_lab.id
        assert upcoming_session.capacity == 19

        # Act
        booking = await book_seat_use_case().execute(
            session_id=session_id, lab_id=lab_id, seat_name='b3', caller=student
        )

        # Assert
        assert booking.name == 'B3'
        assert booking.status == BookingStatus.CONFIRMED
        assert (await get_session(session_id)).capacity == 18

        with pytest.raises(AlreadyBookedError):
            await book_seat_use_case().execute(
                session_id=session_id, lab_id=lab_id, seat_name='A1', caller=student
            )
        with pytest.raises(SeatTakenError):
            await book_seat_use_case().execute(
                session_id=session_id, lab_id=lab_id, seat_name='B3', caller=another_student
            )
        assert (await get_session(session_id)).capacity == 18

        await unbook_seat_use_case().execute(
            session_id=session_id, lab_id=lab_id, seat_name='B3', caller=student
        )
        assert (await get_session(session_id)).capacity == 19
        occupied = await SessionQueryUseCase(uow=container.unit_of_work()).list_occupied_seats(
            lab_id=lab_id, session_id=session_id
        )
        assert occupied == []

    async def test_banned_booking_waits_for_approval(
        self, upcoming_session, physics_lab, banned_student, teacher, sent_emails
    ):
        """
        Given: a student with a stored ban
        When: they book the edge seat and a teacher approves it
        Then: the seat is held while pending, the creator is asked, and it ends CONFIRMED
        """
        # Act
        booking = await book_seat_use_case().execute(
            session_id=upcoming_session.id,
            lab_id=physics_lab.id,
            seat_name='edge',
            caller=banned_student,
        )

        # Assert
        assert booking.status == BookingStatus.PENDING_APPROVAL
        assert booking.name == 'Edge'
        assert (await get_session(upcoming_session.id)).capacity == 18
        assert {email['to'] for email in sent_emails} == {'ben@lab.local', 'tess@lab.local'}

        approved = await ApproveBookingUseCase(
            uow=container.unit_of_work(),
            notification_dispatcher=container.notification_dispatcher(),
        ).execute(booking_id=booking.id, caller=teacher)
        assert approved.status == BookingStatus.CONFIRMED

    async def test_cancel_by_booking_id_restores_capacity(
        self, upcoming_session, physics_lab, student
    ):
        booking = await book_seat_use_case().execute(
            session_id=upcoming_session.id, lab_id=physics_lab.id, seat_name='C1', caller=student
        )

        await CancelBookingUseCase(
            uow=container.unit_of_work(),
            equipment_ledger=container.equipment_ledger(),
            notification_dispatcher=container.notification_dispatcher(),
        ).execute(booking_id=booking.id, caller=student)

        assert (await get_session(upcoming_session.id)).capacity == 19

    async def test_last_seat_goes_to_exactly_one_caller(
        self, upcoming_session, physics_lab, student, another_student
    ):
        """
        Given: a session with a single seat of capacity left
        When: two students book different seats at the same time
        Then: exactly one succeeds and the other gets SessionFullError
        """
        # Arrange
        uow = container.unit_of_work()
        async with uow:
            await uow.session_repo.set_capacity(session_id=upcoming_session.id, capacity=1)
            await uow.commit()

        # Act
        results = await asyncio.gather(
            book_seat_use_case().execute(
                session_id=upcoming_session.id,
                lab_id=physics_lab.id,
                seat_name='A1',
                caller=student,
            ),
            book_seat_use_case().execute(
                session_id=upcoming_session.id,
                lab_id=physics_lab.id,
                seat_name='A2',
                caller=another_student,
            ),
            return_exceptions=True,
        )

        # Assert
        succeeded = [r for r in results if not isinstance(r, Exception)]
        failed = [r for r in results if isinstance(r, Exception)]
        assert len(succeeded) == 1
        assert len(failed) == 1 and isinstance(failed[0], SessionFullError)
        assert (await get_session(upcoming_session.id)).capacity == 0


@pytest.mark.integration
class TestEquipmentReservations:
    @pytest.fixture
    async def microscopes(self, upcoming_session, physics_lab, teacher):
        equipment = await AddLabEquipmentUseCase(uow=container.unit_of_work()).execute(
            lab_id=physics_lab.id, name='Microscope', total=8, caller=teacher
        )
        await UpdateSessionEquipmentUseCase(
            uow=container.unit_of_work(), equipment_ledger=container.equipment_ledger()
        ).execute(
            session_id=upcoming_session.id,
            caller=teacher,
            additions=[EquipmentOffer(equipment_id=equipment.id, available=5)],
        )
        return equipment

    async def test_over_request_rolls_back_the_seat(
        self, microscopes, upcoming_session, physics_lab, student, another_student
    ):
        """
        Given: 5 microscopes offered, a student reserves 3 with their seat
        When: another student asks for 3, then for 2
        Then: the first attempt fails without taking a seat, the second leaves 0 remaining
        """
        # Arrange
        await book_seat_use_case().execute(
            session_id=upcoming_session.id,
            lab_id=physics_lab.id,
            seat_name='A1',
            caller=student,
            equipment=[EquipmentRequest(equipment_id=microscopes.id, amount=3)],
        )

        # Act & Assert
        with pytest.raises(InsufficientEquipmentError):
            await book_seat_use_case().execute(
                session_id=upcoming_session.id,
                lab_id=physics_lab.id,
                seat_name='A2',
                caller=another_student,
                equipment=[EquipmentRequest(equipment_id=microscopes.id, amount=3)],
            )
        assert (await get_session(upcoming_session.id)).capacity == 18

        await book_seat_use_case().execute(
            session_id=upcoming_session.id,
            lab_id=physics_lab.id,
            seat_name='A2',
            caller=another_student,
            equipment=[EquipmentRequest(equipment_id=microscopes.id, amount=2)],
        )
        views = await SessionQueryUseCase(uow=container.unit_of_work()).get_session_equipment(
            session_id=upcoming_session.id
        )
        assert [(v.available, v.reserved) for v in views] == [(5, 5)]

    async def test_unbook_hands_equipment_back(
        self, microscopes, upcoming_session, physics_lab, student
    ):
        await book_seat_use_case().execute(
            session_id=upcoming_session.id,
            lab_id=physics_lab.id,
            seat_name='A1',
            caller=student,
            equipment=[EquipmentRequest(equipment_id=microscopes.id, amount=3)],
        )

        await unbook_seat_use_case().execute(
            session_id=upcoming_session.id, lab_id=physics_lab.id, seat_name='A1', caller=student
        )

        views = await SessionQueryUseCase(uow=container.unit_of_work()).get_session_equipment(
            session_id=upcoming_session.id
        )
        assert views[0].reserved == 0


@pytest.mark.integration
class TestLayoutChanges:
    async def test_shrinking_layout_blocked_by_booking(
        self, upcoming_session, physics_lab, another_student, teacher
    ):
        """
        Given: Ana Lopez holds C2 in an upcoming session
        When: the layout is reduced to rows A and B
        Then: the change is refused naming her booking; after she leaves it succeeds
        and the session capacity follows the new seat count
        """
        # Arrange
        await book_seat_use_case().execute(
            session_id=upcoming_session.id,
            lab_id=physics_lab.id,
            seat_name='C2',
            caller=another_student,
        )
        smaller = LabLayout(rows=(RowConfig('A', 6), RowConfig('B', 6)), edge_seat=True)

        # Act & Assert
        with pytest.raises(LayoutConflictError) as exc_info:
            await SetLabLayoutUseCase(uow=container.unit_of_work()).execute(
                lab_id=physics_lab.id, layout=smaller, caller=teacher
            )
        assert exc_info.value.affected == ['Ana Lopez (C2)']

        await unbook_seat_use_case().execute(
            session_id=upcoming_session.id,
            lab_id=physics_lab.id,
            seat_name='C2',
            caller=another_student,
        )
        lab = await SetLabLayoutUseCase(uow=container.unit_of_work()).execute(
            lab_id=physics_lab.id, layout=smaller, caller=teacher
        )
        assert lab.layout.total_seats == 13
        assert (await get_session(upcoming_session.id)).capacity == 13

    async def test_layout_recounts_capacity_from_bookings(
        self, upcoming_session, physics_lab, student, another_student, teacher
    ):
        """
        Given: two bookings in an upcoming session whose stored capacity has drifted to 3
        When: the layout changes to rows A and B with the edge seat (13 seats)
        Then: capacity is recomputed from the bookings held at that moment: 13 - 2
        """
        # Arrange
        for seat_name, caller in (('A1', student), ('B2', another_student)):
            await book_seat_use_case().execute(
                session_id=upcoming_session.id,
                lab_id=physics_lab.id,
                seat_name=seat_name,
                caller=caller,
            )
        uow = container.unit_of_work()
        async with uow:
            await uow.session_repo.set_capacity(session_id=upcoming_session.id, capacity=3)
            await uow.commit()
        smaller = LabLayout(rows=(RowConfig('A', 6), RowConfig('B', 6)), edge_seat=True)

        # Act
        await SetLabLayoutUseCase(uow=container.unit_of_work()).execute(
            lab_id=physics_lab.id, layout=smaller, caller=teacher
        )

        # Assert
        assert (await get_session(upcoming_session.id)).capacity == 11
