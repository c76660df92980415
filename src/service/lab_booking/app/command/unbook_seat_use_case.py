from typing import List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import ForbiddenError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.lab_booking_metrics import metrics
from src.service.lab_booking.app.dto.notification_dto import BookingChange
from src.service.lab_booking.app.interface.i_notification_dispatcher import (
    INotificationDispatcher,
)
from src.service.lab_booking.app.service.booking_notice_builder import build_booking_notices
from src.service.lab_booking.app.service.booking_release import release_seat_bookings
from src.service.lab_booking.app.service.equipment_ledger import EquipmentReservationLedger
from src.service.lab_booking.domain.booking_errors import InvalidSeatError
from src.service.lab_booking.domain.booking_policy import utc_now
from src.service.lab_booking.domain.entity.seat_booking_entity import SeatBooking
from src.service.lab_booking.domain.value_object.caller import Caller
from src.service.lab_booking.domain.value_object.lab_layout import normalize_seat_name


class UnbookSeatUseCase:
    """
    Free a seat in a session.

    Students free their own booking; staff acting as teacher free whatever
    booking occupies the seat. Equipment reservations go back to the session
    offers and the session regains one seat per removed booking.
    """

    def __init__(
        self,
        *,
        uow: AbstractUnitOfWork,
        equipment_ledger: EquipmentReservationLedger,
        notification_dispatcher: INotificationDispatcher,
    ) -> None:
        self.uow = uow
        self.equipment_ledger = equipment_ledger
        self.notification_dispatcher = notification_dispatcher
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work]),
        equipment_ledger: EquipmentReservationLedger = Depends(
            Provide[Container.equipment_ledger]
        ),
        notification_dispatcher: INotificationDispatcher = Depends(
            Provide[Container.notification_dispatcher]
        ),
    ) -> Self:
        return cls(
            uow=uow,
            equipment_ledger=equipment_ledger,
            notification_dispatcher=notification_dispatcher,
        )

    @Logger.io
    async def execute(
        self,
        *,
        session_id: int,
        lab_id: int,
        seat_name: str,
        caller: Caller,
        is_teacher_acting: bool = False,
    ) -> List[SeatBooking]:
        with (
            metrics.track_booking('unbook'),
            self.tracer.start_as_current_span(
                'use_case.unbook_seat',
                attributes={'session.id': session_id, 'seat.name': seat_name},
            ),
        ):
            async with self.uow:
                try:
                    name = normalize_seat_name(seat_name)
                except InvalidSeatError as e:
                    raise NotFoundError('Seat not found') from e
                seat = await self.uow.seat_repo.get_by_name(lab_id=lab_id, name=name)
                if not seat:
                    raise NotFoundError('Seat not found')

                session = await self.uow.session_repo.get_by_id(session_id=session_id)
                if not session or session.lab_id != lab_id:
                    raise NotFoundError('Session not found')
                if not caller.is_staff:
                    session.ensure_open(utc_now())
                if is_teacher_acting and not caller.is_staff:
                    raise ForbiddenError('Only teachers or admins can free other seats')

                bookings = await self.uow.seat_booking_repo.list_matching(
                    session_id=session_id,
                    seat_id=seat.id or 0,
                    name=seat.name,
                    user_id=None if is_teacher_acting else caller.user_id,
                )
                if not bookings:
                    raise NotFoundError('Booking not found')

                lab = await self.uow.lab_repo.get_for_share(lab_id=lab_id)
                notices = await build_booking_notices(
                    self.uow, bookings=bookings, session=session, lab=lab
                )
                await release_seat_bookings(self.uow, self.equipment_ledger, bookings)
                await self.uow.commit()

        Logger.base.info(
            f'🔓 [UNBOOK] {caller.user_id} freed {seat.name} in session {session_id} '
            f'({len(bookings)} bookings removed)'
        )

        for notice in notices:
            await self.notification_dispatcher.send_booking_status_change(
                notice=notice, change=BookingChange.CANCELLED
            )

        return bookings
