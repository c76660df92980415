from typing import Optional, Self, Sequence

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.lab_booking_metrics import metrics
from src.service.lab_booking.app.dto.equipment_dto import EquipmentRequest
from src.service.lab_booking.app.interface.i_notification_dispatcher import (
    INotificationDispatcher,
)
from src.service.lab_booking.app.service.booking_notice_builder import build_booking_notices
from src.service.lab_booking.app.service.equipment_ledger import EquipmentReservationLedger
from src.service.lab_booking.app.service.seat_identity_resolver import SeatIdentityResolver
from src.service.lab_booking.domain.booking_errors import (
    AlreadyBookedError,
    SeatTakenError,
    SessionFullError,
)
from src.service.lab_booking.domain.booking_policy import utc_now
from src.service.lab_booking.domain.entity.seat_booking_entity import SeatBooking
from src.service.lab_booking.domain.value_object.caller import Caller


class BookSeatUseCase:
    """
    Book one seat (optionally with equipment) in a session.

    Flow, all in one transaction:
    1. Validate the seat label against the lab layout
    2. Load the session, enforce the lockout window (no staff exemption)
    3. Get-or-create the Seat, reject a second booking or a taken seat
    4. Compare-and-set decrement of the session capacity
    5. Insert the booking (PENDING_APPROVAL for banned callers)
    6. Reserve each requested equipment line
    After commit: confirmation e-mail, plus an approval request to the
    session creator when the booking is pending.
    """

    def __init__(
        self,
        *,
        uow: AbstractUnitOfWork,
        seat_identity_resolver: SeatIdentityResolver,
        equipment_ledger: EquipmentReservationLedger,
        notification_dispatcher: INotificationDispatcher,
    ) -> None:
        self.uow = uow
        self.seat_identity_resolver = seat_identity_resolver
        self.equipment_ledger = equipment_ledger
        self.notification_dispatcher = notification_dispatcher
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work]),
        seat_identity_resolver: SeatIdentityResolver = Depends(
            Provide[Container.seat_identity_resolver]
        ),
        equipment_ledger: EquipmentReservationLedger = Depends(
            Provide[Container.equipment_ledger]
        ),
        notification_dispatcher: INotificationDispatcher = Depends(
            Provide[Container.notification_dispatcher]
        ),
    ) -> Self:
        return cls(
            uow=uow,
            seat_identity_resolver=seat_identity_resolver,
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
        notes: Optional[str] = None,
        equipment: Sequence[EquipmentRequest] = (),
    ) -> SeatBooking:
        """
        Raises:
            NotFoundError: unknown lab, session not in the lab, or equipment not offered
            InvalidSeatError: seat label not in the lab layout
            LockedOutError: less than the lockout window before start
            AlreadyBookedError: caller already holds a seat in the session
            SeatTakenError: someone else holds the seat
            SessionFullError: no capacity left
            InsufficientEquipmentError: not enough of a requested item left
        """
        with (
            metrics.track_booking('book'),
            self.tracer.start_as_current_span(
                'use_case.book_seat',
                attributes={'session.id': session_id, 'seat.name': seat_name},
            ),
        ):
            async with self.uow:
                lab = await self.uow.lab_repo.get_for_share(lab_id=lab_id)
                if not lab:
                    raise NotFoundError('Lab not found')
                position = self.seat_identity_resolver.locate(lab=lab, seat_name=seat_name)

                session = await self.uow.session_repo.get_by_id(session_id=session_id)
                if not session or session.lab_id != lab_id:
                    raise NotFoundError('Session not found')
                session.ensure_open(utc_now())

                seat = await self.seat_identity_resolver.resolve(
                    uow=self.uow, lab=lab, seat_name=position.name
                )

                if await self.uow.seat_booking_repo.find_by_session_and_user(
                    session_id=session_id, user_id=caller.user_id
                ):
                    raise AlreadyBookedError()
                if await self.uow.seat_booking_repo.find_by_session_and_seat(
                    session_id=session_id, seat_id=seat.id or 0
                ):
                    raise SeatTakenError(seat.name)

                if not await self.uow.session_repo.try_decrement_capacity(session_id=session_id):
                    raise SessionFullError()

                booking = await self.uow.seat_booking_repo.create(
                    booking=SeatBooking.create(
                        session_id=session_id,
                        seat_id=seat.id or 0,
                        user_id=caller.user_id,
                        name=seat.name,
                        is_banned=caller.is_banned,
                        notes=notes,
                    )
                )
                reserved = await self.equipment_ledger.reserve_for_booking(
                    uow=self.uow, booking=booking, requests=equipment
                )

                notices = await build_booking_notices(
                    self.uow,
                    bookings=[booking],
                    session=session,
                    lab=lab,
                    equipment_by_booking={booking.id or 0: reserved},
                )
                await self.uow.commit()

        Logger.base.info(
            f'💺 [BOOK] {caller.user_id} booked {booking.name} in session {session_id} '
            f'({booking.status.value}, {len(reserved)} equipment lines)'
        )

        for notice in notices:
            await self.notification_dispatcher.send_booking_confirmation(notice=notice)
            await self.notification_dispatcher.send_teacher_request(notice=notice)

        return booking
