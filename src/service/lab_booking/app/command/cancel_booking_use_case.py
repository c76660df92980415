from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

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
from src.service.lab_booking.domain.booking_policy import utc_now
from src.service.lab_booking.domain.entity.seat_booking_entity import SeatBooking
from src.service.lab_booking.domain.value_object.caller import Caller


class CancelBookingUseCase:
    """Cancel a booking by id; same effects as freeing its seat."""

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
    async def execute(self, *, booking_id: int, caller: Caller) -> SeatBooking:
        with metrics.track_booking('cancel'):
            async with self.uow:
                booking = await self.uow.seat_booking_repo.get_by_id(booking_id=booking_id)
                if not booking:
                    raise NotFoundError('Booking not found')
                if booking.user_id != caller.user_id and not caller.is_staff:
                    raise ForbiddenError('Only the booking owner can cancel it')

                session = await self.uow.session_repo.get_by_id(session_id=booking.session_id)
                if not session:
                    raise NotFoundError('Session not found')
                if not caller.is_staff:
                    session.ensure_open(utc_now())

                lab = await self.uow.lab_repo.get_for_share(lab_id=session.lab_id)
                notices = await build_booking_notices(
                    self.uow, bookings=[booking], session=session, lab=lab
                )
                await release_seat_bookings(self.uow, self.equipment_ledger, [booking])
                await self.uow.commit()

        Logger.base.info(f'🔓 [CANCEL] Booking {booking_id} cancelled by {caller.user_id}')

        for notice in notices:
            await self.notification_dispatcher.send_booking_status_change(
                notice=notice, change=BookingChange.CANCELLED
            )
        return booking
