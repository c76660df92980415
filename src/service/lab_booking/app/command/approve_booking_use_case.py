from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.lab_booking_metrics import metrics
from src.service.lab_booking.app.dto.notification_dto import BookingChange
from src.service.lab_booking.app.interface.i_notification_dispatcher import (
    INotificationDispatcher,
)
from src.service.lab_booking.app.service.booking_notice_builder import build_booking_notices
from src.service.lab_booking.domain.entity.seat_booking_entity import SeatBooking
from src.service.lab_booking.domain.value_object.caller import Caller


class ApproveBookingUseCase:
    def __init__(
        self, *, uow: AbstractUnitOfWork, notification_dispatcher: INotificationDispatcher
    ) -> None:
        self.uow = uow
        self.notification_dispatcher = notification_dispatcher

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work]),
        notification_dispatcher: INotificationDispatcher = Depends(
            Provide[Container.notification_dispatcher]
        ),
    ) -> Self:
        return cls(uow=uow, notification_dispatcher=notification_dispatcher)

    @Logger.io
    async def execute(self, *, booking_id: int, caller: Caller) -> SeatBooking:
        caller.ensure_staff('approve bookings')

        with metrics.track_booking('approve'):
            async with self.uow:
                booking = await self.uow.seat_booking_repo.get_by_id(booking_id=booking_id)
                if not booking:
                    raise NotFoundError('Booking not found')
                approved = booking.approve()

                updated = await self.uow.seat_booking_repo.update_status(
                    booking_id=booking_id, status=approved.status
                )
                session = await self.uow.session_repo.get_by_id(session_id=booking.session_id)
                lab = await self.uow.lab_repo.get_by_id(lab_id=session.lab_id) if session else None
                notices = (
                    await build_booking_notices(
                        self.uow, bookings=[updated], session=session, lab=lab
                    )
                    if session and lab
                    else []
                )
                await self.uow.commit()

        Logger.base.info(f'✅ [APPROVE] Booking {booking_id} approved by {caller.user_id}')

        for notice in notices:
            await self.notification_dispatcher.send_booking_status_change(
                notice=notice, change=BookingChange.APPROVED
            )
        return updated
