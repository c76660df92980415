from typing import Optional, Self, Sequence

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import ForbiddenError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.lab_booking_metrics import metrics
from src.service.lab_booking.app.dto.equipment_dto import EquipmentRequest
from src.service.lab_booking.app.service.equipment_ledger import EquipmentReservationLedger
from src.service.lab_booking.domain.booking_policy import utc_now
from src.service.lab_booking.domain.entity.seat_booking_entity import SeatBooking
from src.service.lab_booking.domain.value_object.caller import Caller


class UpdateBookingDetailsUseCase:
    """Replace a booking's notes and equipment reservations in one go."""

    def __init__(
        self, *, uow: AbstractUnitOfWork, equipment_ledger: EquipmentReservationLedger
    ) -> None:
        self.uow = uow
        self.equipment_ledger = equipment_ledger

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work]),
        equipment_ledger: EquipmentReservationLedger = Depends(
            Provide[Container.equipment_ledger]
        ),
    ) -> Self:
        return cls(uow=uow, equipment_ledger=equipment_ledger)

    @Logger.io
    async def execute(
        self,
        *,
        booking_id: int,
        caller: Caller,
        notes: Optional[str],
        equipment: Sequence[EquipmentRequest],
    ) -> SeatBooking:
        with metrics.track_booking('update_details'):
            async with self.uow:
                booking = await self.uow.seat_booking_repo.get_by_id(booking_id=booking_id)
                if not booking:
                    raise NotFoundError('Booking not found')
                if booking.user_id != caller.user_id:
                    raise ForbiddenError('Only the booking owner can edit it')

                session = await self.uow.session_repo.get_by_id(session_id=booking.session_id)
                if not session:
                    raise NotFoundError('Session not found')
                if not caller.is_staff:
                    session.ensure_open(utc_now())

                # give everything back first so the new lines can reuse it
                await self.equipment_ledger.release_for_bookings(
                    uow=self.uow, seat_booking_ids=[booking_id]
                )
                await self.equipment_ledger.reserve_for_booking(
                    uow=self.uow, booking=booking, requests=equipment
                )
                updated = await self.uow.seat_booking_repo.update_notes(
                    booking_id=booking_id,
                    notes=notes.strip() if notes and notes.strip() else None,
                )
                await self.uow.commit()

        Logger.base.info(
            f'📝 [DETAILS] Booking {booking_id} now has {len(equipment)} equipment lines'
        )
        return updated
