from typing import Iterable, List

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import DomainError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.lab_booking.app.dto.equipment_dto import EquipmentOffer, EquipmentRequest
from src.service.lab_booking.domain.booking_errors import ReservationsExistError
from src.service.lab_booking.domain.entity.equipment_entity import (
    EquipmentBooking,
    SessionEquipment,
)
from src.service.lab_booking.domain.entity.seat_booking_entity import SeatBooking


class EquipmentReservationLedger:
    """
    Keeps ``SessionEquipment.reserved`` equal to the sum of the session's
    EquipmentBooking amounts. Every method runs inside the caller's unit of work.
    """

    @Logger.io
    async def check_and_reserve(
        self, *, uow: AbstractUnitOfWork, session_id: int, equipment_id: int, amount: int
    ) -> SessionEquipment:
        """
        Raises:
            DomainError: amount is not positive
            NotFoundError: the equipment is not offered in this session
            InsufficientEquipmentError: remaining amount is below the request
        """
        if amount <= 0:
            raise DomainError('Equipment amount must be positive')

        offer = await uow.equipment_repo.get_offer(
            session_id=session_id, equipment_id=equipment_id, for_update=True
        )
        if offer is None:
            raise NotFoundError(f'Equipment {equipment_id} is not offered in this session')

        equipment = await uow.equipment_repo.get_by_id(equipment_id=equipment_id)
        equipment_name = equipment.name if equipment else f'equipment {equipment_id}'
        return await uow.equipment_repo.save_offer(
            offer=offer.reserve(amount, equipment_name=equipment_name)
        )

    @Logger.io
    async def release(
        self, *, uow: AbstractUnitOfWork, session_id: int, equipment_id: int, amount: int
    ) -> None:
        offer = await uow.equipment_repo.get_offer(
            session_id=session_id, equipment_id=equipment_id, for_update=True
        )
        if offer is None:
            Logger.base.warning(
                f'⚠️ [EQUIPMENT] No offer for equipment {equipment_id} in session {session_id}, '
                'nothing to release'
            )
            return
        await uow.equipment_repo.save_offer(offer=offer.release(amount))

    @Logger.io
    async def reserve_for_booking(
        self,
        *,
        uow: AbstractUnitOfWork,
        booking: SeatBooking,
        requests: Iterable[EquipmentRequest],
    ) -> List[EquipmentBooking]:
        reserved: List[EquipmentBooking] = []
        for request in requests:
            await self.check_and_reserve(
                uow=uow,
                session_id=booking.session_id,
                equipment_id=request.equipment_id,
                amount=request.amount,
            )
            reserved.append(
                await uow.equipment_repo.create_booking(
                    booking=EquipmentBooking(
                        user_id=booking.user_id,
                        session_id=booking.session_id,
                        equipment_id=request.equipment_id,
                        seat_booking_id=booking.id or 0,
                        amount=request.amount,
                    )
                )
            )
        return reserved

    @Logger.io
    async def release_for_bookings(
        self, *, uow: AbstractUnitOfWork, seat_booking_ids: List[int]
    ) -> List[EquipmentBooking]:
        """Give back every reservation attached to the seat bookings and delete them"""
        if not seat_booking_ids:
            return []
        equipment_bookings = await uow.equipment_repo.list_bookings_by_seat_bookings(
            seat_booking_ids=seat_booking_ids
        )
        for equipment_booking in equipment_bookings:
            await self.release(
                uow=uow,
                session_id=equipment_booking.session_id,
                equipment_id=equipment_booking.equipment_id,
                amount=equipment_booking.amount,
            )
        await uow.equipment_repo.delete_bookings_by_seat_bookings(
            seat_booking_ids=seat_booking_ids
        )
        return equipment_bookings

    @Logger.io
    async def update_session_equipment(
        self,
        *,
        uow: AbstractUnitOfWork,
        session_id: int,
        lab_id: int,
        deletions: Iterable[int],
        additions: Iterable[EquipmentOffer],
        updates: Iterable[EquipmentOffer],
    ) -> List[SessionEquipment]:
        """
        Apply staff edits to what a session offers.

        Additions and updates are both upserts; an addition for an item already
        offered just changes its amount.

        Raises:
            ReservationsExistError: deleting an offer that still has reservations
            BelowReservedError: lowering availability under the reserved amount
            ExceedsInventoryError: offering more than the lab owns
            NotFoundError: unknown equipment or offer
        """
        for equipment_id in deletions:
            offer = await uow.equipment_repo.get_offer(
                session_id=session_id, equipment_id=equipment_id, for_update=True
            )
            if offer is None:
                raise NotFoundError(f'Equipment {equipment_id} is not offered in this session')
            if offer.reserved > 0:
                raise ReservationsExistError(
                    f'Cannot remove equipment {equipment_id}: {offer.reserved} already reserved'
                )
            await uow.equipment_repo.delete_offer(
                session_id=session_id, equipment_id=equipment_id
            )

        for change in [*additions, *updates]:
            equipment = await uow.equipment_repo.get_by_id(equipment_id=change.equipment_id)
            if equipment is None or equipment.lab_id != lab_id:
                raise NotFoundError(f'Equipment {change.equipment_id} not found in this lab')
            offer = await uow.equipment_repo.get_offer(
                session_id=session_id, equipment_id=change.equipment_id, for_update=True
            )
            if offer is None:
                offer = SessionEquipment.offer(
                    session_id=session_id, equipment=equipment, available=change.available
                )
            else:
                offer = offer.with_available(change.available, equipment=equipment)
            await uow.equipment_repo.save_offer(offer=offer)

        return await uow.equipment_repo.list_offers_by_session(session_id=session_id)
