from collections import Counter
from typing import Dict, List

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.service.lab_booking.app.service.equipment_ledger import EquipmentReservationLedger
from src.service.lab_booking.domain.entity.equipment_entity import EquipmentBooking
from src.service.lab_booking.domain.entity.seat_booking_entity import SeatBooking


@Logger.io
async def release_seat_bookings(
    uow: AbstractUnitOfWork,
    ledger: EquipmentReservationLedger,
    bookings: List[SeatBooking],
) -> Dict[int, List[EquipmentBooking]]:
    """
    Delete seat bookings the way unbook does: equipment is handed back to the
    session offers first, then the bookings go and each session gets its
    seats back.

    Returns the released equipment reservations keyed by seat booking id.
    """
    booking_ids = [booking.id for booking in bookings if booking.id is not None]
    if not booking_ids:
        return {}

    released = await ledger.release_for_bookings(uow=uow, seat_booking_ids=booking_ids)
    await uow.seat_booking_repo.delete(booking_ids=booking_ids)

    for session_id, count in Counter(booking.session_id for booking in bookings).items():
        await uow.session_repo.increment_capacity(session_id=session_id, amount=count)

    by_booking: Dict[int, List[EquipmentBooking]] = {}
    for equipment_booking in released:
        by_booking.setdefault(equipment_booking.seat_booking_id, []).append(equipment_booking)
    return by_booking


@Logger.io
async def delete_session_cascade(uow: AbstractUnitOfWork, *, session_id: int) -> int:
    """
    Remove a session and everything hanging off it, children first.

    Returns the number of seat bookings that were removed.
    """
    bookings = await uow.seat_booking_repo.list_by_session(session_id=session_id)
    await uow.attendance_repo.delete_by_session(session_id=session_id)
    await uow.equipment_repo.delete_bookings_by_session(session_id=session_id)
    await uow.equipment_repo.delete_offers_by_session(session_id=session_id)
    await uow.seat_booking_repo.delete(
        booking_ids=[booking.id for booking in bookings if booking.id is not None]
    )
    await uow.session_repo.delete(session_id=session_id)
    return len(bookings)
