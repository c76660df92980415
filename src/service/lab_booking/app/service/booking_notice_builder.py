from typing import Dict, List, Optional

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.service.lab_booking.app.dto.notification_dto import BookingNotice, EquipmentLine
from src.service.lab_booking.domain.entity.equipment_entity import EquipmentBooking
from src.service.lab_booking.domain.entity.lab_entity import Lab
from src.service.lab_booking.domain.entity.lab_session_entity import LabSession
from src.service.lab_booking.domain.entity.seat_booking_entity import SeatBooking


async def equipment_lines(
    uow: AbstractUnitOfWork, equipment_bookings: List[EquipmentBooking]
) -> tuple[EquipmentLine, ...]:
    lines = []
    for equipment_booking in equipment_bookings:
        equipment = await uow.equipment_repo.get_by_id(
            equipment_id=equipment_booking.equipment_id
        )
        lines.append(
            EquipmentLine(
                name=equipment.name if equipment else f'#{equipment_booking.equipment_id}',
                amount=equipment_booking.amount,
                unit_type=equipment.unit_type.value if equipment else 'UNIT',
            )
        )
    return tuple(lines)


async def build_booking_notices(
    uow: AbstractUnitOfWork,
    *,
    bookings: List[SeatBooking],
    session: LabSession,
    lab: Lab,
    equipment_by_booking: Optional[Dict[int, List[EquipmentBooking]]] = None,
) -> List[BookingNotice]:
    """
    Snapshot what the e-mails need while the transaction is still open.

    ``equipment_by_booking`` overrides the stored reservations (used when they
    are about to be deleted).
    """
    if not bookings:
        return []

    if equipment_by_booking is None:
        equipment_by_booking = {}
        for equipment_booking in await uow.equipment_repo.list_bookings_by_seat_bookings(
            seat_booking_ids=[booking.id for booking in bookings if booking.id is not None]
        ):
            equipment_by_booking.setdefault(equipment_booking.seat_booking_id, []).append(
                equipment_booking
            )

    users = await uow.user_repo.get_many(
        user_ids=[booking.user_id for booking in bookings] + [session.created_by_id]
    )
    teacher = users.get(session.created_by_id)

    notices = []
    for booking in bookings:
        student = users.get(booking.user_id)
        notices.append(
            BookingNotice(
                booking_id=booking.id or 0,
                student_email=student.email if student and student.email else None,
                student_name=student.display_name if student else booking.user_id,
                lab_name=lab.name,
                seat_name=booking.name,
                start_at=session.start_at,
                end_at=session.end_at,
                status=booking.status,
                notes=booking.notes,
                equipment=await equipment_lines(
                    uow, equipment_by_booking.get(booking.id or 0, [])
                ),
                teacher_email=teacher.email if teacher and teacher.email else None,
                teacher_name=teacher.display_name if teacher else None,
            )
        )
    return notices
