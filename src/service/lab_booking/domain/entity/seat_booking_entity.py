from datetime import datetime
from typing import Optional

import attrs

from src.platform.exception.exceptions import DomainError
from src.service.lab_booking.domain.enum.booking_status import BookingStatus


@attrs.define
class SeatBooking:
    session_id: int
    seat_id: int
    user_id: str
    # seat label, kept alongside seat_id for layout checks and display
    name: str
    status: BookingStatus = BookingStatus.CONFIRMED
    notes: Optional[str] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        *,
        session_id: int,
        seat_id: int,
        user_id: str,
        name: str,
        is_banned: bool,
        notes: Optional[str] = None,
    ) -> 'SeatBooking':
        # banned users still take the seat, staff decide afterwards
        status = BookingStatus.PENDING_APPROVAL if is_banned else BookingStatus.CONFIRMED
        return cls(
            session_id=session_id,
            seat_id=seat_id,
            user_id=user_id,
            name=name,
            status=status,
            notes=notes.strip() if notes and notes.strip() else None,
        )

    @property
    def is_pending(self) -> bool:
        return self.status == BookingStatus.PENDING_APPROVAL

    def approve(self) -> 'SeatBooking':
        if not self.is_pending:
            raise DomainError('Only bookings pending approval can be approved')
        return attrs.evolve(self, status=BookingStatus.CONFIRMED)

    def ensure_rejectable(self) -> None:
        if not self.is_pending:
            raise DomainError('Only bookings pending approval can be rejected')
