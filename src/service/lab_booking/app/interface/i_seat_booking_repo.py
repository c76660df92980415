from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from src.service.lab_booking.domain.entity.seat_booking_entity import SeatBooking
from src.service.lab_booking.domain.enum.booking_status import BookingStatus


class ISeatBookingRepo(ABC):
    @abstractmethod
    async def get_by_id(self, *, booking_id: int) -> Optional[SeatBooking]:
        pass

    @abstractmethod
    async def find_by_session_and_user(
        self, *, session_id: int, user_id: str
    ) -> Optional[SeatBooking]:
        pass

    @abstractmethod
    async def find_by_session_and_seat(
        self, *, session_id: int, seat_id: int
    ) -> Optional[SeatBooking]:
        pass

    @abstractmethod
    async def create(self, *, booking: SeatBooking) -> SeatBooking:
        """
        Insert and flush the booking.

        Raises:
            AlreadyBookedError: (session_id, user_id) uniqueness violated
            SeatTakenError: (session_id, seat_id) uniqueness violated
        """
        pass

    @abstractmethod
    async def list_matching(
        self, *, session_id: int, seat_id: int, name: str, user_id: Optional[str] = None
    ) -> List[SeatBooking]:
        pass

    @abstractmethod
    async def move_to_seat(self, *, booking_id: int, seat_id: int, name: str) -> SeatBooking:
        """
        Raises:
            SeatTakenError: target seat taken by a concurrent booking
        """
        pass

    @abstractmethod
    async def update_status(self, *, booking_id: int, status: BookingStatus) -> SeatBooking:
        pass

    @abstractmethod
    async def update_notes(self, *, booking_id: int, notes: Optional[str]) -> SeatBooking:
        pass

    @abstractmethod
    async def delete(self, *, booking_ids: List[int]) -> None:
        pass

    @abstractmethod
    async def list_by_session(
        self, *, session_id: int, status: Optional[BookingStatus] = None
    ) -> List[SeatBooking]:
        pass

    @abstractmethod
    async def list_by_user(self, *, user_id: str) -> List[SeatBooking]:
        pass

    @abstractmethod
    async def list_pending(self) -> List[SeatBooking]:
        pass

    @abstractmethod
    async def list_by_lab_starting_after(
        self, *, lab_id: int, after: datetime
    ) -> List[SeatBooking]:
        """Bookings in sessions of the lab whose start is after ``after``"""
        pass
