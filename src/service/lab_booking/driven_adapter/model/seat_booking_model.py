from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.orm_db_setting import Base


UQ_SESSION_SEAT = 'uq_seat_booking_session_seat'
UQ_SESSION_USER = 'uq_seat_booking_session_user'


class SeatBookingModel(Base):
    __tablename__ = 'seat_booking'
    __table_args__ = (
        UniqueConstraint('session_id', 'seat_id', name=UQ_SESSION_SEAT),
        UniqueConstraint('session_id', 'user_id', name=UQ_SESSION_USER),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    session_id: Mapped[int] = mapped_column(ForeignKey('lab_session.id'), nullable=False)
    seat_id: Mapped[int] = mapped_column(ForeignKey('seat.id'), nullable=False)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[str] = mapped_column(String(20), default='CONFIRMED', nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
