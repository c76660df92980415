from datetime import datetime
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.orm_db_setting import Base


class EquipmentModel(Base):
    __tablename__ = 'equipment'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    lab_id: Mapped[int] = mapped_column(ForeignKey('lab.id'), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    total: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_type: Mapped[str] = mapped_column(String(10), default='UNIT', nullable=False)
    expiration_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class SessionEquipmentModel(Base):
    __tablename__ = 'session_equipment'
    __table_args__ = (
        CheckConstraint(
            'reserved >= 0 AND reserved <= available', name='ck_session_equipment_reserved'
        ),
    )

    session_id: Mapped[int] = mapped_column(ForeignKey('lab_session.id'), primary_key=True)
    equipment_id: Mapped[int] = mapped_column(ForeignKey('equipment.id'), primary_key=True)
    available: Mapped[int] = mapped_column(Integer, nullable=False)
    reserved: Mapped[int] = mapped_column(Integer, default=0, nullable=False)


class EquipmentBookingModel(Base):
    __tablename__ = 'equipment_booking'
    __table_args__ = (CheckConstraint('amount > 0', name='ck_equipment_booking_amount'),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False)
    session_id: Mapped[int] = mapped_column(
        ForeignKey('lab_session.id'), nullable=False, index=True
    )
    equipment_id: Mapped[int] = mapped_column(ForeignKey('equipment.id'), nullable=False)
    seat_booking_id: Mapped[int] = mapped_column(
        ForeignKey('seat_booking.id'), nullable=False, index=True
    )
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    actual_used: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
