from typing import Optional

from sqlalchemy import Boolean, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.orm_db_setting import Base


class SeatModel(Base):
    __tablename__ = 'seat'
    __table_args__ = (UniqueConstraint('lab_id', 'name', name='uq_seat_lab_name'),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    lab_id: Mapped[int] = mapped_column(ForeignKey('lab.id'), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(20), nullable=False)
    # null for the edge seat
    row: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    col: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
