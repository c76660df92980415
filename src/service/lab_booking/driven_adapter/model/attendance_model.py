from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.orm_db_setting import Base


class AttendanceModel(Base):
    __tablename__ = 'attendance'

    user_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    session_id: Mapped[int] = mapped_column(ForeignKey('lab_session.id'), primary_key=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    marked_by: Mapped[str] = mapped_column(String(255), nullable=False)
    marked_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
