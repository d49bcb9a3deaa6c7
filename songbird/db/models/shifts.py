from sqlalchemy import Integer, Date, DateTime, Boolean, String, ForeignKey, Enum as SQLEnum, Index, UniqueConstraint, func
import datetime as dt
from sqlalchemy.orm import Mapped, mapped_column
from enum import Enum
from typing import Optional
from songbird.db.database import Base


class ShiftType(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    OVERNIGHT = "overnight"


class Shifts(Base):
    __tablename__ = "shifts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    shift_type: Mapped[ShiftType] = mapped_column(SQLEnum(ShiftType, name="shift_type_enum", values_callable=lambda e: [m.value for m in e]), nullable=False)
    assigned_to: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("users.id"), nullable=True)
    is_open: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_preliminary: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    notes: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    created_by_user_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("users.id"), nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("date", "shift_type", name="uq_shifts_date_type"),
        Index("ix_shifts_assigned_date", "assigned_to", "date"),
    )
