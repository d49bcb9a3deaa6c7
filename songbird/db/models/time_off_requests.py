from typing import Optional
from enum import Enum
from datetime import date, datetime
from sqlalchemy import Date, DateTime, Enum as SQLEnum, ForeignKey, Integer, func, String
from sqlalchemy.orm import Mapped, mapped_column

from songbird.db.database import Base
from songbird.db.models.shift_requests import RequestStatus, request_status_column


class TimeOffType(str, Enum):
    ASSIGNED_SHIFT = "assigned_shift"
    FUTURE_VACATION = "future_vacation"


class TimeOffRequests(Base):
    __tablename__ = "time_off_requests"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    requester_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    request_type: Mapped[TimeOffType] = mapped_column(SQLEnum(TimeOffType, name="time_off_type_enum", values_callable=lambda e: [m.value for m in e]), nullable=False)
    shift_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("shifts.id"), nullable=True)
    start_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    reason: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    status: Mapped[RequestStatus] = mapped_column(request_status_column("time_off_status_enum"), nullable=False, default=RequestStatus.PENDING)
    admin_note: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    actioned_by_user_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("users.id"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
