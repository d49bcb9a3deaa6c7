from typing import Optional
from enum import Enum
from datetime import datetime
from sqlalchemy import DateTime, Enum as SQLEnum, ForeignKey, Integer, func, String
from sqlalchemy.orm import Mapped, mapped_column

from songbird.db.database import Base


class RequestStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"


def request_status_column(name: str):
    return SQLEnum(RequestStatus, name=name, values_callable=lambda e: [m.value for m in e])


class ShiftRequests(Base):
    __tablename__ = "shift_requests"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    shift_id: Mapped[int] = mapped_column(Integer, ForeignKey("shifts.id"), nullable=False, index=True)
    requester_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    status: Mapped[RequestStatus] = mapped_column(request_status_column("shift_request_status_enum"), nullable=False, default=RequestStatus.PENDING)
    admin_note: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    actioned_by_user_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("users.id"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
