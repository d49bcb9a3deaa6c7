from typing import Optional
from datetime import datetime
from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, func, String
from sqlalchemy.orm import Mapped, mapped_column

from songbird.db.database import Base
from songbird.db.models.shift_requests import RequestStatus, request_status_column


class TradeRequests(Base):
    __tablename__ = "trade_requests"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    requester_shift_id: Mapped[int] = mapped_column(Integer, ForeignKey("shifts.id"), nullable=False)
    target_shift_id: Mapped[int] = mapped_column(Integer, ForeignKey("shifts.id"), nullable=False)
    requester_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    target_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    # proposing the trade counts as the requester's approval
    requester_approved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    target_approved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    admin_approved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    status: Mapped[RequestStatus] = mapped_column(request_status_column("trade_request_status_enum"), nullable=False, default=RequestStatus.PENDING)
    requester_note: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    target_note: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    admin_note: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    actioned_by_user_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("users.id"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    @property
    def awaiting_admin(self) -> bool:
        return self.status == RequestStatus.PENDING and self.requester_approved and self.target_approved
