from sqlalchemy import Integer, DateTime, ForeignKey, String, func
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from songbird.db.database import Base


class NotificationLog(Base):
    __tablename__ = "notifications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    message: Mapped[str] = mapped_column(String, nullable=False)
    sent_via: Mapped[str] = mapped_column(String(20), nullable=False, default="telegram")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
