from sqlalchemy import String, Integer, DateTime, Boolean, Enum as SQLEnum, func
from datetime import datetime
from enum import Enum
from typing import Optional
from sqlalchemy.orm import Mapped, mapped_column
from songbird.db.database import Base

# placeholder account that stands in for "no one" on open shifts
OPEN_SHIFT_USERNAME = "_open"


class UserRole(str, Enum):
    ADMIN = "admin"
    STAFF = "staff"
    SYSTEM = "system"


class Users(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    username: Mapped[str] = mapped_column(String(100), unique=True, index=True, nullable=False)
    full_name: Mapped[str] = mapped_column(String(200), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[UserRole] = mapped_column(SQLEnum(UserRole, name="user_role_enum", values_callable=lambda e: [m.value for m in e]), nullable=False, default=UserRole.STAFF)
    job_title: Mapped[str] = mapped_column(String(100), nullable=False, default="Caregiver")
    telegram_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    @property
    def is_system(self) -> bool:
        return self.role == UserRole.SYSTEM or self.username == OPEN_SHIFT_USERNAME
