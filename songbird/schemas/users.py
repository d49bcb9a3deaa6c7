from pydantic import BaseModel
from datetime import datetime
from typing import Optional
from songbird.db.models.users import UserRole


class UserBase(BaseModel):
    username: str
    full_name: str
    job_title: str = "Caregiver"
    telegram_id: Optional[str] = None


class UserCreate(UserBase):
    password: str
    role: UserRole = UserRole.STAFF


class UserUpdate(BaseModel):
    full_name: Optional[str] = None
    job_title: Optional[str] = None
    telegram_id: Optional[str] = None
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None
    password: Optional[str] = None


class UserResponse(UserBase):
    id: int
    role: UserRole
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ProfileUpdate(BaseModel):
    # job_title drives the cap exemption, so staff can only rename themselves
    full_name: Optional[str] = None


class PasswordChange(BaseModel):
    current_password: str
    new_password: str
