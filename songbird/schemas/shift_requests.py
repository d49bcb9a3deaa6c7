from pydantic import BaseModel
from datetime import datetime
from typing import Optional
from songbird.db.models.shift_requests import RequestStatus


class ShiftRequestCreate(BaseModel):
    shift_id: int


class ShiftRequestAction(BaseModel):
    admin_note: Optional[str] = None


class ShiftRequestResponse(BaseModel):
    id: int
    shift_id: int
    requester_id: int
    status: RequestStatus
    admin_note: Optional[str]
    actioned_by_user_id: Optional[int]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
