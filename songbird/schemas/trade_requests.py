from pydantic import BaseModel
from datetime import datetime
from typing import Optional
from songbird.db.models.shift_requests import RequestStatus


class TradeRequestCreate(BaseModel):
    requester_shift_id: int
    target_shift_id: int
    note: Optional[str] = None


class TradeRequestAction(BaseModel):
    note: Optional[str] = None


class TradeRequestResponse(BaseModel):
    id: int
    requester_shift_id: int
    target_shift_id: int
    requester_id: int
    target_id: int
    requester_approved: bool
    target_approved: bool
    admin_approved: bool
    status: RequestStatus
    requester_note: Optional[str]
    target_note: Optional[str]
    admin_note: Optional[str]
    actioned_by_user_id: Optional[int]
    awaiting_admin: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
