from pydantic import BaseModel
from datetime import date, datetime
from typing import Optional
from songbird.db.models.shift_requests import RequestStatus
from songbird.db.models.time_off_requests import TimeOffType


class TimeOffRequestCreate(BaseModel):
    request_type: TimeOffType
    shift_id: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    reason: Optional[str] = None


class TimeOffRequestAction(BaseModel):
    admin_note: Optional[str] = None


class TimeOffRequestResponse(BaseModel):
    id: int
    requester_id: int
    request_type: TimeOffType
    shift_id: Optional[int]
    start_date: Optional[date]
    end_date: Optional[date]
    reason: Optional[str]
    status: RequestStatus
    admin_note: Optional[str]
    actioned_by_user_id: Optional[int]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
