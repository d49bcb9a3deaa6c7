from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class AbsenceCreate(BaseModel):
    shift_id: int
    reason: Optional[str] = None


class AbsenceResponse(BaseModel):
    id: int
    shift_id: int
    user_id: int
    reported_by_user_id: int
    reason: Optional[str]
    reported_at: datetime

    class Config:
        from_attributes = True
