from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import List, Optional
from songbird.db.models.shifts import ShiftType


class ShiftBase(BaseModel):
    date: date
    shift_type: ShiftType
    assigned_to: Optional[int] = None
    is_open: bool = False
    is_preliminary: bool = False
    notes: Optional[str] = None


class ShiftCreate(ShiftBase):
    pass


class ShiftUpdate(BaseModel):
    assigned_to: Optional[int] = None
    is_open: Optional[bool] = None
    is_preliminary: Optional[bool] = None
    notes: Optional[str] = None


class ShiftResponse(ShiftBase):
    id: int
    created_by_user_id: Optional[int]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ShiftWithHours(ShiftResponse):
    assignee_name: Optional[str] = None
    # assignee's pay-period total up to and including this shift
    running_hours: Optional[float] = None


class BulkShiftCreate(BaseModel):
    shifts: List[ShiftCreate] = Field(default_factory=list)


class BulkSkipped(BaseModel):
    index: int
    reason: str


class BulkShiftResponse(BaseModel):
    created: int
    skipped: List[BulkSkipped]
    shifts: List[ShiftResponse]
