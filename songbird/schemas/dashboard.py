from pydantic import BaseModel
from datetime import date
from typing import List

from songbird.schemas.shifts import ShiftResponse


class DashboardResponse(BaseModel):
    period_start: date
    period_end: date
    my_hours: float
    my_hours_display: str
    my_hours_status: str
    upcoming_shifts: List[ShiftResponse]
    open_shifts: List[ShiftResponse]
    pending_shift_requests: int
    pending_trade_requests: int
    pending_time_off_requests: int
