from pydantic import BaseModel
from datetime import date
from typing import List


class CapCheckResponse(BaseModel):
    would_exceed: bool
    current_hours: float
    projected_hours: float
    shift_hours: float
    is_exempt: bool


class PeriodDay(BaseModel):
    day: date
    name: str


class WeeklyHoursEntry(BaseModel):
    user_id: int
    full_name: str
    job_title: str
    hours: float
    display: str
    status: str


class WeeklyHoursResponse(BaseModel):
    period_start: date
    period_end: date
    days: List[PeriodDay]
    staff: List[WeeklyHoursEntry]
