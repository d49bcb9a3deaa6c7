"""
Internal data types for hours accounting.
decoupled from SQLAlchemy models so the calculations stay pure.
"""

from dataclasses import dataclass, asdict
from datetime import date
from typing import Optional

from songbird.db.models.shifts import ShiftType


@dataclass(frozen=True)
class ShiftDef:
    """Fixed template for one of the three daily shifts."""
    label: str
    time_range: str
    start_minute: int  # minutes after midnight
    end_minute: int  # may run past 1440 for shifts ending the next day
    hours: float


@dataclass
class ShiftRecord:
    id: int
    date: date
    shift_type: ShiftType
    assigned_to: Optional[int] = None
    is_open: bool = False
    is_preliminary: bool = False


@dataclass
class StaffRecord:
    id: int
    full_name: str
    job_title: str
    is_active: bool = True


@dataclass
class CapCheck:
    """Outcome of testing one more shift against the weekly cap."""
    would_exceed: bool
    current_hours: float
    projected_hours: float
    shift_hours: float
    is_exempt: bool

    def to_dict(self) -> dict:
        return asdict(self)
