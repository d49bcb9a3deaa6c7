"""
Hours accounting package.

Usage:
    from datetime import date
    from songbird.services.hours import check_cap_for_user

    check = check_cap_for_user(db, user_id=3, shift_date=date(2026, 2, 16), shift_type="overnight")
    if check.would_exceed:
        ...

    # Or work on plain records without a database
    from songbird.services.hours import ShiftRecord, weekly_hours
"""

from .types import ShiftDef, ShiftRecord, StaffRecord, CapCheck
from .calculator import (
    SHIFT_DEFS,
    SHIFT_ORDER,
    SAT_OVERNIGHT_THIS_PERIOD,
    SAT_OVERNIGHT_NEXT_PERIOD,
    WEEKLY_HOUR_CAP,
    HOUSE_MANAGER_TITLE,
    as_date,
    get_shift_def,
    shift_hours,
    pay_period_start,
    pay_period_dates,
    weekly_hours,
    running_totals,
    is_cap_exempt,
    check_cap,
    format_hours,
    hours_status,
    format_date,
    day_name,
)
from .data_loader import (
    load_staff_record,
    load_period_shifts,
    weekly_hours_for_user,
    check_cap_for_user,
    running_totals_for_period,
)

__all__ = [
    # Types
    "ShiftDef",
    "ShiftRecord",
    "StaffRecord",
    "CapCheck",
    # Constants
    "SHIFT_DEFS",
    "SHIFT_ORDER",
    "SAT_OVERNIGHT_THIS_PERIOD",
    "SAT_OVERNIGHT_NEXT_PERIOD",
    "WEEKLY_HOUR_CAP",
    "HOUSE_MANAGER_TITLE",
    # Pure calculations
    "as_date",
    "get_shift_def",
    "shift_hours",
    "pay_period_start",
    "pay_period_dates",
    "weekly_hours",
    "running_totals",
    "is_cap_exempt",
    "check_cap",
    # Display helpers
    "format_hours",
    "hours_status",
    "format_date",
    "day_name",
    # Database-backed
    "load_staff_record",
    "load_period_shifts",
    "weekly_hours_for_user",
    "check_cap_for_user",
    "running_totals_for_period",
]
