"""
Pay-period hour accounting.

A pay period runs Sunday through Saturday. Every shift is charged at its
template value, except the Saturday overnight: it starts at 7pm Saturday and
runs into the next period, so only the 5 hours before midnight are charged.
The 7 hours after midnight are not credited to the following period.
"""

import math
from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Union

from songbird.db.models.shifts import ShiftType

from .types import ShiftDef, ShiftRecord, CapCheck


DateLike = Union[date, datetime, str]

SHIFT_DEFS: dict[ShiftType, ShiftDef] = {
    ShiftType.MORNING: ShiftDef(
        label="Morning",
        time_range="7:00 AM – 3:00 PM",
        start_minute=420,
        end_minute=900,
        hours=8.0,
    ),
    ShiftType.AFTERNOON: ShiftDef(
        label="Afternoon",
        time_range="3:00 PM – 7:00 PM",
        start_minute=900,
        end_minute=1140,
        hours=4.0,
    ),
    ShiftType.OVERNIGHT: ShiftDef(
        label="Overnight",
        time_range="7:00 PM – 7:00 AM",
        start_minute=1140,
        end_minute=1620,  # 7am next day
        hours=12.0,
    ),
}

# processing order within a single day
SHIFT_ORDER: list[ShiftType] = [ShiftType.MORNING, ShiftType.AFTERNOON, ShiftType.OVERNIGHT]

# Saturday overnight straddles the period boundary; only Sat 7pm -> midnight counts
SAT_OVERNIGHT_NEXT_PERIOD = 7.0  # midnight -> Sun 7am, never charged
SAT_OVERNIGHT_THIS_PERIOD = SHIFT_DEFS[ShiftType.OVERNIGHT].hours - SAT_OVERNIGHT_NEXT_PERIOD

WEEKLY_HOUR_CAP = 40.0
HOURS_WARNING_THRESHOLD = 36.0
HOUSE_MANAGER_TITLE = "House Manager"

SATURDAY = 5  # date.weekday()


def as_date(value: DateLike) -> date:
    """Normalise a date, datetime or ISO 'YYYY-MM-DD' string to a plain date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def parse_shift_type(shift_type) -> Optional[ShiftType]:
    try:
        return ShiftType(shift_type)
    except ValueError:
        return None


def get_shift_def(shift_type) -> Optional[ShiftDef]:
    kind = parse_shift_type(shift_type)
    return SHIFT_DEFS[kind] if kind else None


def shift_hours(shift_date: DateLike, shift_type) -> float:
    """Hours charged to the pay period for one shift. Unknown types count as 0."""
    kind = parse_shift_type(shift_type)
    if kind is None:
        return 0.0

    if kind == ShiftType.OVERNIGHT and as_date(shift_date).weekday() == SATURDAY:
        return SAT_OVERNIGHT_THIS_PERIOD

    return SHIFT_DEFS[kind].hours


def pay_period_start(day: DateLike) -> date:
    """Sunday on or before the given day."""
    d = as_date(day)
    return d - timedelta(days=(d.weekday() + 1) % 7)


def pay_period_dates(day: DateLike) -> list[date]:
    sunday = pay_period_start(day)
    return [sunday + timedelta(days=i) for i in range(7)]


def weekly_hours(
    shifts: Iterable[ShiftRecord],
    staff_id: int,
    anchor_date: DateLike,
    exclude_shift_id: Optional[int] = None,
) -> float:
    """
    Total hours for a staff member in the pay period containing anchor_date.
    exclude_shift_id drops one shift from the sum (e.g. a shift being traded away).
    """
    start = pay_period_start(anchor_date)
    end = start + timedelta(days=6)

    return math.fsum(
        shift_hours(s.date, s.shift_type)
        for s in shifts
        if s.assigned_to == staff_id
        and start <= as_date(s.date) <= end
        and (exclude_shift_id is None or s.id != exclude_shift_id)
    )


def _order_key(shift: ShiftRecord) -> tuple[int, int]:
    kind = parse_shift_type(shift.shift_type)
    position = SHIFT_ORDER.index(kind) if kind else len(SHIFT_ORDER)
    return position, shift.id


def running_totals(
    shifts: Iterable[ShiftRecord],
    period_start: DateLike,
) -> dict[tuple[date, int, ShiftType], float]:
    """
    Cumulative hours per staff member after each shift of the 7-day period.

    Days are walked in order and, within a day, morning -> afternoon -> overnight,
    so the "hours so far" shown on a tile does not depend on creation order.

    Returns:
        (date, staff_id, shift_type) -> running total
    """
    start = as_date(period_start)
    by_day: dict[date, list[ShiftRecord]] = defaultdict(list)
    for shift in shifts:
        if shift.assigned_to is None:
            continue
        by_day[as_date(shift.date)].append(shift)

    totals: dict[tuple[date, int, ShiftType], float] = {}
    accumulators: dict[int, float] = defaultdict(float)

    for offset in range(7):
        day = start + timedelta(days=offset)
        for shift in sorted(by_day.get(day, []), key=_order_key):
            accumulators[shift.assigned_to] += shift_hours(day, shift.shift_type)
            totals[(day, shift.assigned_to, shift.shift_type)] = accumulators[shift.assigned_to]

    return totals


def is_cap_exempt(job_title: Optional[str]) -> bool:
    return job_title == HOUSE_MANAGER_TITLE


def check_cap(
    shifts: Iterable[ShiftRecord],
    staff_id: int,
    shift_date: DateLike,
    shift_type,
    exclude_shift_id: Optional[int] = None,
    job_title: Optional[str] = None,
) -> CapCheck:
    """
    Would adding this shift push the staff member over the weekly cap?
    The cap is strictly greater-than: landing on exactly 40.0 is allowed.
    """
    is_exempt = is_cap_exempt(job_title)
    current = weekly_hours(shifts, staff_id, shift_date, exclude_shift_id)
    added = shift_hours(shift_date, shift_type)
    projected = current + added

    return CapCheck(
        would_exceed=projected > WEEKLY_HOUR_CAP and not is_exempt,
        current_hours=current,
        projected_hours=projected,
        shift_hours=added,
        is_exempt=is_exempt,
    )


def format_hours(hours: float) -> str:
    return f"{hours:.1f}/{WEEKLY_HOUR_CAP:.1f}"


def hours_status(hours: float) -> str:
    if hours >= WEEKLY_HOUR_CAP:
        return "over"
    if hours >= HOURS_WARNING_THRESHOLD:
        return "warn"
    return "ok"


def format_date(day: DateLike) -> str:
    """e.g. 'Feb 15, 2026'"""
    d = as_date(day)
    return f"{d.strftime('%b')} {d.day}, {d.year}"


def day_name(day: DateLike) -> str:
    return as_date(day).strftime("%A")
