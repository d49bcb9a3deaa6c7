"""
Data loader for hours accounting.
Snapshots pay-period shifts from the database and converts to internal types.
"""

import logging
from datetime import timedelta
from typing import Optional

from sqlalchemy import select, and_
from sqlalchemy.orm import Session

from songbird.db.models.shifts import Shifts
from songbird.db.models.users import Users

from .types import ShiftRecord, StaffRecord, CapCheck
from .calculator import (
    DateLike,
    check_cap,
    parse_shift_type,
    pay_period_start,
    running_totals,
    weekly_hours,
)


logger = logging.getLogger(__name__)


def to_shift_record(shift: Shifts) -> ShiftRecord:
    return ShiftRecord(
        id=shift.id,
        date=shift.date,
        shift_type=shift.shift_type,
        assigned_to=shift.assigned_to,
        is_open=shift.is_open,
        is_preliminary=shift.is_preliminary,
    )


def load_staff_record(db: Session, user_id: int) -> Optional[StaffRecord]:
    user = db.get(Users, user_id)
    if not user:
        return None
    return StaffRecord(
        id=user.id,
        full_name=user.full_name,
        job_title=user.job_title,
        is_active=user.is_active,
    )


def load_period_shifts(
    db: Session,
    anchor_date: DateLike,
    user_id: Optional[int] = None,
) -> list[ShiftRecord]:
    """Load the shifts of the pay period containing anchor_date, optionally for one assignee."""
    start = pay_period_start(anchor_date)
    end = start + timedelta(days=6)

    conditions = [Shifts.date >= start, Shifts.date <= end]
    if user_id is not None:
        conditions.append(Shifts.assigned_to == user_id)

    stmt = select(Shifts).where(and_(*conditions)).order_by(Shifts.date, Shifts.id)
    return [to_shift_record(s) for s in db.execute(stmt).scalars().all()]


def weekly_hours_for_user(
    db: Session,
    user_id: int,
    anchor_date: DateLike,
    exclude_shift_id: Optional[int] = None,
) -> float:
    shifts = load_period_shifts(db, anchor_date, user_id=user_id)
    return weekly_hours(shifts, user_id, anchor_date, exclude_shift_id)


def check_cap_for_user(
    db: Session,
    user_id: int,
    shift_date: DateLike,
    shift_type,
    exclude_shift_id: Optional[int] = None,
) -> CapCheck:
    """Cap check against the current database state. Unknown users are treated as non-exempt."""
    if parse_shift_type(shift_type) is None:
        logger.warning(f"Unknown shift type {shift_type!r} in cap check for user {user_id}, counting 0 hours")

    staff = load_staff_record(db, user_id)
    shifts = load_period_shifts(db, shift_date, user_id=user_id)

    return check_cap(
        shifts,
        user_id,
        shift_date,
        shift_type,
        exclude_shift_id=exclude_shift_id,
        job_title=staff.job_title if staff else None,
    )


def running_totals_for_period(db: Session, anchor_date: DateLike) -> dict:
    start = pay_period_start(anchor_date)
    return running_totals(load_period_shifts(db, start), start)
