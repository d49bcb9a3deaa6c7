from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from songbird.api.deps import AuthContext, get_db, get_auth_context
from songbird.db.models.shifts import ShiftType
from songbird.db.models.users import Users, UserRole, OPEN_SHIFT_USERNAME
from songbird.schemas.hours import CapCheckResponse, PeriodDay, WeeklyHoursEntry, WeeklyHoursResponse
from songbird.services.hours import (
    check_cap_for_user,
    day_name,
    format_hours,
    hours_status,
    load_period_shifts,
    pay_period_dates,
    pay_period_start,
    weekly_hours,
)

router = APIRouter(prefix="/hours", tags=["hours"])


@router.get("/check", response_model=CapCheckResponse)
def check_hours(
    shift_date: date,
    shift_type: ShiftType,
    user_id: Optional[int] = None,
    exclude_shift_id: Optional[int] = None,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
):
    """Would one more shift push this staff member past the cap? Defaults to the caller."""
    # unknown ids carry no hours and no exemption, so they read as zero
    target_id = user_id if user_id is not None else auth.user_id

    check = check_cap_for_user(db, target_id, shift_date, shift_type, exclude_shift_id=exclude_shift_id)
    return check.to_dict()


@router.get("/weekly", response_model=WeeklyHoursResponse)
def weekly_summary(
    anchor_date: Optional[date] = None,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
):
    start = pay_period_start(anchor_date or date.today())
    days = pay_period_dates(start)
    shifts = load_period_shifts(db, start)

    staff = db.query(Users).filter(
        Users.is_active == True,
        Users.role != UserRole.SYSTEM,
        Users.username != OPEN_SHIFT_USERNAME,
    ).order_by(Users.full_name).all()

    entries = []
    for user in staff:
        hours = weekly_hours(shifts, user.id, start)
        entries.append(WeeklyHoursEntry(
            user_id=user.id,
            full_name=user.full_name,
            job_title=user.job_title,
            hours=hours,
            display=format_hours(hours),
            status=hours_status(hours),
        ))

    return WeeklyHoursResponse(
        period_start=days[0],
        period_end=days[-1],
        days=[PeriodDay(day=d, name=day_name(d)) for d in days],
        staff=entries,
    )
