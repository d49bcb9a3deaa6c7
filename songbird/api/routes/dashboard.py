from datetime import date, timedelta
from fastapi import APIRouter, Depends
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from songbird.api.deps import AuthContext, get_db, get_auth_context
from songbird.db.models.shift_requests import ShiftRequests, RequestStatus
from songbird.db.models.shifts import Shifts
from songbird.db.models.time_off_requests import TimeOffRequests
from songbird.db.models.trade_requests import TradeRequests
from songbird.schemas.dashboard import DashboardResponse
from songbird.schemas.shifts import ShiftResponse
from songbird.services.hours import format_hours, hours_status, pay_period_start, weekly_hours_for_user

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


def _count(db: Session, model, *conditions) -> int:
    return db.query(func.count(model.id)).filter(model.status == RequestStatus.PENDING, *conditions).scalar() or 0


@router.get("", response_model=DashboardResponse)
def get_dashboard(
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
):
    """
    Landing summary for the caller: this pay period's hours, upcoming shifts,
    open shifts, and pending request counts (all pending for admins, own for staff).
    """
    today = date.today()
    start = pay_period_start(today)
    hours = weekly_hours_for_user(db, auth.user_id, start)

    upcoming = db.query(Shifts).filter(
        Shifts.assigned_to == auth.user_id,
        Shifts.date >= today,
    ).order_by(Shifts.date, Shifts.id).limit(10).all()

    open_shifts = db.query(Shifts).filter(
        Shifts.is_open == True,
        Shifts.date >= today,
    ).order_by(Shifts.date, Shifts.id).all()

    if auth.is_admin:
        shift_reqs = _count(db, ShiftRequests)
        trade_reqs = _count(db, TradeRequests)
        time_off_reqs = _count(db, TimeOffRequests)
    else:
        shift_reqs = _count(db, ShiftRequests, ShiftRequests.requester_id == auth.user_id)
        trade_reqs = _count(db, TradeRequests, or_(
            TradeRequests.requester_id == auth.user_id,
            TradeRequests.target_id == auth.user_id,
        ))
        time_off_reqs = _count(db, TimeOffRequests, TimeOffRequests.requester_id == auth.user_id)

    return DashboardResponse(
        period_start=start,
        period_end=start + timedelta(days=6),
        my_hours=hours,
        my_hours_display=format_hours(hours),
        my_hours_status=hours_status(hours),
        upcoming_shifts=[ShiftResponse.model_validate(s) for s in upcoming],
        open_shifts=[ShiftResponse.model_validate(s) for s in open_shifts],
        pending_shift_requests=shift_reqs,
        pending_trade_requests=trade_reqs,
        pending_time_off_requests=time_off_reqs,
    )
