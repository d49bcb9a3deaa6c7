from datetime import date, timedelta
from typing import List, Optional
from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.orm import Session

from songbird.api.deps import AuthContext, get_db, get_auth_context, require_admin
from songbird.db.models.shifts import Shifts
from songbird.db.models.users import Users
from songbird.schemas.shifts import (
    BulkShiftCreate,
    BulkShiftResponse,
    ShiftCreate,
    ShiftResponse,
    ShiftUpdate,
    ShiftWithHours,
)
from songbird.services import exchange
from songbird.services.hours import pay_period_start, running_totals_for_period
from songbird.services.notifications import Outbox, deliver_notifications

router = APIRouter(prefix="/shifts", tags=["shifts"])


@router.get("", response_model=List[ShiftWithHours])
def list_shifts(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    assigned_to: Optional[int] = None,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
):
    """
    Shifts in a date range (default: the current pay period), each carrying the
    assignee's running pay-period total at that point in the week.
    """
    start = start_date or pay_period_start(date.today())
    end = end_date or start + timedelta(days=6)

    query = db.query(Shifts).filter(Shifts.date >= start, Shifts.date <= end)
    if assigned_to is not None:
        query = query.filter(Shifts.assigned_to == assigned_to)
    shifts = query.order_by(Shifts.date, Shifts.id).all()

    totals = {}
    for period in sorted({pay_period_start(s.date) for s in shifts}):
        totals.update(running_totals_for_period(db, period))

    names = dict(db.query(Users.id, Users.full_name).all())

    results = []
    for shift in shifts:
        item = ShiftWithHours.model_validate(shift)
        if shift.assigned_to is not None:
            item.assignee_name = names.get(shift.assigned_to)
            item.running_hours = totals.get((shift.date, shift.assigned_to, shift.shift_type))
        results.append(item)
    return results


@router.post("", response_model=ShiftResponse, status_code=status.HTTP_201_CREATED)
def create_shift(
    payload: ShiftCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    admin: AuthContext = Depends(require_admin),
):
    outbox = Outbox(db)
    shift = exchange.create_shift(
        db,
        shift_date=payload.date,
        shift_type=payload.shift_type,
        created_by=admin.user_id,
        assigned_to=payload.assigned_to,
        is_open=payload.is_open,
        is_preliminary=payload.is_preliminary,
        notes=payload.notes,
        outbox=outbox,
    )
    background_tasks.add_task(deliver_notifications, outbox.drain())
    return shift


@router.post("/bulk", response_model=BulkShiftResponse, status_code=status.HTTP_201_CREATED)
def bulk_create_shifts(
    payload: BulkShiftCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    admin: AuthContext = Depends(require_admin),
):
    outbox = Outbox(db)
    items = [item.model_dump() for item in payload.shifts]
    result = exchange.bulk_create_shifts(db, items, created_by=admin.user_id, outbox=outbox)
    background_tasks.add_task(deliver_notifications, outbox.drain())
    return BulkShiftResponse(
        created=len(result.created),
        skipped=result.skipped,
        shifts=[ShiftResponse.model_validate(s) for s in result.created],
    )


@router.put("/{shift_id}", response_model=ShiftResponse)
def update_shift(
    shift_id: int,
    payload: ShiftUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    admin: AuthContext = Depends(require_admin),
):
    outbox = Outbox(db)
    shift = exchange.update_shift(db, shift_id, payload.model_dump(exclude_unset=True), outbox=outbox)
    background_tasks.add_task(deliver_notifications, outbox.drain())
    return shift
