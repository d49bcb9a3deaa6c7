from typing import List, Optional
from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.orm import Session

from songbird.api.deps import AuthContext, get_db, get_auth_context, require_admin
from songbird.db.models.shift_requests import RequestStatus
from songbird.db.models.time_off_requests import TimeOffRequests
from songbird.schemas.time_off_requests import TimeOffRequestAction, TimeOffRequestCreate, TimeOffRequestResponse
from songbird.services import exchange
from songbird.services.notifications import Outbox, deliver_notifications

router = APIRouter(prefix="/time-off-requests", tags=["time-off-requests"])


@router.get("", response_model=List[TimeOffRequestResponse])
def list_time_off_requests(
    request_status: Optional[RequestStatus] = None,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
):
    query = db.query(TimeOffRequests)
    if not auth.is_admin:
        query = query.filter(TimeOffRequests.requester_id == auth.user_id)
    if request_status:
        query = query.filter(TimeOffRequests.status == request_status)
    return query.order_by(TimeOffRequests.created_at.desc(), TimeOffRequests.id.desc()).all()


@router.post("", response_model=TimeOffRequestResponse, status_code=status.HTTP_201_CREATED)
def create_time_off_request(
    payload: TimeOffRequestCreate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
):
    """Staff can only request time off for themselves."""
    return exchange.create_time_off_request(
        db,
        requester_id=auth.user_id,
        request_type=payload.request_type,
        shift_id=payload.shift_id,
        start_date=payload.start_date,
        end_date=payload.end_date,
        reason=payload.reason,
    )


@router.post("/{request_id}/approve", response_model=TimeOffRequestResponse)
def approve_time_off_request(
    request_id: int,
    background_tasks: BackgroundTasks,
    payload: Optional[TimeOffRequestAction] = None,
    db: Session = Depends(get_db),
    admin: AuthContext = Depends(require_admin),
):
    outbox = Outbox(db)
    note = payload.admin_note if payload else None
    request = exchange.approve_time_off_request(db, request_id, admin.user_id, admin_note=note, outbox=outbox)
    background_tasks.add_task(deliver_notifications, outbox.drain())
    return request


@router.post("/{request_id}/deny", response_model=TimeOffRequestResponse)
def deny_time_off_request(
    request_id: int,
    background_tasks: BackgroundTasks,
    payload: Optional[TimeOffRequestAction] = None,
    db: Session = Depends(get_db),
    admin: AuthContext = Depends(require_admin),
):
    outbox = Outbox(db)
    note = payload.admin_note if payload else None
    request = exchange.deny_time_off_request(db, request_id, admin.user_id, admin_note=note, outbox=outbox)
    background_tasks.add_task(deliver_notifications, outbox.drain())
    return request
