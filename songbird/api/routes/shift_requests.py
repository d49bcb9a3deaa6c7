from typing import List, Optional
from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.orm import Session

from songbird.api.deps import AuthContext, get_db, get_auth_context, require_admin
from songbird.db.models.shift_requests import ShiftRequests, RequestStatus
from songbird.schemas.shift_requests import ShiftRequestAction, ShiftRequestCreate, ShiftRequestResponse
from songbird.services import exchange
from songbird.services.notifications import Outbox, deliver_notifications

router = APIRouter(prefix="/shift-requests", tags=["shift-requests"])


@router.get("", response_model=List[ShiftRequestResponse])
def list_shift_requests(
    request_status: Optional[RequestStatus] = None,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
):
    """Admins see every request, staff only their own."""
    query = db.query(ShiftRequests)
    if not auth.is_admin:
        query = query.filter(ShiftRequests.requester_id == auth.user_id)
    if request_status:
        query = query.filter(ShiftRequests.status == request_status)
    return query.order_by(ShiftRequests.created_at.desc(), ShiftRequests.id.desc()).all()


@router.post("", response_model=ShiftRequestResponse, status_code=status.HTTP_201_CREATED)
def create_shift_request(
    payload: ShiftRequestCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
):
    outbox = Outbox(db)
    request = exchange.create_shift_request(db, payload.shift_id, auth.user_id, outbox=outbox)
    background_tasks.add_task(deliver_notifications, outbox.drain())
    return request


@router.post("/{request_id}/approve", response_model=ShiftRequestResponse)
def approve_shift_request(
    request_id: int,
    background_tasks: BackgroundTasks,
    payload: Optional[ShiftRequestAction] = None,
    db: Session = Depends(get_db),
    admin: AuthContext = Depends(require_admin),
):
    outbox = Outbox(db)
    note = payload.admin_note if payload else None
    request = exchange.approve_shift_request(db, request_id, admin.user_id, admin_note=note, outbox=outbox)
    background_tasks.add_task(deliver_notifications, outbox.drain())
    return request


@router.post("/{request_id}/deny", response_model=ShiftRequestResponse)
def deny_shift_request(
    request_id: int,
    background_tasks: BackgroundTasks,
    payload: Optional[ShiftRequestAction] = None,
    db: Session = Depends(get_db),
    admin: AuthContext = Depends(require_admin),
):
    outbox = Outbox(db)
    note = payload.admin_note if payload else None
    request = exchange.deny_shift_request(db, request_id, admin.user_id, admin_note=note, outbox=outbox)
    background_tasks.add_task(deliver_notifications, outbox.drain())
    return request
