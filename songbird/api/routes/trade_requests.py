from typing import List, Optional
from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from songbird.api.deps import AuthContext, get_db, get_auth_context, require_admin
from songbird.db.models.shift_requests import RequestStatus
from songbird.db.models.trade_requests import TradeRequests
from songbird.schemas.trade_requests import TradeRequestAction, TradeRequestCreate, TradeRequestResponse
from songbird.services import exchange
from songbird.services.notifications import Outbox, deliver_notifications

router = APIRouter(prefix="/trade-requests", tags=["trade-requests"])


@router.get("", response_model=List[TradeRequestResponse])
def list_trade_requests(
    request_status: Optional[RequestStatus] = None,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
):
    """Admins see every trade; staff see trades they proposed or were asked to take."""
    query = db.query(TradeRequests)
    if not auth.is_admin:
        query = query.filter(or_(
            TradeRequests.requester_id == auth.user_id,
            TradeRequests.target_id == auth.user_id,
        ))
    if request_status:
        query = query.filter(TradeRequests.status == request_status)
    return query.order_by(TradeRequests.created_at.desc(), TradeRequests.id.desc()).all()


@router.post("", response_model=TradeRequestResponse, status_code=status.HTTP_201_CREATED)
def propose_trade(
    payload: TradeRequestCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
):
    outbox = Outbox(db)
    trade = exchange.propose_trade(
        db,
        requester_id=auth.user_id,
        requester_shift_id=payload.requester_shift_id,
        target_shift_id=payload.target_shift_id,
        note=payload.note,
        outbox=outbox,
    )
    background_tasks.add_task(deliver_notifications, outbox.drain())
    return trade


@router.post("/{trade_id}/approve", response_model=TradeRequestResponse)
def approve_trade(
    trade_id: int,
    background_tasks: BackgroundTasks,
    payload: Optional[TradeRequestAction] = None,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
):
    outbox = Outbox(db)
    note = payload.note if payload else None
    trade = exchange.approve_trade_as_target(db, trade_id, auth.user_id, note=note, outbox=outbox)
    background_tasks.add_task(deliver_notifications, outbox.drain())
    return trade


@router.post("/{trade_id}/deny", response_model=TradeRequestResponse)
def deny_trade(
    trade_id: int,
    background_tasks: BackgroundTasks,
    payload: Optional[TradeRequestAction] = None,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
):
    outbox = Outbox(db)
    note = payload.note if payload else None
    trade = exchange.deny_trade_as_target(db, trade_id, auth.user_id, note=note, outbox=outbox)
    background_tasks.add_task(deliver_notifications, outbox.drain())
    return trade


@router.post("/{trade_id}/finalize", response_model=TradeRequestResponse)
def finalize_trade(
    trade_id: int,
    background_tasks: BackgroundTasks,
    payload: Optional[TradeRequestAction] = None,
    db: Session = Depends(get_db),
    admin: AuthContext = Depends(require_admin),
):
    outbox = Outbox(db)
    note = payload.note if payload else None
    trade = exchange.finalize_trade(db, trade_id, admin.user_id, admin_note=note, outbox=outbox)
    background_tasks.add_task(deliver_notifications, outbox.drain())
    return trade
