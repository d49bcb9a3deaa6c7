"""
Time-off requests. Approving an assigned-shift request hands the shift back
to the open pool; vacation requests only record the dates.
"""

import logging
from datetime import date
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from songbird.db.models.shift_requests import RequestStatus
from songbird.db.models.shifts import Shifts
from songbird.db.models.time_off_requests import TimeOffRequests, TimeOffType
from songbird.db.models.users import Users
from songbird.services.notifications import Outbox, templates

from .errors import DuplicatePendingError, InvalidStateError, NotAuthorizedError, NotFoundError
from .locks import lock_row


logger = logging.getLogger(__name__)

TYPE_LABELS = {
    TimeOffType.ASSIGNED_SHIFT: "Assigned shift",
    TimeOffType.FUTURE_VACATION: "Vacation",
}


def create_time_off_request(
    db: Session,
    requester_id: int,
    request_type,
    shift_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    reason: Optional[str] = None,
) -> TimeOffRequests:
    kind = TimeOffType(request_type)

    if kind == TimeOffType.ASSIGNED_SHIFT:
        if shift_id is None:
            raise InvalidStateError("Shift ID required for assigned shift requests")
        shift = db.get(Shifts, shift_id)
        if not shift:
            raise NotFoundError("Shift not found")
        if shift.assigned_to != requester_id:
            raise NotAuthorizedError("You are not assigned to this shift")

        existing = db.execute(
            select(TimeOffRequests).where(
                TimeOffRequests.shift_id == shift_id,
                TimeOffRequests.requester_id == requester_id,
                TimeOffRequests.status == RequestStatus.PENDING,
            )
        ).scalars().first()
        if existing:
            raise DuplicatePendingError("You already requested time off for this shift")

        start_date = start_date or shift.date
        end_date = end_date or shift.date
    else:
        if start_date is None:
            raise InvalidStateError("Start date required for vacation requests")
        end_date = end_date or start_date
        if end_date < start_date:
            raise InvalidStateError("End date must be on or after start date")
        shift_id = None

    request = TimeOffRequests(
        requester_id=requester_id,
        request_type=kind,
        shift_id=shift_id,
        start_date=start_date,
        end_date=end_date,
        reason=reason,
        status=RequestStatus.PENDING,
    )
    db.add(request)
    db.commit()
    db.refresh(request)
    logger.info(f"Time-off request {request.id} ({kind.value}) created by user {requester_id}")
    return request


def _lock_pending(db: Session, request_id: int) -> TimeOffRequests:
    request = lock_row(db, TimeOffRequests, request_id)
    if not request or request.status != RequestStatus.PENDING:
        raise NotFoundError("Request not found or already processed")
    return request


def approve_time_off_request(
    db: Session,
    request_id: int,
    admin_id: int,
    admin_note: Optional[str] = None,
    outbox: Optional[Outbox] = None,
) -> TimeOffRequests:
    outbox = outbox or Outbox(db)

    request = _lock_pending(db, request_id)
    request.status = RequestStatus.APPROVED
    request.admin_note = admin_note
    request.actioned_by_user_id = admin_id

    if request.shift_id is not None:
        shift = lock_row(db, Shifts, request.shift_id)
        if shift and shift.assigned_to == request.requester_id:
            shift.assigned_to = None
            shift.is_open = True
        elif shift:
            logger.warning(f"Time-off request {request_id}: shift {shift.id} no longer held by requester, left as is")

    requester = db.get(Users, request.requester_id)
    if requester:
        outbox.notify_user(
            requester,
            "time_off_approved",
            templates.time_off_approved(request.start_date, request.end_date, TYPE_LABELS[request.request_type]),
        )

    db.commit()
    db.refresh(request)
    logger.info(f"Time-off request {request_id} approved by user {admin_id}")
    return request


def deny_time_off_request(
    db: Session,
    request_id: int,
    admin_id: int,
    admin_note: Optional[str] = None,
    outbox: Optional[Outbox] = None,
) -> TimeOffRequests:
    outbox = outbox or Outbox(db)

    request = _lock_pending(db, request_id)
    request.status = RequestStatus.DENIED
    request.admin_note = admin_note
    request.actioned_by_user_id = admin_id

    requester = db.get(Users, request.requester_id)
    if requester:
        outbox.notify_user(requester, "time_off_denied", templates.time_off_denied(request.start_date, admin_note))

    db.commit()
    db.refresh(request)
    logger.info(f"Time-off request {request_id} denied by user {admin_id}")
    return request
