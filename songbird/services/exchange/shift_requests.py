"""
Open-shift requests: staff ask for an open shift, an admin approves or denies.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from songbird.db.models.shift_requests import ShiftRequests, RequestStatus
from songbird.db.models.shifts import Shifts
from songbird.db.models.users import Users
from songbird.services.hours import check_cap_for_user
from songbird.services.notifications import Outbox, templates

from .errors import CapExceededError, DuplicatePendingError, InvalidStateError, NotFoundError
from .locks import lock_assignee, lock_row, lock_staff


logger = logging.getLogger(__name__)


def create_shift_request(
    db: Session,
    shift_id: int,
    requester_id: int,
    outbox: Optional[Outbox] = None,
) -> ShiftRequests:
    outbox = outbox or Outbox(db)

    shift = lock_row(db, Shifts, shift_id)
    if not shift:
        raise NotFoundError("Shift not found")
    if not shift.is_open:
        raise InvalidStateError("Shift is not open for requests")

    requester = lock_staff(db, requester_id).get(requester_id)
    if not requester:
        raise NotFoundError("Requester not found")

    existing = db.execute(
        select(ShiftRequests).where(
            ShiftRequests.shift_id == shift_id,
            ShiftRequests.requester_id == requester_id,
            ShiftRequests.status == RequestStatus.PENDING,
        )
    ).scalars().first()
    if existing:
        raise DuplicatePendingError("You already requested this shift")

    check = check_cap_for_user(db, requester_id, shift.date, shift.shift_type)
    if check.would_exceed:
        logger.info(f"Shift request by user {requester_id} for shift {shift_id} refused at {check.current_hours}h")
        raise CapExceededError("Would exceed 40-hour limit", check, "requester")

    request = ShiftRequests(
        shift_id=shift_id,
        requester_id=requester_id,
        status=RequestStatus.PENDING,
    )
    db.add(request)
    outbox.notify_admins(
        "shift_request_admin",
        templates.shift_request_admin(requester.full_name, shift.date, shift.shift_type),
    )

    db.commit()
    db.refresh(request)
    logger.info(f"Shift request {request.id} created by user {requester_id} for shift {shift_id}")
    return request


def _lock_pending(db: Session, request_id: int) -> ShiftRequests:
    request = lock_row(db, ShiftRequests, request_id)
    if not request or request.status != RequestStatus.PENDING:
        raise NotFoundError("Request not found or already processed")
    return request


def approve_shift_request(
    db: Session,
    request_id: int,
    admin_id: int,
    admin_note: Optional[str] = None,
    outbox: Optional[Outbox] = None,
) -> ShiftRequests:
    """
    Assign the shift to the requester and close it.

    The cap was checked when the request was made and is not enforced again
    here; an approval that now overshoots is logged for the admin's attention.
    """
    outbox = outbox or Outbox(db)

    request = _lock_pending(db, request_id)

    shift = lock_row(db, Shifts, request.shift_id)
    if not shift:
        raise NotFoundError("Shift not found")
    if not shift.is_open:
        raise InvalidStateError("Shift is no longer open")

    requester = lock_assignee(db, request.requester_id)

    check = check_cap_for_user(db, requester.id, shift.date, shift.shift_type)
    if check.would_exceed:
        logger.warning(
            f"Approving shift request {request_id} puts user {requester.id} at "
            f"{check.projected_hours}h for the week of {shift.date}"
        )

    request.status = RequestStatus.APPROVED
    request.admin_note = admin_note
    request.actioned_by_user_id = admin_id
    shift.assigned_to = requester.id
    shift.is_open = False

    outbox.notify_user(
        requester,
        "shift_request_approved",
        templates.shift_request_approved(shift.date, shift.shift_type, admin_note),
    )

    db.commit()
    db.refresh(request)
    logger.info(f"Shift request {request_id} approved by user {admin_id}")
    return request


def deny_shift_request(
    db: Session,
    request_id: int,
    admin_id: int,
    admin_note: Optional[str] = None,
    outbox: Optional[Outbox] = None,
) -> ShiftRequests:
    outbox = outbox or Outbox(db)

    request = _lock_pending(db, request_id)
    request.status = RequestStatus.DENIED
    request.admin_note = admin_note
    request.actioned_by_user_id = admin_id

    shift = db.get(Shifts, request.shift_id)
    requester = db.get(Users, request.requester_id)
    if requester and shift:
        outbox.notify_user(
            requester,
            "shift_request_denied",
            templates.shift_request_denied(shift.date, shift.shift_type, admin_note),
        )

    db.commit()
    db.refresh(request)
    logger.info(f"Shift request {request_id} denied by user {admin_id}")
    return request
