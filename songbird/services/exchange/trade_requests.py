"""
Shift trades between two staff members.

Lifecycle:
    propose  -> requester_approved, status pending
    target approves -> target_approved (still pending, awaiting admin)
    target denies   -> status denied
    admin finalizes -> both shifts swap assignees, status approved

Both staff are cap-checked against the post-trade state: each gives up their
own shift and takes the other's. The check runs at proposal and again at
finalization, since schedules move in between.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from songbird.db.models.shift_requests import RequestStatus
from songbird.db.models.shifts import Shifts
from songbird.db.models.trade_requests import TradeRequests
from songbird.db.models.users import Users
from songbird.services.hours import check_cap_for_user
from songbird.services.notifications import Outbox, templates

from .errors import (
    AlreadyProcessedError,
    CapExceededError,
    IncompleteApprovalsError,
    InvalidStateError,
    NotAuthorizedError,
    NotFoundError,
)
from .locks import check_assignable, lock_row, lock_shifts, lock_staff


logger = logging.getLogger(__name__)


def _check_trade_caps(
    db: Session,
    requester_shift: Shifts,
    target_shift: Shifts,
    requester_id: int,
    target_id: int,
    requester_message: str,
    target_message: str,
) -> None:
    requester_check = check_cap_for_user(
        db, requester_id, target_shift.date, target_shift.shift_type,
        exclude_shift_id=requester_shift.id,
    )
    if requester_check.would_exceed:
        raise CapExceededError(requester_message, requester_check, "requester")

    target_check = check_cap_for_user(
        db, target_id, requester_shift.date, requester_shift.shift_type,
        exclude_shift_id=target_shift.id,
    )
    if target_check.would_exceed:
        raise CapExceededError(target_message, target_check, "target")


def propose_trade(
    db: Session,
    requester_id: int,
    requester_shift_id: int,
    target_shift_id: int,
    note: Optional[str] = None,
    outbox: Optional[Outbox] = None,
) -> TradeRequests:
    outbox = outbox or Outbox(db)

    if requester_shift_id == target_shift_id:
        raise InvalidStateError("Cannot trade a shift for itself")

    shifts = lock_shifts(db, requester_shift_id, target_shift_id)
    my_shift = shifts.get(requester_shift_id)
    their_shift = shifts.get(target_shift_id)
    if not my_shift or not their_shift:
        raise NotFoundError("One or both shifts not found")
    if my_shift.assigned_to != requester_id:
        raise NotAuthorizedError("You are not assigned to the first shift")
    if their_shift.assigned_to is None:
        raise InvalidStateError("Target shift is not assigned")
    if their_shift.assigned_to == requester_id:
        raise InvalidStateError("You are already assigned to the target shift")

    target_id = their_shift.assigned_to
    staff = lock_staff(db, requester_id, target_id)
    requester = check_assignable(staff.get(requester_id))
    target = check_assignable(staff.get(target_id))

    _check_trade_caps(
        db, my_shift, their_shift, requester_id, target_id,
        requester_message="Trade request denied: You would exceed 40-hour weekly limit",
        target_message="Trade request denied: Target staff would exceed 40-hour weekly limit",
    )

    trade = TradeRequests(
        requester_shift_id=my_shift.id,
        target_shift_id=their_shift.id,
        requester_id=requester_id,
        target_id=target_id,
        requester_approved=True,
        target_approved=False,
        admin_approved=False,
        status=RequestStatus.PENDING,
        requester_note=note,
    )
    db.add(trade)

    mine = (my_shift.date, my_shift.shift_type)
    theirs = (their_shift.date, their_shift.shift_type)
    outbox.notify_user(requester, "trade_request_sent", templates.trade_request_sent(target.full_name, mine, theirs))
    outbox.notify_user(target, "trade_request", templates.trade_request_received(requester.full_name, mine, theirs))
    outbox.notify_admins(
        "trade_request_admin",
        templates.trade_request_admin(requester.full_name, target.full_name, mine, theirs),
    )

    db.commit()
    db.refresh(trade)
    logger.info(f"Trade {trade.id} proposed: shift {my_shift.id} (user {requester_id}) <-> shift {their_shift.id} (user {target_id})")
    return trade


def _lock_trade_for_target(db: Session, trade_id: int, actor_id: int) -> TradeRequests:
    trade = lock_row(db, TradeRequests, trade_id)
    if not trade:
        raise NotFoundError("Trade request not found")
    if trade.target_id != actor_id:
        raise NotAuthorizedError("Not authorized")
    if trade.status != RequestStatus.PENDING:
        raise AlreadyProcessedError("Trade already processed")
    return trade


def approve_trade_as_target(
    db: Session,
    trade_id: int,
    actor_id: int,
    note: Optional[str] = None,
    outbox: Optional[Outbox] = None,
) -> TradeRequests:
    """Target accepts. The trade stays pending until an admin finalizes it."""
    outbox = outbox or Outbox(db)

    trade = _lock_trade_for_target(db, trade_id, actor_id)
    already_approved = trade.target_approved
    trade.target_approved = True
    if note is not None:
        trade.target_note = note

    if not already_approved:
        requester = db.get(Users, trade.requester_id)
        target = db.get(Users, trade.target_id)
        their_shift = db.get(Shifts, trade.target_shift_id)
        if requester and target and their_shift:
            outbox.notify_user(
                requester,
                "trade_approved",
                templates.trade_approved(target.full_name, their_shift.date, their_shift.shift_type),
            )

    db.commit()
    db.refresh(trade)
    logger.info(f"Trade {trade_id} approved by target user {actor_id}, awaiting admin")
    return trade


def deny_trade_as_target(
    db: Session,
    trade_id: int,
    actor_id: int,
    note: Optional[str] = None,
    outbox: Optional[Outbox] = None,
) -> TradeRequests:
    outbox = outbox or Outbox(db)

    trade = _lock_trade_for_target(db, trade_id, actor_id)
    trade.status = RequestStatus.DENIED
    trade.target_note = note

    requester = db.get(Users, trade.requester_id)
    target = db.get(Users, trade.target_id)
    if requester and target:
        outbox.notify_user(requester, "trade_denied", templates.trade_denied(target.full_name, note))

    db.commit()
    db.refresh(trade)
    logger.info(f"Trade {trade_id} denied by target user {actor_id}")
    return trade


def finalize_trade(
    db: Session,
    trade_id: int,
    admin_id: int,
    admin_note: Optional[str] = None,
    outbox: Optional[Outbox] = None,
) -> TradeRequests:
    """
    Swap the two assignees. All checks run before any write, so a refused
    finalization leaves the trade and both shifts exactly as they were.
    """
    outbox = outbox or Outbox(db)

    trade = lock_row(db, TradeRequests, trade_id)
    if not trade:
        raise NotFoundError("Trade not found")
    if trade.status != RequestStatus.PENDING:
        raise AlreadyProcessedError("Trade already processed")
    if not (trade.requester_approved and trade.target_approved):
        raise IncompleteApprovalsError("Both parties must approve first")

    shifts = lock_shifts(db, trade.requester_shift_id, trade.target_shift_id)
    requester_shift = shifts.get(trade.requester_shift_id)
    target_shift = shifts.get(trade.target_shift_id)
    if not requester_shift or not target_shift:
        raise NotFoundError("One or both shifts not found")
    if requester_shift.assigned_to != trade.requester_id or target_shift.assigned_to != trade.target_id:
        raise InvalidStateError("Shift assignments changed since the trade was proposed")

    staff = lock_staff(db, trade.requester_id, trade.target_id)
    requester = check_assignable(staff.get(trade.requester_id))
    target = check_assignable(staff.get(trade.target_id))

    _check_trade_caps(
        db, requester_shift, target_shift, trade.requester_id, trade.target_id,
        requester_message="Trade denied: Requester would exceed 40-hour limit",
        target_message="Trade denied: Target staff would exceed 40-hour limit",
    )

    requester_shift.assigned_to = trade.target_id
    target_shift.assigned_to = trade.requester_id
    trade.admin_approved = True
    trade.status = RequestStatus.APPROVED
    trade.admin_note = admin_note
    trade.actioned_by_user_id = admin_id

    outbox.notify_user(
        requester, "trade_finalized",
        templates.trade_finalized(target_shift.date, target_shift.shift_type, admin_note),
    )
    outbox.notify_user(
        target, "trade_finalized",
        templates.trade_finalized(requester_shift.date, requester_shift.shift_type, admin_note),
    )

    db.commit()
    db.refresh(trade)
    logger.info(f"Trade {trade_id} finalized by admin {admin_id}")
    return trade
