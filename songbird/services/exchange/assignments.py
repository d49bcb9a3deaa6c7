"""
Direct shift assignment by admins: single create/update and bulk create.
Every path that puts a staff member on a shift goes through the weekly cap check.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from songbird.db.models.shifts import Shifts, ShiftType
from songbird.db.models.users import Users
from songbird.services.hours import check_cap_for_user
from songbird.services.notifications import Outbox, templates

from .errors import CapExceededError, ExchangeError, InvalidStateError, NotFoundError
from .locks import lock_assignee, lock_row, lock_staff


logger = logging.getLogger(__name__)


@dataclass
class BulkResult:
    created: list[Shifts] = field(default_factory=list)
    skipped: list[dict] = field(default_factory=list)


def _find_shift(db: Session, shift_date: date, shift_type: ShiftType) -> Optional[Shifts]:
    stmt = select(Shifts).where(Shifts.date == shift_date, Shifts.shift_type == shift_type)
    return db.execute(stmt).scalar_one_or_none()


def _check_assignee_cap(db: Session, assignee: Users, shift_date: date, shift_type: ShiftType,
                        exclude_shift_id: Optional[int] = None) -> None:
    check = check_cap_for_user(db, assignee.id, shift_date, shift_type, exclude_shift_id=exclude_shift_id)
    if check.would_exceed:
        logger.info(
            f"Assignment of {shift_type.value} {shift_date} to user {assignee.id} refused: "
            f"{check.current_hours}h + {check.shift_hours}h > cap"
        )
        raise CapExceededError("Would exceed 40-hour limit", check, "assignee")


def create_shift(
    db: Session,
    shift_date: date,
    shift_type,
    created_by: int,
    assigned_to: Optional[int] = None,
    is_open: bool = False,
    is_preliminary: bool = False,
    notes: Optional[str] = None,
    outbox: Optional[Outbox] = None,
) -> Shifts:
    """
    Create one shift. An open shift never has an assignee; otherwise the
    assignee must be an active staff member who stays within the weekly cap.
    """
    outbox = outbox or Outbox(db)
    kind = ShiftType(shift_type)

    if _find_shift(db, shift_date, kind):
        raise InvalidStateError("Shift already exists for this date and time")

    assignee = None
    if assigned_to is not None and not is_open:
        assignee = lock_assignee(db, assigned_to)
        _check_assignee_cap(db, assignee, shift_date, kind)

    shift = Shifts(
        date=shift_date,
        shift_type=kind,
        assigned_to=assignee.id if assignee else None,
        is_open=bool(is_open),
        is_preliminary=is_preliminary,
        notes=notes,
        created_by_user_id=created_by,
    )
    db.add(shift)

    if assignee:
        outbox.notify_user(assignee, "shift_assigned", templates.shift_assigned(shift_date, kind))

    try:
        db.commit()
    except IntegrityError:
        # a concurrent create won the (date, shift_type) slot
        db.rollback()
        outbox.drain()
        raise InvalidStateError("Shift already exists for this date and time")

    db.refresh(shift)
    logger.info(f"Shift {shift.id} created for {shift_date} {kind.value} by user {created_by}")
    return shift


def update_shift(
    db: Session,
    shift_id: int,
    changes: dict,
    outbox: Optional[Outbox] = None,
) -> Shifts:
    """
    Apply a partial update. Opening a shift clears its assignee; assigning a
    different staff member re-runs the cap check with this shift excluded.
    """
    outbox = outbox or Outbox(db)

    shift = lock_row(db, Shifts, shift_id)
    if not shift:
        raise NotFoundError("Shift not found")

    opening = changes.get("is_open") is True
    new_assignee_id = changes.get("assigned_to")
    reassigning = (
        not opening
        and "assigned_to" in changes
        and new_assignee_id is not None
        and new_assignee_id != shift.assigned_to
    )

    assignee = None
    if reassigning:
        assignee = lock_assignee(db, new_assignee_id)
        _check_assignee_cap(db, assignee, shift.date, shift.shift_type, exclude_shift_id=shift.id)

    if opening:
        shift.assigned_to = None
        shift.is_open = True
    elif "assigned_to" in changes:
        shift.assigned_to = new_assignee_id
        if new_assignee_id is not None:
            shift.is_open = False
        elif "is_open" in changes:
            shift.is_open = bool(changes["is_open"])
    elif "is_open" in changes:
        shift.is_open = bool(changes["is_open"])

    if "is_preliminary" in changes:
        shift.is_preliminary = bool(changes["is_preliminary"])
    if "notes" in changes:
        shift.notes = changes["notes"]

    if assignee:
        outbox.notify_user(assignee, "shift_assigned", templates.shift_assigned(shift.date, shift.shift_type))

    db.commit()
    db.refresh(shift)
    logger.info(f"Shift {shift.id} updated: {sorted(changes)}")
    return shift


def bulk_create_shifts(
    db: Session,
    items: list[dict],
    created_by: int,
    outbox: Optional[Outbox] = None,
) -> BulkResult:
    """
    Create many shifts in one transaction.

    Items that collide with an existing slot, name an unusable assignee, or
    would push the assignee over the cap are skipped, not fatal. Shifts created
    earlier in the batch count towards later cap checks.
    """
    outbox = outbox or Outbox(db)
    result = BulkResult()

    assignee_ids = [item.get("assigned_to") for item in items if not item.get("is_open")]
    lock_staff(db, *assignee_ids)

    for index, item in enumerate(items):
        shift_date = item["date"]
        kind = ShiftType(item["shift_type"])
        is_open = bool(item.get("is_open", False))
        assigned_to = None if is_open else item.get("assigned_to")

        if _find_shift(db, shift_date, kind):
            result.skipped.append({"index": index, "reason": "Shift already exists for this date and time"})
            continue

        assignee = None
        if assigned_to is not None:
            try:
                assignee = lock_assignee(db, assigned_to)
                _check_assignee_cap(db, assignee, shift_date, kind)
            except ExchangeError as e:
                result.skipped.append({"index": index, "reason": e.message})
                continue

        shift = Shifts(
            date=shift_date,
            shift_type=kind,
            assigned_to=assignee.id if assignee else None,
            is_open=is_open,
            is_preliminary=bool(item.get("is_preliminary", False)),
            notes=item.get("notes"),
            created_by_user_id=created_by,
        )
        db.add(shift)
        # later cap checks and duplicate lookups must see this row
        db.flush()
        result.created.append(shift)

        if assignee:
            outbox.notify_user(assignee, "shift_assigned", templates.shift_assigned(shift_date, kind))

    db.commit()
    for shift in result.created:
        db.refresh(shift)

    logger.info(f"Bulk create by user {created_by}: {len(result.created)} created, {len(result.skipped)} skipped")
    return result
