import logging
from typing import Optional

from sqlalchemy.orm import Session

from songbird.db.models.absences import Absences
from songbird.db.models.shifts import Shifts
from songbird.db.models.users import Users
from songbird.services.notifications import Outbox, templates

from .errors import InvalidStateError, NotAuthorizedError, NotFoundError


logger = logging.getLogger(__name__)


def report_absence(
    db: Session,
    shift_id: int,
    reporter_id: int,
    is_admin: bool = False,
    reason: Optional[str] = None,
    outbox: Optional[Outbox] = None,
) -> Absences:
    """Record that the assignee can't work a shift and alert every admin. The shift itself is untouched."""
    outbox = outbox or Outbox(db)

    shift = db.get(Shifts, shift_id)
    if not shift:
        raise NotFoundError("Shift not found")
    if shift.assigned_to is None:
        raise InvalidStateError("Shift is not assigned")
    if not is_admin and shift.assigned_to != reporter_id:
        raise NotAuthorizedError("Can only report your own absences")

    absence = Absences(
        shift_id=shift.id,
        user_id=shift.assigned_to,
        reported_by_user_id=reporter_id,
        reason=reason,
    )
    db.add(absence)

    staff = db.get(Users, shift.assigned_to)
    staff_name = staff.full_name if staff else "Unknown"
    outbox.notify_admins("emergency_absence", templates.emergency_absence(staff_name, shift.date, shift.shift_type))

    db.commit()
    db.refresh(absence)
    logger.warning(f"Absence reported for shift {shift.id} ({shift.date} {shift.shift_type.value}), user {shift.assigned_to}")
    return absence
