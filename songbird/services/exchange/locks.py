"""
Row locks for exchange transitions.

Each transition reads, checks and writes inside one transaction. Rows that feed
the decision are loaded SELECT ... FOR UPDATE so two requests can't both pass a
cap check for the same staff member. Locking a staff member's users row
serialises every assignment path that touches their weekly total.

Lock order is always: request row, then shifts by id, then users by id.
SQLite ignores FOR UPDATE; it serialises writers on its own.
"""

from typing import Optional, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.orm import Session

from songbird.db.database import Base
from songbird.db.models.shifts import Shifts
from songbird.db.models.users import Users

from .errors import InvalidStateError, NotFoundError

ModelT = TypeVar("ModelT", bound=Base)


def lock_row(db: Session, model: Type[ModelT], row_id: int) -> Optional[ModelT]:
    stmt = (
        select(model)
        .where(model.id == row_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return db.execute(stmt).scalar_one_or_none()


def _lock_many(db: Session, model, ids) -> dict:
    wanted = sorted({i for i in ids if i is not None})
    if not wanted:
        return {}
    stmt = (
        select(model)
        .where(model.id.in_(wanted))
        .order_by(model.id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return {row.id: row for row in db.execute(stmt).scalars().all()}


def lock_shifts(db: Session, *shift_ids: int) -> dict[int, Shifts]:
    return _lock_many(db, Shifts, shift_ids)


def lock_staff(db: Session, *user_ids: int) -> dict[int, Users]:
    return _lock_many(db, Users, user_ids)


def check_assignable(user: Optional[Users]) -> Users:
    """System and inactive accounts can't hold shifts."""
    if not user:
        raise NotFoundError("Staff member not found")
    if user.is_system:
        raise InvalidStateError("The open-shift placeholder cannot be assigned shifts")
    if not user.is_active:
        raise InvalidStateError("Staff member is not active")
    return user


def lock_assignee(db: Session, user_id: int) -> Users:
    """Lock a user who is about to receive a shift."""
    return check_assignable(lock_staff(db, user_id).get(user_id))
