from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.orm import Session

from songbird.api.deps import AuthContext, get_db, get_auth_context
from songbird.schemas.absences import AbsenceCreate, AbsenceResponse
from songbird.services import exchange
from songbird.services.notifications import Outbox, deliver_notifications

router = APIRouter(prefix="/absences", tags=["absences"])


@router.post("", response_model=AbsenceResponse, status_code=status.HTTP_201_CREATED)
def report_absence(
    payload: AbsenceCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
):
    """Staff report their own absence; admins may report on anyone's behalf."""
    outbox = Outbox(db)
    absence = exchange.report_absence(
        db,
        shift_id=payload.shift_id,
        reporter_id=auth.user_id,
        is_admin=auth.is_admin,
        reason=payload.reason,
        outbox=outbox,
    )
    background_tasks.add_task(deliver_notifications, outbox.drain())
    return absence
