from songbird.db.database import Base

# Import models
from songbird.db.models.users import Users, UserRole, OPEN_SHIFT_USERNAME
from songbird.db.models.shifts import Shifts, ShiftType
from songbird.db.models.shift_requests import ShiftRequests, RequestStatus
from songbird.db.models.trade_requests import TradeRequests
from songbird.db.models.time_off_requests import TimeOffRequests, TimeOffType
from songbird.db.models.absences import Absences
from songbird.db.models.notifications import NotificationLog

__all__ = [
    "Base",
    # Models
    "Users",
    "Shifts",
    "ShiftRequests",
    "TradeRequests",
    "TimeOffRequests",
    "Absences",
    "NotificationLog",
    # Enums
    "UserRole",
    "ShiftType",
    "RequestStatus",
    "TimeOffType",
    # Constants
    "OPEN_SHIFT_USERNAME",
]
