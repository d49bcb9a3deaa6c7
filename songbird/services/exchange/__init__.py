"""
Exchange engine: every state transition that moves a shift between people.

Usage:
    from songbird.services.exchange import propose_trade, CapExceededError
    from songbird.services.notifications import Outbox, deliver_notifications

    outbox = Outbox(db)
    try:
        trade = propose_trade(db, requester_id=1, requester_shift_id=10, target_shift_id=12, outbox=outbox)
    except CapExceededError as e:
        print(e.check.projected_hours)
    deliver_notifications(outbox.drain())

Each operation validates, locks, mutates and commits in one transaction.
A raised ExchangeError means no state changed.
"""

from .errors import (
    ExchangeError,
    InvalidStateError,
    DuplicatePendingError,
    NotAuthorizedError,
    NotFoundError,
    AlreadyProcessedError,
    IncompleteApprovalsError,
    CapExceededError,
)
from .assignments import BulkResult, create_shift, update_shift, bulk_create_shifts
from .shift_requests import create_shift_request, approve_shift_request, deny_shift_request
from .trade_requests import propose_trade, approve_trade_as_target, deny_trade_as_target, finalize_trade
from .time_off import create_time_off_request, approve_time_off_request, deny_time_off_request
from .absences import report_absence

__all__ = [
    # Errors
    "ExchangeError",
    "InvalidStateError",
    "DuplicatePendingError",
    "NotAuthorizedError",
    "NotFoundError",
    "AlreadyProcessedError",
    "IncompleteApprovalsError",
    "CapExceededError",
    # Assignments
    "BulkResult",
    "create_shift",
    "update_shift",
    "bulk_create_shifts",
    # Shift requests
    "create_shift_request",
    "approve_shift_request",
    "deny_shift_request",
    # Trades
    "propose_trade",
    "approve_trade_as_target",
    "deny_trade_as_target",
    "finalize_trade",
    # Time off and absences
    "create_time_off_request",
    "approve_time_off_request",
    "deny_time_off_request",
    "report_absence",
]
