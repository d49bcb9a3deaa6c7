"""
Errors raised by exchange operations.
Every check runs before any mutation, so a raised error means nothing changed.
"""

from typing import Optional

from songbird.services.hours import CapCheck


class ExchangeError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"detail": self.message}


class InvalidStateError(ExchangeError):
    """Operation does not apply to the entity's current state."""


class DuplicatePendingError(InvalidStateError):
    pass


class NotAuthorizedError(ExchangeError):
    status_code = 403


class NotFoundError(ExchangeError):
    status_code = 404


class AlreadyProcessedError(ExchangeError):
    pass


class IncompleteApprovalsError(ExchangeError):
    pass


class CapExceededError(ExchangeError):
    def __init__(self, message: str, check: CapCheck, staff_member: Optional[str] = None):
        super().__init__(message)
        self.check = check
        self.staff_member = staff_member

    def to_dict(self) -> dict:
        body = {"detail": self.message, "details": self.check.to_dict()}
        if self.staff_member:
            body["staff_member"] = self.staff_member
        return body
