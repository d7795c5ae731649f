from __future__ import annotations

from typing import Sequence


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class TransitionError(DomainError):
    """A refused attendance action.

    Carries the actions that are legal from the subject's current state so
    callers can tell the user what to do instead.
    """

    code = "TRANSITION_REFUSED"

    def __init__(self, message: str, *, allowed_actions: Sequence = ()):
        super().__init__(message)
        self.allowed_actions = tuple(allowed_actions)


class AlreadyCheckedIn(TransitionError):
    code = "ALREADY_CHECKED_IN"


class NotCheckedIn(TransitionError):
    code = "NOT_CHECKED_IN"


class AlreadyOnBreak(TransitionError):
    code = "ALREADY_ON_BREAK"


class NotOnBreak(TransitionError):
    code = "NOT_ON_BREAK"


class AlreadyCheckedOutToday(TransitionError):
    code = "ALREADY_CHECKED_OUT_TODAY"


class BreakStillOpen(TransitionError):
    code = "BREAK_STILL_OPEN"


class OutOfOrderEvent(TransitionError):
    code = "OUT_OF_ORDER_EVENT"


class ConcurrentModification(TransitionError):
    """Another writer appended to the same day first; safe to retry."""

    code = "CONCURRENT_MODIFICATION"


class LookupFailure(DomainError):
    """Caller referenced something that does not exist or makes no sense."""

    code = "LOOKUP_FAILED"


class EmployeeNotFound(LookupFailure):
    code = "EMPLOYEE_NOT_FOUND"


class InvalidDateRange(LookupFailure):
    code = "INVALID_DATE_RANGE"


class PersistenceError(Exception):
    """Raised when the backing store is unavailable.

    Not a DomainError: it is transient and the caller may retry.
    """

    code = "STORE_UNAVAILABLE"
