from __future__ import annotations

import logging
from functools import wraps

from flask import jsonify

from ..core.exceptions import (
    DomainError,
    EmployeeNotFound,
    LookupFailure,
    PersistenceError,
    TransitionError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def ok(data=None, status: int = 200, **extra):
    body = {"success": True}
    if data is not None:
        body["data"] = data
    body.update(extra)
    return jsonify(body), status


def _fail(message: str, error: str, status: int, allowed_actions=()):
    return (
        jsonify(
            {
                "success": False,
                "message": message,
                "error": error,
                "allowedActions": [a.value if hasattr(a, "value") else str(a) for a in allowed_actions],
            }
        ),
        status,
    )


def error_response(exc: Exception):
    """Map a raised error onto the JSON error envelope."""

    if isinstance(exc, TransitionError):
        return _fail(str(exc), exc.code, 409, exc.allowed_actions)
    if isinstance(exc, EmployeeNotFound):
        return _fail(str(exc), exc.code, 404)
    if isinstance(exc, LookupFailure):
        return _fail(str(exc), exc.code, 400)
    if isinstance(exc, ValidationError):
        return _fail(str(exc), "VALIDATION_ERROR", 400)
    if isinstance(exc, DomainError):
        return _fail(str(exc), "DOMAIN_ERROR", 400)
    if isinstance(exc, PersistenceError):
        return _fail("Attendance store is unavailable, please retry", exc.code, 503)
    return _fail("Internal error", "INTERNAL_ERROR", 500)


def api_errors(view):
    """Turn domain and store errors raised by a view into JSON responses."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except (DomainError, PersistenceError) as e:
            if isinstance(e, PersistenceError):
                logger.error("Store failure in %s: %s", view.__name__, e)
            return error_response(e)

    return wrapper
