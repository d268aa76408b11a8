from __future__ import annotations

from datetime import date

from flask import jsonify

from ..core.exceptions import (
    DayClosedError,
    DomainError,
    InvalidStateError,
    NotFoundError,
    ScanError,
    ValidationError,
)
from .datetime_utils import parse_iso_date

_STATUS_CODES = (
    (NotFoundError, 404),
    (DayClosedError, 409),
    (InvalidStateError, 409),
    (ScanError, 400),
    (ValidationError, 400),
)


def fail(message: str, code: int):
    return jsonify({"success": False, "message": message}), code


def domain_error(e: DomainError):
    """JSON response for a rejected user action."""
    for exc_type, code in _STATUS_CODES:
        if isinstance(e, exc_type):
            return fail(str(e), code)
    return fail(str(e), 400)


def parse_day(value: str) -> date:
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError(f"Invalid date: {value!r} (expected YYYY-MM-DD)") from None
