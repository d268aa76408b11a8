from __future__ import annotations


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced student does not exist."""


class DayClosedError(DomainError):
    """Raised when a mutation targets a date whose day has been ended."""

    def __init__(self, day: str):
        super().__init__(f"Attendance for {day} is locked: the day has ended")
        self.day = day


class InvalidStateError(DomainError):
    """Raised when an operation is not allowed in the current state."""


class ScanError(DomainError):
    """Raised by scan decoders; carries a machine-readable reason."""

    def __init__(self, message: str, *, reason: str):
        super().__init__(message)
        self.reason = reason
