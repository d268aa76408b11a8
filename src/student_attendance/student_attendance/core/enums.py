from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Attendance status stored per student per date."""

    PRESENT = "present"
    ABSENT = "absent"


class ScanState(str, Enum):
    """States of a single scan surface session."""

    IDLE = "idle"
    AWAITING_PERMISSION = "awaiting_permission"
    SCANNING = "scanning"
    MATCHED = "matched"
    CANCELLED = "cancelled"
    ERROR = "error"


class ScanErrorReason(str, Enum):
    PERMISSION_DENIED = "permission_denied"
    NO_CAMERA = "no_camera"
    CAMERA_IN_USE = "camera_in_use"
    DECODER_FAILURE = "decoder_failure"
    NOT_FOUND = "not_found"
    DAY_CLOSED = "day_closed"
