from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional

from ..common.datetime_utils import now_local
from ..core.enums import AttendanceStatus, ScanErrorReason, ScanState
from ..core.exceptions import DayClosedError, InvalidStateError, ScanError
from ..students.model import Student
from .decoder import Decoder
from .lookup import RosterLookup

logger = logging.getLogger(__name__)

PERMISSION_MESSAGES = {
    ScanErrorReason.PERMISSION_DENIED: "Camera access was denied. Allow camera access and reopen the scanner.",
    ScanErrorReason.NO_CAMERA: "No camera was found on this device.",
    ScanErrorReason.CAMERA_IN_USE: "The camera is in use by another application.",
}

TERMINAL_STATES = frozenset({ScanState.MATCHED, ScanState.CANCELLED, ScanState.ERROR})


@dataclass(frozen=True)
class ScanOutcome:
    state: ScanState
    message: str
    student: Optional[Student] = None
    reason: Optional[ScanErrorReason] = None

    @property
    def success(self) -> bool:
        return self.state == ScanState.MATCHED


class ScanSession:
    """One use of the scan surface.

    idle -> awaiting_permission -> scanning -> matched | cancelled | error.
    Terminal states accept no further events; to scan again, open a new session.
    A match marks the student present for today through the attendance service.
    """

    def __init__(
        self,
        lookup: RosterLookup,
        attendance,
        *,
        decoder: Optional[Decoder] = None,
        today: Callable[[], date] | None = None,
    ):
        self._lookup = lookup
        self._attendance = attendance
        self._decoder = decoder
        self._today = today or (lambda: now_local().date())
        self.state = ScanState.IDLE
        self.outcome: Optional[ScanOutcome] = None

    @property
    def finished(self) -> bool:
        return self.state in TERMINAL_STATES

    def _expect(self, *states: ScanState) -> None:
        if self.state not in states:
            raise InvalidStateError(f"Scan session is {self.state.value}")

    def _finish(self, outcome: ScanOutcome) -> ScanOutcome:
        if self._decoder is not None and self.state == ScanState.SCANNING:
            self._decoder.stop()
        self.state = outcome.state
        self.outcome = outcome
        logger.info("Scan session %s: %s", outcome.state.value, outcome.message)
        return outcome

    def _fail(self, reason: ScanErrorReason, message: str) -> ScanOutcome:
        return self._finish(ScanOutcome(state=ScanState.ERROR, message=message, reason=reason))

    def open(self) -> None:
        self._expect(ScanState.IDLE)
        self.state = ScanState.AWAITING_PERMISSION

    def permission_granted(self) -> None:
        self._expect(ScanState.AWAITING_PERMISSION)
        self.state = ScanState.SCANNING
        if self._decoder is not None:
            self._decoder.start(self.on_decode, self.on_error)

    def permission_denied(self, reason: ScanErrorReason | str = ScanErrorReason.PERMISSION_DENIED) -> ScanOutcome:
        self._expect(ScanState.AWAITING_PERMISSION)
        reason = ScanErrorReason(reason)
        message = PERMISSION_MESSAGES.get(reason, PERMISSION_MESSAGES[ScanErrorReason.PERMISSION_DENIED])
        return self._fail(reason, message)

    def on_decode(self, raw_value: str) -> Optional[ScanOutcome]:
        self._expect(ScanState.SCANNING)
        if not raw_value:
            # empty frame; keep scanning
            return None

        student = self._lookup.find_by_scan_key(raw_value)
        if student is None:
            return self._fail(ScanErrorReason.NOT_FOUND, "No student found with this phone number.")

        try:
            self._attendance.set_status(student.student_id, AttendanceStatus.PRESENT, self._today())
        except DayClosedError as e:
            return self._fail(ScanErrorReason.DAY_CLOSED, str(e))

        return self._finish(
            ScanOutcome(state=ScanState.MATCHED, message=f"Marked {student.name} as present!", student=student)
        )

    def on_error(self, error: Exception) -> ScanOutcome:
        self._expect(ScanState.SCANNING)
        if isinstance(error, ScanError):
            return self._fail(ScanErrorReason(error.reason), str(error))
        return self._fail(ScanErrorReason.DECODER_FAILURE, f"QR scan error: {error}")

    def close(self) -> Optional[ScanOutcome]:
        """User closed the scan surface. Closing a finished session is a no-op."""

        if self.finished:
            return self.outcome
        return self._finish(ScanOutcome(state=ScanState.CANCELLED, message="Scan cancelled."))
