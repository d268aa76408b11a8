from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import format_iso_date, now_local
from ..common.validators import require_rating
from ..core.constants import UNRATED
from ..core.enums import AttendanceStatus
from ..core.exceptions import DayClosedError, InvalidStateError, NotFoundError, ValidationError
from ..students.repository import StudentRepository
from .closure import ClosurePlan, DayClosurePolicy
from .model import AttendanceRecord, ClosureResult, DayClosure, Ledger, LedgerEntry
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def _as_status(value) -> AttendanceStatus:
    try:
        return AttendanceStatus(value)
    except ValueError:
        raise ValidationError(f"Unknown attendance status: {value!r}") from None


class AttendanceService:
    """Daily attendance workflow: mark, rate, and end the day.

    Every rule is checked before the store is touched. The closed-day check is
    repeated atomically by the repository, so a closure racing a mutation still
    wins cleanly.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        students: StudentRepository,
        *,
        closure_policy: DayClosurePolicy | None = None,
    ):
        self._attendance = attendance
        self._students = students
        self._policy = closure_policy or DayClosurePolicy()

    def load_for_date(self, day: date) -> Ledger:
        return Ledger.from_records(day, self._attendance.list_for_date(day))

    def is_day_closed(self, day: date) -> bool:
        return self._attendance.get_closure(day) is not None

    def get_closure(self, day: date) -> Optional[DayClosure]:
        return self._attendance.get_closure(day)

    def _require_open(self, day: date) -> None:
        if self.is_day_closed(day):
            raise DayClosedError(format_iso_date(day))

    def _require_student(self, student_id: str) -> None:
        if not self._students.get_by_id(student_id):
            raise NotFoundError("Student not found")

    def _write(self, record: AttendanceRecord) -> LedgerEntry:
        if not self._attendance.upsert_if_open(record):
            logger.warning("Rejected write to %s: day already ended", record.key)
            raise DayClosedError(format_iso_date(record.date))
        return record.to_entry()

    def set_status(
        self,
        student_id: str,
        status: AttendanceStatus | str,
        day: date,
        *,
        now: datetime | None = None,
    ) -> LedgerEntry:
        self._require_open(day)
        status = _as_status(status)
        self._require_student(student_id)

        current = self.load_for_date(day).get(student_id)
        rating = current.rating if current else UNRATED

        return self._write(
            AttendanceRecord(
                student_id=student_id,
                date=day,
                status=status,
                rating=rating,
                timestamp=now or now_local(),
            )
        )

    def set_rating(self, student_id: str, rating: int, day: date, *, now: datetime | None = None) -> LedgerEntry:
        self._require_open(day)
        rating = require_rating(rating)

        current = self.load_for_date(day).get(student_id)
        if not current or not current.is_present:
            raise InvalidStateError("Only students marked present can be rated")

        return self._write(
            AttendanceRecord(
                student_id=student_id,
                date=day,
                status=current.status,
                rating=rating,
                timestamp=now or now_local(),
            )
        )

    def end_day(self, day: date, *, now: datetime | None = None) -> ClosureResult:
        """Finalize `day`: default every roster student's outcome and lock the date.

        All writes and the closure marker are committed together; if anything fails
        nothing is written and the call can simply be repeated. The plan is built
        inside that transaction from the records read after the marker.
        """

        self._require_open(day)
        now = now or now_local()
        roster = self._students.list_all()

        def build(records) -> ClosurePlan:
            return self._policy.plan(roster=roster, ledger=Ledger.from_records(day, records), now=now)

        plan = self._attendance.apply_closure(day=day, ended_at=now, plan=build)
        if plan is None:
            raise DayClosedError(format_iso_date(day))

        logger.info(
            "Day %s ended: %d students, %d marked absent, %d default ratings",
            format_iso_date(day),
            len(roster),
            plan.marked_absent,
            plan.defaulted_ratings,
        )
        return ClosureResult(
            closure=DayClosure(date=day, ended_at=now),
            ledger=plan.ledger,
            marked_absent=plan.marked_absent,
            defaulted_ratings=plan.defaulted_ratings,
        )
