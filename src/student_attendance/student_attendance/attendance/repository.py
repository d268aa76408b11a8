from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Optional, Protocol, Sequence

from .closure import ClosurePlan
from .model import AttendanceRecord, DayClosure

PlanBuilder = Callable[[Sequence[AttendanceRecord]], ClosurePlan]


class AttendanceRepository(Protocol):
    """Store for the `attendance` and `attendance_end` collections."""

    def list_for_date(self, day: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_student(self, student_id: str) -> Sequence[AttendanceRecord]:
        """All records of a student, newest date first."""

        raise NotImplementedError

    def list_all(self) -> Sequence[AttendanceRecord]:
        """All records, newest date first."""

        raise NotImplementedError

    def get_closure(self, day: date) -> Optional[DayClosure]:
        raise NotImplementedError

    def list_closed_dates(self) -> Sequence[date]:
        raise NotImplementedError

    def upsert_if_open(self, record: AttendanceRecord) -> bool:
        """Insert or replace `record` unless its date is closed.

        Returns False (and writes nothing) when a closure marker exists. The check and
        the write happen atomically.
        """

        raise NotImplementedError

    def apply_closure(self, *, day: date, ended_at: datetime, plan: PlanBuilder) -> Optional[ClosurePlan]:
        """Close `day` and write the plan built from its records, as one transaction.

        The marker is written first; `plan` then receives the date's records read
        under lock, so every mark committed before the closure is seen by it.
        Returns None (and writes nothing) when the day was already closed.
        """

        raise NotImplementedError
