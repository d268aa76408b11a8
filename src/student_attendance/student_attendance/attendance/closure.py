from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Sequence

from ..core.enums import AttendanceStatus
from ..students.model import Student
from .factory import ClosureStrategyFactory
from .model import AttendanceRecord, Ledger


@dataclass(frozen=True)
class ClosurePlan:
    records: list[AttendanceRecord]
    ledger: Ledger
    marked_absent: int
    defaulted_ratings: int


class DayClosurePolicy:
    """Computes the writes that finalize a date.

    Pure: takes the roster and the current ledger, returns one record per roster
    student plus the ledger as it reads once those are applied. It always works
    from the ledger it is given, so re-running it after a failed closure produces
    the same outcome.
    """

    def __init__(self, factory: ClosureStrategyFactory | None = None):
        self._factory = factory or ClosureStrategyFactory()

    def plan(self, *, roster: Sequence[Student], ledger: Ledger, now: datetime) -> ClosurePlan:
        records: list[AttendanceRecord] = []
        closed = ledger
        marked_absent = 0
        defaulted = 0

        for student in roster:
            current = ledger.get(student.student_id)
            decision = self._factory.for_entry(current).decide(current)

            if decision.status == AttendanceStatus.ABSENT:
                marked_absent += 1
            elif current is None or current.rating != decision.rating:
                defaulted += 1

            record = AttendanceRecord(
                student_id=student.student_id,
                date=ledger.date,
                status=decision.status,
                rating=decision.rating,
                timestamp=now,
            )
            records.append(record)
            closed = closed.with_entry(record.student_id, record.to_entry())

        return ClosurePlan(
            records=records,
            ledger=closed,
            marked_absent=marked_absent,
            defaulted_ratings=defaulted,
        )
