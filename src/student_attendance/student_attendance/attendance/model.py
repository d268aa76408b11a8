from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Mapping, Optional

from ..common.datetime_utils import format_iso_date
from ..core.constants import UNRATED
from ..core.enums import AttendanceStatus


def record_key(day: date, student_id: str) -> str:
    """Store key of an attendance record: one record per student per date."""
    return f"{format_iso_date(day)}_{student_id}"


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student's attendance on one date."""

    student_id: str
    date: date
    status: AttendanceStatus
    rating: int = UNRATED
    timestamp: Optional[datetime] = None

    @property
    def key(self) -> str:
        return record_key(self.date, self.student_id)

    def to_entry(self) -> "LedgerEntry":
        return LedgerEntry(status=self.status, rating=self.rating)


@dataclass(frozen=True)
class LedgerEntry:
    status: AttendanceStatus
    rating: int = UNRATED

    @property
    def is_present(self) -> bool:
        return self.status == AttendanceStatus.PRESENT


@dataclass(frozen=True)
class Ledger:
    """Snapshot of one date's attendance, keyed by student id.

    Ledgers are immutable; views hold a snapshot and ask the service for a new one.
    Students with no record are simply missing from `entries`.
    """

    date: date
    entries: Mapping[str, LedgerEntry] = field(default_factory=dict)

    @classmethod
    def from_records(cls, day: date, records) -> "Ledger":
        return cls(date=day, entries={r.student_id: r.to_entry() for r in records})

    def get(self, student_id: str) -> Optional[LedgerEntry]:
        return self.entries.get(student_id)

    def status_of(self, student_id: str) -> Optional[AttendanceStatus]:
        entry = self.entries.get(student_id)
        return entry.status if entry else None

    def with_entry(self, student_id: str, entry: LedgerEntry) -> "Ledger":
        entries = dict(self.entries)
        entries[student_id] = entry
        return replace(self, entries=entries)


@dataclass(frozen=True)
class DayClosure:
    """Marker that a date has ended; its existence locks the date."""

    date: date
    ended_at: datetime
    ended: bool = True


@dataclass(frozen=True)
class ClosureResult:
    closure: DayClosure
    ledger: Ledger
    marked_absent: int
    defaulted_ratings: int
