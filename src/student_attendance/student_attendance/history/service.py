from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..common.datetime_utils import format_iso_date
from ..core.constants import UNKNOWN_STUDENT_NAME, UNRATED
from ..core.enums import AttendanceStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..attendance.repository import AttendanceRepository
from ..students.model import Student
from ..students.repository import StudentRepository

STATUS_FILTERS = ("all", AttendanceStatus.PRESENT.value, AttendanceStatus.ABSENT.value)


@dataclass(frozen=True)
class StudentProfile:
    student: Student
    records: list[dict]
    stats: dict


def _average(values: list[int]) -> float:
    if not values:
        return 0
    return round(sum(values) / len(values), 1)


def _record_row(r) -> dict:
    return {
        "date": format_iso_date(r.date),
        "status": r.status.value,
        "rating": r.rating,
        "time": r.timestamp.strftime("%H:%M") if r.timestamp else "",
    }


class HistoryService:
    """Read-only views over past attendance."""

    def __init__(self, attendance: AttendanceRepository, students: StudentRepository):
        self._attendance = attendance
        self._students = students

    def list_dates(self) -> list[dict]:
        closed = set(self._attendance.list_closed_dates())
        by_date: dict[date, dict] = {}

        for r in self._attendance.list_all():
            row = by_date.get(r.date)
            if not row:
                row = {"date": format_iso_date(r.date), "present": 0, "absent": 0, "closed": r.date in closed}
                by_date[r.date] = row
            row[r.status.value] += 1

        return [by_date[d] for d in sorted(by_date, reverse=True)]

    def date_detail(self, day: date) -> list[dict]:
        students = {s.student_id: s for s in self._students.list_all()}

        rows = []
        for r in self._attendance.list_for_date(day):
            student = students.get(r.student_id)
            row = _record_row(r)
            row.update(
                student_id=r.student_id,
                name=student.name if student else UNKNOWN_STUDENT_NAME,
                year_of_study=(student.year_of_study if student else None) or "N/A",
            )
            rows.append(row)

        rows.sort(key=lambda x: x["name"].lower())
        return rows

    def student_profile(self, student_id: str, *, status_filter: str = "all") -> StudentProfile:
        if status_filter not in STATUS_FILTERS:
            raise ValidationError(f"Unknown filter: {status_filter}")

        student = self._students.get_by_id(student_id)
        if not student:
            raise NotFoundError("Student not found")

        records = list(self._attendance.list_for_student(student_id))
        present = [r for r in records if r.status == AttendanceStatus.PRESENT]

        stats = {
            "total": len(records),
            "present": len(present),
            "absent": len(records) - len(present),
            "average_rating": _average([r.rating for r in present if r.rating > UNRATED]),
        }

        if status_filter != "all":
            records = [r for r in records if r.status.value == status_filter]

        return StudentProfile(student=student, records=[_record_row(r) for r in records], stats=stats)

    def dashboard_stats(self, today: date) -> dict:
        todays = self._attendance.list_for_date(today)
        return {
            "total_students": len(self._students.list_all()),
            "present_today": sum(1 for r in todays if r.status == AttendanceStatus.PRESENT),
            "average_rating": _average([r.rating for r in todays]),
        }
