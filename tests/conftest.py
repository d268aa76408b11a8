from __future__ import annotations

from datetime import date, datetime
from typing import Optional

import pytest

from src.student_attendance.student_attendance.attendance.model import AttendanceRecord, DayClosure
from src.student_attendance.student_attendance.attendance.service import AttendanceService
from src.student_attendance.student_attendance.students.model import Student, StudentInput


class InMemoryStudents:
    def __init__(self, students: list[Student] | None = None):
        self._students: list[Student] = list(students or [])
        self._id = 0

    def get_by_id(self, student_id: str) -> Optional[Student]:
        return next((s for s in self._students if s.student_id == student_id), None)

    def list_all(self):
        return list(self._students)

    def create(self, data: StudentInput) -> str:
        self._id += 1
        student_id = f"s{self._id}"
        self._students.append(Student(student_id=student_id, **vars(data)))
        return student_id

    def update(self, student_id: str, data: StudentInput) -> bool:
        for i, s in enumerate(self._students):
            if s.student_id == student_id:
                updated = Student(student_id=student_id, **vars(data))
                self._students[i] = updated
                # affected rows, like MySQL without FOUND_ROWS
                return updated != s
        return False

    def delete_by_id(self, student_id: str) -> bool:
        before = len(self._students)
        self._students = [s for s in self._students if s.student_id != student_id]
        return len(self._students) < before


class InMemoryAttendance:
    """Fake store with the same atomicity as the MySQL repository."""

    def __init__(self):
        self.records: dict[str, AttendanceRecord] = {}
        self.closures: dict[date, DayClosure] = {}
        self.writes = 0
        self.fail_closure = False

    def list_for_date(self, day: date):
        return [r for r in self.records.values() if r.date == day]

    def list_for_student(self, student_id: str):
        items = [r for r in self.records.values() if r.student_id == student_id]
        return sorted(items, key=lambda r: r.date, reverse=True)

    def list_all(self):
        return sorted(self.records.values(), key=lambda r: r.date, reverse=True)

    def get_closure(self, day: date) -> Optional[DayClosure]:
        return self.closures.get(day)

    def list_closed_dates(self):
        return sorted(self.closures, reverse=True)

    def upsert_if_open(self, record: AttendanceRecord) -> bool:
        if record.date in self.closures:
            return False
        self.records[record.key] = record
        self.writes += 1
        return True

    def apply_closure(self, *, day: date, ended_at: datetime, plan):
        if day in self.closures:
            return None
        if self.fail_closure:
            raise ConnectionError("store unavailable")
        result = plan(self.list_for_date(day))
        for r in result.records:
            self.records[r.key] = r
            self.writes += 1
        self.closures[day] = DayClosure(date=day, ended_at=ended_at)
        return result


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 2, 1, 9, 30, 0)


@pytest.fixture
def day(fixed_now) -> date:
    return fixed_now.date()


@pytest.fixture
def student_a() -> Student:
    return Student(student_id="a", name="Mina Youssef", phone="01012345678", year_of_study="Year 1")


@pytest.fixture
def student_b() -> Student:
    return Student(student_id="b", name="Kirollos Adel", phone="01198765432")


@pytest.fixture
def students_repo(student_a, student_b) -> InMemoryStudents:
    return InMemoryStudents([student_a, student_b])


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def attendance_service(attendance_repo, students_repo) -> AttendanceService:
    return AttendanceService(attendance_repo, students_repo)
