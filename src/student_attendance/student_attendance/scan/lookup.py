from __future__ import annotations

from typing import Optional

from ..students.model import Student
from ..students.repository import StudentRepository


class RosterLookup:
    """Resolve a scanned string to a student by exact phone match.

    No trimming or reformatting is applied: the QR payload must equal the stored
    phone exactly. The first match in roster order wins.
    """

    def __init__(self, students: StudentRepository):
        self._students = students

    def find_by_scan_key(self, raw_value: str) -> Optional[Student]:
        if not raw_value:
            return None
        for student in self._students.list_all():
            if student.phone == raw_value:
                return student
        return None
