from __future__ import annotations

import logging
from typing import Sequence

from ..common.validators import optional_phone, require_non_empty, require_phone
from ..core.exceptions import NotFoundError, ValidationError
from .model import Student, StudentInput
from .repository import StudentRepository

logger = logging.getLogger(__name__)


def _optional_text(value):
    if value is None:
        return None
    value = str(value).strip()
    return value or None


class StudentService:
    """Use case: manage the roster (admin)."""

    def __init__(self, students: StudentRepository):
        self._students = students

    def _clean(self, data: StudentInput) -> StudentInput:
        return StudentInput(
            name=require_non_empty(data.name, "Name"),
            phone=require_phone(data.phone),
            father_phone=optional_phone(data.father_phone, "Father phone"),
            mother_phone=optional_phone(data.mother_phone, "Mother phone"),
            date_of_birth=data.date_of_birth,
            year_of_study=_optional_text(data.year_of_study),
            address=_optional_text(data.address),
            church_father_name=_optional_text(data.church_father_name),
        )

    def list_all(self) -> Sequence[Student]:
        return self._students.list_all()

    def get(self, student_id: str) -> Student:
        student = self._students.get_by_id(student_id)
        if not student:
            raise NotFoundError("Student not found")
        return student

    def create(self, data: StudentInput) -> Student:
        student_id = self._students.create(self._clean(data))
        logger.info("Student %s created", student_id)
        return self.get(student_id)

    def update(self, student_id: str, data: StudentInput) -> Student:
        self.get(student_id)
        # MySQL reports affected rows, so saving unchanged fields updates nothing
        self._students.update(student_id, self._clean(data))
        return self.get(student_id)

    def delete(self, student_id: str) -> None:
        """Remove a student from the roster.

        Attendance history is kept; history views show the record as an unknown student.
        """

        self.get(student_id)
        if not self._students.delete_by_id(student_id):
            raise ValidationError("Deleting student failed")
        logger.info("Student %s deleted; attendance history kept", student_id)
