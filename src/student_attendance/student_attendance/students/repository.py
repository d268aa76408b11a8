from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Student, StudentInput


class StudentRepository(Protocol):
    """Repository interface for the roster.

    Services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, student_id: str) -> Optional[Student]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Student]:
        """All students in insertion order."""

        raise NotImplementedError

    def create(self, data: StudentInput) -> str:
        """Insert a student and return the store-assigned id."""

        raise NotImplementedError

    def update(self, student_id: str, data: StudentInput) -> bool:
        raise NotImplementedError

    def delete_by_id(self, student_id: str) -> bool:
        raise NotImplementedError
