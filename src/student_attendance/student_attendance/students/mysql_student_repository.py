from __future__ import annotations

import uuid
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Student, StudentInput
from .repository import StudentRepository

_COLUMNS = """
    student_id, name, phone, father_phone, mother_phone, date_of_birth,
    year_of_study, address, church_father_name, created_at, updated_at
"""


def _row_to_student(r: dict) -> Student:
    return Student(
        student_id=r["student_id"],
        name=r["name"],
        phone=r["phone"],
        father_phone=r.get("father_phone"),
        mother_phone=r.get("mother_phone"),
        date_of_birth=r.get("date_of_birth"),
        year_of_study=r.get("year_of_study"),
        address=r.get("address"),
        church_father_name=r.get("church_father_name"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


def _params(data: StudentInput) -> tuple:
    return (
        data.name,
        data.phone,
        data.father_phone,
        data.mother_phone,
        data.date_of_birth,
        data.year_of_study,
        data.address,
        data.church_father_name,
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, student_id: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE student_id=%s", (student_id,))
            r = fetchone(cur)
            return _row_to_student(r) if r else None

    def list_all(self) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students ORDER BY created_at ASC, student_id ASC")
            return [_row_to_student(r) for r in fetchall(cur)]

    def create(self, data: StudentInput) -> str:
        student_id = uuid.uuid4().hex
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO students(
                    student_id, name, phone, father_phone, mother_phone,
                    date_of_birth, year_of_study, address, church_father_name
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (student_id, *_params(data)),
            )
        return student_id

    def update(self, student_id: str, data: StudentInput) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE students
                SET name=%s, phone=%s, father_phone=%s, mother_phone=%s,
                    date_of_birth=%s, year_of_study=%s, address=%s, church_father_name=%s
                WHERE student_id=%s
                """,
                (*_params(data), student_id),
            )
            return cur.rowcount > 0

    def delete_by_id(self, student_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM students WHERE student_id=%s", (student_id,))
            return cur.rowcount > 0
