from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .closure import ClosurePlan
from .model import AttendanceRecord, DayClosure
from .repository import AttendanceRepository, PlanBuilder

_SELECT = "SELECT student_id, date, status, rating, timestamp FROM attendance"

_UPSERT = """
    INSERT INTO attendance(record_key, student_id, date, status, rating, timestamp)
    VALUES(%s,%s,%s,%s,%s,%s)
    ON DUPLICATE KEY UPDATE
        status=VALUES(status), rating=VALUES(rating), timestamp=VALUES(timestamp)
"""


class _AlreadyClosed(Exception):
    pass


def _row_to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        student_id=r["student_id"],
        date=r["date"],
        status=AttendanceStatus(r["status"]),
        rating=int(r.get("rating") or 0),
        timestamp=r.get("timestamp"),
    )


def _upsert_params(record: AttendanceRecord) -> tuple:
    return (
        record.key,
        record.student_id,
        record.date,
        record.status.value,
        int(record.rating),
        record.timestamp,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_date(self, day: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE date=%s", (day,))
            return [_row_to_record(r) for r in fetchall(cur)]

    def list_for_student(self, student_id: str) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE student_id=%s ORDER BY date DESC", (student_id,))
            return [_row_to_record(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} ORDER BY date DESC")
            return [_row_to_record(r) for r in fetchall(cur)]

    def get_closure(self, day: date) -> Optional[DayClosure]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT date, ended, ended_at FROM attendance_end WHERE date=%s", (day,))
            r = fetchone(cur)
            if not r:
                return None
            return DayClosure(date=r["date"], ended_at=r["ended_at"], ended=bool(r["ended"]))

    def list_closed_dates(self) -> Sequence[date]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT date FROM attendance_end ORDER BY date DESC")
            return [r["date"] for r in fetchall(cur)]

    def upsert_if_open(self, record: AttendanceRecord) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            # Shared lock on the marker row (or its gap) blocks a concurrent closure
            # until this write commits, and waits for an uncommitted closure.
            cur.execute(
                "SELECT date FROM attendance_end WHERE date=%s LOCK IN SHARE MODE",
                (record.date,),
            )
            if fetchone(cur):
                return False
            cur.execute(_UPSERT, _upsert_params(record))
            return True

    def apply_closure(self, *, day: date, ended_at: datetime, plan: PlanBuilder) -> Optional[ClosurePlan]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                # The marker insert waits for guarded writes holding the share lock;
                # rows read after it include every mark that committed first.
                try:
                    cur.execute(
                        "INSERT INTO attendance_end(date, ended, ended_at) VALUES(%s, 1, %s)",
                        (day, ended_at),
                    )
                except mysql.connector.IntegrityError as e:
                    if e.errno == errorcode.ER_DUP_ENTRY:
                        raise _AlreadyClosed() from e
                    raise
                cur.execute(f"{_SELECT} WHERE date=%s FOR UPDATE", (day,))
                result = plan([_row_to_record(r) for r in fetchall(cur)])
                for record in result.records:
                    cur.execute(_UPSERT, _upsert_params(record))
        except _AlreadyClosed:
            return None
        return result
