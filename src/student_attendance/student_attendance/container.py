from __future__ import annotations

from dataclasses import dataclass

from .attendance.closure import DayClosurePolicy
from .attendance.factory import ClosureStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_CLOSURE_RATING
from .database.connection import DBConfig, DatabaseConnection
from .history.service import HistoryService
from .scan.lookup import RosterLookup
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .students.service import StudentService


@dataclass(frozen=True)
class Container:
    students_repo: StudentRepository
    attendance_repo: AttendanceRepository

    student_service: StudentService
    attendance_service: AttendanceService
    history_service: HistoryService
    roster_lookup: RosterLookup


def wire(
    students_repo: StudentRepository,
    attendance_repo: AttendanceRepository,
    *,
    default_closure_rating: int = DEFAULT_CLOSURE_RATING,
) -> Container:
    policy = DayClosurePolicy(ClosureStrategyFactory(default_rating=default_closure_rating))

    return Container(
        students_repo=students_repo,
        attendance_repo=attendance_repo,
        student_service=StudentService(students_repo),
        attendance_service=AttendanceService(attendance_repo, students_repo, closure_policy=policy),
        history_service=HistoryService(attendance_repo, students_repo),
        roster_lookup=RosterLookup(students_repo),
    )


def build_container(*, db_config: dict, default_closure_rating: int = DEFAULT_CLOSURE_RATING) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    return wire(
        MySQLStudentRepository(conn),
        MySQLAttendanceRepository(conn),
        default_closure_rating=default_closure_rating,
    )
