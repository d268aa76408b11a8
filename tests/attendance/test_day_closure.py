from __future__ import annotations

import pytest

from src.student_attendance.student_attendance.attendance.closure import DayClosurePolicy
from src.student_attendance.student_attendance.attendance.factory import ClosureStrategyFactory
from src.student_attendance.student_attendance.attendance.model import AttendanceRecord, Ledger
from src.student_attendance.student_attendance.attendance.service import AttendanceService
from src.student_attendance.student_attendance.core.enums import AttendanceStatus
from src.student_attendance.student_attendance.core.exceptions import DayClosedError
from src.student_attendance.student_attendance.students.model import Student


def test_end_day_scenario(attendance_service, attendance_repo, day, fixed_now):
    attendance_service.set_status("a", "present", day)

    result = attendance_service.end_day(day, now=fixed_now)

    ledger = attendance_service.load_for_date(day)
    assert ledger.get("a").status == AttendanceStatus.PRESENT
    assert ledger.get("a").rating == 10
    assert ledger.get("b").status == AttendanceStatus.ABSENT
    assert ledger.get("b").rating == 0
    assert attendance_service.is_day_closed(day)
    assert attendance_repo.closures[day].ended_at == fixed_now
    assert result.ledger == ledger
    assert result.marked_absent == 1
    assert result.defaulted_ratings == 1


def test_end_day_keeps_given_ratings(attendance_service, day):
    attendance_service.set_status("a", "present", day)
    attendance_service.set_rating("a", 4, day)
    attendance_service.set_status("b", "absent", day)

    attendance_service.end_day(day)

    ledger = attendance_service.load_for_date(day)
    assert ledger.get("a").rating == 4
    assert ledger.get("b").status == AttendanceStatus.ABSENT


def test_end_day_twice_is_rejected(attendance_service, day):
    attendance_service.end_day(day)

    with pytest.raises(DayClosedError):
        attendance_service.end_day(day)
    with pytest.raises(DayClosedError):
        attendance_service.set_status("a", "present", day)


def test_failed_closure_writes_nothing_and_can_be_rerun(attendance_service, attendance_repo, day):
    attendance_service.set_status("a", "present", day)
    attendance_repo.fail_closure = True

    with pytest.raises(ConnectionError):
        attendance_service.end_day(day)

    assert not attendance_service.is_day_closed(day)
    assert attendance_service.load_for_date(day).get("b") is None

    attendance_repo.fail_closure = False
    attendance_service.end_day(day)

    assert attendance_service.load_for_date(day).get("a").rating == 10


def test_records_of_deleted_students_are_left_alone(attendance_service, attendance_repo, students_repo, day, fixed_now):
    attendance_service.set_status("b", "present", day, now=fixed_now)
    students_repo.delete_by_id("b")

    attendance_service.end_day(day)

    assert attendance_repo.records["2026-02-01_b"].rating == 0
    assert attendance_repo.records["2026-02-01_b"].timestamp == fixed_now


def test_closure_default_rating_is_configurable(attendance_repo, students_repo, day):
    policy = DayClosurePolicy(ClosureStrategyFactory(default_rating=8))
    svc = AttendanceService(attendance_repo, students_repo, closure_policy=policy)
    svc.set_status("a", "present", day)

    svc.end_day(day)

    assert svc.load_for_date(day).get("a").rating == 8


def test_policy_plans_one_record_per_roster_student(day, fixed_now):
    roster = [Student(student_id=sid, name=sid, phone="01000000000") for sid in ("x", "y", "z")]
    ledger = Ledger.from_records(
        day,
        [
            AttendanceRecord(student_id="x", date=day, status=AttendanceStatus.PRESENT, rating=3),
            AttendanceRecord(student_id="y", date=day, status=AttendanceStatus.ABSENT, rating=0),
        ],
    )

    plan = DayClosurePolicy().plan(roster=roster, ledger=ledger, now=fixed_now)

    outcome = {r.student_id: (r.status, r.rating) for r in plan.records}
    assert outcome == {
        "x": (AttendanceStatus.PRESENT, 3),
        "y": (AttendanceStatus.ABSENT, 0),
        "z": (AttendanceStatus.ABSENT, 0),
    }
    assert all(r.timestamp == fixed_now for r in plan.records)
    assert plan.marked_absent == 2
    assert plan.defaulted_ratings == 0


def test_mark_committed_while_day_ends_is_not_overwritten(attendance_service, attendance_repo, day, monkeypatch):
    store_closure = attendance_repo.apply_closure
    marked = []

    def mark_then_close(**kwargs):
        # A scan lands after end_day has read the roster but before the marker.
        marked.append(attendance_service.set_status("b", "present", day))
        return store_closure(**kwargs)

    monkeypatch.setattr(attendance_repo, "apply_closure", mark_then_close)

    result = attendance_service.end_day(day)

    assert marked[0].status == AttendanceStatus.PRESENT
    entry = attendance_service.load_for_date(day).get("b")
    assert entry.status == AttendanceStatus.PRESENT
    assert entry.rating == 10
    assert result.ledger.get("b") == entry
    assert result.marked_absent == 1
