from __future__ import annotations

from datetime import date

import pytest

from src.student_attendance.student_attendance.core.exceptions import NotFoundError, ValidationError
from src.student_attendance.student_attendance.students.model import StudentInput
from src.student_attendance.student_attendance.students.service import StudentService


@pytest.fixture
def service(students_repo):
    return StudentService(students_repo)


def test_create_student(service, students_repo):
    student = service.create(
        StudentInput(
            name="  Marina Samir ",
            phone="01234567890",
            mother_phone="01512345678",
            date_of_birth=date(2010, 5, 3),
            year_of_study=" Year 1 ",
            address="",
        )
    )

    assert student.name == "Marina Samir"
    assert student.year_of_study == "Year 1"
    assert student.address is None
    assert students_repo.get_by_id(student.student_id) == student


@pytest.mark.parametrize("phone", ["", "0101234567", "01312345678", "010123456789", "+201012345678", "01012345678\n"])
def test_create_rejects_bad_phone(service, phone):
    with pytest.raises(ValidationError):
        service.create(StudentInput(name="X", phone=phone))


def test_create_rejects_bad_guardian_phone(service):
    with pytest.raises(ValidationError):
        service.create(StudentInput(name="X", phone="01012345678", father_phone="123"))


def test_create_requires_name(service):
    with pytest.raises(ValidationError):
        service.create(StudentInput(name="   ", phone="01012345678"))


def test_update_student(service):
    updated = service.update("a", StudentInput(name="Mina Y.", phone="01112345678"))

    assert updated.student_id == "a"
    assert updated.phone == "01112345678"


def test_saving_unchanged_student_succeeds(service, student_a):
    saved = service.update("a", StudentInput(name="Mina Youssef", phone="01012345678", year_of_study="Year 1"))

    assert saved == student_a


def test_update_missing_student(service):
    with pytest.raises(NotFoundError):
        service.update("ghost", StudentInput(name="X", phone="01012345678"))


def test_delete_keeps_attendance_history(service, attendance_service, attendance_repo, day):
    attendance_service.set_status("a", "present", day)

    service.delete("a")

    with pytest.raises(NotFoundError):
        service.get("a")
    assert "2026-02-01_a" in attendance_repo.records
