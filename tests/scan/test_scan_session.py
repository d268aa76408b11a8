from __future__ import annotations

import pytest

from src.student_attendance.student_attendance.attendance.model import DayClosure
from src.student_attendance.student_attendance.core.enums import AttendanceStatus, ScanErrorReason, ScanState
from src.student_attendance.student_attendance.core.exceptions import InvalidStateError, ScanError
from src.student_attendance.student_attendance.scan.lookup import RosterLookup
from src.student_attendance.student_attendance.scan.session import ScanSession


class FakeDecoder:
    def __init__(self):
        self.started = False
        self.stopped = False
        self.on_decode = None
        self.on_error = None

    def start(self, on_decode, on_error):
        self.started = True
        self.on_decode = on_decode
        self.on_error = on_error

    def stop(self):
        self.stopped = True


@pytest.fixture
def decoder():
    return FakeDecoder()


@pytest.fixture
def session(students_repo, attendance_service, decoder, day):
    return ScanSession(RosterLookup(students_repo), attendance_service, decoder=decoder, today=lambda: day)


def _scanning(session):
    session.open()
    assert session.state == ScanState.AWAITING_PERMISSION
    session.permission_granted()
    assert session.state == ScanState.SCANNING
    return session


def test_scan_marks_student_present(session, decoder, attendance_service, day):
    _scanning(session)
    assert decoder.started

    decoder.on_decode("01012345678")

    assert session.state == ScanState.MATCHED
    assert session.outcome.success
    assert session.outcome.student.student_id == "a"
    assert decoder.stopped
    assert attendance_service.load_for_date(day).get("a").status == AttendanceStatus.PRESENT


def test_unknown_key_is_not_found_without_mutation(session, decoder, attendance_repo):
    _scanning(session)

    decoder.on_decode("01099999999")

    assert session.state == ScanState.ERROR
    assert session.outcome.reason == ScanErrorReason.NOT_FOUND
    assert attendance_repo.writes == 0


def test_empty_decode_keeps_scanning(session, decoder):
    _scanning(session)

    assert decoder.on_decode("") is None
    assert session.state == ScanState.SCANNING


def test_user_close_cancels(session, decoder):
    _scanning(session)

    outcome = session.close()

    assert outcome.state == ScanState.CANCELLED
    assert decoder.stopped
    assert session.close() is outcome


def test_close_while_awaiting_permission(session):
    session.open()

    assert session.close().state == ScanState.CANCELLED


@pytest.mark.parametrize(
    "reason, text",
    [
        (ScanErrorReason.PERMISSION_DENIED, "denied"),
        (ScanErrorReason.NO_CAMERA, "No camera"),
        (ScanErrorReason.CAMERA_IN_USE, "in use"),
    ],
)
def test_permission_failures_have_specific_messages(session, decoder, reason, text):
    session.open()

    outcome = session.permission_denied(reason)

    assert outcome.state == ScanState.ERROR
    assert outcome.reason == reason
    assert text in outcome.message
    assert not decoder.started


def test_decoder_failure_is_terminal(session, decoder):
    _scanning(session)

    decoder.on_error(RuntimeError("camera unplugged"))

    assert session.state == ScanState.ERROR
    assert session.outcome.reason == ScanErrorReason.DECODER_FAILURE
    with pytest.raises(InvalidStateError):
        session.on_decode("01012345678")


def test_scan_error_reason_is_kept(session, decoder):
    _scanning(session)

    decoder.on_error(ScanError("No QR code found in image", reason="decoder_failure"))

    assert session.outcome.message == "No QR code found in image"


def test_no_retry_from_terminal_state(session):
    session.open()
    session.permission_denied()

    with pytest.raises(InvalidStateError):
        session.permission_granted()
    with pytest.raises(InvalidStateError):
        session.open()


def test_scan_on_closed_day_is_an_error(session, decoder, attendance_repo, day, fixed_now):
    attendance_repo.closures[day] = DayClosure(date=day, ended_at=fixed_now)
    _scanning(session)

    decoder.on_decode("01012345678")

    assert session.state == ScanState.ERROR
    assert session.outcome.reason == ScanErrorReason.DAY_CLOSED
    assert attendance_repo.records == {}


def test_works_without_decoder(students_repo, attendance_service, day):
    session = ScanSession(RosterLookup(students_repo), attendance_service, today=lambda: day)
    session.open()
    session.permission_granted()

    assert session.on_decode("01198765432").student.student_id == "b"
