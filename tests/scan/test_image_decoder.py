from __future__ import annotations

import pytest

pytest.importorskip("pyzbar.pyzbar")

from src.student_attendance.student_attendance.core.exceptions import ScanError
from src.student_attendance.student_attendance.scan.decoder import ImageQRDecoder
from src.student_attendance.student_attendance.students.qr import render_qr_png


def _run(decoder):
    decoded, errors = [], []
    decoder.start(decoded.append, errors.append)
    return decoded, errors


def test_decodes_student_qr():
    decoded, errors = _run(ImageQRDecoder(render_qr_png("01012345678")))

    assert decoded == ["01012345678"]
    assert errors == []


def test_garbage_bytes_report_an_error():
    decoded, errors = _run(ImageQRDecoder(b"not an image"))

    assert decoded == []
    assert isinstance(errors[0], ScanError)
    assert errors[0].reason == "decoder_failure"
