from __future__ import annotations

from datetime import date

from flask import Flask, jsonify, request

from ..common.datetime_utils import format_iso_date, now_local
from ..common.http import domain_error, fail, parse_day
from ..container import Container
from ..core.exceptions import DomainError, ValidationError
from ..scan.decoder import ImageQRDecoder
from ..scan.session import ScanOutcome, ScanSession
from .model import Ledger, LedgerEntry


def _entry_to_dict(entry: LedgerEntry) -> dict:
    return {"status": entry.status.value, "rating": entry.rating}


def _ledger_to_dict(ledger: Ledger, *, closed: bool) -> dict:
    return {
        "date": format_iso_date(ledger.date),
        "closed": closed,
        "entries": {sid: _entry_to_dict(e) for sid, e in ledger.entries.items()},
    }


def _outcome_response(outcome: ScanOutcome):
    body = {
        "success": outcome.success,
        "state": outcome.state.value,
        "message": outcome.message,
    }
    if outcome.student:
        body["student_id"] = outcome.student.student_id
    if outcome.reason:
        body["reason"] = outcome.reason.value
    return jsonify(body), 200 if outcome.success else 400


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    def _today() -> date:
        return now_local().date()

    def _new_session(decoder=None) -> ScanSession:
        return ScanSession(container.roster_lookup, service, decoder=decoder, today=_today)

    @app.route("/api/attendance/<day>", methods=["GET"], endpoint="attendance_day")
    def attendance_day(day: str):
        try:
            d = parse_day(day)
            ledger = service.load_for_date(d)
            return jsonify({"success": True, **_ledger_to_dict(ledger, closed=service.is_day_closed(d))})
        except DomainError as e:
            return domain_error(e)
        except Exception:
            app.logger.exception("Fetching attendance for %s failed", day)
            return fail("Error fetching attendance", 500)

    @app.route("/api/attendance/<day>/<student_id>/status", methods=["PUT"], endpoint="attendance_set_status")
    def attendance_set_status(day: str, student_id: str):
        try:
            data = request.get_json(silent=True) or {}
            entry = service.set_status(student_id, data.get("status"), parse_day(day))
            return jsonify({"success": True, "message": "Attendance marked successfully", "entry": _entry_to_dict(entry)})
        except DomainError as e:
            return domain_error(e)
        except Exception:
            app.logger.exception("Marking %s on %s failed", student_id, day)
            return fail("Error marking attendance", 500)

    @app.route("/api/attendance/<day>/<student_id>/rating", methods=["PUT"], endpoint="attendance_set_rating")
    def attendance_set_rating(day: str, student_id: str):
        try:
            data = request.get_json(silent=True) or {}
            entry = service.set_rating(student_id, data.get("rating"), parse_day(day))
            return jsonify({"success": True, "message": "Rating saved", "entry": _entry_to_dict(entry)})
        except DomainError as e:
            return domain_error(e)
        except Exception:
            app.logger.exception("Rating %s on %s failed", student_id, day)
            return fail("Error saving rating", 500)

    @app.route("/api/attendance/<day>/end", methods=["POST"], endpoint="attendance_end_day")
    def attendance_end_day(day: str):
        try:
            result = service.end_day(parse_day(day))
            body = _ledger_to_dict(result.ledger, closed=True)
            body.update(
                success=True,
                message="Day ended. All unmarked students are marked absent.",
                ended_at=result.closure.ended_at.isoformat(),
                marked_absent=result.marked_absent,
            )
            return jsonify(body)
        except DomainError as e:
            return domain_error(e)
        except Exception:
            app.logger.exception("Ending day %s failed", day)
            return fail("Error ending the day", 500)

    @app.route("/api/scan", methods=["POST"], endpoint="scan_code")
    def scan_code():
        """A client-side scanner already decoded the QR; resolve and mark present."""
        try:
            data = request.get_json(silent=True) or {}
            code = data.get("code")
            if not isinstance(code, str) or not code:
                raise ValidationError("QR code must not be empty")

            session = _new_session()
            session.open()
            session.permission_granted()
            return _outcome_response(session.on_decode(code))
        except DomainError as e:
            return domain_error(e)
        except Exception:
            app.logger.exception("Scan failed")
            return fail("Error processing scan", 500)

    @app.route("/api/scan/image", methods=["POST"], endpoint="scan_image")
    def scan_image():
        """Decode an uploaded photo of a student's QR code and mark them present."""
        try:
            if "image" not in request.files:
                raise ValidationError("Missing image file")

            session = _new_session(ImageQRDecoder(request.files["image"].read()))
            session.open()
            session.permission_granted()
            return _outcome_response(session.outcome or session.close())
        except DomainError as e:
            return domain_error(e)
        except Exception:
            app.logger.exception("Image scan failed")
            return fail("Error processing scan", 500)
