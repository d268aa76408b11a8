from __future__ import annotations

import io

from flask import Flask, jsonify, request, send_file

from ..common.datetime_utils import format_iso_date
from ..common.http import domain_error, fail, parse_day
from ..core.exceptions import DomainError
from ..container import Container
from .model import Student, StudentInput
from .qr import render_qr_png


def student_to_dict(s: Student) -> dict:
    return {
        "id": s.student_id,
        "name": s.name,
        "phone": s.phone,
        "father_phone": s.father_phone,
        "mother_phone": s.mother_phone,
        "date_of_birth": format_iso_date(s.date_of_birth) if s.date_of_birth else None,
        "year_of_study": s.year_of_study,
        "address": s.address,
        "church_father_name": s.church_father_name,
    }


def _input_from_json(data: dict) -> StudentInput:
    dob = data.get("date_of_birth")
    return StudentInput(
        name=str(data.get("name") or ""),
        phone=str(data.get("phone") or ""),
        father_phone=data.get("father_phone") or None,
        mother_phone=data.get("mother_phone") or None,
        date_of_birth=parse_day(dob) if dob else None,
        year_of_study=data.get("year_of_study"),
        address=data.get("address"),
        church_father_name=data.get("church_father_name"),
    )


def register(app: Flask, container: Container) -> None:
    service = container.student_service

    @app.route("/api/students", methods=["GET"], endpoint="students_list")
    def students_list():
        try:
            return jsonify({"success": True, "students": [student_to_dict(s) for s in service.list_all()]})
        except Exception:
            app.logger.exception("Listing students failed")
            return fail("Error fetching students", 500)

    @app.route("/api/students", methods=["POST"], endpoint="students_create")
    def students_create():
        try:
            student = service.create(_input_from_json(request.get_json(silent=True) or {}))
            return jsonify({"success": True, "message": "Student added successfully", "student": student_to_dict(student)}), 201
        except DomainError as e:
            return domain_error(e)
        except Exception:
            app.logger.exception("Creating student failed")
            return fail("Error saving student", 500)

    @app.route("/api/students/<student_id>", methods=["GET"], endpoint="students_get")
    def students_get(student_id: str):
        try:
            return jsonify({"success": True, "student": student_to_dict(service.get(student_id))})
        except DomainError as e:
            return domain_error(e)
        except Exception:
            app.logger.exception("Fetching student %s failed", student_id)
            return fail("Error fetching student", 500)

    @app.route("/api/students/<student_id>", methods=["PUT"], endpoint="students_update")
    def students_update(student_id: str):
        try:
            student = service.update(student_id, _input_from_json(request.get_json(silent=True) or {}))
            return jsonify({"success": True, "message": "Student updated successfully", "student": student_to_dict(student)})
        except DomainError as e:
            return domain_error(e)
        except Exception:
            app.logger.exception("Updating student %s failed", student_id)
            return fail("Error saving student", 500)

    @app.route("/api/students/<student_id>", methods=["DELETE"], endpoint="students_delete")
    def students_delete(student_id: str):
        try:
            service.delete(student_id)
            return jsonify({"success": True, "message": "Student deleted successfully"})
        except DomainError as e:
            return domain_error(e)
        except Exception:
            app.logger.exception("Deleting student %s failed", student_id)
            return fail("Error deleting student", 500)

    @app.route("/api/students/<student_id>/qr", methods=["GET"], endpoint="students_qr")
    def students_qr(student_id: str):
        """QR code of the student's phone, for printing or download."""
        try:
            student = service.get(student_id)
            png = render_qr_png(student.phone)
            return send_file(
                io.BytesIO(png),
                mimetype="image/png",
                download_name=f"{student.name}-qr-code.png",
            )
        except DomainError as e:
            return domain_error(e)
        except Exception:
            app.logger.exception("Rendering QR for %s failed", student_id)
            return fail("Error generating QR code", 500)
