from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local
from ..common.http import domain_error, fail, parse_day
from ..container import Container
from ..core.exceptions import DomainError
from ..students.controller import student_to_dict


def register(app: Flask, container: Container) -> None:
    service = container.history_service

    @app.route("/api/dates", methods=["GET"], endpoint="dates_list")
    def dates_list():
        try:
            return jsonify({"success": True, "dates": service.list_dates()})
        except Exception:
            app.logger.exception("Listing dates failed")
            return fail("Error fetching dates", 500)

    @app.route("/api/dates/<day>", methods=["GET"], endpoint="dates_detail")
    def dates_detail(day: str):
        try:
            d = parse_day(day)
            return jsonify({
                "success": True,
                "date": day,
                "closed": container.attendance_service.is_day_closed(d),
                "records": service.date_detail(d),
            })
        except DomainError as e:
            return domain_error(e)
        except Exception:
            app.logger.exception("Fetching date %s failed", day)
            return fail("Error fetching attendance", 500)

    @app.route("/api/students/<student_id>/profile", methods=["GET"], endpoint="student_profile")
    def student_profile(student_id: str):
        try:
            profile = service.student_profile(student_id, status_filter=request.args.get("filter", "all"))
            return jsonify({
                "success": True,
                "student": student_to_dict(profile.student),
                "records": profile.records,
                "stats": profile.stats,
            })
        except DomainError as e:
            return domain_error(e)
        except Exception:
            app.logger.exception("Fetching profile %s failed", student_id)
            return fail("Error fetching student", 500)

    @app.route("/api/stats", methods=["GET"], endpoint="dashboard_stats")
    def dashboard_stats():
        try:
            return jsonify({"success": True, **service.dashboard_stats(now_local().date())})
        except Exception:
            app.logger.exception("Loading stats failed")
            return fail("Error loading stats", 500)
