from __future__ import annotations

import csv
import io
import logging
from datetime import date
from functools import wraps

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import parse_iso_date
from ..common.validators import require_object
from ..core.constants import DEFAULT_PING_LIMIT
from ..core.enums import SLOT_ORDER, ReportScope
from ..core.exceptions import AuthenticationError, ValidationError
from ..container import Container

logger = logging.getLogger(__name__)

REPORT_FIELDS = [
    "work_date",
    "student_id",
    "name",
    "reg_no",
    "class_name",
    "period_number",
    *(slot.value for slot in SLOT_ORDER),
    "status",
]


class _BadQuery(ValueError):
    pass


def register(app: Flask, container: Container) -> None:
    def admin_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if not session.get("admin"):
                return jsonify({"error": "Admin login required"}), 401
            return view(*args, **kwargs)

        return wrapper

    def _report_query() -> tuple[ReportScope, date]:
        try:
            scope = ReportScope(request.args.get("scope", ReportScope.DAY.value))
        except ValueError:
            raise _BadQuery("scope must be one of: day, week, month")
        day_s = request.args.get("date")
        try:
            day = parse_iso_date(day_s) if day_s else container.today()
        except ValueError:
            raise _BadQuery("date must be YYYY-MM-DD")
        return scope, day

    @app.errorhandler(_BadQuery)
    def _bad_query(e: _BadQuery):
        return jsonify({"error": str(e)}), 400

    @app.route("/admin/login", methods=["POST"], endpoint="admin_login")
    def admin_login():
        try:
            body = require_object(request.get_json(silent=True), "body")
        except ValidationError as e:
            return jsonify({"error": str(e)}), 400
        try:
            container.admin_auth.authenticate(str(body.get("username") or ""), str(body.get("password") or ""))
        except AuthenticationError as e:
            logger.warning("Rejected admin login for %r", body.get("username"))
            return jsonify({"error": str(e)}), 401
        session["admin"] = True
        return jsonify({"message": "Admin login successful"}), 200

    @app.route("/admin/logout", methods=["POST"], endpoint="admin_logout")
    def admin_logout():
        session.pop("admin", None)
        return jsonify({"message": "Logged out"}), 200

    @app.route("/admin/attendance", methods=["GET"], endpoint="admin_attendance")
    @admin_required
    def admin_attendance():
        scope, day = _report_query()
        data = container.report_service.build_attendance_report(scope=scope, day=day)
        return jsonify(
            {
                "scope": scope.value,
                "start": data.start.strftime("%Y-%m-%d"),
                "end": data.end.strftime("%Y-%m-%d"),
                "rows": data.rows,
                "summary": data.summary,
            }
        )

    @app.route("/admin/attendance.csv", methods=["GET"], endpoint="admin_attendance_csv")
    @admin_required
    def admin_attendance_csv():
        scope, day = _report_query()
        data = container.report_service.build_attendance_report(scope=scope, day=day)

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=REPORT_FIELDS)
        writer.writeheader()
        for row in data.rows:
            writer.writerow(row)

        filename = f"attendance_{scope.value}_{data.start.strftime('%Y%m%d')}_{data.end.strftime('%Y%m%d')}.csv"
        return app.response_class(
            out.getvalue().encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/admin/users", methods=["GET"], endpoint="admin_users")
    @admin_required
    def admin_users():
        students = container.student_service.list_all()
        return jsonify({"users": [s.public_json() for s in students]})

    @app.route("/admin/pings", methods=["GET"], endpoint="admin_pings")
    @admin_required
    def admin_pings():
        try:
            day = parse_iso_date(request.args["date"]) if request.args.get("date") else None
            student_id = int(request.args["studentId"]) if request.args.get("studentId") else None
            limit = int(request.args.get("limit", DEFAULT_PING_LIMIT))
        except ValueError:
            raise _BadQuery("date must be YYYY-MM-DD; studentId and limit must be integers")
        if limit <= 0:
            raise _BadQuery("limit must be positive")

        pings = container.attendance_repo.list_pings(work_date=day, student_id=student_id, limit=limit)
        return jsonify({"pings": [p.to_json() for p in pings]})
