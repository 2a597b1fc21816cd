from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..core.enums import ErrorKind
from ..core.exceptions import StorageError
from ..core.result import Err
from ..container import Container
from .schemas import MarkRequest, PingRequest

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.STUDENT_NOT_FOUND: 404,
    ErrorKind.OUTSIDE_WINDOW: 422,
    ErrorKind.STORAGE_ERROR: 500,
}


def error_response(err: Err):
    return jsonify({"error": err.message, "kind": err.kind.value}), STATUS_BY_KIND[err.kind]


def register(app: Flask, container: Container) -> None:
    @app.route("/attendance/ping", methods=["POST"], endpoint="attendance_ping")
    def attendance_ping():
        parsed = PingRequest.parse(request.get_json(silent=True))
        if not parsed.ok:
            return error_response(parsed)

        result = container.attendance_service.record_ping(parsed.value)
        if not result.ok:
            return error_response(result)
        return jsonify(result.value.to_json()), 200

    @app.route("/attendance/mark", methods=["POST"], endpoint="attendance_mark")
    def attendance_mark():
        parsed = MarkRequest.parse(request.get_json(silent=True))
        if not parsed.ok:
            return error_response(parsed)

        result = container.attendance_service.mark(parsed.value)
        if not result.ok:
            return error_response(result)
        return jsonify(result.value.to_json()), 200

    @app.route("/attendance/today/<int:student_id>", methods=["GET"], endpoint="attendance_today")
    def attendance_today(student_id: int):
        try:
            summary = container.attendance_service.today_summary(student_id)
        except StorageError:
            logger.exception("Fetch attendance failed for student %s", student_id)
            return jsonify({"error": "Server error", "kind": ErrorKind.STORAGE_ERROR.value}), 500

        if summary is None:
            return jsonify({"error": "Student not found", "kind": ErrorKind.STUDENT_NOT_FOUND.value}), 404
        return jsonify(summary), 200
