from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..core.exceptions import AuthenticationError, NotFoundError, StorageError, ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    service = container.student_service

    def _body() -> dict:
        body = request.get_json(silent=True)
        return body if isinstance(body, dict) else {}

    @app.route("/signup", methods=["POST"], endpoint="signup")
    def signup():
        try:
            student = service.signup(request.get_json(silent=True))
        except ValidationError as e:
            return jsonify({"error": str(e)}), 400
        except StorageError:
            logger.exception("Signup failed")
            return jsonify({"error": "Server error while creating account"}), 500
        return jsonify({"message": "User registered successfully", "user": student.public_json()}), 201

    @app.route("/login", methods=["POST"], endpoint="login")
    def login():
        body = _body()
        try:
            student = service.authenticate(body.get("username") or "", body.get("password") or "")
        except NotFoundError as e:
            return jsonify({"error": str(e)}), 404
        except AuthenticationError as e:
            return jsonify({"error": str(e)}), 401
        except StorageError:
            logger.exception("Login failed")
            return jsonify({"error": "Server error during login"}), 500
        return jsonify({"message": "Login successful", "user": student.public_json()}), 200

    @app.route("/userinfo", methods=["GET"], endpoint="userinfo")
    def userinfo():
        try:
            student = service.get_by_username(request.args.get("username") or "")
        except ValidationError:
            return jsonify({"error": "Username is required"}), 400
        except NotFoundError as e:
            return jsonify({"error": str(e)}), 404
        return jsonify(student.public_json()), 200

    @app.route("/check-student", methods=["POST"], endpoint="check_student")
    def check_student():
        body = _body()
        return jsonify({"exists": service.student_exists(body.get("name") or "", body.get("regNo") or "")})

    @app.route("/check-username", methods=["POST"], endpoint="check_username")
    def check_username():
        return jsonify({"exists": service.username_exists(_body().get("username") or "")})

    @app.route("/check-email", methods=["POST"], endpoint="check_email")
    def check_email():
        return jsonify({"exists": service.email_exists(_body().get("email") or "")})
