from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_min_length, require_non_empty, require_object
from ..core.exceptions import AuthenticationError, NotFoundError, ValidationError
from ..geofence.model import GeoPoint
from .model import NewStudent, Student
from .repository import StudentRepository

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _parse_year(value: Any) -> int:
    if isinstance(value, bool):
        raise ValidationError("year must be an integer")
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if not isinstance(value, int) or value <= 0:
        raise ValidationError("year must be a positive integer")
    return value


class StudentService:
    """Use cases: signup, login, profile lookups and the signup-form availability checks."""

    def __init__(self, students: StudentRepository):
        self._students = students

    def signup(self, body: Mapping[str, Any]) -> Student:
        body = require_object(body, "body")

        name = require_non_empty(body.get("name"), "name")
        reg_no = require_non_empty(body.get("regNo"), "regNo")
        class_name = require_non_empty(body.get("class"), "class")
        username = require_non_empty(body.get("username"), "username")
        email = require_non_empty(body.get("email"), "email").lower()
        uuid = require_non_empty(body.get("uuid"), "uuid")
        password = body.get("password")
        if not isinstance(password, str):
            raise ValidationError("password is required")
        require_min_length(password, "password", MIN_PASSWORD_LENGTH)
        year = _parse_year(body.get("year"))
        phone = body.get("phone")
        phone = (phone.strip() or None) if isinstance(phone, str) else None
        location = GeoPoint.from_json(body["location"]) if body.get("location") is not None else None

        if "@" not in email:
            raise ValidationError("email is invalid")

        if self._students.get_by_name_and_reg_no(name, reg_no):
            raise ValidationError("Student already exists")
        if self._students.get_by_username(username):
            raise ValidationError("Username already taken")
        if self._students.get_by_email(email):
            raise ValidationError("Email already registered")
        if self._students.get_by_uuid(uuid):
            raise ValidationError("UUID already registered")

        new = NewStudent(
            name=name,
            class_name=class_name,
            year=year,
            reg_no=reg_no,
            phone=phone,
            username=username,
            email=email,
            password_hash=generate_password_hash(password),
            uuid=uuid,
            location=location,
        )
        student_id = self._students.create(new)
        logger.info("Registered student %s (regNo=%s)", student_id, reg_no)

        return Student(student_id=student_id, **vars(new))

    def authenticate(self, username: str, password: str) -> Student:
        student = self._students.get_by_username(_text(username))
        if not student:
            raise NotFoundError("User not found")

        try:
            ok = check_password_hash(student.password_hash, password if isinstance(password, str) else "")
        except ValueError:
            # e.g. placeholder or corrupted hash values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid password")
        return student

    def get_by_username(self, username: str) -> Student:
        username = require_non_empty(username, "username")
        student = self._students.get_by_username(username)
        if not student:
            raise NotFoundError("User not found")
        return student

    def student_exists(self, name: str, reg_no: str) -> bool:
        return self._students.get_by_name_and_reg_no(_text(name), _text(reg_no)) is not None

    def username_exists(self, username: str) -> bool:
        return self._students.get_by_username(_text(username)) is not None

    def email_exists(self, email: str) -> bool:
        return self._students.get_by_email(_text(email).lower()) is not None

    def list_all(self) -> Sequence[Student]:
        return self._students.list_all()
