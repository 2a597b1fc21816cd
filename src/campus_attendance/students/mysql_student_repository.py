from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from ..geofence.model import GeoPoint
from .model import NewStudent, Student
from .repository import StudentRepository

_COLUMNS = """
    student_id, name, class_name, year, reg_no, phone, username, email,
    password_hash, uuid, latitude, longitude
"""


def _to_student(r: dict) -> Student:
    location = None
    if r.get("latitude") is not None and r.get("longitude") is not None:
        location = GeoPoint(latitude=float(r["latitude"]), longitude=float(r["longitude"]))
    return Student(
        student_id=int(r["student_id"]),
        name=r["name"],
        class_name=r["class_name"],
        year=int(r["year"]),
        reg_no=r["reg_no"],
        phone=r.get("phone"),
        username=r["username"],
        email=r["email"],
        password_hash=r["password_hash"],
        uuid=r["uuid"],
        location=location,
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, where: str, params: tuple) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE {where}", params)
            row = fetchone(cur)
            return _to_student(row) if row else None

    def get_by_id(self, student_id: int) -> Optional[Student]:
        return self._get_one("student_id=%s", (int(student_id),))

    def get_by_uuid(self, uuid: str) -> Optional[Student]:
        return self._get_one("uuid=%s", (uuid,))

    def get_by_username(self, username: str) -> Optional[Student]:
        return self._get_one("username=%s", (username,))

    def get_by_email(self, email: str) -> Optional[Student]:
        return self._get_one("email=%s", (email,))

    def get_by_name_and_reg_no(self, name: str, reg_no: str) -> Optional[Student]:
        return self._get_one("name=%s AND reg_no=%s", (name, reg_no))

    def create(self, student: NewStudent) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO students(
                    name, class_name, year, reg_no, phone, username, email,
                    password_hash, uuid, latitude, longitude
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    student.name,
                    student.class_name,
                    student.year,
                    student.reg_no,
                    student.phone,
                    student.username,
                    student.email,
                    student.password_hash,
                    student.uuid,
                    student.location.latitude if student.location else None,
                    student.location.longitude if student.location else None,
                ),
            )
            return int(cur.lastrowid)

    def list_all(self) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students ORDER BY class_name, reg_no")
            return [_to_student(r) for r in fetchall(cur)]
