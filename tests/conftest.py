from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from campus_attendance.attendance.model import AttendanceMark, AttendanceReportRow, MarkKey, PingRecord
from campus_attendance.container import AttendanceSettings, assemble
from campus_attendance.core.constants import DEFAULT_CAMPUS_POINT, DEFAULT_TIMETABLE
from campus_attendance.core.enums import GeofenceMode
from campus_attendance.geofence.model import GeoPoint
from campus_attendance.students.model import NewStudent, Student
from campus_attendance.timetable.model import Timetable

CAMPUS = GeoPoint(*DEFAULT_CAMPUS_POINT)


class InMemoryStudents:
    def __init__(self):
        self.by_id: dict[int, Student] = {}
        self._id = 0

    def add(self, **overrides) -> Student:
        self._id += 1
        fields = dict(
            student_id=self._id,
            name=f"Student {self._id}",
            class_name="CSE-A",
            year=2,
            reg_no=f"REG{self._id:04d}",
            phone=None,
            username=f"user{self._id}",
            email=f"user{self._id}@example.com",
            password_hash=generate_password_hash("secret123"),
            uuid=f"uuid-{self._id}",
            location=CAMPUS,
        )
        fields.update(overrides)
        student = Student(**fields)
        self.by_id[student.student_id] = student
        return student

    def _find(self, **match) -> Optional[Student]:
        for s in self.by_id.values():
            if all(getattr(s, k) == v for k, v in match.items()):
                return s
        return None

    def get_by_id(self, student_id: int) -> Optional[Student]:
        return self.by_id.get(student_id)

    def get_by_uuid(self, uuid: str) -> Optional[Student]:
        return self._find(uuid=uuid)

    def get_by_username(self, username: str) -> Optional[Student]:
        return self._find(username=username)

    def get_by_email(self, email: str) -> Optional[Student]:
        return self._find(email=email)

    def get_by_name_and_reg_no(self, name: str, reg_no: str) -> Optional[Student]:
        return self._find(name=name, reg_no=reg_no)

    def create(self, student: NewStudent) -> int:
        self._id += 1
        self.by_id[self._id] = Student(student_id=self._id, **vars(student))
        return self._id

    def list_all(self):
        return list(self.by_id.values())


class InMemoryAttendance:
    def __init__(self, students: InMemoryStudents):
        self._students = students
        self._lock = threading.Lock()
        self.marks: dict[MarkKey, AttendanceMark] = {}
        self.pings: list[PingRecord] = []
        self._mark_id = 0

    def get_mark(self, key: MarkKey) -> Optional[AttendanceMark]:
        return self.marks.get(key)

    def list_marks_for_student_date(self, student_id: int, work_date: date):
        items = [m for k, m in self.marks.items() if k.student_id == student_id and k.work_date == work_date]
        return sorted(items, key=lambda m: m.period_number)

    def record_ping(self, *, key: MarkKey, ping: PingRecord, update) -> AttendanceMark:
        with self._lock:
            updated = update(self.marks.get(key))
            if updated.mark_id is None:
                self._mark_id += 1
                updated = replace(updated, mark_id=self._mark_id)
            self.marks[key] = updated
            self.pings.append(replace(ping, ping_id=len(self.pings) + 1))
            return updated

    def list_pings(self, *, work_date=None, student_id=None, limit=200):
        items = [
            p
            for p in self.pings
            if (work_date is None or p.timestamp.date() == work_date)
            and (student_id is None or p.student_id == student_id)
        ]
        items.sort(key=lambda p: (p.timestamp, p.ping_id), reverse=True)
        return items[:limit]

    def get_report_rows(self, *, start_date: date, end_date: date, student_id=None):
        rows = []
        for m in self.marks.values():
            if not start_date <= m.work_date <= end_date:
                continue
            if student_id is not None and m.student_id != student_id:
                continue
            s = self._students.get_by_id(m.student_id)
            rows.append(
                AttendanceReportRow(
                    student_id=m.student_id,
                    name=s.name,
                    reg_no=s.reg_no,
                    class_name=s.class_name,
                    work_date=m.work_date,
                    period_number=m.period_number,
                    slots=m.slots,
                    status=m.status,
                )
            )
        rows.sort(key=lambda r: (r.work_date, r.reg_no, r.period_number))
        return rows


@pytest.fixture
def timetable() -> Timetable:
    return Timetable.from_config(DEFAULT_TIMETABLE)


@pytest.fixture
def fixed_now() -> datetime:
    # Monday, period 1 start
    return datetime(2026, 3, 2, 8, 15, 0)


@pytest.fixture
def settings(timetable) -> AttendanceSettings:
    return AttendanceSettings(timetable=timetable, tz=None, geofence_mode=GeofenceMode.RADIUS)


@pytest.fixture
def students() -> InMemoryStudents:
    return InMemoryStudents()


@pytest.fixture
def attendance_repo(students) -> InMemoryAttendance:
    return InMemoryAttendance(students)


@pytest.fixture
def container(settings, students, attendance_repo):
    return assemble(settings=settings, students_repo=students, attendance_repo=attendance_repo)


@pytest.fixture
def app(monkeypatch, container):
    from campus_attendance.main import create_app

    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container=container)


@pytest.fixture
def client(app):
    return app.test_client()
