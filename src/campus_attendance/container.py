from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, tzinfo
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .admin.service import AdminAuthService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.rules import MarkUpdateRule
from .attendance.service import AttendanceService
from .common.datetime_utils import now_local
from .core.constants import (
    DEFAULT_CAMPUS_POINT,
    DEFAULT_CAMPUS_POLYGON,
    DEFAULT_PRESENT_SLOT_THRESHOLD,
    DEFAULT_RADIUS_METERS,
    DEFAULT_SLOT_TOLERANCE_MINUTES,
    DEFAULT_TIMETABLE,
    DEFAULT_TIMEZONE,
)
from .core.enums import GeofenceMode
from .core.exceptions import ConfigurationError
from .database.connection import DatabaseConnection, DBConfig
from .geofence.factory import GeofenceStrategyFactory
from .geofence.model import GeoPoint, Polygon
from .geofence.validator import PresenceValidator
from .reports.service import AttendanceReportService
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .students.service import StudentService
from .timetable.matcher import SlotMatcher
from .timetable.model import Timetable


def _number(settings: Any, name: str, default, convert):
    raw = getattr(settings, name, default)
    try:
        return convert(raw)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e


@dataclass(frozen=True)
class AttendanceSettings:
    """Validated attendance knobs, built once from the settings module at startup."""

    timetable: Timetable
    tz: Optional[tzinfo]
    slot_tolerance_minutes: int = DEFAULT_SLOT_TOLERANCE_MINUTES
    present_slot_threshold: int = DEFAULT_PRESENT_SLOT_THRESHOLD
    geofence_mode: GeofenceMode = GeofenceMode.RADIUS
    radius_meters: float = DEFAULT_RADIUS_METERS
    campus_point: GeoPoint = field(default_factory=lambda: GeoPoint(*DEFAULT_CAMPUS_POINT))
    campus_polygon: Polygon = field(default_factory=lambda: Polygon.from_config(DEFAULT_CAMPUS_POLYGON))
    admin_username: str = "admin"
    admin_password: str = "admin123"

    @classmethod
    def from_module(cls, settings: Any) -> "AttendanceSettings":
        tz_name = getattr(settings, "TIMEZONE", DEFAULT_TIMEZONE)
        try:
            tz = ZoneInfo(tz_name) if tz_name else None
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ConfigurationError(f"Unknown TIMEZONE {tz_name!r}") from e

        try:
            mode = GeofenceMode(str(getattr(settings, "GEOFENCE_MODE", GeofenceMode.RADIUS.value)).lower())
        except ValueError as e:
            raise ConfigurationError("GEOFENCE_MODE must be 'radius' or 'polygon'") from e

        tolerance = _number(settings, "SLOT_TOLERANCE_MINUTES", DEFAULT_SLOT_TOLERANCE_MINUTES, int)
        if tolerance < 0:
            raise ConfigurationError("SLOT_TOLERANCE_MINUTES must be >= 0")

        threshold = _number(settings, "PRESENT_SLOT_THRESHOLD", DEFAULT_PRESENT_SLOT_THRESHOLD, int)
        if not 1 <= threshold <= 4:
            raise ConfigurationError("PRESENT_SLOT_THRESHOLD must be between 1 and 4")

        radius = _number(settings, "GEOFENCE_RADIUS_METERS", DEFAULT_RADIUS_METERS, float)
        if radius <= 0:
            raise ConfigurationError("GEOFENCE_RADIUS_METERS must be > 0")

        lat, lon = getattr(settings, "CAMPUS_REFERENCE_POINT", DEFAULT_CAMPUS_POINT)

        return cls(
            timetable=Timetable.from_config(getattr(settings, "TIMETABLE", DEFAULT_TIMETABLE)),
            tz=tz,
            slot_tolerance_minutes=tolerance,
            present_slot_threshold=threshold,
            geofence_mode=mode,
            radius_meters=radius,
            campus_point=GeoPoint(latitude=float(lat), longitude=float(lon)),
            campus_polygon=Polygon.from_config(getattr(settings, "CAMPUS_POLYGON", DEFAULT_CAMPUS_POLYGON)),
            admin_username=str(getattr(settings, "ADMIN_USERNAME", "admin")),
            admin_password=str(getattr(settings, "ADMIN_PASSWORD", "admin123")),
        )


@dataclass(frozen=True)
class Container:
    settings: AttendanceSettings

    students_repo: StudentRepository
    attendance_repo: AttendanceRepository

    student_service: StudentService
    attendance_service: AttendanceService
    report_service: AttendanceReportService
    admin_auth: AdminAuthService

    def today(self) -> date:
        return now_local(self.settings.tz).date()


def assemble(
    *,
    settings: AttendanceSettings,
    students_repo: StudentRepository,
    attendance_repo: AttendanceRepository,
) -> Container:
    matcher = SlotMatcher(settings.timetable, tolerance_minutes=settings.slot_tolerance_minutes, tz=settings.tz)
    validator = PresenceValidator(
        mode=settings.geofence_mode,
        campus_point=settings.campus_point,
        campus_polygon=settings.campus_polygon,
        factory=GeofenceStrategyFactory(radius_meters=settings.radius_meters),
    )

    attendance_service = AttendanceService(
        attendance_repo,
        students_repo,
        matcher=matcher,
        validator=validator,
        rule=MarkUpdateRule(threshold=settings.present_slot_threshold),
        tz=settings.tz,
    )

    return Container(
        settings=settings,
        students_repo=students_repo,
        attendance_repo=attendance_repo,
        student_service=StudentService(students_repo),
        attendance_service=attendance_service,
        report_service=AttendanceReportService(attendance_repo),
        admin_auth=AdminAuthService(username=settings.admin_username, password=settings.admin_password),
    )


def build_container(*, db_config: dict, settings: AttendanceSettings) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return assemble(
        settings=settings,
        students_repo=MySQLStudentRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
    )
