"""Register a demo student whose classroom point is the campus reference point."""
from __future__ import annotations

import importlib
import logging

from campus_attendance.config import get_settings_module
from campus_attendance.container import AttendanceSettings, build_container
from campus_attendance.core.exceptions import ValidationError
from campus_attendance.main import configure_logging

logger = logging.getLogger("seed_db")


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    attendance_settings = AttendanceSettings.from_module(settings)
    container = build_container(db_config=dict(settings.DB_CONFIG), settings=attendance_settings)

    try:
        student = container.student_service.signup(
            {
                "name": "Demo Student",
                "class": "CSE-A",
                "year": 2,
                "regNo": "DEMO0001",
                "phone": "0000000000",
                "username": "demo",
                "email": "demo@example.com",
                "password": "demo1234",
                "uuid": "demo-device-uuid",
                "location": attendance_settings.campus_point.to_json(),
            }
        )
        logger.info("Seeded demo student id=%s", student.student_id)
    except ValidationError as e:
        logger.info("Demo student not created: %s", e)


if __name__ == "__main__":
    main()
