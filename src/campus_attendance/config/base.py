"""Settings shared by every environment. Environment modules import * from here and override."""
import json
import os

from ..core.constants import (
    DEFAULT_CAMPUS_POINT,
    DEFAULT_CAMPUS_POLYGON,
    DEFAULT_PRESENT_SLOT_THRESHOLD,
    DEFAULT_RADIUS_METERS,
    DEFAULT_SLOT_TOLERANCE_MINUTES,
    DEFAULT_TIMETABLE,
    DEFAULT_TIMEZONE,
)

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "campus_attendance"),
}

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

TIMEZONE = os.getenv("TIMEZONE", DEFAULT_TIMEZONE)

# [(period, "HH:MM", "HH:MM"), ...]; TIMETABLE_JSON overrides, e.g. '[[1, "08:00", "08:45"]]'
TIMETABLE = json.loads(os.environ["TIMETABLE_JSON"]) if os.getenv("TIMETABLE_JSON") else DEFAULT_TIMETABLE

SLOT_TOLERANCE_MINUTES = os.getenv("SLOT_TOLERANCE_MINUTES", str(DEFAULT_SLOT_TOLERANCE_MINUTES))
PRESENT_SLOT_THRESHOLD = os.getenv("PRESENT_SLOT_THRESHOLD", str(DEFAULT_PRESENT_SLOT_THRESHOLD))

# "radius": per-student classroom point; "polygon": campus boundary
GEOFENCE_MODE = os.getenv("GEOFENCE_MODE", "radius")
GEOFENCE_RADIUS_METERS = os.getenv("GEOFENCE_RADIUS_METERS", str(DEFAULT_RADIUS_METERS))
CAMPUS_REFERENCE_POINT = DEFAULT_CAMPUS_POINT
CAMPUS_POLYGON = json.loads(os.environ["CAMPUS_POLYGON_JSON"]) if os.getenv("CAMPUS_POLYGON_JSON") else DEFAULT_CAMPUS_POLYGON

ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
