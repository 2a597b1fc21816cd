"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EARTH_RADIUS_METERS = 6_371_000.0

# Absorbs float round-off when a sample sits exactly on the radius boundary.
DISTANCE_EPSILON_METERS = 1e-6

DEFAULT_RADIUS_METERS = 100.0
DEFAULT_SLOT_TOLERANCE_MINUTES = 5
DEFAULT_PRESENT_SLOT_THRESHOLD = 3
DEFAULT_TIMEZONE = "Asia/Kolkata"
DEFAULT_PING_LIMIT = 200

AFTER_START_OFFSET_MINUTES = 15
BEFORE_END_OFFSET_MINUTES = 10

DEFAULT_TIMETABLE = (
    (1, "08:15", "09:05"),
    (2, "09:05", "09:55"),
    (3, "10:05", "10:55"),
    (4, "10:55", "11:45"),
    (5, "12:45", "13:30"),
    (6, "13:30", "14:15"),
    (7, "14:25", "15:10"),
    (8, "15:10", "15:55"),
)

# College main gate, used when a student has no registered classroom location.
DEFAULT_CAMPUS_POINT = (12.8005328, 80.0388091)

# [lon, lat] ring, closed.
DEFAULT_CAMPUS_POLYGON = (
    (80.042220, 12.826504),
    (80.042201, 12.826280),
    (80.042853, 12.826268),
    (80.042851, 12.826512),
    (80.042220, 12.826504),
)
