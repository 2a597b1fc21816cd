from __future__ import annotations

from types import SimpleNamespace

import pytest

from campus_attendance.config import get_settings_module
from campus_attendance.container import AttendanceSettings
from campus_attendance.core.enums import GeofenceMode
from campus_attendance.core.exceptions import ConfigurationError


def settings_module(**overrides):
    values = dict(
        TIMEZONE="Asia/Kolkata",
        TIMETABLE=[(1, "08:15", "09:05")],
        SLOT_TOLERANCE_MINUTES=5,
        PRESENT_SLOT_THRESHOLD=3,
        GEOFENCE_MODE="polygon",
        GEOFENCE_RADIUS_METERS=50,
        CAMPUS_REFERENCE_POINT=(12.8, 80.0),
        CAMPUS_POLYGON=[(0, 0), (1, 0), (1, 1), (0, 0)],
        ADMIN_USERNAME="boss",
        ADMIN_PASSWORD="hunter22",
    )
    values.update(overrides)
    return SimpleNamespace(**values)


def test_from_module():
    s = AttendanceSettings.from_module(settings_module())
    assert s.geofence_mode == GeofenceMode.POLYGON
    assert s.radius_meters == 50.0
    assert len(s.timetable) == 1
    assert s.campus_point.latitude == 12.8
    assert str(s.tz) == "Asia/Kolkata"
    assert s.admin_username == "boss"


@pytest.mark.parametrize(
    "overrides",
    [
        {"TIMEZONE": "Mars/Olympus"},
        {"GEOFENCE_MODE": "hexagon"},
        {"SLOT_TOLERANCE_MINUTES": -1},
        {"PRESENT_SLOT_THRESHOLD": 5},
        {"GEOFENCE_RADIUS_METERS": 0},
        {"TIMETABLE": []},
        {"CAMPUS_POLYGON": [(0, 0), (1, 1)]},
        {"SLOT_TOLERANCE_MINUTES": "five"},
        {"PRESENT_SLOT_THRESHOLD": "3.5"},
        {"GEOFENCE_RADIUS_METERS": "far"},
        {"GEOFENCE_RADIUS_METERS": None},
    ],
)
def test_from_module_rejects_bad_settings(overrides):
    with pytest.raises(ConfigurationError):
        AttendanceSettings.from_module(settings_module(**overrides))


@pytest.mark.parametrize(
    "env,module",
    [
        ("production", "campus_attendance.config.production"),
        ("test", "campus_attendance.config.testing"),
        ("development", "campus_attendance.config.development"),
    ],
)
def test_settings_module_by_env(monkeypatch, env, module):
    monkeypatch.setenv("APP_ENV", env)
    assert get_settings_module() == module


def test_from_module_accepts_numeric_strings_from_env():
    s = AttendanceSettings.from_module(
        settings_module(SLOT_TOLERANCE_MINUTES="0", PRESENT_SLOT_THRESHOLD="4", GEOFENCE_RADIUS_METERS="75.5")
    )
    assert s.slot_tolerance_minutes == 0
    assert s.present_slot_threshold == 4
    assert s.radius_meters == 75.5
