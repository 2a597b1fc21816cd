from __future__ import annotations

import pytest

from campus_attendance.core.constants import DEFAULT_CAMPUS_POINT, DEFAULT_CAMPUS_POLYGON
from campus_attendance.core.enums import ErrorKind, GeofenceMode, MarkStatus
from campus_attendance.core.exceptions import ConfigurationError
from campus_attendance.geofence.factory import GeofenceStrategyFactory
from campus_attendance.geofence.geometry import destination_point, haversine_m, point_in_polygon
from campus_attendance.geofence.model import GeoPoint, Polygon
from campus_attendance.geofence.strategies.polygon_strategy import PolygonStrategy
from campus_attendance.geofence.strategies.radius_strategy import RadiusStrategy
from campus_attendance.geofence.validator import PresenceValidator

CAMPUS = GeoPoint(*DEFAULT_CAMPUS_POINT)
POLYGON = Polygon.from_config(DEFAULT_CAMPUS_POLYGON)


def radius_validator(radius: float = 100.0) -> PresenceValidator:
    return PresenceValidator(
        mode=GeofenceMode.RADIUS,
        campus_point=CAMPUS,
        factory=GeofenceStrategyFactory(radius_meters=radius),
    )


def polygon_validator() -> PresenceValidator:
    return PresenceValidator(mode=GeofenceMode.POLYGON, campus_point=CAMPUS, campus_polygon=POLYGON)


def test_haversine_zero_for_same_point():
    assert haversine_m(CAMPUS, CAMPUS) == 0.0


def test_haversine_one_degree_latitude():
    d = haversine_m(GeoPoint(0.0, 0.0), GeoPoint(1.0, 0.0))
    assert d == pytest.approx(111_195, rel=1e-3)


def test_same_point_is_present_with_zero_distance():
    res = radius_validator().validate(CAMPUS, CAMPUS)
    assert res.ok
    assert res.value.status == MarkStatus.PRESENT
    assert res.value.distance_meters == 0.0


@pytest.mark.parametrize("bearing", [0, 90, 180, 270, 45])
def test_radius_boundary_is_inclusive(bearing):
    on_edge = destination_point(CAMPUS, bearing, 100.0)
    res = radius_validator(100.0).validate(on_edge, CAMPUS)
    assert res.value.status == MarkStatus.PRESENT


@pytest.mark.parametrize("bearing", [0, 90, 180, 270])
def test_radius_plus_one_meter_is_absent(bearing):
    outside = destination_point(CAMPUS, bearing, 101.0)
    res = radius_validator(100.0).validate(outside, CAMPUS)
    assert res.ok
    assert res.value.status == MarkStatus.ABSENT
    assert res.value.distance_meters == pytest.approx(101.0, abs=0.01)


def test_sample_may_be_raw_json():
    res = radius_validator().validate({"latitude": CAMPUS.latitude, "longitude": CAMPUS.longitude}, CAMPUS)
    assert res.ok and res.value.present


@pytest.mark.parametrize(
    "sample",
    [
        None,
        {"latitude": 95.0, "longitude": 10.0},
        {"latitude": 10.0, "longitude": -181.0},
        {"latitude": "abc", "longitude": 10.0},
        {"latitude": float("nan"), "longitude": 10.0},
        {"longitude": 10.0},
    ],
)
def test_malformed_coordinates_are_invalid_input(sample):
    res = radius_validator().validate(sample, CAMPUS)
    assert not res.ok
    assert res.kind == ErrorKind.INVALID_INPUT


def test_reference_must_fit_mode():
    res = radius_validator().validate(CAMPUS, POLYGON)
    assert not res.ok
    assert res.kind == ErrorKind.INVALID_INPUT


def test_polygon_vertex_and_edge_count_as_inside():
    lon, lat = DEFAULT_CAMPUS_POLYGON[1]
    assert point_in_polygon(GeoPoint(latitude=lat, longitude=lon), POLYGON)

    (lon1, lat1), (lon2, lat2) = DEFAULT_CAMPUS_POLYGON[1], DEFAULT_CAMPUS_POLYGON[2]
    mid = GeoPoint(latitude=(lat1 + lat2) / 2, longitude=(lon1 + lon2) / 2)
    assert point_in_polygon(mid, POLYGON)


def test_polygon_mode_inside_and_outside():
    validator = polygon_validator()
    inside = GeoPoint(latitude=12.826391, longitude=80.042531)
    res = validator.validate(inside, validator.reference_for(None))
    assert res.ok and res.value.present
    assert res.value.distance_meters is None

    res = validator.validate(CAMPUS, validator.reference_for(None))
    assert res.ok
    assert res.value.status == MarkStatus.ABSENT


def test_reference_for_radius_prefers_registered_location():
    registered = GeoPoint(12.9, 80.1)
    validator = radius_validator()
    assert validator.reference_for(registered) == registered
    assert validator.reference_for(None) == CAMPUS


def test_reference_for_polygon_ignores_registered_location():
    assert polygon_validator().reference_for(GeoPoint(12.9, 80.1)) is POLYGON


def test_polygon_mode_without_polygon_is_rejected():
    with pytest.raises(ValueError):
        PresenceValidator(mode=GeofenceMode.POLYGON, campus_point=CAMPUS)


@pytest.mark.parametrize(
    "ring",
    [
        [(0, 0), (1, 0), (0, 0)],
        [(0, 0), (1, 0), (1, 1), (0, 1)],
        [(0, 0), ("x", 0), (1, 1), (0, 0)],
    ],
)
def test_invalid_polygon_config(ring):
    with pytest.raises(ConfigurationError):
        Polygon.from_config(ring)


def test_factory_returns_configured_strategy():
    factory = GeofenceStrategyFactory(radius_meters=42.0)
    radius = factory.for_mode(GeofenceMode.RADIUS)
    assert isinstance(radius, RadiusStrategy)
    assert radius.radius_meters == 42.0
    assert isinstance(factory.for_mode(GeofenceMode.POLYGON), PolygonStrategy)

    with pytest.raises(ValueError):
        factory.for_mode("circle")


@pytest.mark.parametrize(
    "lat,lon",
    [(0.0, 0.0), (12.8005328, 80.0388091), (-33.8688, 151.2093), (45.0, -179.5), (89.9, 10.0)],
)
def test_antipodal_points_give_half_circumference(lat, lon):
    a = GeoPoint(latitude=lat, longitude=lon)
    b = GeoPoint(latitude=-lat, longitude=lon + 180.0 if lon <= 0 else lon - 180.0)
    assert haversine_m(a, b) == pytest.approx(3.141592653589793 * 6_371_000.0, rel=1e-6)


def test_antipodal_ping_is_absent_not_an_error():
    far = GeoPoint(latitude=-CAMPUS.latitude, longitude=CAMPUS.longitude - 180.0)
    res = radius_validator().validate(far, CAMPUS)
    assert res.ok
    assert res.value.status == MarkStatus.ABSENT
