"""Request bodies of the attendance endpoints.

Each body is parsed into a frozen dataclass; unknown or missing fields are
rejected up front so the service never sees a half-valid request.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from ..common.datetime_utils import parse_iso_timestamp
from ..common.validators import reject_unknown_fields, require_int, require_non_empty, require_number, require_object
from ..core.enums import ErrorKind, Slot
from ..core.exceptions import ValidationError
from ..core.result import Err, Ok, Result
from ..geofence.model import GeoPoint


@dataclass(frozen=True)
class PingRequest:
    """``POST /attendance/ping``: ``{uuid | studentId, latitude, longitude, timestamp?}``."""

    student_id: Optional[int]
    uuid: Optional[str]
    location: GeoPoint
    timestamp: Optional[datetime]

    FIELDS = ("uuid", "studentId", "latitude", "longitude", "timestamp")

    @classmethod
    def parse(cls, body: Any) -> Result["PingRequest"]:
        try:
            return Ok(cls._parse(body))
        except ValidationError as e:
            return Err(ErrorKind.INVALID_INPUT, str(e))

    @classmethod
    def _parse(cls, body: Any) -> "PingRequest":
        body = require_object(body, "body")
        reject_unknown_fields(body, cls.FIELDS)

        has_id = body.get("studentId") is not None
        has_uuid = body.get("uuid") is not None
        if has_id == has_uuid:
            raise ValidationError("Provide exactly one of studentId or uuid")

        student_id = require_int(body["studentId"], "studentId") if has_id else None
        uuid = require_non_empty(body["uuid"], "uuid") if has_uuid else None

        location = GeoPoint(
            latitude=require_number(body.get("latitude"), "latitude", low=-90, high=90),
            longitude=require_number(body.get("longitude"), "longitude", low=-180, high=180),
        )

        timestamp = None
        if body.get("timestamp") is not None:
            raw = body["timestamp"]
            if not isinstance(raw, str):
                raise ValidationError("timestamp must be an ISO-8601 string")
            try:
                timestamp = parse_iso_timestamp(raw)
            except ValueError:
                raise ValidationError("timestamp must be an ISO-8601 string")

        return cls(student_id=student_id, uuid=uuid, location=location, timestamp=timestamp)


@dataclass(frozen=True)
class MarkRequest:
    """``POST /attendance/mark``: ``{studentId, periodNumber, timestampType, location}``.

    Older clients compute period and slot on the device and send them along.
    """

    student_id: int
    period_number: int
    slot: Slot
    location: GeoPoint

    FIELDS = ("studentId", "periodNumber", "timestampType", "location")

    @classmethod
    def parse(cls, body: Any) -> Result["MarkRequest"]:
        try:
            return Ok(cls._parse(body))
        except ValidationError as e:
            return Err(ErrorKind.INVALID_INPUT, str(e))

    @classmethod
    def _parse(cls, body: Any) -> "MarkRequest":
        body = require_object(body, "body")
        reject_unknown_fields(body, cls.FIELDS)

        slot_raw = body.get("timestampType")
        try:
            slot = Slot(slot_raw)
        except ValueError:
            allowed = ", ".join(s.value for s in Slot)
            raise ValidationError(f"timestampType must be one of: {allowed}")

        return cls(
            student_id=require_int(body.get("studentId"), "studentId"),
            period_number=require_int(body.get("periodNumber"), "periodNumber"),
            slot=slot,
            location=GeoPoint.from_json(body.get("location"), "location"),
        )
