from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..geofence.model import GeoPoint


@dataclass(frozen=True)
class Student:
    """Domain entity: a registered student.

    ``location`` is the classroom point registered at signup; radius-mode
    geofencing compares pings against it.
    """

    student_id: int
    name: str
    class_name: str
    year: int
    reg_no: str
    phone: Optional[str]
    username: str
    email: str
    password_hash: str
    uuid: str
    location: Optional[GeoPoint] = None

    def public_json(self) -> dict:
        return {
            "studentId": self.student_id,
            "name": self.name,
            "class": self.class_name,
            "year": self.year,
            "regNo": self.reg_no,
            "phone": self.phone,
            "username": self.username,
            "email": self.email,
            "uuid": self.uuid,
            "location": self.location.to_json() if self.location else None,
        }


@dataclass(frozen=True)
class NewStudent:
    name: str
    class_name: str
    year: int
    reg_no: str
    phone: Optional[str]
    username: str
    email: str
    password_hash: str
    uuid: str
    location: Optional[GeoPoint] = None
