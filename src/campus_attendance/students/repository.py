from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import NewStudent, Student


class StudentRepository(Protocol):
    """Repository interface for Student.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def get_by_uuid(self, uuid: str) -> Optional[Student]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[Student]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Student]:
        raise NotImplementedError

    def get_by_name_and_reg_no(self, name: str, reg_no: str) -> Optional[Student]:
        raise NotImplementedError

    def create(self, student: NewStudent) -> int:
        raise NotImplementedError

    def list_all(self) -> Sequence[Student]:
        raise NotImplementedError
