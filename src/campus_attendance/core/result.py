"""Explicit success/failure values for the ping pipeline.

Matcher, validator and update rule return ``Ok`` or ``Err`` instead of raising,
so the controller can translate an ``ErrorKind`` into a status code in one place.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from .enums import ErrorKind

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    message: str

    @property
    def ok(self) -> bool:
        return False


Result = Union[Ok[T], Err]
