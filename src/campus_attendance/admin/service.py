from __future__ import annotations

import hmac

from ..core.exceptions import AuthenticationError


class AdminAuthService:
    """Single admin account whose credentials come from settings (no user table, no roles)."""

    def __init__(self, *, username: str, password: str):
        self._username = username
        self._password = password

    def authenticate(self, username: str, password: str) -> None:
        user_ok = hmac.compare_digest((username or "").encode(), self._username.encode())
        pass_ok = hmac.compare_digest((password or "").encode(), self._password.encode())
        if not (user_ok and pass_ok):
            raise AuthenticationError("Invalid admin credentials")
