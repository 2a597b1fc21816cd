from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import mysql.connector

from ..core.exceptions import StorageError
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """One connection, one transaction: commit on success, rollback on any error.

    Driver errors are re-raised as StorageError so services don't depend on mysql.connector.
    """
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        raise StorageError(f"Cannot connect to database: {e}") from e

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as e:
        conn.rollback()
        raise StorageError(str(e)) from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def to_flag(value: Any) -> Optional[bool]:
    """TINYINT(1) NULL -> Optional[bool]."""
    if value is None:
        return None
    return bool(int(value))


def from_flag(value: Optional[bool]) -> Optional[int]:
    if value is None:
        return None
    return 1 if value else 0
