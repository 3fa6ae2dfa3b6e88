from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from mysql.connector import errorcode
from mysql.connector import errors as mysql_errors

from ..core.exceptions import ConflictError, TransientStoreError
from .connection import DatabaseConnection

# Connectivity, timeouts and pool exhaustion: retryable, never a business outcome.
TRANSIENT_ERRORS = (
    mysql_errors.OperationalError,
    mysql_errors.InterfaceError,
    mysql_errors.PoolError,
)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    try:
        conn = conn_factory.connect()
    except TRANSIENT_ERRORS as exc:
        raise TransientStoreError("Database is unavailable") from exc

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except TRANSIENT_ERRORS as exc:
        _safe_rollback(conn)
        raise TransientStoreError("Database operation failed or timed out") from exc
    except Exception:
        _safe_rollback(conn)
        raise
    finally:
        conn.close()


def _safe_rollback(conn) -> None:
    try:
        conn.rollback()
    except mysql_errors.Error:
        # Connection already gone; the first error is reported.
        return


def is_duplicate_key(exc: BaseException) -> bool:
    return isinstance(exc, mysql_errors.IntegrityError) and getattr(exc, "errno", None) == errorcode.ER_DUP_ENTRY


def conflict_from_integrity(exc: mysql_errors.IntegrityError, *, key_messages: Dict[str, str]) -> ConflictError:
    """Map a duplicate-key error onto a ConflictError naming the violated rule."""

    text = str(getattr(exc, "msg", "") or exc)
    for key_name, message in key_messages.items():
        if key_name in text:
            return ConflictError(message)
    return ConflictError("Duplicate record")


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])
