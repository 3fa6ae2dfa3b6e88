from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, Optional, Sequence

from mysql.connector import errors as mysql_errors

from ..core.enums import AttendanceStatus, HalfDayStatus
from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import conflict_from_integrity, db_cursor, fetchall, fetchone, is_duplicate_key
from .model import (
    AttendanceFilter,
    AttendanceRecord,
    BulkInsertFailure,
    BulkInsertResult,
    NewAttendanceRecord,
)
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

_COLUMNS = (
    "record_id, user_id, email, checkin_id, checkin_time, checkout_time, status, "
    "punctuality_status, half_day_status, duration_ms"
)

_INSERT_SQL = """
    INSERT INTO attendance_records(
        user_id, email, checkin_id, checkin_time, status, punctuality_status, half_day_status
    )
    VALUES(%s,%s,%s,%s,%s,%s,%s)
"""

_DUPLICATE_KEY_MESSAGES = {
    "uq_attendance_active_user": "User is already checked in",
    "uq_attendance_checkin_id": "checkinId already exists",
}


def _row_to_record(r: Dict[str, Any]) -> AttendanceRecord:
    duration = r.get("duration_ms")
    return AttendanceRecord(
        record_id=int(r["record_id"]),
        user_id=r["user_id"],
        email=r["email"],
        checkin_id=r["checkin_id"],
        checkin_time=r["checkin_time"],
        checkout_time=r.get("checkout_time"),
        status=AttendanceStatus(r["status"]),
        punctuality_status=r["punctuality_status"],
        half_day_status=HalfDayStatus(r["half_day_status"]),
        duration_ms=int(duration) if duration is not None else None,
    )


def _insert_params(record: NewAttendanceRecord) -> tuple:
    return (
        record.user_id,
        record.email,
        record.checkin_id,
        record.checkin_time,
        record.status.value,
        record.punctuality_status,
        record.half_day_status.value,
    )


def _where(filters: AttendanceFilter) -> tuple[str, list[object]]:
    clauses: list[str] = []
    params: list[object] = []

    if filters.status is not None:
        clauses.append("status=%s")
        params.append(filters.status.value)
    if filters.user_id is not None:
        clauses.append("user_id=%s")
        params.append(filters.user_id)
    if filters.start is not None:
        clauses.append("checkin_time >= %s")
        params.append(filters.start)
    if filters.end is not None:
        clauses.append("checkin_time < %s")
        params.append(filters.end)

    where = " AND ".join(clauses) if clauses else "1=1"
    return where, params


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_active_for_user(self, user_id: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE user_id=%s AND status=%s
                LIMIT 1
                """,
                (user_id, AttendanceStatus.CHECKED_IN.value),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def find_active_session(self, user_id: str, checkin_id: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE user_id=%s AND checkin_id=%s AND status=%s
                """,
                (user_id, checkin_id, AttendanceStatus.CHECKED_IN.value),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def exists_for_user_between(self, user_id: str, start: datetime, end: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT 1 AS found
                FROM attendance_records
                WHERE user_id=%s AND checkin_time >= %s AND checkin_time < %s
                LIMIT 1
                """,
                (user_id, start, end),
            )
            return fetchone(cur) is not None

    def create(self, record: NewAttendanceRecord) -> AttendanceRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(_INSERT_SQL, _insert_params(record))
            except mysql_errors.IntegrityError as exc:
                if is_duplicate_key(exc):
                    raise conflict_from_integrity(exc, key_messages=_DUPLICATE_KEY_MESSAGES) from exc
                raise
            except mysql_errors.DataError as exc:
                raise ValidationError(f"Attendance record rejected by the store: {exc.msg}") from exc
            record_id = int(cur.lastrowid)

        return AttendanceRecord(
            record_id=record_id,
            user_id=record.user_id,
            email=record.email,
            checkin_id=record.checkin_id,
            checkin_time=record.checkin_time,
            status=record.status,
            punctuality_status=record.punctuality_status,
            half_day_status=record.half_day_status,
        )

    def update_checkout(self, *, record_id: int, checkout_time: datetime, duration_ms: Optional[int]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET checkout_time=%s, status=%s, duration_ms=%s
                WHERE record_id=%s AND status=%s
                """,
                (
                    checkout_time,
                    AttendanceStatus.CHECKED_OUT.value,
                    duration_ms,
                    int(record_id),
                    AttendanceStatus.CHECKED_IN.value,
                ),
            )
            return cur.rowcount > 0

    def get_recent_for_user(
        self,
        user_id: str,
        limit: int,
        *,
        status: Optional[AttendanceStatus] = None,
    ) -> Sequence[AttendanceRecord]:
        where, params = _where(AttendanceFilter(status=status, user_id=user_id))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE {where}
                ORDER BY checkin_time DESC, record_id DESC
                LIMIT %s
                """,
                (*params, int(limit)),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def user_ids_checked_in_between(self, start: datetime, end: datetime) -> set[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT DISTINCT user_id
                FROM attendance_records
                WHERE checkin_time BETWEEN %s AND %s
                """,
                (start, end),
            )
            return {r["user_id"] for r in fetchall(cur)}

    def existing_checkin_ids(self, checkin_ids: Iterable[str]) -> set[str]:
        ids = list(dict.fromkeys(checkin_ids))
        if not ids:
            return set()

        placeholders = ",".join(["%s"] * len(ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT checkin_id FROM attendance_records WHERE checkin_id IN ({placeholders})",
                tuple(ids),
            )
            return {r["checkin_id"] for r in fetchall(cur)}

    def insert_many_tolerant(self, records: Sequence[NewAttendanceRecord]) -> BulkInsertResult:
        inserted = 0
        failures: list[BulkInsertFailure] = []
        if not records:
            return BulkInsertResult(inserted=0)

        with db_cursor(self._conn_factory) as (_, cur):
            for record in records:
                try:
                    cur.execute(_INSERT_SQL, _insert_params(record))
                except (mysql_errors.IntegrityError, mysql_errors.DataError) as exc:
                    # Only this statement is rolled back; earlier rows in the batch stay.
                    logger.warning("Insert rejected for checkinId=%s: %s", record.checkin_id, exc)
                    failures.append(BulkInsertFailure(checkin_id=record.checkin_id, reason=str(exc)))
                    continue
                inserted += 1

        return BulkInsertResult(inserted=inserted, failures=failures)

    def list_records(self, filters: AttendanceFilter, *, limit: int) -> Sequence[AttendanceRecord]:
        where, params = _where(filters)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE {where}
                ORDER BY checkin_time DESC, record_id DESC
                LIMIT %s
                """,
                (*params, int(limit)),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def count_by_status(self, filters: AttendanceFilter) -> dict[str, int]:
        where, params = _where(filters)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT status, COUNT(*) AS total
                FROM attendance_records
                WHERE {where}
                GROUP BY status
                """,
                tuple(params),
            )
            return {r["status"]: int(r["total"]) for r in fetchall(cur)}

    def delete_by_id(self, record_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE record_id=%s", (int(record_id),))
            return cur.rowcount > 0
