from __future__ import annotations

from datetime import datetime

import pytest
from mysql.connector import errorcode
from mysql.connector import errors as mysql_errors

from src.attendance_tracker.attendance_tracker.attendance.model import NewAttendanceRecord
from src.attendance_tracker.attendance_tracker.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from src.attendance_tracker.attendance_tracker.core.enums import AttendanceStatus
from src.attendance_tracker.attendance_tracker.core.exceptions import ConflictError, TransientStoreError, ValidationError
from src.attendance_tracker.attendance_tracker.database.mysql_base import db_cursor

T0 = datetime(2026, 2, 1, 21, 0)


def _dup(key: str) -> mysql_errors.IntegrityError:
    return mysql_errors.IntegrityError(
        msg=f"Duplicate entry 'x' for key 'attendance_records.{key}'",
        errno=errorcode.ER_DUP_ENTRY,
    )


class FakeCursor:
    def __init__(self, script):
        self._script = script
        self.executed = []
        self.lastrowid = 0
        self.rowcount = 0

    def execute(self, sql, params=None):
        self.executed.append((sql, params))
        outcome = self._script.pop(0) if self._script else None
        if isinstance(outcome, Exception):
            raise outcome
        self.lastrowid += 1
        self.rowcount = 1

    def fetchall(self):
        return []

    def fetchone(self):
        return None

    def close(self):
        pass


class FakeConn:
    def __init__(self, cursor):
        self._cursor = cursor
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=True):
        return self._cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeFactory:
    def __init__(self, *script):
        self.cursor = FakeCursor(list(script))
        self.conn = FakeConn(self.cursor)

    def connect(self):
        return self.conn


def _absent(uid: str) -> NewAttendanceRecord:
    return NewAttendanceRecord(
        user_id=uid,
        checkin_id=f"{uid}_ABSENT_2026-02-01",
        checkin_time=T0,
        status=AttendanceStatus.ABSENT,
    )


def test_create_maps_open_session_violation_to_conflict():
    factory = FakeFactory(_dup("uq_attendance_active_user"))
    repo = MySQLAttendanceRepository(factory)

    with pytest.raises(ConflictError, match="already checked in"):
        repo.create(
            NewAttendanceRecord(user_id="u1", checkin_id="c1", checkin_time=T0, status=AttendanceStatus.CHECKED_IN)
        )
    assert factory.conn.rolled_back
    assert factory.conn.closed


def test_create_maps_duplicate_checkin_id_to_conflict():
    repo = MySQLAttendanceRepository(FakeFactory(_dup("uq_attendance_checkin_id")))

    with pytest.raises(ConflictError, match="checkinId"):
        repo.create(
            NewAttendanceRecord(user_id="u1", checkin_id="c1", checkin_time=T0, status=AttendanceStatus.CHECKED_IN)
        )


def test_bulk_insert_continues_past_duplicate():
    factory = FakeFactory(None, _dup("uq_attendance_checkin_id"), None)
    repo = MySQLAttendanceRepository(factory)

    result = repo.insert_many_tolerant([_absent("u1"), _absent("u2"), _absent("u3")])

    assert result.inserted == 2
    assert [f.checkin_id for f in result.failures] == ["u2_ABSENT_2026-02-01"]
    assert len(factory.cursor.executed) == 3
    assert factory.conn.committed


def test_lost_connection_becomes_transient_error():
    factory = FakeFactory(mysql_errors.OperationalError(msg="Lost connection to MySQL server during query"))
    repo = MySQLAttendanceRepository(factory)

    with pytest.raises(TransientStoreError):
        repo.find_active_for_user("u1")
    assert factory.conn.rolled_back


def test_pool_exhaustion_on_connect_is_transient():
    class Exhausted:
        def connect(self):
            raise mysql_errors.PoolError(msg="Failed getting connection; pool exhausted")

    with pytest.raises(TransientStoreError):
        with db_cursor(Exhausted()):
            pass


def test_existing_checkin_ids_skips_query_for_empty_input():
    factory = FakeFactory()
    repo = MySQLAttendanceRepository(factory)

    assert repo.existing_checkin_ids([]) == set()
    assert factory.cursor.executed == []


def test_create_maps_data_too_long_to_validation_error():
    too_long = mysql_errors.DataError(msg="Data too long for column 'checkin_id' at row 1", errno=errorcode.ER_DATA_TOO_LONG)
    factory = FakeFactory(too_long)
    repo = MySQLAttendanceRepository(factory)

    with pytest.raises(ValidationError, match="Data too long"):
        repo.create(
            NewAttendanceRecord(user_id="u1", checkin_id="c1", checkin_time=T0, status=AttendanceStatus.CHECKED_IN)
        )
    assert factory.conn.rolled_back
