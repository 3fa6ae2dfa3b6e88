from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime
from typing import Iterable, Optional, Sequence

import pytest

from src.attendance_tracker.attendance_tracker.attendance.model import (
    AttendanceFilter,
    AttendanceRecord,
    BulkInsertFailure,
    BulkInsertResult,
    NewAttendanceRecord,
)
from src.attendance_tracker.attendance_tracker.core.enums import AttendanceStatus
from src.attendance_tracker.attendance_tracker.core.exceptions import ConflictError
from src.attendance_tracker.attendance_tracker.users.model import User


class InMemoryAttendance:
    """Mirrors attendance_records: unique checkin_id and one CheckedIn row per user."""

    def __init__(self):
        self._records: dict[int, AttendanceRecord] = {}
        self._id = 0
        self._lock = threading.Lock()
        self.rejected_inserts: set[str] = set()

    # helpers for tests
    def all(self) -> list[AttendanceRecord]:
        return list(self._records.values())

    def _insert_locked(self, record: NewAttendanceRecord) -> AttendanceRecord:
        if record.checkin_id in self.rejected_inserts:
            raise ConflictError("checkinId already exists")
        if any(r.checkin_id == record.checkin_id for r in self._records.values()):
            raise ConflictError("checkinId already exists")
        if record.status == AttendanceStatus.CHECKED_IN and any(
            r.user_id == record.user_id and r.status == AttendanceStatus.CHECKED_IN for r in self._records.values()
        ):
            raise ConflictError("User is already checked in")

        self._id += 1
        rec = AttendanceRecord(
            record_id=self._id,
            user_id=record.user_id,
            email=record.email,
            checkin_id=record.checkin_id,
            checkin_time=record.checkin_time,
            status=record.status,
            punctuality_status=record.punctuality_status,
            half_day_status=record.half_day_status,
        )
        self._records[rec.record_id] = rec
        return rec

    def find_active_for_user(self, user_id: str) -> Optional[AttendanceRecord]:
        for r in self._records.values():
            if r.user_id == user_id and r.status == AttendanceStatus.CHECKED_IN:
                return r
        return None

    def find_active_session(self, user_id: str, checkin_id: str) -> Optional[AttendanceRecord]:
        for r in self._records.values():
            if r.user_id == user_id and r.checkin_id == checkin_id and r.status == AttendanceStatus.CHECKED_IN:
                return r
        return None

    def exists_for_user_between(self, user_id: str, start: datetime, end: datetime) -> bool:
        return any(r.user_id == user_id and start <= r.checkin_time < end for r in self._records.values())

    def create(self, record: NewAttendanceRecord) -> AttendanceRecord:
        with self._lock:
            return self._insert_locked(record)

    def update_checkout(self, *, record_id: int, checkout_time: datetime, duration_ms: Optional[int]) -> bool:
        with self._lock:
            current = self._records.get(record_id)
            if current is None or current.status != AttendanceStatus.CHECKED_IN:
                return False
            self._records[record_id] = replace(
                current,
                status=AttendanceStatus.CHECKED_OUT,
                checkout_time=checkout_time,
                duration_ms=duration_ms,
            )
            return True

    def get_recent_for_user(self, user_id: str, limit: int, *, status=None) -> Sequence[AttendanceRecord]:
        items = [
            r for r in self._records.values() if r.user_id == user_id and (status is None or r.status == status)
        ]
        items.sort(key=lambda r: (r.checkin_time, r.record_id), reverse=True)
        return items[:limit]

    def user_ids_checked_in_between(self, start: datetime, end: datetime) -> set[str]:
        return {r.user_id for r in self._records.values() if start <= r.checkin_time <= end}

    def existing_checkin_ids(self, checkin_ids: Iterable[str]) -> set[str]:
        wanted = set(checkin_ids)
        return {r.checkin_id for r in self._records.values() if r.checkin_id in wanted}

    def insert_many_tolerant(self, records: Sequence[NewAttendanceRecord]) -> BulkInsertResult:
        inserted = 0
        failures = []
        with self._lock:
            for record in records:
                try:
                    self._insert_locked(record)
                except ConflictError as e:
                    failures.append(BulkInsertFailure(checkin_id=record.checkin_id, reason=str(e)))
                    continue
                inserted += 1
        return BulkInsertResult(inserted=inserted, failures=failures)

    def _matches(self, r: AttendanceRecord, f: AttendanceFilter) -> bool:
        if f.status is not None and r.status != f.status:
            return False
        if f.user_id is not None and r.user_id != f.user_id:
            return False
        if f.start is not None and r.checkin_time < f.start:
            return False
        if f.end is not None and r.checkin_time >= f.end:
            return False
        return True

    def list_records(self, filters: AttendanceFilter, *, limit: int) -> Sequence[AttendanceRecord]:
        items = [r for r in self._records.values() if self._matches(r, filters)]
        items.sort(key=lambda r: (r.checkin_time, r.record_id), reverse=True)
        return items[:limit]

    def count_by_status(self, filters: AttendanceFilter) -> dict[str, int]:
        counts: dict[str, int] = {}
        for r in self._records.values():
            if self._matches(r, filters):
                counts[r.status.value] = counts.get(r.status.value, 0) + 1
        return counts

    def delete_by_id(self, record_id: int) -> bool:
        with self._lock:
            return self._records.pop(record_id, None) is not None


class InMemoryUsers:
    def __init__(self, users: Iterable[User] = ()):
        self._users: dict[str, User] = {u.user_id: u for u in users}

    def list_active_user_ids(self) -> Sequence[str]:
        return sorted(u.user_id for u in self._users.values() if u.is_active)

    def upsert(self, user: User) -> None:
        self._users[user.user_id] = user


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def users_repo() -> InMemoryUsers:
    return InMemoryUsers([User(user_id="u1"), User(user_id="u2"), User(user_id="u3")])
