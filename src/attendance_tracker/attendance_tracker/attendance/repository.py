from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceFilter, AttendanceRecord, BulkInsertResult, NewAttendanceRecord


class AttendanceRepository(Protocol):
    """Attendance Record Store.

    Implementations must enforce two uniqueness rules and report violations as ConflictError:
    `checkin_id` is unique across all records, and a user has at most one CheckedIn record.
    """

    def find_active_for_user(self, user_id: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def find_active_session(self, user_id: str, checkin_id: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def exists_for_user_between(self, user_id: str, start: datetime, end: datetime) -> bool:
        """Any record for the user with start <= checkin_time < end."""

        raise NotImplementedError

    def create(self, record: NewAttendanceRecord) -> AttendanceRecord:
        raise NotImplementedError

    def update_checkout(self, *, record_id: int, checkout_time: datetime, duration_ms: Optional[int]) -> bool:
        """CheckedIn -> CheckedOut. Returns False when the record is no longer CheckedIn."""

        raise NotImplementedError

    def get_recent_for_user(
        self,
        user_id: str,
        limit: int,
        *,
        status: Optional[AttendanceStatus] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def user_ids_checked_in_between(self, start: datetime, end: datetime) -> set[str]:
        """Distinct user ids with start <= checkin_time <= end."""

        raise NotImplementedError

    def existing_checkin_ids(self, checkin_ids: Iterable[str]) -> set[str]:
        raise NotImplementedError

    def insert_many_tolerant(self, records: Sequence[NewAttendanceRecord]) -> BulkInsertResult:
        """Insert each record independently; a rejected item never aborts the rest."""

        raise NotImplementedError

    def list_records(self, filters: AttendanceFilter, *, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def count_by_status(self, filters: AttendanceFilter) -> dict[str, int]:
        raise NotImplementedError

    def delete_by_id(self, record_id: int) -> bool:
        raise NotImplementedError
