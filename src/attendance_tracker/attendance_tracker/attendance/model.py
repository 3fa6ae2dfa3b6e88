from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import to_iso
from ..core.constants import DEFAULT_EMAIL, DEFAULT_PUNCTUALITY_STATUS
from ..core.enums import AttendanceStatus, HalfDayStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one check-in attempt (or a synthesized absence).

    `duration_ms` is set only once the record reaches CheckedOut.
    """

    record_id: int
    user_id: str
    checkin_id: str
    checkin_time: datetime
    status: AttendanceStatus
    email: str = DEFAULT_EMAIL
    checkout_time: Optional[datetime] = None
    punctuality_status: str = DEFAULT_PUNCTUALITY_STATUS
    half_day_status: HalfDayStatus = HalfDayStatus.FULL_DAY
    duration_ms: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "recordId": self.record_id,
            "userId": self.user_id,
            "email": self.email,
            "checkinId": self.checkin_id,
            "checkinTime": to_iso(self.checkin_time),
            "checkoutTime": to_iso(self.checkout_time),
            "status": self.status.value,
            "punctualityStatus": self.punctuality_status,
            "halfDayStatus": self.half_day_status.value,
            "duration": self.duration_ms,
        }


@dataclass(frozen=True)
class NewAttendanceRecord:
    """Write-model for an insert; the store assigns `record_id`."""

    user_id: str
    checkin_id: str
    checkin_time: datetime
    status: AttendanceStatus
    email: str = DEFAULT_EMAIL
    punctuality_status: str = DEFAULT_PUNCTUALITY_STATUS
    half_day_status: HalfDayStatus = HalfDayStatus.FULL_DAY


@dataclass(frozen=True)
class SessionStatus:
    """Read-model: whether a user currently has an open session."""

    is_checked_in: bool
    checkin_time: Optional[datetime] = None
    checkin_id: Optional[str] = None

    def to_dict(self) -> dict:
        if not self.is_checked_in:
            return {"isCheckedIn": False}
        return {
            "isCheckedIn": True,
            "checkinTime": to_iso(self.checkin_time),
            "checkinId": self.checkin_id,
        }


@dataclass(frozen=True)
class AttendanceFilter:
    status: Optional[AttendanceStatus] = None
    user_id: Optional[str] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None


@dataclass(frozen=True)
class AttendanceListing:
    records: list[AttendanceRecord]
    counts: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "records": [r.to_dict() for r in self.records],
            "counts": dict(self.counts),
            "total": sum(self.counts.values()),
        }


@dataclass(frozen=True)
class BulkInsertFailure:
    checkin_id: str
    reason: str


@dataclass(frozen=True)
class BulkInsertResult:
    inserted: int
    failures: list[BulkInsertFailure] = field(default_factory=list)
