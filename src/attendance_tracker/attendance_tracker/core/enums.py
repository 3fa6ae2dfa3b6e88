from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Lifecycle state of a single attendance record."""

    CHECKED_IN = "CheckedIn"
    CHECKED_OUT = "CheckedOut"
    ABSENT = "Absent"


class HalfDayStatus(str, Enum):
    """Whether a session counts as a full or partial workday."""

    FULL_DAY = "FullDay"
    HALF_DAY = "HalfDay"
    NOT_APPLICABLE = "N/A"


class CheckinGuard(str, Enum):
    """Rule used to reject a duplicate check-in.

    OPEN_SESSION rejects only while the user still has a CheckedIn record.
    CALENDAR_DAY additionally rejects any second record on the same day.
    """

    OPEN_SESSION = "open_session"
    CALENDAR_DAY = "calendar_day"
