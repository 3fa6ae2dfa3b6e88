from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Any, Optional

from ..common.datetime_utils import day_bounds, parse_timestamp
from ..common.validators import optional_text, require_choice, require_non_empty, require_positive_int
from ..core.constants import (
    CHECKIN_ID_MAX_LENGTH,
    DEFAULT_ADMIN_LIST_LIMIT,
    DEFAULT_EMAIL,
    DEFAULT_HISTORY_LIMIT,
    DEFAULT_PUNCTUALITY_STATUS,
    EMAIL_MAX_LENGTH,
    MAX_ADMIN_LIST_LIMIT,
    MAX_HISTORY_LIMIT,
    PUNCTUALITY_STATUS_MAX_LENGTH,
    USER_ID_MAX_LENGTH,
)
from ..core.enums import AttendanceStatus, CheckinGuard, HalfDayStatus
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from .duration import calculate_duration_ms
from .model import AttendanceFilter, AttendanceListing, AttendanceRecord, NewAttendanceRecord, SessionStatus
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Session state machine: NoSession -> CheckedIn -> CheckedOut.

    The open-session precondition is checked here; the store's unique keys are the backstop
    for two check-ins racing past that check (the loser gets ConflictError from the store).
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        checkin_guard: CheckinGuard = CheckinGuard.OPEN_SESSION,
    ):
        self._attendance = attendance
        self._guard = CheckinGuard(checkin_guard)

    @property
    def checkin_guard(self) -> CheckinGuard:
        return self._guard

    def check_in(
        self,
        *,
        user_id: Any,
        timestamp: Any,
        checkin_id: Any,
        punctuality_status: Any = None,
        half_day_status: Any = None,
        email: Any = None,
    ) -> AttendanceRecord:
        user_id = require_non_empty(user_id, "userId", max_length=USER_ID_MAX_LENGTH)
        checkin_id = require_non_empty(checkin_id, "checkinId", max_length=CHECKIN_ID_MAX_LENGTH)
        if timestamp is None or timestamp == "":
            raise ValidationError("timestamp is required")
        checkin_time = parse_timestamp(timestamp)
        half_day = require_choice(half_day_status, HalfDayStatus, "halfDayStatus", default=HalfDayStatus.FULL_DAY)
        email = optional_text(email, DEFAULT_EMAIL, field_name="email", max_length=EMAIL_MAX_LENGTH)
        punctuality = optional_text(
            punctuality_status,
            DEFAULT_PUNCTUALITY_STATUS,
            field_name="punctualityStatus",
            max_length=PUNCTUALITY_STATUS_MAX_LENGTH,
        )

        active = self._attendance.find_active_for_user(user_id)
        if active is not None:
            logger.warning("Check-in rejected for user %s: session %s still open", user_id, active.checkin_id)
            raise ConflictError("User is already checked in")

        if self._guard == CheckinGuard.CALENDAR_DAY:
            start, end = day_bounds(checkin_time.date())
            if self._attendance.exists_for_user_between(user_id, start, end):
                logger.warning("Check-in rejected for user %s: already has a record on %s", user_id, start.date())
                raise ConflictError("User already has an attendance record today")

        record = self._attendance.create(
            NewAttendanceRecord(
                user_id=user_id,
                checkin_id=checkin_id,
                checkin_time=checkin_time,
                status=AttendanceStatus.CHECKED_IN,
                email=email,
                punctuality_status=punctuality,
                half_day_status=half_day,
            )
        )
        logger.info("User %s checked in (checkinId=%s)", user_id, checkin_id)
        return record

    def check_out(self, *, user_id: Any, checkin_id: Any, timestamp: Any) -> AttendanceRecord:
        user_id = require_non_empty(user_id, "userId", max_length=USER_ID_MAX_LENGTH)
        checkin_id = require_non_empty(checkin_id, "checkinId", max_length=CHECKIN_ID_MAX_LENGTH)
        if timestamp is None or timestamp == "":
            raise ValidationError("timestamp is required")
        checkout_time = parse_timestamp(timestamp)

        record = self._attendance.find_active_session(user_id, checkin_id)
        if record is None:
            logger.warning("Checkout rejected: no open session for user %s / %s", user_id, checkin_id)
            raise NotFoundError("No active checkin session found for this user/checkinId.")

        duration_ms = calculate_duration_ms(record.checkin_time, checkout_time)
        if not self._attendance.update_checkout(
            record_id=record.record_id,
            checkout_time=checkout_time,
            duration_ms=duration_ms,
        ):
            # Closed by a concurrent checkout between the read and the update.
            raise NotFoundError("No active checkin session found for this user/checkinId.")

        logger.info("User %s checked out (checkinId=%s, duration=%sms)", user_id, checkin_id, duration_ms)
        return replace(
            record,
            status=AttendanceStatus.CHECKED_OUT,
            checkout_time=checkout_time,
            duration_ms=duration_ms,
        )

    def get_status(self, user_id: Any) -> SessionStatus:
        user_id = require_non_empty(user_id, "userId")
        active = self._attendance.find_active_for_user(user_id)
        if active is None:
            return SessionStatus(is_checked_in=False)
        return SessionStatus(is_checked_in=True, checkin_time=active.checkin_time, checkin_id=active.checkin_id)

    def get_history(
        self,
        user_id: Any,
        *,
        limit: Any = DEFAULT_HISTORY_LIMIT,
        include_all: bool = False,
    ) -> list[AttendanceRecord]:
        """Completed sessions newest first; `include_all` is the admin view of every record."""

        user_id = require_non_empty(user_id, "userId")
        limit = require_positive_int(limit, "limit", maximum=MAX_HISTORY_LIMIT)
        status = None if include_all else AttendanceStatus.CHECKED_OUT
        return list(self._attendance.get_recent_for_user(user_id, limit, status=status))

    def list_attendance(
        self,
        *,
        status: Any = None,
        user_id: Any = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: Any = DEFAULT_ADMIN_LIST_LIMIT,
    ) -> AttendanceListing:
        """Admin view. `start`/`end` are inclusive calendar days."""

        if start and end and end < start:
            raise ValidationError("end must not be before start")

        filters = AttendanceFilter(
            status=require_choice(status, AttendanceStatus, "status") if status not in (None, "") else None,
            user_id=str(user_id).strip() if user_id not in (None, "") else None,
            start=day_bounds(start)[0] if start else None,
            end=day_bounds(end)[1] if end else None,
        )
        limit = require_positive_int(limit, "limit", maximum=MAX_ADMIN_LIST_LIMIT)

        records = list(self._attendance.list_records(filters, limit=limit))
        counts = self._attendance.count_by_status(filters)
        return AttendanceListing(records=records, counts=counts)

    def delete_record(self, record_id: Any) -> None:
        record_id = require_positive_int(record_id, "recordId")
        if not self._attendance.delete_by_id(record_id):
            raise NotFoundError(f"Attendance record {record_id} not found")
        logger.info("Attendance record %s deleted", record_id)
