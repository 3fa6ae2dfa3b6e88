from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional

from ..attendance.model import BulkInsertFailure, NewAttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_utc, to_iso
from ..core.constants import ABSENT_CHECKIN_ID_FORMAT
from ..core.enums import AttendanceStatus
from ..shifts.model import ShiftPolicy, ShiftWindow
from ..users.repository import UserRepository

logger = logging.getLogger(__name__)


def absent_checkin_id(user_id: str, shift_start: datetime) -> str:
    """Deterministic key for a synthesized absence, so reruns of the same cycle match."""

    return ABSENT_CHECKIN_ID_FORMAT.format(user_id=user_id, shift_date=shift_start.strftime("%Y-%m-%d"))


@dataclass(frozen=True)
class ReconciliationSummary:
    window: ShiftWindow
    users_considered: int
    absentees_found: int
    already_marked: int = 0
    inserted: int = 0
    failures: list[BulkInsertFailure] = field(default_factory=list)

    @property
    def partial_failure(self) -> bool:
        return bool(self.failures)

    @property
    def message(self) -> str:
        if self.users_considered == 0:
            return "No active users found."
        if self.absentees_found == 0:
            return "No absentees found for the checked shift cycle."
        if self.inserted == 0 and not self.failures:
            return "All absentees already marked for this cycle."
        if self.inserted == 0:
            return f"Failed to mark {len(self.failures)} users as Absent; no records were inserted."
        text = f"Successfully marked {self.inserted} users as Absent."
        if self.failures:
            text += f" {len(self.failures)} records could not be inserted."
        return text

    def to_dict(self) -> dict:
        return {
            "message": self.message,
            "shiftStart": to_iso(self.window.start),
            "shiftEnd": to_iso(self.window.end),
            "usersConsidered": self.users_considered,
            "absenteesFound": self.absentees_found,
            "alreadyMarked": self.already_marked,
            "absentCount": self.inserted,
            "partialFailure": self.partial_failure,
            "failures": [{"checkinId": f.checkin_id, "reason": f.reason} for f in self.failures],
        }


class AbsenteeReconciliationService:
    """Marks every active user with no check-in inside the last shift window as Absent.

    Safe to rerun for the same window: candidates whose deterministic checkinId already
    exists are skipped, and a duplicate-key race on insert is reported, not raised.
    A user who checks in after being marked Absent keeps both records.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        policy: ShiftPolicy,
        *,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._attendance = attendance
        self._users = users
        self._policy = policy
        self._clock = clock

    def run(self, *, now: Optional[datetime] = None) -> ReconciliationSummary:
        now = now or self._clock()
        window = self._policy.last_completed_window(now)
        logger.info("Absentee check started for shift %s -> %s", window.start, window.end)

        user_ids = list(dict.fromkeys(self._users.list_active_user_ids()))
        logger.info("Active users found: %d", len(user_ids))
        if not user_ids:
            return ReconciliationSummary(window=window, users_considered=0, absentees_found=0)

        attended = self._attendance.user_ids_checked_in_between(window.start, window.end)
        absent_ids = [uid for uid in user_ids if uid not in attended]
        logger.info("Users absent: %d", len(absent_ids))
        if not absent_ids:
            return ReconciliationSummary(window=window, users_considered=len(user_ids), absentees_found=0)

        candidates = [
            NewAttendanceRecord(
                user_id=uid,
                checkin_id=absent_checkin_id(uid, window.start),
                checkin_time=window.start,
                status=AttendanceStatus.ABSENT,
            )
            for uid in absent_ids
        ]
        existing = self._attendance.existing_checkin_ids(c.checkin_id for c in candidates)
        new_records = [c for c in candidates if c.checkin_id not in existing]
        logger.info("New unique absences to insert: %d", len(new_records))

        result = self._attendance.insert_many_tolerant(new_records)
        summary = ReconciliationSummary(
            window=window,
            users_considered=len(user_ids),
            absentees_found=len(absent_ids),
            already_marked=len(candidates) - len(new_records),
            inserted=result.inserted,
            failures=list(result.failures),
        )
        if summary.partial_failure:
            logger.warning(
                "Absentee check partially failed: %d inserted, %d rejected",
                summary.inserted,
                len(summary.failures),
            )
        else:
            logger.info(summary.message)
        return summary
