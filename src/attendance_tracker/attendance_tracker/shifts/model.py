from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time, timedelta

from ..common.datetime_utils import parse_clock_time
from ..core.constants import DEFAULT_ABSENTEE_CHECK_AT, DEFAULT_SHIFT_END, DEFAULT_SHIFT_START


@dataclass(frozen=True)
class ShiftWindow:
    """One concrete shift occurrence; both bounds inclusive."""

    start: datetime
    end: datetime


@dataclass(frozen=True)
class ShiftPolicy:
    """Daily shift (wall-clock, may cross midnight) and the time the absentee check runs."""

    start_time: time
    end_time: time
    run_at: time

    @classmethod
    def from_settings(
        cls,
        *,
        shift_start: str = DEFAULT_SHIFT_START,
        shift_end: str = DEFAULT_SHIFT_END,
        run_at: str = DEFAULT_ABSENTEE_CHECK_AT,
    ) -> "ShiftPolicy":
        return cls(
            start_time=parse_clock_time(shift_start),
            end_time=parse_clock_time(shift_end),
            run_at=parse_clock_time(run_at),
        )

    def last_completed_window(self, now: datetime) -> ShiftWindow:
        """Most recent shift whose end is at or before `now`."""

        end = datetime.combine(now.date(), self.end_time)
        if end > now:
            end -= timedelta(days=1)

        start = datetime.combine(end.date(), self.start_time)
        if start >= end:
            start -= timedelta(days=1)
        return ShiftWindow(start=start, end=end)
