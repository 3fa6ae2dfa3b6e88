from __future__ import annotations

import math
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Optional

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_clock_time(value: str) -> time:
    """Parse HH:MM (or HH:MM:SS) wall-clock string into time."""
    parts = value.strip().split(":")
    if len(parts) not in (2, 3):
        raise ValueError(f"Invalid clock time: {value!r}")
    seconds = int(parts[2]) if len(parts) == 3 else 0
    return time(hour=int(parts[0]), minute=int(parts[1]), second=seconds)


def now_utc() -> datetime:
    """Current time as naive UTC.

    Note: Wrapped so tests can patch/mock easier.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_timestamp(value: Any, field_name: str = "timestamp") -> datetime:
    """Normalize a client timestamp into naive UTC.

    Accepts datetime objects, epoch milliseconds (int/float or digit string) and ISO-8601
    strings, with or without an offset or a trailing 'Z'.
    """

    if isinstance(value, datetime):
        return _to_naive_utc(value)

    if isinstance(value, bool):
        raise ValidationError(f"{field_name} is not a valid timestamp")

    if isinstance(value, (int, float)):
        return _from_epoch_ms(value, field_name)

    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValidationError(f"{field_name} is required")
        if text.lstrip("-").isdigit():
            return _from_epoch_ms(int(text), field_name)
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            return _to_naive_utc(datetime.fromisoformat(text))
        except ValueError:
            raise ValidationError(f"{field_name} is not a valid timestamp") from None

    raise ValidationError(f"{field_name} is not a valid timestamp")


def truncate_to_millis(value: datetime) -> datetime:
    """The store keeps millisecond precision; drop the rest up front so durations agree."""
    return value.replace(microsecond=(value.microsecond // 1000) * 1000)


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """Inclusive start and exclusive end of a calendar day."""
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


def to_iso(value: Optional[datetime]) -> Optional[str]:
    """Render a naive UTC datetime the way JavaScript clients expect it."""
    if value is None:
        return None
    return value.isoformat(timespec="milliseconds") + "Z"


def _to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return truncate_to_millis(value)


def _from_epoch_ms(value: float, field_name: str) -> datetime:
    if isinstance(value, float) and not math.isfinite(value):
        raise ValidationError(f"{field_name} is not a valid timestamp")
    try:
        moment = datetime(1970, 1, 1) + timedelta(milliseconds=value)
    except (OverflowError, ValueError):
        raise ValidationError(f"{field_name} is out of range") from None
    return truncate_to_millis(moment)
