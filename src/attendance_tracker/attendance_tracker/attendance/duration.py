from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

_ONE_MS = timedelta(milliseconds=1)


def calculate_duration_ms(checkin_time: Optional[datetime], checkout_time: Optional[datetime]) -> Optional[int]:
    """Elapsed session time in whole milliseconds.

    Returns None while either side is missing. A checkout earlier than the check-in
    (clock skew between devices) yields 0, never a negative duration.
    """

    if checkin_time is None or checkout_time is None:
        return None
    elapsed = (checkout_time - checkin_time) // _ONE_MS
    return elapsed if elapsed > 0 else 0
