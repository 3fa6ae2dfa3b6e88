"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_EMAIL = "no-email@provided.com"
DEFAULT_PUNCTUALITY_STATUS = "N/A"

DEFAULT_HISTORY_LIMIT = 30
MAX_HISTORY_LIMIT = 200
DEFAULT_ADMIN_LIST_LIMIT = 200
MAX_ADMIN_LIST_LIMIT = 1000

# Column widths in attendance_records.
USER_ID_MAX_LENGTH = 128
CHECKIN_ID_MAX_LENGTH = 191
EMAIL_MAX_LENGTH = 255
PUNCTUALITY_STATUS_MAX_LENGTH = 64

# Night shift closing before the daily absentee check.
DEFAULT_SHIFT_START = "21:00"
DEFAULT_SHIFT_END = "05:30"
DEFAULT_ABSENTEE_CHECK_AT = "05:35"

ABSENT_CHECKIN_ID_FORMAT = "{user_id}_ABSENT_{shift_date}"
