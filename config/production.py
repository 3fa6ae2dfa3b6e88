from .base import *  # noqa: F401,F403
from .base import _flag

DEBUG = False

AUTO_INIT_DB = _flag("AUTO_INIT_DB", "0")

ENABLE_ABSENTEE_SCHEDULER = _flag("ENABLE_ABSENTEE_SCHEDULER", "1")
