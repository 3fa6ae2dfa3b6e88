from .base import *  # noqa: F401,F403

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

DB_CONFIG = {
    "host": "localhost",
    "port": 3306,
    "user": "root",
    "password": "",
    "database": "attendance_db_test",
    "connection_timeout": 2,
    "pool_size": 1,
}

CHECKIN_GUARD = "open_session"

AUTO_INIT_DB = False
ENABLE_ABSENTEE_SCHEDULER = False
