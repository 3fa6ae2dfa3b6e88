import os


def _flag(name: str, default: str) -> bool:
    return bool(int(os.getenv(name, default)))


def _origins(default: str) -> list:
    raw = os.getenv("CORS_ORIGINS", default)
    return [o.strip() for o in raw.split(",") if o.strip()]


DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_db"),
    # Seconds; applies to connecting and to every statement on the socket.
    "connection_timeout": int(os.getenv("DB_TIMEOUT", "10")),
    "pool_size": int(os.getenv("DB_POOL_SIZE", "5")),
}

PORT = int(os.getenv("PORT", "5000"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

CORS_ORIGINS = _origins(
    "https://pp-ecommerce-frontend.vercel.app,http://localhost:5173,http://localhost:3000"
)

# open_session | calendar_day
CHECKIN_GUARD = os.getenv("CHECKIN_GUARD", "open_session")

# Wall-clock UTC. The default shift crosses midnight.
SHIFT_START = os.getenv("SHIFT_START", "21:00")
SHIFT_END = os.getenv("SHIFT_END", "05:30")
ABSENTEE_CHECK_AT = os.getenv("ABSENTEE_CHECK_AT", "05:35")
