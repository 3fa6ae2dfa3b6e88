from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.attendance_tracker.attendance_tracker.database.connection import DBConfig, DatabaseConnection
from src.attendance_tracker.attendance_tracker.users.model import User
from src.attendance_tracker.attendance_tracker.users.mysql_user_repository import MySQLUserRepository

DEMO_USERS = (
    User(user_id="u1", full_name="Demo One", email="u1@example.com"),
    User(user_id="u2", full_name="Demo Two", email="u2@example.com"),
    User(user_id="u3", full_name="Demo Three", email="u3@example.com"),
    User(user_id="former", full_name="Former Employee", is_active=False),
)


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    users = MySQLUserRepository(DatabaseConnection.get_instance(DBConfig.from_dict(db_config)))
    for user in DEMO_USERS:
        users.upsert(user)

    print(
        f"OK: Seeded {len(DEMO_USERS)} users -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )


if __name__ == "__main__":
    main()
