"""Run one absentee reconciliation cycle outside the web process.

Usage: python scripts/mark_absent.py [--at 2026-02-01T05:35:00]
"""

from __future__ import annotations

import argparse
import importlib
import json
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.attendance_tracker.attendance_tracker.common.datetime_utils import parse_timestamp
from src.attendance_tracker.attendance_tracker.container import build_container
from src.attendance_tracker.attendance_tracker.main import configure_logging


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--at", help="Pretend the check runs at this UTC time (ISO-8601)")
    args = parser.parse_args(argv)

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    container = build_container(db_config=dict(settings.DB_CONFIG), settings=settings)
    now = parse_timestamp(args.at, "--at") if args.at else None
    summary = container.reconciliation_service.run(now=now)

    print(json.dumps(summary.to_dict(), indent=2))
    if summary.partial_failure:
        logging.getLogger(__name__).warning("Some absences were not recorded")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
