from __future__ import annotations

import logging
from datetime import time
from typing import Callable

from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_EXECUTED, EVENT_JOB_MISSED, JobEvent
from apscheduler.schedulers.background import BackgroundScheduler

logger = logging.getLogger(__name__)

ABSENTEE_JOB_ID = "absentee-check"


def log_job_event(event: JobEvent) -> None:
    """Scheduler listener: a failed run is logged and the next daily run stays scheduled."""

    if event.code == EVENT_JOB_MISSED:
        logger.warning("%s missed its run at %s", event.job_id, event.scheduled_run_time)
        return
    if getattr(event, "exception", None) is not None:
        logger.error("%s failed: %s\n%s", event.job_id, event.exception, getattr(event, "traceback", "") or "")
        return
    logger.info("%s finished: %s", event.job_id, getattr(event, "retval", None))


def build_absentee_scheduler(job: Callable[[], object], *, run_at: time) -> BackgroundScheduler:
    """Daily UTC cron for the absentee check; the caller starts and shuts it down.

    Single process only: two processes started with the scheduler enabled both run the job,
    which the reconciliation tolerates because its inserts are keyed deterministically.
    """

    scheduler = BackgroundScheduler(
        timezone="UTC",
        job_defaults={
            "coalesce": True,
            "max_instances": 1,
            "misfire_grace_time": 3600,
        },
    )
    scheduler.add_job(
        job,
        "cron",
        hour=run_at.hour,
        minute=run_at.minute,
        second=run_at.second,
        id=ABSENTEE_JOB_ID,
        name=ABSENTEE_JOB_ID,
        replace_existing=True,
    )
    scheduler.add_listener(log_job_event, EVENT_JOB_EXECUTED | EVENT_JOB_ERROR | EVENT_JOB_MISSED)
    logger.info("%s scheduled daily at %s UTC", ABSENTEE_JOB_ID, run_at.strftime("%H:%M:%S"))
    return scheduler
