from __future__ import annotations

import logging
import threading
import time as systime
from datetime import datetime, time, timezone

from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_EXECUTED, JobExecutionEvent
from apscheduler.triggers.cron import CronTrigger

from src.attendance_tracker.attendance_tracker.absentees.scheduler import (
    ABSENTEE_JOB_ID,
    build_absentee_scheduler,
    log_job_event,
)

SCHEDULER_LOGGER = "src.attendance_tracker.attendance_tracker.absentees.scheduler"


def _utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def test_job_fires_daily_at_run_at_utc():
    def job():
        return None

    scheduler = build_absentee_scheduler(job, run_at=time(5, 35))
    scheduled = scheduler.get_job(ABSENTEE_JOB_ID)

    assert scheduled.func is job
    assert isinstance(scheduled.trigger, CronTrigger)
    assert scheduled.trigger.get_next_fire_time(None, _utc(2026, 2, 1, 4, 0)) == _utc(2026, 2, 1, 5, 35)
    assert scheduled.trigger.get_next_fire_time(None, _utc(2026, 2, 1, 6, 0)) == _utc(2026, 2, 2, 5, 35)


def test_failed_run_is_logged(caplog):
    event = JobExecutionEvent(
        EVENT_JOB_ERROR,
        ABSENTEE_JOB_ID,
        "default",
        _utc(2026, 2, 1, 5, 35),
        exception=RuntimeError("store down"),
        traceback="Traceback (most recent call last): ...",
    )

    log_job_event(event)

    assert "absentee-check failed: store down" in caplog.text


def test_successful_run_is_logged(caplog):
    event = JobExecutionEvent(EVENT_JOB_EXECUTED, ABSENTEE_JOB_ID, "default", _utc(2026, 2, 1, 5, 35), retval="ok")

    with caplog.at_level(logging.INFO, logger=SCHEDULER_LOGGER):
        log_job_event(event)

    assert "absentee-check finished: ok" in caplog.text


def test_failure_keeps_next_daily_run(caplog):
    fired = threading.Event()

    def job():
        fired.set()
        raise RuntimeError("store down")

    scheduler = build_absentee_scheduler(job, run_at=time(5, 35))
    scheduler.start()
    try:
        scheduler.modify_job(ABSENTEE_JOB_ID, next_run_time=datetime.now(timezone.utc))
        assert fired.wait(timeout=5)
        for _ in range(50):
            if "absentee-check failed" in caplog.text:
                break
            systime.sleep(0.05)

        upcoming = scheduler.get_job(ABSENTEE_JOB_ID).next_run_time
    finally:
        scheduler.shutdown(wait=True)

    assert "absentee-check failed: store down" in caplog.text
    assert upcoming > datetime.now(timezone.utc)
    assert (upcoming.hour, upcoming.minute) == (5, 35)
