"""Recurring daily/weekly digest scheduling.

The scheduler only decides when a batch is due and enqueues the matching rq
job; the worker does the actual sending.
"""
from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta
from typing import Callable
from zoneinfo import ZoneInfo

from apps.backend.config import Settings, get_settings

logger = logging.getLogger(__name__)

DAILY = "daily"
WEEKLY = "weekly"
JOB_PATHS = {
    DAILY: "apps.worker.jobs.run_daily_digests",
    WEEKLY: "apps.worker.jobs.run_weekly_digests",
}


def next_daily_run(now: datetime, hour: int) -> datetime:
    candidate = now.replace(hour=hour, minute=0, second=0, microsecond=0)
    if candidate <= now:
        candidate += timedelta(days=1)
    return candidate


def next_weekly_run(now: datetime, weekday: int, hour: int) -> datetime:
    candidate = now.replace(hour=hour, minute=0, second=0, microsecond=0)
    candidate += timedelta(days=(weekday - now.weekday()) % 7)
    if candidate <= now:
        candidate += timedelta(days=7)
    return candidate


def enqueue_digest_job(kind: str) -> None:
    from redis import Redis
    from rq import Queue

    s = get_settings()
    r = Redis(host=s.redis_host, port=s.redis_port)
    q = Queue(s.rq_digest_queue_name or "digests", connection=r)
    q.enqueue(JOB_PATHS[kind], job_timeout=max(300, int(s.digest_lock_ttl_seconds or 3600)))


class DigestScheduler:
    def __init__(
        self,
        settings: Settings | None = None,
        enqueue: Callable[[str], None] | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.tz = ZoneInfo(self.settings.timezone)
        self.enqueue = enqueue or enqueue_digest_job
        self.clock = clock or (lambda: datetime.now(self.tz))
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self.next_runs: dict[str, datetime] = {}

    def schedule_from(self, now: datetime) -> None:
        s = self.settings
        self.next_runs = {
            DAILY: next_daily_run(now, s.email_daily_hour),
            WEEKLY: next_weekly_run(now, s.email_weekly_weekday, s.email_weekly_hour),
        }

    def tick(self, now: datetime | None = None) -> list[str]:
        """Enqueue every batch whose time has come; returns the kinds enqueued."""
        now = now or self.clock()
        if not self.next_runs:
            self.schedule_from(now)
        due = [kind for kind, at in self.next_runs.items() if at <= now]
        for kind in due:
            try:
                self.enqueue(kind)
                logger.info("digest_scheduler_enqueued kind=%s", kind)
            except Exception:
                logger.exception("digest_scheduler_enqueue_failed kind=%s", kind)
            if kind == DAILY:
                self.next_runs[kind] = next_daily_run(now, self.settings.email_daily_hour)
            else:
                self.next_runs[kind] = next_weekly_run(
                    now, self.settings.email_weekly_weekday, self.settings.email_weekly_hour
                )
        return due

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self.schedule_from(self.clock())
        self._thread = threading.Thread(target=self._run, name="digest-scheduler", daemon=True)
        self._thread.start()
        logger.info(
            "digest_scheduler_started next_daily=%s next_weekly=%s",
            self.next_runs[DAILY].isoformat(), self.next_runs[WEEKLY].isoformat(),
        )

    def stop(self, timeout: float = 5.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.info("digest_scheduler_stopped")

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _run(self) -> None:
        interval = max(1, int(self.settings.digest_scheduler_poll_seconds or 60))
        while not self._stop.wait(interval):
            self.tick()
