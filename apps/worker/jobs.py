"""RQ jobs."""
import logging
from datetime import datetime

logger = logging.getLogger(__name__)

# One lock per kind and digest period; it is left to expire so a later job for the
# same period finds it taken.
_LOCK_KEY = "digests:{kind}:{period}"
_PERIOD_DAYS = {"daily": 1, "weekly": 7}


def _period(kind: str, now: datetime | None = None) -> str:
    """Date of the window end (UTC) the batch covers, e.g. "2026-10-19"."""
    from apps.backend.config import get_settings
    from apps.backend.services.digest_windows import digest_window

    s = get_settings()
    hour = s.email_daily_hour if kind == "daily" else s.email_weekly_hour
    _start, end = digest_window(now or datetime.utcnow(), _PERIOD_DAYS[kind], hour, s.timezone)
    return end.date().isoformat()


def _acquire_lock(kind: str, period: str):
    """Return the Redis client holding the lock, None if Redis is down, False if held elsewhere."""
    from redis import Redis
    from apps.backend.config import get_settings

    s = get_settings()
    try:
        r = Redis(host=s.redis_host, port=s.redis_port)
        ttl = max(int(s.digest_lock_ttl_seconds or 3600), _PERIOD_DAYS[kind] * 86400)
        if not r.set(_LOCK_KEY.format(kind=kind, period=period), "1", nx=True, ex=ttl):
            return False
        return r
    except Exception:
        # Without Redis the batch still runs once.
        logger.exception("digest_lock_unavailable kind=%s period=%s", kind, period)
        return None


def _release_lock(r, kind: str, period: str) -> None:
    try:
        r.delete(_LOCK_KEY.format(kind=kind, period=period))
    except Exception:
        logger.exception("digest_lock_release_failed kind=%s period=%s", kind, period)


def _run_digests(kind: str, collect, now: datetime | None = None) -> dict:
    from apps.backend.config import get_settings
    from apps.backend.services import digest_selection

    period = _period(kind, now)
    lock = _acquire_lock(kind, period)
    if lock is False:
        logger.info("digest_job_skipped kind=%s period=%s reason=already_sent", kind, period)
        return {"skipped": "lock_not_acquired"}
    s = get_settings()
    if s.digest_random_seed is not None:
        digest_selection.seed(s.digest_random_seed)
    try:
        return collect()
    except Exception:
        # A crashed batch frees its period so the next job can take it.
        if lock:
            _release_lock(lock, kind, period)
        raise


def run_daily_digests() -> dict:
    from apps.backend.services import daily_digest

    return _run_digests("daily", daily_digest.collect)


def run_weekly_digests() -> dict:
    from apps.backend.services import weekly_digest

    return _run_digests("weekly", weekly_digest.collect)
