"""Fixed-hour date windows for digest queries."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo


def digest_window(now: datetime, days: int, hour: int, tz_name: str) -> tuple[datetime, datetime]:
    """Return naive-UTC (start, end) covering `days` days and ending today at `hour` local time.

    The bounds do not depend on when the job actually runs during the day.
    """
    tz = ZoneInfo(tz_name)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    local_end = now.astimezone(tz).replace(hour=hour, minute=0, second=0, microsecond=0)
    local_start = local_end - timedelta(days=days)
    return _naive_utc(local_start), _naive_utc(local_end)


def _naive_utc(value: datetime) -> datetime:
    return value.astimezone(timezone.utc).replace(tzinfo=None)
