"""Weekly activity digest: one summary email per user per course."""
from __future__ import annotations

import logging
import random
import time
from datetime import datetime

from sqlalchemy.orm import Session

from apps.backend.config import get_settings
from apps.backend.database import get_session_factory
from apps.backend.models.course import Course
from apps.backend.services import digest_data
from apps.backend.services.activity_types import get_activity_type_configuration
from apps.backend.services.digest_errors import require_admin
from apps.backend.services.digest_mailer import DigestMailer
from apps.backend.services.digest_windows import digest_window
from apps.backend.services.weekly_summary import (
    WeeklySummary,
    compute_ranks,
    most_popular_asset,
    summarize_activities,
)

logger = logging.getLogger(__name__)

TEMPLATE = "weekly"
DEFAULT_COURSE_NAME = "The Asset Library and Whiteboards"


def _new_stats() -> dict:
    return {"courses": 0, "skipped": 0, "sent": 0, "failed": 0}


def collect(now: datetime | None = None, mailer=None, rng: random.Random | None = None) -> dict:
    """Send weekly digests for every active course, one course at a time."""
    started = time.perf_counter()
    stats = _new_stats()
    factory = get_session_factory()
    with factory() as db:
        try:
            courses = digest_data.list_active_courses(db)
        except Exception:
            logger.exception("weekly_digest_courses_failed")
            return stats
        for course in courses:
            course_stats = collect_course(db, course, now=now, mailer=mailer, rng=rng)
            for key in stats:
                stats[key] += course_stats.get(key, 0)
    logger.info(
        "weekly_digest_done courses=%s sent=%s failed=%s duration_ms=%s",
        stats["courses"], stats["sent"], stats["failed"], int((time.perf_counter() - started) * 1000),
    )
    return stats


def send_weekly_digest_for_course(db: Session, user, course: Course, now: datetime | None = None, mailer=None) -> dict:
    """Admin-only manual trigger for a single course."""
    require_admin(user, course, "weekly")
    return collect_course(db, course, now=now, mailer=mailer)


def collect_course(
    db: Session,
    course: Course,
    now: datetime | None = None,
    mailer=None,
    rng: random.Random | None = None,
) -> dict:
    stats = _new_stats()
    stats["courses"] = 1
    if not course.asset_library_enabled or not course.engagement_index_enabled:
        logger.info("weekly_digest_course_skipped course_id=%s reason=tools_disabled", course.id)
        stats["skipped"] = 1
        return stats
    if not course.enable_weekly_notifications:
        logger.info("weekly_digest_course_skipped course_id=%s reason=notifications_disabled", course.id)
        stats["skipped"] = 1
        return stats

    started = time.perf_counter()
    try:
        course_data = get_course_data(db, course, now=now, rng=rng)
    except Exception:
        logger.exception("weekly_digest_course_data_failed course_id=%s", course.id)
        db.rollback()
        stats["skipped"] = 1
        return stats
    if course_data is None:
        logger.info("weekly_digest_course_skipped course_id=%s reason=no_activity", course.id)
        stats["skipped"] = 1
        return stats

    mailer = mailer or DigestMailer()
    summary: WeeklySummary = course_data["summary"]
    for user in course_data["users"].values():
        if not user.get("canvas_email"):
            continue
        try:
            ok = handle_user(course, summary, user, mailer, rng=rng)
        except Exception:
            logger.warning("weekly_digest_user_failed course_id=%s user_id=%s", course.id, user.get("id"), exc_info=True)
            ok = False
        stats["sent" if ok else "failed"] += 1

    logger.info(
        "weekly_digest_course_done course_id=%s sent=%s failed=%s duration_ms=%s",
        course.id, stats["sent"], stats["failed"], int((time.perf_counter() - started) * 1000),
    )
    return stats


def handle_user(course: Course, summary: WeeklySummary, user: dict, mailer, rng: random.Random | None = None) -> bool:
    user_totals = summary.users.get(user["id"])
    if user_totals is not None:
        user_totals.top_asset = most_popular_asset(user_totals, rng=rng)

    subject = f"This week's activity in {course.name or DEFAULT_COURSE_NAME}"
    payload = {
        "weekly": {
            "course": summary.course,
            "user": user_totals,
        }
    }
    ok, _err = mailer.send_digest(subject, user, course, payload, TEMPLATE)
    return ok


def get_course_data(db: Session, course: Course, now: datetime | None = None, rng: random.Random | None = None) -> dict | None:
    """Roster with ranks plus the week's summary, or None when nothing happened."""
    s = get_settings()
    users = compute_ranks(digest_data.get_ranked_active_users(db, course.id))
    users_by_id = {u["id"]: u for u in users}

    configuration = get_activity_type_configuration(db, course.id)

    start, end = digest_window(now or datetime.utcnow(), 7, s.email_weekly_hour, s.timezone)
    activities = digest_data.get_activities_in_range(db, course.id, start, end)
    if not activities:
        return None

    summary = summarize_activities(activities, configuration, users_by_id, rng=rng)
    return {"summary": summary, "users": users_by_id}
