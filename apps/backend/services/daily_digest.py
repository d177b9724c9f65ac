"""Daily activity digest: new comments, replies and whiteboard chats per recipient."""
from __future__ import annotations

import logging
import time
from datetime import datetime

from sqlalchemy.orm import Session

from apps.backend.config import get_settings
from apps.backend.database import get_session_factory
from apps.backend.models.course import Course
from apps.backend.services import digest_data
from apps.backend.services.daily_activities import get_activities_for_user
from apps.backend.services.daily_subject import get_subject
from apps.backend.services.digest_errors import require_admin
from apps.backend.services.digest_mailer import DigestMailer
from apps.backend.services.digest_windows import digest_window

logger = logging.getLogger(__name__)

TEMPLATE = "daily"


def _new_stats() -> dict:
    return {"courses": 0, "skipped": 0, "sent": 0, "failed": 0}


def collect(now: datetime | None = None, mailer=None) -> dict:
    """Send daily digests for every active course, one course at a time."""
    started = time.perf_counter()
    stats = _new_stats()
    factory = get_session_factory()
    with factory() as db:
        try:
            courses = digest_data.list_active_courses(db)
        except Exception:
            logger.exception("daily_digest_courses_failed")
            return stats
        for course in courses:
            course_stats = collect_course(db, course, now=now, mailer=mailer)
            for key in stats:
                stats[key] += course_stats.get(key, 0)
    logger.info(
        "daily_digest_done courses=%s sent=%s failed=%s duration_ms=%s",
        stats["courses"], stats["sent"], stats["failed"], int((time.perf_counter() - started) * 1000),
    )
    return stats


def send_daily_digest_for_course(db: Session, user, course: Course, now: datetime | None = None, mailer=None) -> dict:
    """Admin-only manual trigger for a single course."""
    require_admin(user, course, "daily")
    return collect_course(db, course, now=now, mailer=mailer)


def collect_course(db: Session, course: Course, now: datetime | None = None, mailer=None) -> dict:
    stats = _new_stats()
    stats["courses"] = 1
    if not course.enable_daily_notifications:
        logger.info("daily_digest_course_skipped course_id=%s reason=notifications_disabled", course.id)
        stats["skipped"] = 1
        return stats

    started = time.perf_counter()
    try:
        data = get_course_data(db, course, now=now)
    except Exception:
        logger.exception("daily_digest_course_data_failed course_id=%s", course.id)
        db.rollback()
        stats["skipped"] = 1
        return stats

    if not data["assets"] and not data["whiteboards"]:
        logger.info("daily_digest_course_skipped course_id=%s reason=no_activity", course.id)
        stats["skipped"] = 1
        return stats

    mailer = mailer or DigestMailer()
    for user in data["users"].values():
        if not user.get("canvas_email"):
            continue
        activities = get_activities_for_user(data, user)
        if not activities:
            continue
        subject = get_subject(course, activities, user)
        try:
            ok, _err = mailer.send_digest(subject, user, course, {"activities": activities}, TEMPLATE)
        except Exception:
            logger.warning("daily_digest_user_failed course_id=%s user_id=%s", course.id, user["id"], exc_info=True)
            ok = False
        stats["sent" if ok else "failed"] += 1

    logger.info(
        "daily_digest_course_done course_id=%s sent=%s failed=%s duration_ms=%s",
        course.id, stats["sent"], stats["failed"], int((time.perf_counter() - started) * 1000),
    )
    return stats


def get_course_data(db: Session, course: Course, now: datetime | None = None) -> dict:
    """All users (inactive ones may still author parent comments), commented assets and chatted whiteboards."""
    s = get_settings()
    users = digest_data.get_all_users(db, course.id)
    start, end = digest_window(now or datetime.utcnow(), 1, s.email_daily_hour, s.timezone)
    assets = digest_data.get_commented_assets(db, course.id, start, end, users)
    whiteboards = digest_data.get_chatted_whiteboards(db, course.id, start, end, users)
    return {"users": users, "assets": assets, "whiteboards": whiteboards}
