"""Weekly digest batch against an in-memory database."""
import logging
import random
from datetime import datetime

import pytest
from sqlalchemy.orm import sessionmaker

from apps.backend.database import Base, get_test_engine
from apps.backend.models.activity import Activity, ActivityTypeOverride
from apps.backend.models.asset import Asset
from apps.backend.models.course import Course
from apps.backend.models.user import User
from apps.backend.services import digest_data, weekly_digest
from apps.backend.services.digest_errors import DigestAuthError

# Monday 2026-10-19 09:00 in Los Angeles; the week runs from 10-12 15:00 UTC to 10-19 15:00 UTC.
NOW = datetime(2026, 10, 19, 16, 0)
IN_WINDOW = datetime(2026, 10, 15, 12, 0)


class FakeMailer:
    def __init__(self, fail_for=()):
        self.sent = []
        self.fail_for = set(fail_for)

    def send_digest(self, subject, user, course, payload, template):
        if user["id"] in self.fail_for:
            raise RuntimeError("smtp down")
        self.sent.append({"subject": subject, "user": user, "payload": payload, "template": template})
        return True, None


@pytest.fixture
def test_db_session():
    engine = get_test_engine()
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _course(db, **kwargs):
    values = {
        "canvas_course_id": 1234,
        "canvas_api_domain": "bcourses.berkeley.edu",
        "name": "Data Science 100",
        "assetlibrary_url": "https://bcourses.berkeley.edu/courses/1234/external_tools/1",
        "engagementindex_url": "https://bcourses.berkeley.edu/courses/1234/external_tools/2",
    }
    values.update(kwargs)
    course = Course(**values)
    db.add(course)
    db.commit()
    db.refresh(course)
    return course


def _user(db, course, canvas_user_id, name, email=None, points=0, **kwargs):
    user = User(
        course_id=course.id,
        canvas_user_id=canvas_user_id,
        canvas_full_name=name,
        canvas_email=email,
        points=points,
        **kwargs,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def _seed_week(db):
    course = _course(db)
    ana = _user(db, course, 1, "Ana", "ana@example.edu", points=100, share_points=True)
    bo = _user(db, course, 2, "Bo", "bo@example.edu", points=50)
    cy = _user(db, course, 3, "Cy", None, points=10)
    asset = Asset(course_id=course.id, title="Lab report", users=[ana])
    db.add(asset)
    db.add(ActivityTypeOverride(course_id=course.id, type="like", points=2))
    db.commit()
    db.refresh(asset)
    for kwargs in (
        {"type": "add_asset", "user_id": ana.id},
        {"type": "like", "user_id": ana.id, "actor_id": bo.id},
        {"type": "asset_comment", "user_id": ana.id, "actor_id": bo.id},
    ):
        db.add(Activity(course_id=course.id, asset_id=asset.id, created_at=IN_WINDOW, **kwargs))
    db.commit()
    return course, ana, bo, cy, asset


@pytest.mark.timeout(10)
def test_collect_course_sends_weekly_summary_to_users_with_email(test_db_session):
    course, ana, bo, cy, asset = _seed_week(test_db_session)
    mailer = FakeMailer()

    stats = weekly_digest.collect_course(test_db_session, course, now=NOW, mailer=mailer, rng=random.Random(1))

    assert stats["sent"] == 2
    assert stats["failed"] == 0
    assert {m["user"]["id"] for m in mailer.sent} == {ana.id, bo.id}
    assert all(m["template"] == "weekly" for m in mailer.sent)
    assert all(m["subject"] == "This week's activity in Data Science 100" for m in mailer.sent)

    ana_mail = next(m for m in mailer.sent if m["user"]["id"] == ana.id)
    totals = ana_mail["payload"]["weekly"]["user"]
    assert totals.points_from_assets_uploaded == 5
    assert totals.points_from_likes == 2
    assert totals.points_from_comments == 3
    assert totals.points_generated == 5
    assert totals.points_received == 5
    assert totals.top_asset["id"] == asset.id
    assert ana_mail["user"]["rank"] == {"this_week": 1}

    course_summary = ana_mail["payload"]["weekly"]["course"]
    # 10 points generated and 5 received across 3 active users.
    assert course_summary["averages"]["points_generated"] == 3
    assert course_summary["averages"]["points_received"] == 2
    assert course_summary["top_users"]["points_received"]["user"]["id"] == ana.id

    bo_mail = next(m for m in mailer.sent if m["user"]["id"] == bo.id)
    assert bo_mail["payload"]["weekly"]["user"].points_generated == 5
    assert bo_mail["user"]["rank"] == {"this_week": 2}


@pytest.mark.timeout(10)
def test_collect_course_skips_week_without_activity(test_db_session):
    course = _course(test_db_session)
    _user(test_db_session, course, 1, "Ana", "ana@example.edu")
    test_db_session.add(Activity(course_id=course.id, type="add_asset", user_id=1, created_at=datetime(2026, 10, 19, 15, 30)))
    test_db_session.commit()
    mailer = FakeMailer()

    stats = weekly_digest.collect_course(test_db_session, course, now=NOW, mailer=mailer)

    assert stats["skipped"] == 1
    assert mailer.sent == []


@pytest.mark.timeout(10)
def test_collect_course_skips_disabled_tools_and_notifications(test_db_session):
    no_index = _course(test_db_session, engagementindex_url=None)
    muted = _course(test_db_session, canvas_course_id=99, enable_weekly_notifications=False)
    mailer = FakeMailer()

    assert weekly_digest.collect_course(test_db_session, no_index, now=NOW, mailer=mailer)["skipped"] == 1
    assert weekly_digest.collect_course(test_db_session, muted, now=NOW, mailer=mailer)["skipped"] == 1
    assert mailer.sent == []


@pytest.mark.timeout(10)
def test_collect_course_keeps_going_after_a_failed_send(test_db_session):
    course, ana, bo, _cy, _asset = _seed_week(test_db_session)
    mailer = FakeMailer(fail_for={ana.id})

    stats = weekly_digest.collect_course(test_db_session, course, now=NOW, mailer=mailer)

    assert stats["failed"] == 1
    assert stats["sent"] == 1
    assert [m["user"]["id"] for m in mailer.sent] == [bo.id]


@pytest.mark.timeout(10)
def test_collect_course_skips_when_course_data_fails(test_db_session, monkeypatch):
    course, *_ = _seed_week(test_db_session)

    def boom(*args, **kwargs):
        raise RuntimeError("db gone")

    monkeypatch.setattr(digest_data, "get_activities_in_range", boom)
    stats = weekly_digest.collect_course(test_db_session, course, now=NOW, mailer=FakeMailer())
    assert stats["skipped"] == 1
    assert stats["sent"] == 0


@pytest.mark.timeout(10)
def test_collect_runs_every_active_course(test_db_session, monkeypatch):
    _seed_week(test_db_session)
    _course(test_db_session, canvas_course_id=77, active=False)
    SessionLocal = sessionmaker(bind=test_db_session.bind)
    monkeypatch.setattr(weekly_digest, "get_session_factory", lambda: SessionLocal)
    mailer = FakeMailer()

    stats = weekly_digest.collect(now=NOW, mailer=mailer, rng=random.Random(3))

    assert stats["courses"] == 1
    assert stats["sent"] == 2


@pytest.mark.timeout(10)
def test_activity_window_bounds_are_exclusive(test_db_session):
    course, ana, *_ = _seed_week(test_db_session)
    start, end = datetime(2026, 10, 12, 15, 0), datetime(2026, 10, 19, 15, 0)
    for created_at in (start, end):
        test_db_session.add(Activity(course_id=course.id, type="add_asset", user_id=ana.id, created_at=created_at))
    test_db_session.commit()

    records = digest_data.get_activities_in_range(test_db_session, course.id, start, end)
    assert len(records) == 3
    assert all(r.created_at == IN_WINDOW for r in records)


@pytest.mark.timeout(10)
def test_manual_trigger_requires_admin(test_db_session, caplog):
    course, ana, *_ = _seed_week(test_db_session)
    with caplog.at_level(logging.ERROR), pytest.raises(DigestAuthError) as exc:
        weekly_digest.send_weekly_digest_for_course(test_db_session, ana, course, now=NOW, mailer=FakeMailer())
    assert f"user_id={ana.id} course_id={course.id}" in caplog.text
    assert exc.value.code == 401
    assert exc.value.detail == "Unauthorized to send weekly notifications for a course"

    admin = _user(test_db_session, course, 50, "Instructor", "instructor@example.edu", is_admin=True)
    mailer = FakeMailer()
    stats = weekly_digest.send_weekly_digest_for_course(test_db_session, admin, course, now=NOW, mailer=mailer)
    assert stats["sent"] == 3
