"""Digest rendering and delivery."""
from datetime import datetime
from types import SimpleNamespace

import pytest

from apps.backend.config import Settings
from apps.backend.services import email as email_service
from apps.backend.services.daily_activities import get_activities_for_user
from apps.backend.services.digest_mailer import DigestMailer
from apps.backend.services.digest_render import render_daily, render_weekly
from apps.backend.services.digest_totals import AssetTotals, UserTotals

COURSE = SimpleNamespace(id=3, name="Art 23AC", assetlibrary_url="https://canvas.example.edu/courses/3/external_tools/9")
USER = {"id": 1, "canvas_full_name": "Ana", "canvas_email": "ana@example.edu", "rank": {"this_week": 2}}


def _weekly_payload(top_user):
    asset = {"id": 5, "title": "Color study", "weekly_totals": AssetTotals(views=4, likes=2, comments=1)}
    totals = UserTotals(points_generated=12, points_received=7)
    totals.top_asset = asset
    return {
        "weekly": {
            "course": {
                "averages": {"points_generated": 6, "points_received": 3},
                "top_assets": {"likes": asset},
                "top_users": {"points_generated": {"total": 30, "user": top_user}},
            },
            "user": totals,
        }
    }


@pytest.mark.timeout(5)
def test_render_weekly_includes_totals_rank_and_tops():
    text, html = render_weekly(_weekly_payload({"id": 8, "canvas_full_name": "Bo"}), USER, COURSE)
    assert "Hi Ana," in text
    assert "Your rank in the Engagement Index: 2" in text
    assert "You generated 12 points (course average 6)" in text
    assert 'Your most popular asset: "Color study" (4 views, 2 likes, 1 comments)' in text
    assert 'Most liked: "Color study" (2 likes)' in text
    assert "Most points generated: Bo (30 points)" in text
    assert COURSE.assetlibrary_url in text
    assert html.startswith("<html>")
    assert "&quot;Color study&quot;" in html


@pytest.mark.timeout(5)
def test_render_weekly_hides_private_top_user():
    text, _html = render_weekly(_weekly_payload({}), USER, COURSE)
    assert "Most points generated: A classmate (30 points)" in text


@pytest.mark.timeout(5)
def test_render_weekly_without_own_activity():
    payload = _weekly_payload({})
    payload["weekly"]["user"] = None
    text, _html = render_weekly(payload, USER, COURSE)
    assert "You had no activity this week." in text


@pytest.mark.timeout(5)
def test_render_daily_lists_comments_and_chats():
    bo = {"id": 2, "canvas_full_name": "Bo"}
    comment = {
        "id": 10, "user_id": 2, "parent_id": None, "body": "Love the palette",
        "created_at": datetime(2026, 10, 19, 10, 0), "user": bo, "parent": None,
    }
    asset = {"id": 5, "title": "Color study", "users": {1: USER}, "comments": [comment]}
    whiteboard = {
        "id": 7, "title": "Mood board", "users": [USER],
        "chats": [{"id": 1, "user_id": 2, "body": "<b>hi</b>", "created_at": datetime(2026, 10, 19, 9, 0), "user": bo}],
    }
    activities = get_activities_for_user({"assets": [asset], "whiteboards": [whiteboard]}, USER)

    text, html = render_daily({"activities": activities}, USER, COURSE)

    assert 'Bo commented on your asset "Color study"' in text
    assert "  Bo: Love the palette" in text
    assert 'Bo commented on your whiteboard "Mood board"' in text
    assert "Bo: <b>hi</b>" in text
    assert "&lt;b&gt;hi&lt;/b&gt;" in html
    assert text.index("Color study") < text.index("Mood board")


@pytest.mark.timeout(5)
def test_mailer_sends_rendered_digest(monkeypatch):
    calls = []

    def fake_send(settings, **kwargs):
        calls.append(kwargs)
        return True, None

    monkeypatch.setattr(email_service, "send_email", fake_send)
    mailer = DigestMailer(settings=Settings(smtp_host="smtp.example.edu", email_from="suitec@example.edu"))

    ok, err = mailer.send_digest("This week's activity in Art 23AC", USER, COURSE, _weekly_payload({}), "weekly")

    assert (ok, err) == (True, None)
    assert calls[0]["to_email"] == "ana@example.edu"
    assert calls[0]["to_name"] == "Ana"
    assert calls[0]["subject"] == "This week's activity in Art 23AC"
    assert "Hi Ana," in calls[0]["text"]


@pytest.mark.timeout(5)
def test_mailer_reports_failures_without_raising(monkeypatch):
    monkeypatch.setattr(email_service, "send_email", lambda settings, **kwargs: (False, "connection refused"))
    mailer = DigestMailer(settings=Settings())
    assert mailer.send_digest("s", USER, COURSE, {"activities": []}, "daily") == (False, "connection refused")
    assert mailer.send_digest("s", USER, COURSE, {}, "monthly") == (False, "unknown_template")


@pytest.mark.timeout(5)
def test_send_email_requires_smtp_and_sender():
    kwargs = {"to_email": "a@example.edu", "to_name": None, "subject": "s", "html": "<p>x</p>", "text": "x"}
    assert email_service.send_email(Settings(smtp_host=""), **kwargs) == (False, "missing_smtp")
    assert email_service.send_email(Settings(smtp_host="smtp.example.edu", email_from=""), **kwargs) == (False, "missing_from")


class FakeSMTP:
    sent = []

    def __init__(self, host, port, timeout=None):
        self.host = host

    def starttls(self):
        pass

    def login(self, user, password):
        pass

    def send_message(self, msg):
        FakeSMTP.sent.append(msg)

    def quit(self):
        pass


@pytest.mark.timeout(5)
def test_send_email_quotes_display_names_with_commas(monkeypatch):
    from email.utils import getaddresses

    FakeSMTP.sent = []
    monkeypatch.setattr(email_service.smtplib, "SMTP", FakeSMTP)
    settings = Settings(smtp_host="smtp.example.edu", email_from="suitec@example.edu", email_from_name="SuiteC, Berkeley")

    ok, err = email_service.send_email(
        settings, to_email="jane@example.edu", to_name="Doe, Jane", subject="s", html="<p>x</p>", text="x"
    )

    assert (ok, err) == (True, None)
    [msg] = FakeSMTP.sent
    assert getaddresses([msg["To"]]) == [("Doe, Jane", "jane@example.edu")]
    assert getaddresses([msg["From"]]) == [("SuiteC, Berkeley", "suitec@example.edu")]
