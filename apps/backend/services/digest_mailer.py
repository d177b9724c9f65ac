"""Render and deliver one digest email."""
from __future__ import annotations

import logging

from apps.backend.config import Settings, get_settings
from apps.backend.services import email as email_service
from apps.backend.services.digest_render import RENDERERS

logger = logging.getLogger(__name__)


class DigestMailer:
    """Best-effort sender: failures are logged and reported, never raised or retried."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    def send_digest(self, subject: str, user: dict, course, payload: dict, template: str) -> tuple[bool, str | None]:
        renderer = RENDERERS.get(template)
        if renderer is None:
            logger.error("digest_mail_unknown_template template=%s", template)
            return False, "unknown_template"
        text, html = renderer(payload, user, course)
        ok, err = email_service.send_email(
            self.settings,
            to_email=user["canvas_email"],
            to_name=user.get("canvas_full_name"),
            subject=subject,
            html=html,
            text=text,
        )
        if ok:
            logger.info(
                "digest_mail_sent template=%s course_id=%s user_id=%s",
                template, getattr(course, "id", None), user.get("id"),
            )
        else:
            logger.warning(
                "digest_mail_failed template=%s course_id=%s user_id=%s error=%s",
                template, getattr(course, "id", None), user.get("id"), err,
            )
        return ok, err
