"""Errors raised by the digest triggers."""
from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class DigestAuthError(Exception):
    def __init__(self, detail: str, code: int = 401) -> None:
        super().__init__(detail)
        self.code = code
        self.detail = detail


def require_admin(user, course, kind: str) -> None:
    if not getattr(user, "is_admin", False):
        logger.error(
            "digest_trigger_forbidden kind=%s user_id=%s course_id=%s",
            kind, getattr(user, "id", None), getattr(course, "id", None),
        )
        raise DigestAuthError(f"Unauthorized to send {kind} notifications for a course")
