"""Activity type point configuration (defaults + per-course overrides)."""
from __future__ import annotations

import copy

from sqlalchemy import select
from sqlalchemy.orm import Session

from apps.backend.models.activity import ActivityTypeOverride

DEFAULT_ACTIVITY_TYPES: list[dict] = [
    {"type": "add_asset", "points": 5, "enabled": True},
    {"type": "asset_comment", "points": 3, "enabled": True},
    {"type": "get_asset_comment", "points": 1, "enabled": True},
    {"type": "get_asset_comment_reply", "points": 1, "enabled": True},
    {"type": "like", "points": 1, "enabled": True},
    {"type": "get_like", "points": 1, "enabled": True},
    {"type": "dislike", "points": -1, "enabled": False},
    {"type": "get_dislike", "points": -1, "enabled": False},
    {"type": "view_asset", "points": 0, "enabled": True},
    {"type": "get_view_asset", "points": 0, "enabled": True},
    {"type": "discussion_topic", "points": 5, "enabled": True},
    {"type": "discussion_entry", "points": 3, "enabled": True},
    {"type": "get_discussion_entry_reply", "points": 1, "enabled": True},
    {"type": "submit_assignment", "points": 20, "enabled": True},
    {"type": "export_whiteboard", "points": 10, "enabled": True},
    {"type": "whiteboard_add_asset", "points": 8, "enabled": True},
    {"type": "whiteboard_chat", "points": 1, "enabled": True},
]


def get_activity_type_configuration(db: Session, course_id: int) -> list[dict]:
    """Defaults overlaid with the course's overrides; null override fields are ignored."""
    overrides = db.execute(
        select(ActivityTypeOverride).where(ActivityTypeOverride.course_id == course_id)
    ).scalars().all()
    by_type = {o.type: o for o in overrides}
    configuration = copy.deepcopy(DEFAULT_ACTIVITY_TYPES)
    for item in configuration:
        override = by_type.get(item["type"])
        if not override:
            continue
        if override.points is not None:
            item["points"] = override.points
        if override.enabled is not None:
            item["enabled"] = override.enabled
    return configuration
