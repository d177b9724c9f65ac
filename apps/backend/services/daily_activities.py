"""Classify a day's comments and chats into per-recipient digest activities."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

ASSET_COMMENT = "asset_comment"
ASSET_COMMENT_REPLY = "asset_comment_reply"
WHITEBOARD_CHAT = "whiteboard_chat"

LIBRARY_TYPES = (ASSET_COMMENT, ASSET_COMMENT_REPLY)


@dataclass
class AssetActivity:
    type: str
    actors: list[dict]
    last_activity: datetime | None
    asset: dict
    new_comments: int = 0

    @classmethod
    def build(cls, asset: dict, activity_type: str, comments: list[dict]) -> "AssetActivity":
        """New activity whose asset copy holds `comments` reshaped into a two-level tree.

        The source asset and its comment dicts are left untouched; the same
        asset is shared between every recipient in the course.
        """
        tree = comment_tree(comments)
        recent = sorted(comments, key=lambda c: c["id"], reverse=True)
        newest = recent[0] if recent else None
        return cls(
            type=activity_type,
            actors=[c["user"] for c in recent if c.get("user")],
            last_activity=newest["created_at"] if newest else None,
            asset=dict(asset, comments=tree),
            new_comments=len(comments),
        )


@dataclass
class WhiteboardActivity:
    whiteboard: dict
    actors: list[dict] = field(default_factory=list)
    last_activity: datetime | None = None
    type: str = WHITEBOARD_CHAT

    @classmethod
    def build(cls, whiteboard: dict, chats: list[dict]) -> "WhiteboardActivity":
        latest = max(chats, key=lambda c: c["created_at"]) if chats else None
        return cls(
            whiteboard=dict(whiteboard, chats=list(chats)),
            actors=[c["user"] for c in chats if c.get("user")],
            last_activity=latest["created_at"] if latest else None,
        )


def comment_tree(comments: list[dict]) -> list[dict]:
    """Top-level comments newest first, each followed by its replies oldest first.

    Parents of replies are taken from the reply's `parent` snapshot when they
    are not part of `comments` themselves.
    """
    by_id: dict = {}
    for comment in comments:
        by_id[comment["id"]] = comment
    for comment in comments:
        parent = comment.get("parent")
        if parent and parent["id"] not in by_id:
            by_id[parent["id"]] = parent

    ordered = sorted(by_id.values(), key=lambda c: c["id"], reverse=True)
    tree = []
    for comment in ordered:
        if comment.get("parent_id"):
            continue
        tree.append(_copy_comment(comment, level=0))
        replies = [c for c in ordered if c.get("parent_id") == comment["id"]]
        for reply in reversed(replies):
            tree.append(_copy_comment(reply, level=1))
    return tree


def _copy_comment(comment: dict, level: int) -> dict:
    return dict(comment, level=level)


def get_activities_for_user(course_data: dict, user: dict) -> list:
    """Activities the user should hear about, most recent first.

    For each asset the owner branch wins over the reply branch, so a user gets
    at most one activity per asset.
    """
    user_id = user["id"]
    activities: list = []

    for asset in course_data.get("assets") or []:
        owners = asset.get("users") or {}
        is_owner = user_id in owners if isinstance(owners, dict) else any(o["id"] == user_id for o in owners)
        comments = asset.get("comments") or []

        top_other_comments = [c for c in comments if not c.get("parent") and c["user_id"] != user_id]
        other_replies = [
            c for c in comments
            if c.get("parent") and c["parent"]["user_id"] == user_id and c["user_id"] != user_id
        ]

        if is_owner and top_other_comments:
            activities.append(AssetActivity.build(asset, ASSET_COMMENT, top_other_comments))
        elif other_replies:
            activities.append(AssetActivity.build(asset, ASSET_COMMENT_REPLY, other_replies))

    for whiteboard in course_data.get("whiteboards") or []:
        if not any(m["id"] == user_id for m in whiteboard.get("users") or []):
            continue
        other_chats = [c for c in whiteboard.get("chats") or [] if c["user_id"] != user_id]
        if other_chats:
            activities.append(WhiteboardActivity.build(whiteboard, other_chats))

    return sorted(activities, key=lambda a: a.last_activity or datetime.min, reverse=True)
