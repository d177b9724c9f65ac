"""Running weekly totals per asset, user and course.

Each totals record translates activity types to counter fields through an
explicit table. Types missing from a table are ignored and the increment
method reports False, so callers can tell a no-op from a real update.
"""
from __future__ import annotations

from dataclasses import dataclass, field

# Generic point buckets used next to the stored activity types.
COLLECTED = "collected"
GENERATED = "generated"
RECEIVED = "received"


def _increment(totals, table: dict[str, str], activity_type: str, amount: int) -> bool:
    name = table.get(activity_type)
    if name is None:
        return False
    setattr(totals, name, getattr(totals, name) + amount)
    return True


@dataclass
class AssetTotals:
    comments: int = 0
    likes: int = 0
    views: int = 0

    ACTIVITIES = {
        "asset_comment": "comments",
        "like": "likes",
        "view_asset": "views",
    }

    def increment_activities(self, activity_type: str) -> bool:
        return _increment(self, self.ACTIVITIES, activity_type, 1)

    def popularity(self) -> int:
        return self.views + 2 * self.likes + 5 * self.comments


@dataclass
class CourseTotals:
    points_from_assets_uploaded: int = 0
    points_from_comments: int = 0
    points_from_likes: int = 0
    points_from_whiteboards: int = 0
    points_generated: int = 0
    points_received: int = 0

    POINTS = {
        "add_asset": "points_from_assets_uploaded",
        "asset_comment": "points_from_comments",
        "export_whiteboard": "points_from_assets_uploaded",
        "like": "points_from_likes",
        "whiteboard_add_asset": "points_from_whiteboards",
        "whiteboard_chat": "points_from_whiteboards",
        GENERATED: "points_generated",
        RECEIVED: "points_received",
    }

    def increment_points(self, activity_type: str, points: int) -> bool:
        return _increment(self, self.POINTS, activity_type, points)

    def as_dict(self) -> dict[str, int]:
        return {name: getattr(self, name) for name in dict.fromkeys(self.POINTS.values())}


@dataclass
class UserTotals:
    comments_received: int = 0
    likes_received: int = 0
    points_from_assets_uploaded: int = 0
    points_from_comments: int = 0
    points_from_likes: int = 0
    points_from_whiteboards: int = 0
    points_from_comments_received: int = 0
    points_from_likes_received: int = 0
    points_collected: int = 0
    points_generated: int = 0
    points_received: int = 0
    assets: dict = field(default_factory=dict)
    top_asset: dict | None = None

    ACTIVITIES = {
        "get_asset_comment": "comments_received",
        "get_asset_comment_reply": "comments_received",
        "get_like": "likes_received",
    }

    POINTS = {
        "add_asset": "points_from_assets_uploaded",
        "asset_comment": "points_from_comments",
        "export_whiteboard": "points_from_assets_uploaded",
        "get_asset_comment": "points_from_comments_received",
        "get_asset_comment_reply": "points_from_comments_received",
        "get_like": "points_from_likes_received",
        "like": "points_from_likes",
        "whiteboard_add_asset": "points_from_whiteboards",
        "whiteboard_chat": "points_from_whiteboards",
        COLLECTED: "points_collected",
        GENERATED: "points_generated",
        RECEIVED: "points_received",
    }

    def increment_activities(self, activity_type: str) -> bool:
        return _increment(self, self.ACTIVITIES, activity_type, 1)

    def increment_points(self, activity_type: str, points: int) -> bool:
        return _increment(self, self.POINTS, activity_type, points)
