"""SQLAlchemy models."""
from apps.backend.models.course import Course
from apps.backend.models.user import User
from apps.backend.models.asset import Asset, Category, Comment, asset_users, asset_categories
from apps.backend.models.activity import Activity, ActivityTypeOverride
from apps.backend.models.whiteboard import Whiteboard, Chat, whiteboard_members

__all__ = [
    "Course",
    "User",
    "Asset",
    "Category",
    "Comment",
    "asset_users",
    "asset_categories",
    "Activity",
    "ActivityTypeOverride",
    "Whiteboard",
    "Chat",
    "whiteboard_members",
]
