"""Data access for the digests: courses, rosters, activities, comments and chats."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from apps.backend.models.activity import Activity
from apps.backend.models.asset import Asset, Comment
from apps.backend.models.course import Course
from apps.backend.models.user import User
from apps.backend.models.whiteboard import Chat, Whiteboard
from apps.backend.services.assets import asset_snapshot, is_deleted_or_hidden
from apps.backend.services.weekly_summary import ActivityRecord


def user_snapshot(user: User) -> dict:
    return {
        "id": user.id,
        "canvas_user_id": user.canvas_user_id,
        "canvas_course_role": user.canvas_course_role,
        "canvas_enrollment_state": user.canvas_enrollment_state,
        "canvas_full_name": user.canvas_full_name,
        "canvas_image": user.canvas_image,
        "canvas_email": user.canvas_email,
        "is_admin": bool(user.is_admin),
        "share_points": bool(user.share_points),
        "points": user.points or 0,
    }


def list_active_courses(db: Session) -> list[Course]:
    return list(db.execute(select(Course).where(Course.active.is_(True)).order_by(Course.id.asc())).scalars().all())


def get_ranked_active_users(db: Session, course_id: int) -> list[dict]:
    """Active users ordered by descending points."""
    rows = db.execute(
        select(User)
        .where(User.course_id == course_id, User.canvas_enrollment_state == "active")
        .order_by(User.points.desc(), User.id.asc())
    ).scalars().all()
    return [user_snapshot(u) for u in rows]


def get_all_users(db: Session, course_id: int) -> dict[int, dict]:
    """Every user in the course regardless of enrollment state, keyed by id."""
    rows = db.execute(
        select(User).where(User.course_id == course_id).order_by(User.id.asc())
    ).scalars().all()
    return {u.id: user_snapshot(u) for u in rows}


def get_activities_in_range(db: Session, course_id: int, start: datetime, end: datetime) -> list[ActivityRecord]:
    # Deleted assets stay in: their activities still count towards points.
    rows = db.execute(
        select(Activity)
        .where(
            Activity.course_id == course_id,
            Activity.created_at > start,
            Activity.created_at < end,
        )
        .options(
            selectinload(Activity.asset).selectinload(Asset.users),
            selectinload(Activity.asset).selectinload(Asset.categories),
        )
        .order_by(Activity.id.asc())
    ).scalars().all()
    snapshots: dict[int, dict] = {}
    records = []
    for row in rows:
        asset = None
        if row.asset is not None:
            asset = snapshots.get(row.asset.id)
            if asset is None:
                asset = asset_snapshot(row.asset)
                snapshots[row.asset.id] = asset
        records.append(
            ActivityRecord(
                type=row.type,
                user_id=row.user_id,
                actor_id=row.actor_id,
                asset=asset,
                created_at=row.created_at,
                metadata=row.metadata_json or {},
            )
        )
    return records


def _comment_snapshot(comment: Comment, users: dict[int, dict]) -> dict:
    return {
        "id": comment.id,
        "asset_id": comment.asset_id,
        "user_id": comment.user_id,
        "parent_id": comment.parent_id,
        "body": comment.body,
        "created_at": comment.created_at,
        "user": users.get(comment.user_id),
    }


def get_commented_assets(
    db: Session,
    course_id: int,
    start: datetime,
    end: datetime,
    users: dict[int, dict],
) -> list[dict]:
    """Visible assets with comments in the window; each comment carries its author and parent."""
    comments = db.execute(
        select(Comment)
        .join(Asset, Asset.id == Comment.asset_id)
        .where(
            Asset.course_id == course_id,
            Asset.visible.is_(True),
            Asset.deleted_at.is_(None),
            Comment.created_at > start,
            Comment.created_at < end,
        )
        .options(
            selectinload(Comment.parent),
            selectinload(Comment.asset).selectinload(Asset.users),
            selectinload(Comment.asset).selectinload(Asset.categories),
        )
        .order_by(Comment.asset_id.asc(), Comment.id.asc())
    ).scalars().all()

    assets: dict[int, dict] = {}
    for comment in comments:
        entry = assets.get(comment.asset_id)
        if entry is None:
            entry = asset_snapshot(comment.asset)
            entry["users"] = {u["id"]: u for u in entry["users"]}
            entry["comments"] = []
            assets[comment.asset_id] = entry
        item = _comment_snapshot(comment, users)
        item["parent"] = _comment_snapshot(comment.parent, users) if comment.parent is not None else None
        entry["comments"].append(item)

    return [a for a in assets.values() if not is_deleted_or_hidden(a)]


def get_chatted_whiteboards(
    db: Session,
    course_id: int,
    start: datetime,
    end: datetime,
    users: dict[int, dict],
) -> list[dict]:
    """Whiteboards with chat messages in the window, newest whiteboard first."""
    chats = db.execute(
        select(Chat)
        .join(Whiteboard, Whiteboard.id == Chat.whiteboard_id)
        .where(
            Whiteboard.course_id == course_id,
            Whiteboard.deleted_at.is_(None),
            Chat.created_at > start,
            Chat.created_at < end,
        )
        .options(selectinload(Chat.whiteboard).selectinload(Whiteboard.members))
        .order_by(Whiteboard.id.desc(), Chat.id.asc())
    ).scalars().all()

    whiteboards: dict[int, dict] = {}
    for chat in chats:
        entry = whiteboards.get(chat.whiteboard_id)
        if entry is None:
            wb = chat.whiteboard
            entry = {
                "id": wb.id,
                "title": wb.title,
                "thumbnail_url": wb.thumbnail_url,
                "users": [{"id": m.id, "canvas_full_name": m.canvas_full_name} for m in wb.members],
                "chats": [],
            }
            whiteboards[chat.whiteboard_id] = entry
        entry["chats"].append(
            {
                "id": chat.id,
                "user_id": chat.user_id,
                "body": chat.body,
                "created_at": chat.created_at,
                "user": users.get(chat.user_id),
            }
        )
    return list(whiteboards.values())
