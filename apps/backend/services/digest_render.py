"""Plain-text and HTML bodies for the digest emails."""
from __future__ import annotations

from html import escape

from apps.backend.services.daily_activities import ASSET_COMMENT, ASSET_COMMENT_REPLY, WHITEBOARD_CHAT
from apps.backend.services.daily_subject import get_summary_actors

TOP_ASSET_LABELS = {
    "comments": "Most commented",
    "likes": "Most liked",
    "views": "Most viewed",
}
TOP_USER_LABELS = {
    "points_generated": "Most points generated",
    "points_received": "Most points received",
}


def _lines_to_text(lines: list[tuple[int, str]]) -> str:
    return "\n".join(("  " * level) + line for level, line in lines) + "\n"


def _lines_to_html(lines: list[tuple[int, str]]) -> str:
    body = "".join(
        f'<p style="margin:4px 0 4px {level * 24}px">{escape(line)}</p>' if line else "<br>"
        for level, line in lines
    )
    return f"<html><body>{body}</body></html>"


def _footer(course) -> list[tuple[int, str]]:
    lines = [(0, "")]
    if getattr(course, "assetlibrary_url", None):
        lines.append((0, f"Visit the Asset Library: {course.assetlibrary_url}"))
    lines.append((0, "You can change your notification settings in the Asset Library."))
    return lines


def render_weekly(payload: dict, user: dict, course) -> tuple[str, str]:
    weekly = payload.get("weekly") or {}
    course_data = weekly.get("course") or {}
    user_totals = weekly.get("user")
    averages = course_data.get("averages") or {}
    course_name = getattr(course, "name", None) or "your course"

    lines: list[tuple[int, str]] = [
        (0, f"Hi {user.get('canvas_full_name') or 'there'},"),
        (0, ""),
        (0, f"Here is what happened this week in {course_name}."),
    ]

    rank = (user.get("rank") or {}).get("this_week")
    if rank:
        lines.append((0, f"Your rank in the Engagement Index: {rank}"))
    if user_totals is not None:
        lines.append(
            (0, f"You generated {user_totals.points_generated} points "
                f"(course average {averages.get('points_generated', 0)}) and received "
                f"{user_totals.points_received} points (course average {averages.get('points_received', 0)}).")
        )
        top = user_totals.top_asset
        if top:
            wt = top["weekly_totals"]
            lines.append(
                (0, f'Your most popular asset: "{top["title"]}" '
                    f"({wt.views} views, {wt.likes} likes, {wt.comments} comments)")
            )
    else:
        lines.append((0, "You had no activity this week."))

    top_assets = course_data.get("top_assets") or {}
    if top_assets:
        lines.append((0, ""))
        lines.append((0, "Top assets this week:"))
        for key, label in TOP_ASSET_LABELS.items():
            asset = top_assets.get(key)
            if asset:
                lines.append((1, f'{label}: "{asset["title"]}" ({getattr(asset["weekly_totals"], key)} {key})'))

    top_users = course_data.get("top_users") or {}
    if top_users:
        lines.append((0, ""))
        lines.append((0, "Top contributors this week:"))
        for key, label in TOP_USER_LABELS.items():
            entry = top_users.get(key)
            if entry:
                name = (entry.get("user") or {}).get("canvas_full_name") or "A classmate"
                lines.append((1, f"{label}: {name} ({entry['total']} points)"))

    lines.extend(_footer(course))
    return _lines_to_text(lines), _lines_to_html(lines)


def render_daily(payload: dict, user: dict, course) -> tuple[str, str]:
    lines: list[tuple[int, str]] = [
        (0, f"Hi {user.get('canvas_full_name') or 'there'},"),
        (0, ""),
    ]
    for activity in payload.get("activities") or []:
        actors = get_summary_actors(activity.actors, user)
        if activity.type == ASSET_COMMENT:
            lines.append((0, f'{actors} commented on your asset "{activity.asset["title"]}"'))
        elif activity.type == ASSET_COMMENT_REPLY:
            lines.append((0, f'{actors} replied to your comment on "{activity.asset["title"]}"'))
        elif activity.type == WHITEBOARD_CHAT:
            lines.append((0, f'{actors} commented on your whiteboard "{activity.whiteboard["title"]}"'))
            for chat in activity.whiteboard.get("chats") or []:
                author = (chat.get("user") or {}).get("canvas_full_name") or "Someone"
                lines.append((1, f"{author}: {chat['body']}"))
            lines.append((0, ""))
            continue
        for comment in activity.asset.get("comments") or []:
            author = (comment.get("user") or {}).get("canvas_full_name") or "Someone"
            lines.append((1 + comment.get("level", 0), f"{author}: {comment['body']}"))
        lines.append((0, ""))

    lines.extend(_footer(course))
    return _lines_to_text(lines), _lines_to_html(lines)


RENDERERS = {
    "weekly": render_weekly,
    "daily": render_daily,
}
