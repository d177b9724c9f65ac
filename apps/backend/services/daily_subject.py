"""Subject lines for the daily digest."""
from __future__ import annotations

from apps.backend.services.daily_activities import (
    ASSET_COMMENT,
    ASSET_COMMENT_REPLY,
    LIBRARY_TYPES,
    WHITEBOARD_CHAT,
)


def get_summary_actors(actors: list[dict], current_user: dict) -> str:
    """Join actor names, e.g. "Jack", "Jack and Jill", "Jack, Jill and 2 others".

    Actors are de-duplicated by id and the recipient is left out.
    """
    seen: set = set()
    names: list[str] = []
    for actor in actors:
        if not actor or actor["id"] in seen:
            continue
        seen.add(actor["id"])
        if actor["id"] == current_user["id"]:
            continue
        names.append(actor.get("canvas_full_name") or "")

    if not names:
        return "Someone"
    if len(names) == 1:
        return names[0]
    if len(names) == 2:
        return f"{names[0]} and {names[1]}"
    others = len(names) - 2
    suffix = "1 other" if others == 1 else f"{others} others"
    return f"{names[0]}, {names[1]} and {suffix}"


def get_subject(course, activities: list, current_user: dict) -> str | None:
    if len(activities) == 1:
        activity = activities[0]
        actors = get_summary_actors(activity.actors, current_user)
        if activity.type == ASSET_COMMENT:
            return f'{actors} commented on your asset "{activity.asset["title"]}"'
        if activity.type == ASSET_COMMENT_REPLY:
            return f"{actors} replied to your comment"
        if activity.type == WHITEBOARD_CHAT:
            return f'{actors} commented on your whiteboard "{activity.whiteboard["title"]}"'
        return None

    types = {a.type for a in activities}
    has_library = any(t in LIBRARY_TYPES for t in types)
    has_whiteboards = WHITEBOARD_CHAT in types
    if has_library and has_whiteboards:
        return "New Asset Library and Whiteboard activity is waiting for you"
    if has_library:
        return "New Asset Library activity is waiting for you"
    if has_whiteboards:
        return "New Whiteboard activity is waiting for you"
    return None
