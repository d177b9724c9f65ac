"""Fold a week of activities into course, asset and user summaries."""
from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, Mapping

from apps.backend.services.assets import has_non_admin_owner, is_deleted_or_hidden
from apps.backend.services.digest_selection import sample_maximum
from apps.backend.services.digest_totals import (
    COLLECTED,
    GENERATED,
    RECEIVED,
    AssetTotals,
    CourseTotals,
    UserTotals,
)

logger = logging.getLogger(__name__)

TOP_ASSET_KEYS = ("comments", "likes", "views")
TOP_USER_KEYS = ("points_generated", "points_received")


@dataclass
class ActivityRecord:
    type: str
    user_id: int
    actor_id: int | None = None
    asset: dict | None = None
    created_at: datetime | None = None
    metadata: dict = field(default_factory=dict)


@dataclass
class WeeklySummary:
    course: dict = field(default_factory=dict)
    assets: dict = field(default_factory=dict)
    users: dict = field(default_factory=dict)

    def asset_totals(self, asset: dict | None) -> AssetTotals | None:
        """Return the asset's weekly totals, registering the asset on first sight."""
        if not asset:
            return None
        entry = self.assets.get(asset["id"])
        if entry is None:
            entry = dict(asset, weekly_totals=AssetTotals())
            self.assets[asset["id"]] = entry
        return entry["weekly_totals"]

    def link_owned_assets(self) -> None:
        """Give every summarized user the touched assets they own."""
        for asset_id, entry in self.assets.items():
            for owner in entry.get("users") or []:
                totals = self.users.get(owner["id"])
                if totals is not None:
                    totals.assets[asset_id] = entry

    def user_totals(self, user_id: int) -> UserTotals:
        totals = self.users.get(user_id)
        if totals is None:
            totals = UserTotals()
            self.users[user_id] = totals
        return totals


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_ranks(users: list[dict], score_key: str = "points") -> list[dict]:
    """Attach this week's rank to users sorted by descending score.

    Rank is one plus the number of users with a strictly higher score, so
    scores [200, 100, 50, 50, 25] map to ranks [1, 2, 3, 3, 5].
    """
    ranked = []
    cutoff = object()
    rank = 1
    for index, user in enumerate(users):
        score = user.get(score_key)
        if score != cutoff:
            rank = index + 1
            cutoff = score
        ranked.append(dict(user, rank={"this_week": rank}))
    return ranked


def summarize_activities(
    activities: Iterable[ActivityRecord],
    configuration: Iterable[Mapping[str, Any]],
    users: Mapping[int, dict],
    rng: random.Random | None = None,
) -> WeeklySummary:
    """Build the weekly summary for one course.

    `users` holds the active roster keyed by id; it drives averages and decides
    whether a top user may be named.
    """
    course_totals = CourseTotals()
    summary = WeeklySummary(course={"totals": course_totals})
    config_by_type = {c["type"]: c for c in configuration}

    for activity in activities:
        type_config = config_by_type.get(activity.type)
        if not type_config:
            logger.debug("weekly_summary_unknown_type type=%s", activity.type)
            continue
        if not type_config.get("enabled"):
            continue

        asset_totals = summary.asset_totals(activity.asset)
        user_totals = summary.user_totals(activity.user_id)

        if asset_totals is not None:
            asset_totals.increment_activities(activity.type)
        user_totals.increment_activities(activity.type)

        points = type_config.get("points") or 0
        user_totals.increment_points(activity.type, points)
        course_totals.increment_points(activity.type, points)
        user_totals.increment_points(COLLECTED, points)
        course_totals.increment_points(GENERATED, points)

        if activity.actor_id and activity.actor_id != activity.user_id:
            summary.user_totals(activity.actor_id).increment_points(GENERATED, points)
            user_totals.increment_points(RECEIVED, points)
            course_totals.increment_points(RECEIVED, points)
        else:
            user_totals.increment_points(GENERATED, points)

    summary.link_owned_assets()

    user_count = len(users)
    summary.course["averages"] = {
        key: (round_half_up(total / user_count) if user_count else 0)
        for key, total in course_totals.as_dict().items()
    }

    top_assets = {}
    for key in TOP_ASSET_KEYS:
        top = sample_maximum(summary.assets, lambda a, k=key: _top_asset_score(a, k), rng=rng)
        if top:
            top_assets[key] = summary.assets[top["id"]]
    summary.course["top_assets"] = top_assets

    top_users = {}
    for key in TOP_USER_KEYS:
        top = sample_maximum(summary.users, lambda u, k=key: getattr(u, k), rng=rng)
        if top:
            user = users.get(top["id"])
            # Inactive users and users not sharing points stay anonymous.
            if not user or not user.get("share_points"):
                user = {}
            top_users[key] = {"total": top["value"], "user": user}
    summary.course["top_users"] = top_users

    return summary


def _top_asset_score(asset: dict, key: str) -> int:
    if is_deleted_or_hidden(asset) or not has_non_admin_owner(asset):
        return 0
    return getattr(asset["weekly_totals"], key)


def most_popular_asset(user_totals: UserTotals, rng: random.Random | None = None) -> dict | None:
    """Weighted views + 2*likes + 5*comments over the user's visible assets."""
    top = sample_maximum(
        user_totals.assets,
        lambda a: 0 if is_deleted_or_hidden(a) else a["weekly_totals"].popularity(),
        rng=rng,
    )
    if not top:
        return None
    return user_totals.assets[top["id"]]
