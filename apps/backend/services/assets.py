"""Asset visibility helpers shared by the digests."""
from __future__ import annotations

from apps.backend.models.asset import Asset


def asset_snapshot(asset: Asset) -> dict:
    """Plain-dict copy of an asset with its owners and category visibility."""
    return {
        "id": asset.id,
        "type": asset.type,
        "title": asset.title,
        "description": asset.description,
        "url": asset.url,
        "thumbnail_url": asset.thumbnail_url,
        "visible": bool(asset.visible),
        "deleted_at": asset.deleted_at,
        "likes": asset.likes or 0,
        "views": asset.views or 0,
        "comment_count": asset.comment_count or 0,
        "categories": [{"id": c.id, "visible": bool(c.visible)} for c in asset.categories],
        "users": [
            {"id": u.id, "canvas_full_name": u.canvas_full_name, "is_admin": bool(u.is_admin)}
            for u in asset.users
        ],
    }


def is_deleted_or_hidden(asset: dict) -> bool:
    """True if the asset is hidden, deleted, or only filed under hidden categories."""
    if not asset.get("visible", True) or asset.get("deleted_at"):
        return True
    categories = asset.get("categories") or []
    return bool(categories) and not any(c.get("visible") for c in categories)


def has_non_admin_owner(asset: dict) -> bool:
    owners = asset.get("users") or []
    if isinstance(owners, dict):
        owners = owners.values()
    return any(not u.get("is_admin") for u in owners)
