"""Tie-breaking maximum selection for weekly "top" entries."""
from __future__ import annotations

import random
from typing import Any, Callable, Mapping

_rng = random.Random()


def seed(value: int | None) -> None:
    """Seed the shared generator; None reseeds from system entropy."""
    _rng.seed(value)


def sample_maximum(
    items: Mapping[Any, Any],
    transform: Callable[[Any], float],
    rng: random.Random | None = None,
) -> dict | None:
    """Return {"id", "value"} for the highest positive transformed value.

    Ties are broken by picking one of the tied keys at random. Returns None
    when no item scores above zero.
    """
    ids: list = []
    maximum = 0
    for key, item in items.items():
        value = transform(item) or 0
        if value < maximum:
            continue
        if value > maximum:
            ids = []
            maximum = value
        if maximum > 0:
            ids.append(key)
    if not ids:
        return None
    return {"id": (rng or _rng).choice(ids), "value": maximum}
