"""Tie-breaking maximum selection."""
import random

import pytest

from apps.backend.services import digest_selection
from apps.backend.services.digest_selection import sample_maximum


@pytest.mark.timeout(5)
def test_sample_maximum_returns_highest_positive():
    items = {1: 3, 2: 7, 3: 5}
    top = sample_maximum(items, lambda v: v)
    assert top == {"id": 2, "value": 7}


@pytest.mark.timeout(5)
def test_sample_maximum_none_when_nothing_positive():
    assert sample_maximum({}, lambda v: v) is None
    assert sample_maximum({1: 0, 2: 0}, lambda v: v) is None
    assert sample_maximum({1: -4, 2: -1}, lambda v: v) is None


@pytest.mark.timeout(5)
def test_sample_maximum_ignores_negatives_next_to_positive():
    top = sample_maximum({1: -10, 2: 1, 3: 0}, lambda v: v)
    assert top == {"id": 2, "value": 1}


@pytest.mark.timeout(5)
def test_sample_maximum_ties_pick_one_of_tied_ids():
    items = {1: 4, 2: 9, 3: 9, 4: 2, 5: 9}
    seen = set()
    for seed in range(30):
        top = sample_maximum(items, lambda v: v, rng=random.Random(seed))
        assert top["value"] == 9
        assert top["id"] in {2, 3, 5}
        seen.add(top["id"])
    assert len(seen) > 1


@pytest.mark.timeout(5)
def test_sample_maximum_seeded_module_generator_is_repeatable():
    items = {i: 1 for i in range(10)}
    digest_selection.seed(42)
    first = [sample_maximum(items, lambda v: v)["id"] for _ in range(5)]
    digest_selection.seed(42)
    second = [sample_maximum(items, lambda v: v)["id"] for _ in range(5)]
    assert first == second
    digest_selection.seed(None)


@pytest.mark.timeout(5)
def test_sample_maximum_treats_none_score_as_zero():
    top = sample_maximum({1: None, 2: 2}, lambda v: v)
    assert top == {"id": 2, "value": 2}
