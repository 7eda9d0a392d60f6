"""Test the shared Fisher-Yates shuffle."""

import sys
import os
import random
from collections import Counter
from itertools import permutations
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import pytest

from ecoquest.minigames.shuffle import draw, fisher_yates


def test_shuffle_keeps_elements_and_input():
    items = [1, 2, 3, 4, 5]
    out = fisher_yates(items, random.Random(1))
    assert sorted(out) == items
    assert items == [1, 2, 3, 4, 5]


def test_shuffle_is_uniform_over_three_elements():
    """Each of the 3! orders shows up close to 1/6 of the time."""
    rng = random.Random(12345)
    trials = 60000
    counts = Counter(tuple(fisher_yates("abc", rng)) for _ in range(trials))

    assert set(counts) == set(permutations("abc"))
    expected = trials / 6
    chi2 = sum((c - expected) ** 2 / expected for c in counts.values())
    # 5 degrees of freedom; 20.5 is far beyond the 99.9th percentile
    assert chi2 < 20.5


def test_same_seed_same_order():
    assert fisher_yates(range(10), random.Random(3)) == fisher_yates(range(10), random.Random(3))


def test_draw_counts():
    rng = random.Random(0)
    assert len(draw(range(10), 4, rng)) == 4
    assert len(set(draw(range(10), 10, rng))) == 10
    # Fewer items than requested: everything, once
    assert sorted(draw([1, 2], 7, rng)) == [1, 2]
    assert draw([1, 2, 3], 0, rng) == []


def test_draw_rejects_negative_count():
    with pytest.raises(ValueError):
        draw([1, 2, 3], -1)
