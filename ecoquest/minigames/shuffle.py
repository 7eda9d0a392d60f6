"""Unbiased shuffling shared by every mini-game."""
from __future__ import annotations
import random
from typing import List, Optional, Sequence, TypeVar

T = TypeVar("T")


def fisher_yates(items: Sequence[T], rng: Optional[random.Random] = None) -> List[T]:
    """Return a shuffled copy of ``items``; every permutation is equally likely.

    Args:
        items: Sequence to shuffle (left untouched)
        rng: Random source, defaults to a fresh ``random.Random``

    Returns:
        New list with the same elements in random order
    """
    rng = rng or random.Random()
    out = list(items)
    for i in range(len(out) - 1, 0, -1):
        j = rng.randint(0, i)
        out[i], out[j] = out[j], out[i]
    return out


def draw(items: Sequence[T], count: int, rng: Optional[random.Random] = None) -> List[T]:
    """Draw ``count`` items without replacement (all of them if fewer)."""
    if count < 0:
        raise ValueError("count must be >= 0")
    return fisher_yates(items, rng)[:count]
