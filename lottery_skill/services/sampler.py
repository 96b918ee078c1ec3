"""Draw winners from an applicant pool without replacement."""

from __future__ import annotations

import random
from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")


def sample(
    pool: Sequence[T],
    count: int,
    rng: random.Random | None = None,
) -> tuple[list[T], list[T]]:
    """Draw ``count`` unique items from ``pool``.

    Each step picks a uniformly random index of what is still in the pool,
    so winners come back in draw order rather than sorted. ``pool`` itself
    is left untouched.

    Returns:
        ``(winners, remaining)``.

    Raises:
        ValueError: if ``count`` is not in ``1..len(pool)``.
    """

    if count < 1:
        raise ValueError("count must be >= 1")
    if count > len(pool):
        raise ValueError(f"count must be <= pool size ({len(pool)})")

    source = rng or random
    remaining = list(pool)
    winners: list[T] = []
    for _ in range(count):
        index = source.randrange(len(remaining))
        winners.append(remaining.pop(index))
    return winners, remaining
