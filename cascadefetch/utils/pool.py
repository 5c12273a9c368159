import random
from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")


def pick_random(items: Sequence[T] | None) -> T | None:
    """Pick one element uniformly at random, or None for a missing/empty pool."""
    if not items:
        return None
    return items[random.randrange(len(items))]
