"""Utility functions."""

import random
from typing import List, Optional, Sequence, TypeVar

T = TypeVar("T")


def shuffled(items: Sequence[T], rng: Optional[random.Random] = None) -> List[T]:
    """
    Fisher-Yates (aka Knuth) shuffle.

    Returns a new list; the input sequence is left untouched.
    """
    rng = rng or random.Random()
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = rng.randint(0, i)
        result[i], result[j] = result[j], result[i]
    return result
