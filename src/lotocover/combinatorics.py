from __future__ import annotations
from itertools import combinations
from math import comb
from typing import Iterator, Sequence, Tuple, TypeVar

T = TypeVar("T")


def binomial(n: int, k: int) -> int:
    """C(n, k); 0 when k is negative or larger than n."""
    if k < 0 or n < 0 or k > n:
        return 0
    return comb(n, k)


def k_subsets(items: Sequence[T], k: int) -> Iterator[Tuple[T, ...]]:
    """
    Lazily yield the k-subsets of items in ascending index order:
    (0,1,2), (0,1,3), ... so search order is the same on every run.
    """
    if k < 0:
        return iter(())
    return combinations(items, k)
