from __future__ import annotations

from collections.abc import Sequence
from random import Random
from typing import Callable, TypeVar

T = TypeVar("T")

PivotFunc = Callable[[Sequence[T], int, int, Random], int]


def random_pivot(a: Sequence[T], lo: int, hi: int, rng: Random) -> int:
    return lo + rng.randrange(hi - lo)


def midpoint_pivot(a: Sequence[T], lo: int, hi: int, rng: Random | None = None) -> int:
    # positional middle of the range, not the median value
    return lo + (hi - lo) // 2


PIVOTS: dict[str, PivotFunc] = {
    "random": random_pivot,
    "midpoint": midpoint_pivot,
}


def resolve_pivot(pivot: str | PivotFunc) -> PivotFunc:
    """
    pivot - a name from PIVOTS or a callable (a, lo, hi, rng) -> index in [lo, hi)
    """
    if isinstance(pivot, str):
        try:
            return PIVOTS[pivot]
        except KeyError:
            raise ValueError(
                f"unknown pivot policy {pivot!r}, expected one of {sorted(PIVOTS)}"
            ) from None
    if not callable(pivot):
        raise TypeError("pivot must be a policy name or a callable")
    return pivot
