from __future__ import annotations

import logging
import operator
from collections.abc import MutableSequence, Sequence
from concurrent.futures import Executor, ThreadPoolExecutor, wait
from random import Random
from typing import Callable, TypeVar

from parqsort.pivot import PivotFunc, resolve_pivot

T = TypeVar("T")

LessFunc = Callable[[T, T], bool]

log = logging.getLogger(__name__)


DEPTH_LIMIT = 5
PARALLEL_THRESHOLD = 1_000
INSERTION_SORT_THRESHOLD = 16



def insertion_sort(
    a: MutableSequence[T],
    lo: int,
    hi: int,
    less: LessFunc = operator.lt,
) -> None:
    if hi - lo <= 1:
        return

    for i in range(lo + 1, hi):
        v = a[i]
        j = i - 1
        # stop at the first element v is not less than, so equal elements keep their order
        while j >= lo and less(v, a[j]):
            a[j + 1] = a[j]
            j -= 1
        a[j + 1] = v


def partition(
    a: MutableSequence[T],
    lo: int,
    hi: int,
    pivot_index: int,
    less: LessFunc = operator.lt,
) -> int:
    """
    Rearrange a[lo:hi] around the value at pivot_index and return the boundary b:
    a[lo:b-1] are less than the pivot value, a[b-1] is the pivot value,
    a[b:hi] are not less than it. Elements equal to the pivot land after it.
    """
    if not lo <= pivot_index < hi:
        raise ValueError(f"pivot index {pivot_index} outside range [{lo}, {hi})")

    a[lo], a[pivot_index] = a[pivot_index], a[lo]
    pivot_value = a[lo]

    boundary = lo + 1
    for i in range(lo + 1, hi):
        if less(a[i], pivot_value):
            if i != boundary:
                a[i], a[boundary] = a[boundary], a[i]
            boundary += 1

    a[lo], a[boundary - 1] = a[boundary - 1], a[lo]
    return boundary



def _quicksort_recursive(
    a: MutableSequence[T],
    lo: int,
    hi: int,
    less: LessFunc,
    select: PivotFunc,
    rng: Random,
    insertion_threshold: int | None,
) -> None:
    # Recurse into the smaller side and keep looping on the larger one, so the
    # stack stays O(log n) even when a bad pivot makes the running time quadratic.
    while hi - lo > 1:
        if insertion_threshold is not None and hi - lo <= insertion_threshold:
            insertion_sort(a, lo, hi, less)
            return

        boundary = partition(a, lo, hi, select(a, lo, hi, rng), less)

        if boundary - 1 - lo < hi - boundary:
            _quicksort_recursive(a, lo, boundary - 1, less, select, rng, insertion_threshold)
            lo = boundary
        else:
            _quicksort_recursive(a, boundary, hi, less, select, rng, insertion_threshold)
            hi = boundary - 1


def _quicksort_parallel(
    pool: Executor,
    a: MutableSequence[T],
    lo: int,
    hi: int,
    depth: int,
    depth_limit: int,
    less: LessFunc,
    select: PivotFunc,
    rng: Random,
    insertion_threshold: int | None,
) -> None:
    if depth >= depth_limit:
        _quicksort_recursive(a, lo, hi, less, select, rng, insertion_threshold)
        return

    if hi - lo <= 1:
        return
    if insertion_threshold is not None and hi - lo <= insertion_threshold:
        insertion_sort(a, lo, hi, less)
        return

    boundary = partition(a, lo, hi, select(a, lo, hi, rng), less)

    # the forked half gets its own generator; Random is not shared across threads
    child_rng = Random(rng.getrandbits(64))
    future = pool.submit(
        _quicksort_parallel,
        pool, a, lo, boundary - 1, depth + 1, depth_limit,
        less, select, child_rng, insertion_threshold,
    )
    try:
        _quicksort_parallel(
            pool, a, boundary, hi, depth + 1, depth_limit,
            less, select, rng, insertion_threshold,
        )
    finally:
        wait((future,))
    future.result()



def _check_range(a: Sequence[T], lo: int, hi: int | None) -> tuple[int, int]:
    n = len(a)
    if hi is None:
        hi = n
    if lo < 0 or hi > n or lo > hi:
        raise ValueError(f"invalid range [{lo}, {hi}) for sequence of length {n}")
    return lo, hi


def _check_insertion_threshold(insertion_threshold: int | None) -> None:
    if insertion_threshold is not None and insertion_threshold < 0:
        raise ValueError("insertion_threshold must be >= 0")


def _make_less(
    less: LessFunc | None,
    key: Callable[[T], object] | None,
    reverse: bool,
) -> LessFunc:
    if less is None:
        less = operator.lt
    elif not callable(less):
        raise TypeError("less must be a callable (a, b) -> bool")

    if key is not None:
        base = less

        def less(x, y):
            return base(key(x), key(y))

    if reverse:
        forward = less

        def less(x, y):
            return forward(y, x)

    return less



def sort(
    a: MutableSequence[T],
    less: LessFunc | None = None,
    *,
    key: Callable[[T], object] | None = None,
    reverse: bool = False,
    pivot: str | PivotFunc = "random",
    seed: int | None = None,
    insertion_threshold: int | None = None,
    lo: int = 0,
    hi: int | None = None,
) -> None:
    """
    Sort a[lo:hi] in place with quicksort. Not stable.

    less - strict weak ordering, defaults to operator.lt; an inconsistent
           ordering gives an unspecified (but still permuted) result
    pivot - "random", "midpoint" or a callable (a, lo, hi, rng) -> index
    seed - seeds the pivot generator, for reproducible runs
    insertion_threshold - sort ranges of at most this length with insertion
           sort; None (default) disables the fallback
    """
    lo, hi = _check_range(a, lo, hi)
    _check_insertion_threshold(insertion_threshold)
    less = _make_less(less, key, reverse)
    select = resolve_pivot(pivot)

    _quicksort_recursive(a, lo, hi, less, select, Random(seed), insertion_threshold)


def parallel_sort(
    a: MutableSequence[T],
    less: LessFunc | None = None,
    *,
    key: Callable[[T], object] | None = None,
    reverse: bool = False,
    pivot: str | PivotFunc = "random",
    seed: int | None = None,
    insertion_threshold: int | None = None,
    depth_limit: int = DEPTH_LIMIT,
    parallel_threshold: int = PARALLEL_THRESHOLD,
    lo: int = 0,
    hi: int | None = None,
) -> None:
    """
    Same contract as sort(), but the lower half of every partition above
    depth_limit is handed to a worker thread while the caller sorts the upper
    half. Every worker is joined before this returns, and the first worker
    error is re-raised here; a is then left partially sorted.

    At most 2 ** depth_limit threads (the caller included) sort at once.
    Ranges of at most parallel_threshold elements are sorted by sort().
    """
    lo, hi = _check_range(a, lo, hi)
    _check_insertion_threshold(insertion_threshold)
    if depth_limit < 0:
        raise ValueError("depth_limit must be >= 0")
    less = _make_less(less, key, reverse)
    select = resolve_pivot(pivot)
    rng = Random(seed)

    n = hi - lo
    if n <= parallel_threshold or depth_limit == 0:
        log.debug("parallel_sort: n=%d, sorting sequentially", n)
        _quicksort_recursive(a, lo, hi, less, select, rng, insertion_threshold)
        return

    # one thread per fork that can be outstanding, so a parent blocked on its
    # child never holds the last free worker
    max_workers = (1 << depth_limit) - 1
    log.debug(
        "parallel_sort: n=%d depth_limit=%d max_workers=%d",
        n, depth_limit, max_workers,
    )
    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="parqsort") as pool:
        _quicksort_parallel(
            pool, a, lo, hi, 0, depth_limit,
            less, select, rng, insertion_threshold,
        )
