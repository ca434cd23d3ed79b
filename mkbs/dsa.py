"""
DSA utilities
=============

Small building blocks used by the multi-key search engine:

- `default_cmp`: three-way comparison using `<` and `>`
- `binary_search`: single-key binary search over a sub-range [lo, hi)
- `check_keys_ascending`: linear pre-scan of the query keys
- `naive_multi_search`: one independent binary search per key (baseline)
- `CountingComparator`: wraps a comparator and counts its calls (benchmarks)

All searches are comparator-driven: `cmp(a, b)` returns a negative number,
zero or a positive number, like the old Python 2 `cmp`. An optional `key`
callable projects *data elements* before comparing them with a query key,
the same convention as `bisect` uses.
"""

from __future__ import annotations
from typing import Any, Callable, List, Optional, Sequence, TypeVar

from .models import Found, InvalidKeyOrder, NotFound, SearchOutcome

T = TypeVar("T")
Comparator = Callable[[Any, Any], int]


def default_cmp(a: Any, b: Any) -> int:
    """Three-way comparison for anything supporting `<` and `>`."""
    return (a > b) - (a < b)


def binary_search(
    data: Sequence[T],
    target: Any,
    lo: int = 0,
    hi: Optional[int] = None,
    *,
    cmp: Comparator = default_cmp,
    key: Callable[[T], Any] = lambda x: x,
) -> SearchOutcome:
    """Binary search for `target` inside `data[lo:hi]`.

    Returns Found(i) with lo <= i < hi if some element compares equal
    (the first probe that hits wins), else NotFound(i) with lo <= i <= hi
    where inserting `target` keeps the range sorted.
    """
    if lo < 0:
        raise ValueError("lo must be non-negative")
    if hi is None:
        hi = len(data)
    elif hi > len(data):
        raise ValueError("hi must not exceed len(data)")
    while lo < hi:
        mid = (lo + hi) // 2
        c = cmp(target, key(data[mid]))
        if c == 0:
            return Found(mid)
        if c < 0:
            hi = mid
        else:
            lo = mid + 1
    return NotFound(lo)


def check_keys_ascending(keys: Sequence[Any], cmp: Comparator = default_cmp) -> None:
    """Raise InvalidKeyOrder unless `keys` is non-decreasing under `cmp`."""
    for i in range(1, len(keys)):
        if cmp(keys[i - 1], keys[i]) > 0:
            raise InvalidKeyOrder(i)


def naive_multi_search(
    data: Sequence[T],
    keys: Sequence[Any],
    cmp: Optional[Comparator] = None,
    *,
    key: Optional[Callable[[T], Any]] = None,
) -> List[SearchOutcome]:
    """One full-range binary search per key. O(m log n) comparisons."""
    cmp = cmp or default_cmp
    key = key or (lambda x: x)
    return [binary_search(data, k, cmp=cmp, key=key) for k in keys]


class CountingComparator:
    """Comparator wrapper that counts how often it is called."""

    def __init__(self, cmp: Optional[Comparator] = None) -> None:
        self.cmp = cmp or default_cmp
        self.calls = 0

    def __call__(self, a: Any, b: Any) -> int:
        self.calls += 1
        return self.cmp(a, b)

    def reset(self) -> None:
        self.calls = 0
