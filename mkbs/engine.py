"""
Core engine (multi-key binary search)
=====================================

Looks up a whole sorted batch of keys in a sorted sequence at once.

Running one binary search per key costs O(m log n) comparisons and ignores
the fact that the keys are sorted too. The engine here works divide and
conquer style instead:

1) pick the middle key of the current key range (the *pivot*)
2) binary search it inside the current data window
3) every key smaller than the pivot can only live left of that position,
   every bigger key only right of it -> recurse on both halves with the
   shrunken windows

Later searches therefore run over much smaller windows than `n`.

Two modes:
- fast:       a miss only gets a concrete insertion hint when the key itself
              was binary searched; keys that fall into an empty window or
              outside the window bounds get NotFound(None)
- exhaustive: every miss gets its exact insertion index (roughly twice the
              comparisons of fast mode in the worst case)

Each outcome is written straight into the slot of its key in the output
list, so results line up with the input keys even though the recursion
visits keys pivot-first.
"""

from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, List, Optional, Sequence, Tuple

from .dsa import Comparator, binary_search, check_keys_ascending, default_cmp
from .models import NotFound, SearchOutcome

MODES = ("fast", "exhaustive")

# (data lo, data hi, key lo, key hi), all half-open
Subproblem = Tuple[int, int, int, int]

_UNRESOLVED = NotFound(None)


class _Partitioner:
    """One batch query: inputs, comparator and the output buffer."""

    def __init__(
        self,
        data: Sequence[Any],
        keys: Sequence[Any],
        cmp: Comparator,
        key: Callable[[Any], Any],
        exhaustive: bool,
    ) -> None:
        self.data = data
        self.keys = keys
        self.cmp = cmp
        self.key = key
        self.exhaustive = exhaustive
        self.out: List[SearchOutcome] = [_UNRESOLVED] * len(keys)

    def _fill(self, klo: int, khi: int, outcome: SearchOutcome) -> None:
        for i in range(klo, khi):
            self.out[i] = outcome

    def _equal_run(self, klo: int, khi: int, mid: int) -> Tuple[int, int]:
        """Bounds of the run of keys equal to keys[mid] inside [klo, khi).

        The whole run shares the pivot's outcome, so both recursive halves
        hold only strictly smaller / strictly greater keys.
        """
        keys, cmp, target = self.keys, self.cmp, self.keys[mid]
        first, last = mid, mid + 1
        while first > klo and cmp(keys[first - 1], target) == 0:
            first -= 1
        while last < khi and cmp(keys[last], target) == 0:
            last += 1
        return first, last

    def step(self, lo: int, hi: int, klo: int, khi: int) -> List[Subproblem]:
        """Resolve the pivot of keys[klo:khi] against data[lo:hi].

        Writes every outcome it can settle and returns the subproblems that
        are still open.
        """
        if klo >= khi:
            return []
        if lo >= hi:
            # Window collapsed: `lo` is the insertion point for all remaining keys
            self._fill(klo, khi, NotFound(lo) if self.exhaustive else _UNRESOLVED)
            return []

        data, key = self.data, self.key
        mid = klo + (khi - klo) // 2
        target = self.keys[mid]
        first, last = self._equal_run(klo, khi, mid)

        if not self.exhaustive:
            # Keys outside the window bounds are settled without a search
            if self.cmp(target, key(data[lo])) < 0:
                self._fill(klo, last, _UNRESOLVED)
                return [(lo, hi, last, khi)]
            if self.cmp(target, key(data[hi - 1])) > 0:
                self._fill(first, khi, _UNRESOLVED)
                return [(lo, hi, klo, first)]

        outcome = binary_search(data, target, lo, hi, cmp=self.cmp, key=key)
        split = outcome.position
        self._fill(first, last, outcome)

        right_lo = split + 1 if outcome.found else split
        return [(lo, split, klo, first), (right_lo, hi, last, khi)]

    def run(self, lo: int, hi: int, klo: int, khi: int) -> None:
        for sub in self.step(lo, hi, klo, khi):
            self.run(*sub)

    def run_parallel(self, workers: int) -> None:
        """Fork-join: unfold the top of the recursion, then solve the
        independent subproblems on a thread pool.

        Subproblems own disjoint key ranges, so no two tasks ever write the
        same output slot. The work is pure Python, so with the GIL this is
        not faster than `run`; it only helps when `cmp` releases the GIL.
        """
        tasks: List[Subproblem] = [(0, len(self.data), 0, len(self.keys))]
        while tasks and len(tasks) < workers * 4:
            nxt: List[Subproblem] = []
            for t in tasks:
                nxt.extend(sub for sub in self.step(*t) if sub[2] < sub[3])
            tasks = nxt
        if not tasks:
            return
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [pool.submit(self.run, *t) for t in tasks]
            for f in futures:
                f.result()


def _search(
    data: Sequence[Any],
    keys: Sequence[Any],
    cmp: Optional[Comparator],
    key: Optional[Callable[[Any], Any]],
    exhaustive: bool,
    workers: Optional[int],
) -> List[SearchOutcome]:
    cmp = cmp or default_cmp
    check_keys_ascending(keys, cmp)
    p = _Partitioner(data, keys, cmp, key or (lambda x: x), exhaustive)
    if workers is not None and workers > 1:
        p.run_parallel(workers)
    else:
        p.run(0, len(data), 0, len(keys))
    return p.out


def multi_search(
    data: Sequence[Any],
    keys: Sequence[Any],
    cmp: Optional[Comparator] = None,
    *,
    key: Optional[Callable[[Any], Any]] = None,
    workers: Optional[int] = None,
) -> List[SearchOutcome]:
    """Fast mode batch search.

    Found results are exact; misses may come back as NotFound(None).
    Raises InvalidKeyOrder if `keys` is not non-decreasing under `cmp`.
    `data` must already be sorted under `cmp` (not re-checked).
    """
    return _search(data, keys, cmp, key, exhaustive=False, workers=workers)


def multi_search_exhaustive(
    data: Sequence[Any],
    keys: Sequence[Any],
    cmp: Optional[Comparator] = None,
    *,
    key: Optional[Callable[[Any], Any]] = None,
    workers: Optional[int] = None,
) -> List[SearchOutcome]:
    """Exhaustive mode batch search: every miss carries its insertion index."""
    return _search(data, keys, cmp, key, exhaustive=True, workers=workers)


def search(
    data: Sequence[Any],
    keys: Sequence[Any],
    mode: str = "fast",
    cmp: Optional[Comparator] = None,
    *,
    key: Optional[Callable[[Any], Any]] = None,
    workers: Optional[int] = None,
) -> List[SearchOutcome]:
    """Dispatch on a mode name ("fast" or "exhaustive")."""
    if mode == "fast":
        return multi_search(data, keys, cmp, key=key, workers=workers)
    if mode == "exhaustive":
        return multi_search_exhaustive(data, keys, cmp, key=key, workers=workers)
    raise ValueError("mode must be 'fast' or 'exhaustive'")
