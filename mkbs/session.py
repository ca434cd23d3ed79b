"""
Search session (CLI working state)
==================================

The CLI works like a tiny offline query console:

1) Load the sorted data column once
2) Set / change the list of query keys (with undo/redo history)
3) Run a batch search (fast or exhaustive) -> outcomes for the current keys
4) Show, export, benchmark or report on those outcomes

The session never mutates `data`; only the key list and the last outcomes
change.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from functools import cmp_to_key
from typing import Any, Dict, List, Optional, Tuple
import time

from .dsa import Comparator, CountingComparator, default_cmp, naive_multi_search
from .engine import search
from .models import SearchOutcome


@dataclass
class QueryState:
    """The current key list and the outcomes of the last search over it."""
    keys: List[Any]
    outcomes: Optional[List[SearchOutcome]] = None
    last_mode: Optional[str] = None


@dataclass
class SearchSession:
    """Holds one sorted data column and the batch queries run against it."""
    data: List[Any]
    cmp: Comparator = default_cmp
    data_path: Optional[str] = None
    keys_path: Optional[str] = None
    # State-changing commands, reproduced in reports
    command_log: List[str] = field(default_factory=list)
    state: QueryState = field(init=False)
    last_bench: Optional[Dict[str, float]] = field(default=None, init=False)

    # Stacks of key-list snapshots for undo/redo
    _undo: List[List[Any]] = field(default_factory=list, init=False)
    _redo: List[List[Any]] = field(default_factory=list, init=False)

    def __post_init__(self) -> None:
        self.state = QueryState(keys=[])

    # ---------------- History (Stacks) ----------------
    def _push_history(self) -> None:
        self._undo.append(self.state.keys[:])
        self._redo.clear()

    def undo(self) -> bool:
        if not self._undo:
            return False
        self._redo.append(self.state.keys[:])
        self.state = QueryState(keys=self._undo.pop())
        return True

    def redo(self) -> bool:
        if not self._redo:
            return False
        self._undo.append(self.state.keys[:])
        self.state = QueryState(keys=self._redo.pop())
        return True

    # ---------------- Keys ----------------
    @property
    def keys(self) -> List[Any]:
        return self.state.keys

    def set_keys(self, keys: List[Any]) -> None:
        """Replace the key list; previous outcomes are discarded."""
        self._push_history()
        self.state = QueryState(keys=list(keys))

    def sort_keys(self) -> None:
        """Sort the current keys under the session comparator."""
        self.set_keys(sorted(self.state.keys, key=cmp_to_key(self.cmp)))

    # ---------------- Search ----------------
    def search(self, mode: str = "fast", workers: Optional[int] = None) -> List[SearchOutcome]:
        outcomes = search(self.data, self.state.keys, mode, self.cmp, workers=workers)
        self.state.outcomes = outcomes
        self.state.last_mode = mode
        return outcomes

    def results(self) -> List[Tuple[int, Any, SearchOutcome]]:
        """(key index, key, outcome) rows of the last search."""
        if self.state.outcomes is None:
            raise ValueError("No search has been run for the current keys.")
        return [(i, k, o) for i, (k, o) in enumerate(zip(self.state.keys, self.state.outcomes))]

    def misses(self) -> List[Tuple[int, Any, SearchOutcome]]:
        return [r for r in self.results() if not r[2].found]

    def summary(self) -> Dict[str, int]:
        """Counts of hits, misses with a hint and unresolved misses."""
        rows = self.results()
        found = sum(1 for _, _, o in rows if o.found)
        unresolved = sum(1 for _, _, o in rows if not o.found and o.position is None)
        return {
            "keys": len(rows),
            "found": found,
            "missing_with_hint": len(rows) - found - unresolved,
            "unresolved": unresolved,
        }

    # ---------------- Output operations ----------------
    def _export_rows(self) -> List[Dict[str, Any]]:
        return [
            {"key_index": i, "key": k, **o.to_dict()}
            for i, k, o in self.results()
        ]

    def export_csv(self, path: str) -> None:
        import csv
        rows = self._export_rows()
        with open(path, "w", newline="", encoding="utf-8") as f:
            w = csv.writer(f)
            w.writerow(["key_index", "key", "found", "position"])
            for r in rows:
                w.writerow([r["key_index"], r["key"], r["found"],
                            "" if r["position"] is None else r["position"]])

    def export_json(self, path: str) -> None:
        """Export the last outcomes as a JSON list (keeps field names and nulls)."""
        import json
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self._export_rows(), f, ensure_ascii=False, indent=2, default=str)

    def bench(self, rounds: int = 10) -> Dict[str, float]:
        """Time naive per-key search against both engine modes.

        Also records comparator calls of one run of each, which is the
        machine-independent cost measure.
        """
        if rounds < 1:
            raise ValueError("rounds must be >= 1")
        data, keys = self.data, self.state.keys
        runners = {
            "naive": lambda c: naive_multi_search(data, keys, c),
            "fast": lambda c: search(data, keys, "fast", c),
            "exhaustive": lambda c: search(data, keys, "exhaustive", c),
        }
        res: Dict[str, float] = {}
        for name, run in runners.items():
            counter = CountingComparator(self.cmp)
            run(counter)
            res[f"{name}_cmps"] = float(counter.calls)
            t0 = time.perf_counter()
            for _ in range(rounds):
                run(self.cmp)
            res[f"{name}_ms"] = (time.perf_counter() - t0) * 1000 / rounds
        self.last_bench = res
        return res
