"""
Data model (search outcomes)
============================

Every key in a batch query resolves to exactly one `SearchOutcome`:

- `Found(index)`    -> `data[index]` equals the key
- `NotFound(hint)`  -> the key is absent; `hint` is the insertion index that
                       keeps `data` sorted, or `None` when it was not computed

Outcomes are immutable (`frozen=True`) so a result list can be shared,
exported and compared without copying.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union


@dataclass(frozen=True)
class Found:
    """The key occurs at `data[index]`."""
    index: int

    @property
    def found(self) -> bool:
        return True

    @property
    def position(self) -> int:
        return self.index

    def to_dict(self) -> Dict[str, Any]:
        return {"found": True, "position": self.index}


@dataclass(frozen=True)
class NotFound:
    """The key is absent.

    `hint` is the insertion point, or None in fast mode when the engine
    skipped computing it.
    """
    hint: Optional[int] = None

    @property
    def found(self) -> bool:
        return False

    @property
    def position(self) -> Optional[int]:
        return self.hint

    def to_dict(self) -> Dict[str, Any]:
        return {"found": False, "position": self.hint}


SearchOutcome = Union[Found, NotFound]


class InvalidKeyOrder(ValueError):
    """Raised when the query keys are not in non-decreasing order."""

    def __init__(self, position: int) -> None:
        self.position = position
        super().__init__(
            f"keys must be non-decreasing: key #{position} is smaller than key #{position - 1}"
        )
