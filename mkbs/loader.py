"""
Column loader (file -> list of values)
======================================

Reads one column of values (the sorted data, or the query keys) from:

- `.csv`            -> header row expected; column chosen by name or first column
- `.xlsx`           -> first sheet, read with openpyxl (legacy `.xls` is rejected)
- anything else     -> plain text, one value per line, no header; the whole
                       line is the value (commas included)

Key ideas:
- Column names are matched loosely (case / punctuation insensitive).
- Blank cells are dropped.
- A text file becomes numbers only if every line is a number and none has
  a leading zero (`00123` stays text, like an identifier).
- numpy scalars are converted back to plain Python values so they compare
  cleanly with keys typed in the CLI.
"""

from __future__ import annotations
from typing import Any, List, Optional
from functools import cmp_to_key
import math
import os
import re
import pandas as pd

from .dsa import Comparator, default_cmp

_LEADING_ZERO = re.compile(r"[+-]?0\d")


def _norm(s: str) -> str:
    return re.sub(r"[^a-z0-9]+", "", str(s).lower())


def _col(df: pd.DataFrame, name: Optional[str]) -> Any:
    """Resolve a column label; `None` means the first column."""
    cols = list(df.columns)
    if not cols:
        raise KeyError("File has no columns")
    if name is None:
        return cols[0]
    if name in cols:
        return name
    norm_map = {_norm(c): c for c in cols}
    if _norm(name) in norm_map:
        return norm_map[_norm(name)]
    raise KeyError(f"Missing column {name!r}. Available={cols}")


def _read_frame(path: str) -> pd.DataFrame:
    ext = os.path.splitext(path)[1].lower()
    if ext == ".xls":
        raise ValueError(f"Legacy .xls is not supported, save {path!r} as .xlsx")
    if ext == ".xlsx":
        return pd.read_excel(path, engine="openpyxl")
    if ext == ".csv":
        df = pd.read_csv(path)
        df.rename(columns={c: str(c).strip() for c in df.columns}, inplace=True)
        return df
    return _read_lines(path)


def _read_lines(path: str) -> pd.DataFrame:
    """One value per non-blank line, kept whole (no delimiter splitting)."""
    with open(path, encoding="utf-8") as f:
        lines = [line.strip() for line in f]
    lines = [ln for ln in lines if ln]
    values: List[Any] = lines
    if not any(_LEADING_ZERO.match(ln) for ln in lines):
        parsed = [parse_value(ln) for ln in lines]
        if all(not isinstance(v, str) for v in parsed):
            values = parsed
    return pd.DataFrame({"value": pd.Series(values, dtype=object)})


def load_column(path: str, column: Optional[str] = None) -> List[Any]:
    """Load the values of one column, in file order, skipping blanks."""
    df = _read_frame(path)
    series = df[_col(df, column)].dropna()
    if series.dtype == object:
        series = series.map(lambda v: v.strip() if isinstance(v, str) else v)
    return series.tolist()


def load_sorted(
    path: str,
    column: Optional[str] = None,
    *,
    cmp: Comparator = default_cmp,
    sort: bool = False,
) -> List[Any]:
    """Load a column that will be searched.

    With `sort=True` the values are sorted under `cmp` first; otherwise the
    file must already be in ascending order (the engine does not check).
    """
    values = load_column(path, column)
    if sort:
        values.sort(key=cmp_to_key(cmp))
    return values


def parse_value(token: str) -> Any:
    """Turn a CLI token into int, float or str (in that order of preference).

    `nan` / `inf` stay text: they do not order against numbers.
    """
    try:
        return int(token)
    except ValueError:
        pass
    try:
        v = float(token)
    except ValueError:
        return token
    return v if math.isfinite(v) else token
