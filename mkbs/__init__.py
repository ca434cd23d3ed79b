"""
MKBS package
============

Multi-key binary search: look up a sorted batch of keys in a sorted
sequence by sharing search boundaries between the keys.

- The search engine (fast / exhaustive modes) is in `mkbs/engine.py`.
- The single-key binary search and helpers are in `mkbs/dsa.py`.
- The CLI entry point is in `mkbs/cli.py`.
"""

from .models import Found, NotFound, SearchOutcome, InvalidKeyOrder
from .dsa import binary_search, check_keys_ascending, default_cmp, naive_multi_search
from .engine import multi_search, multi_search_exhaustive, search

__version__ = '0.1.0'
