"""PyZSet: Redis-style sorted sets on top of a ranked skip-list in Python.

The package exposes the high-level :class:`pyzset.SortedSet` (and its
asyncio counterpart) while keeping the ranked skip-list itself,
:class:`pyzset.OrderedRankList`, available for callers that need direct
access to entries, spans and ranks.
"""

from __future__ import annotations

__all__ = [
    "AsyncSortedSet",
    "Entry",
    "LevelLink",
    "OrderedRankList",
    "ScoreRange",
    "SortedSet",
]

from .aio import AsyncSortedSet
from .ranges import ScoreRange
from .skiplist import Entry, LevelLink, OrderedRankList
from .sortedset import SortedSet
