"""Redis-style sorted set.

A dictionary maps each member to its score while an
:class:`~pyzset.skiplist.OrderedRankList` keeps the ``(score, member)``
pairs ordered. Ranks exposed here are 0-based like ``ZRANK``; index
arguments accept negative values counted from the end and stop indices are
inclusive.
"""
from __future__ import annotations

import math
import random
from collections.abc import Iterable, Iterator, Mapping
from typing import Any, Generic, Optional, TypeVar, Union

from .ranges import Bound, ScoreRange
from .skiplist import Entry, OrderedRankList

__all__ = ["SortedSet"]

M = TypeVar("M")

Items = Union[Mapping[M, float], Iterable[tuple[M, float]]]


class SortedSet(Generic[M]):
    """Set of unique members ordered by score, then by member."""

    def __init__(self, items: Optional[Items[M]] = None, *, rng: Optional[random.Random] = None):
        self._scores: dict[M, float] = {}
        self._list: OrderedRankList[Any] = OrderedRankList(rng=rng)
        if items is not None:
            self.update(items)

    # ------------------------------------------------------------------
    # Mutation API ✏️
    # ------------------------------------------------------------------
    def add(self, member: M, score: float, *, nx: bool = False, xx: bool = False) -> bool:
        """Set the score of ``member``; return True if the member is new.

        ``nx`` only adds new members, ``xx`` only updates existing ones.
        """
        if nx and xx:
            raise ValueError("nx and xx options are mutually exclusive")
        score = float(score)
        if math.isnan(score):
            raise ValueError("score cannot be NaN")
        old = self._scores.get(member)
        if old is None:
            if xx:
                return False
            self._list.insert(score, member)
            self._scores[member] = score
            return True
        if not nx and old != score:
            self._list.update_score(old, member, score)
            self._scores[member] = score
        return False

    def update(self, items: Items[M]) -> None:
        pairs = items.items() if isinstance(items, Mapping) else items
        for member, score in pairs:
            self.add(member, score)

    def incr(self, member: M, delta: float = 1.0) -> float:
        """Add ``delta`` to the score of ``member`` (0 when absent); return the new score."""
        score = self._scores.get(member, 0.0) + delta
        if math.isnan(score):
            raise ValueError("resulting score is not a number (NaN)")
        self.add(member, score)
        return score

    def discard(self, member: M) -> bool:
        score = self._scores.pop(member, None)
        if score is None:
            return False
        self._list.delete(score, member)
        return True

    def remove(self, member: M) -> None:
        if not self.discard(member):
            raise KeyError(member)

    def pop_min(self, count: int = 1) -> list[tuple[M, float]]:
        return self._pop(count, reverse=False)

    def pop_max(self, count: int = 1) -> list[tuple[M, float]]:
        return self._pop(count, reverse=True)

    def remove_range_by_rank(self, start: int, stop: int) -> int:
        bounds = self._rank_window(start, stop)
        if bounds is None:
            return 0
        return self._forget(self._list.delete_range_by_rank(bounds[0] + 1, bounds[1] + 1))

    def remove_range_by_score(self, min: Bound, max: Bound) -> int:
        return self._forget(self._list.delete_range_by_score(ScoreRange.parse(min, max)))

    def clear(self) -> None:
        self._scores.clear()
        self._list.clear()

    def __setitem__(self, member: M, score: float) -> None:
        self.add(member, score)

    # ------------------------------------------------------------------
    # Query API 🔍
    # ------------------------------------------------------------------
    def score(self, member: M) -> Optional[float]:
        return self._scores.get(member)

    def rank(self, member: M, reverse: bool = False) -> Optional[int]:
        """0-based position of ``member``; ``reverse`` counts from the highest score."""
        score = self._scores.get(member)
        if score is None:
            return None
        rank = self._list.get_rank(score, member)
        return len(self) - rank if reverse else rank - 1

    def range(
        self, start: int, stop: int, *, reverse: bool = False, withscores: bool = False
    ) -> list[Any]:
        """Members between index ``start`` and ``stop`` inclusive."""
        bounds = self._rank_window(start, stop)
        if bounds is None:
            return []
        start, stop = bounds
        if reverse:
            n = len(self)
            entries = self._list.range_by_rank(n - stop, n - start, reverse=True)
        else:
            entries = self._list.range_by_rank(start + 1, stop + 1)
        return self._render(entries, withscores)

    def range_by_score(
        self,
        min: Bound,
        max: Bound,
        *,
        reverse: bool = False,
        offset: int = 0,
        count: Optional[int] = None,
        withscores: bool = False,
    ) -> list[Any]:
        """Members with scores between ``min`` and ``max``.

        Bounds may use the ``"(1.5"`` / ``"-inf"`` string syntax. ``offset``
        and ``count`` page through the matches; ``count=None`` or a negative
        count returns all, a negative ``offset`` returns nothing.
        """
        rng = ScoreRange.parse(min, max)
        entries = self._list.range_by_score(rng, offset=offset, limit=count, reverse=reverse)
        return self._render(entries, withscores)

    def count(self, min: Bound, max: Bound) -> int:
        return self._list.count_in_range(ScoreRange.parse(min, max))

    def items(self) -> list[tuple[M, float]]:
        return [(e.member, e.score) for e in self._list]

    def __getitem__(self, member: M) -> float:
        return self._scores[member]

    def __contains__(self, member: object) -> bool:
        return member in self._scores

    def __len__(self) -> int:
        return len(self._scores)

    def __iter__(self) -> Iterator[M]:
        for entry in self._list:
            yield entry.member

    def __repr__(self) -> str:
        return f"SortedSet({self.items()!r})"

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _rank_window(self, start: int, stop: int) -> Optional[tuple[int, int]]:
        """Normalise Redis-style inclusive indexes to ``0 <= start <= stop < len``."""
        n = len(self)
        if start < 0:
            start += n
        if stop < 0:
            stop += n
        start = max(start, 0)
        if start > stop or start >= n:
            return None
        return start, min(stop, n - 1)

    def _pop(self, count: int, reverse: bool) -> list[tuple[M, float]]:
        popped: list[tuple[M, float]] = []
        while len(popped) < count:
            entry = self._list.last if reverse else self._list.first
            if entry is None:
                break
            popped.append((entry.member, entry.score))
            self.discard(entry.member)
        return popped

    def _forget(self, removed: list[Entry[Any]]) -> int:
        for entry in removed:
            del self._scores[entry.member]
        return len(removed)

    @staticmethod
    def _render(entries: Iterable[Entry[Any]], withscores: bool) -> list[Any]:
        if withscores:
            return [(e.member, e.score) for e in entries]
        return [e.member for e in entries]
