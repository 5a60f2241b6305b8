"""Ranked skip-list keyed by ``(score, member)`` pairs.

This is the structure behind every :class:`pyzset.SortedSet`. Besides the
usual forward pointers each level link carries a *span*: the number of
entries the pointer jumps over (target included). Summing spans along a
search path yields the 1-based rank of an entry without a linear scan.

Complexities (average case):
    • search / insert / delete   – O(log n)
    • rank  <-> entry            – O(log n)
    • range by score or rank     – O(log n + m)

Level-0 entries additionally keep a *backward* pointer so the list can be
walked from the tail.

The probabilistic height algorithm uses a 25 % branching factor.
"""
from __future__ import annotations

import logging
import math
import random
from collections.abc import Iterator
from typing import Any, Generic, Optional, Protocol, TypeVar

from .ranges import ScoreRange

__all__ = ["Entry", "LevelLink", "OrderedRankList", "MAX_LEVEL", "P"]

logger = logging.getLogger(__name__)

MAX_LEVEL = 32  # Enough for 4^32 elements.
P = 0.25


class Comparable(Protocol):
    def __lt__(self, other: Any) -> bool: ...
    def __le__(self, other: Any) -> bool: ...
    def __eq__(self, other: object) -> bool: ...


M = TypeVar("M", bound=Comparable)


def random_level(rng: random.Random) -> int:
    """Draw a level in ``[1, MAX_LEVEL]`` from a capped geometric distribution."""
    lvl = 1
    while rng.random() < P and lvl < MAX_LEVEL:
        lvl += 1
    return lvl


class LevelLink(Generic[M]):
    __slots__ = ("forward", "span")

    def __init__(self) -> None:
        self.forward: Optional[Entry[M]] = None
        self.span = 0

    def __repr__(self) -> str:  # pragma: no cover
        return f"LevelLink<span={self.span} -> {self.forward!r}>"


class Entry(Generic[M]):
    """A scored member stored in the list.

    Entries are owned by their :class:`OrderedRankList`; callers may read
    them and follow ``forward``/``backward`` but must not modify links.
    """

    __slots__ = ("member", "score", "backward", "levels")

    def __init__(self, score: float, member: Optional[M], level: int):
        self.member = member
        self.score = score
        self.backward: Optional[Entry[M]] = None
        self.levels: list[LevelLink[M]] = [LevelLink() for _ in range(level)]

    @property
    def level(self) -> int:
        return len(self.levels)

    @property
    def forward(self) -> Optional[Entry[M]]:
        """Level-0 successor."""
        return self.levels[0].forward

    def __repr__(self) -> str:  # pragma: no cover
        return f"Entry<{self.score!r}:{self.member!r}>"


class OrderedRankList(Generic[M]):
    """Skip-list of ``(score, member)`` entries ordered by score, then member.

    Parameters
    ----------
    rng: random.Random | None
        Source of randomness for level assignment. Pass a seeded instance to
        make the shape of the list reproducible.
    """

    def __init__(self, *, rng: Optional[random.Random] = None):
        self._rng = rng if rng is not None else random.Random()
        self._reset()

    def _reset(self) -> None:
        self._header: Entry[M] = Entry(-math.inf, None, MAX_LEVEL)
        self._tail: Optional[Entry[M]] = None
        self._level = 1
        self._size = 0

    # ------------------------------------------------------------------
    # Mutation API ✏️
    # ------------------------------------------------------------------
    def insert(self, score: float, member: M) -> Entry[M]:
        """Insert ``member`` with ``score`` and return its entry.

        Inserting a pair that is already present does not create a second
        entry: the existing one is returned unchanged.
        """
        if math.isnan(score):
            raise ValueError("score cannot be NaN")
        update: list[Entry[M]] = [self._header] * MAX_LEVEL
        rank = [0] * MAX_LEVEL
        x = self._header
        for i in reversed(range(self._level)):
            rank[i] = 0 if i == self._level - 1 else rank[i + 1]
            while (nxt := x.levels[i].forward) and (
                nxt.score < score or (nxt.score == score and nxt.member < member)
            ):
                rank[i] += x.levels[i].span
                x = nxt
            update[i] = x

        existing = x.levels[0].forward
        if existing is not None and existing.score == score and existing.member == member:
            logger.debug("Ignoring duplicate insert of %r with score %r", member, score)
            return existing

        lvl = random_level(self._rng)
        if lvl > self._level:
            for i in range(self._level, lvl):
                rank[i] = 0
                update[i] = self._header
                update[i].levels[i].span = self._size
            logger.debug("Raising list level %d -> %d", self._level, lvl)
            self._level = lvl

        x = Entry(score, member, lvl)
        for i in range(lvl):
            prev = update[i].levels[i]
            link = x.levels[i]
            link.forward = prev.forward
            prev.forward = x
            link.span = prev.span - (rank[0] - rank[i])
            prev.span = (rank[0] - rank[i]) + 1

        # Levels above the new entry now jump over one more element.
        for i in range(lvl, self._level):
            update[i].levels[i].span += 1

        x.backward = None if update[0] is self._header else update[0]
        if (nxt := x.levels[0].forward) is not None:
            nxt.backward = x
        else:
            self._tail = x
        self._size += 1
        return x

    def delete(self, score: float, member: M) -> bool:
        """Remove the entry matching ``(score, member)``; return whether it existed."""
        update = self._predecessors(score, member)
        x = update[0].levels[0].forward
        if x is None or x.score != score or x.member != member:
            return False
        self._unlink(x, update)
        return True

    def update_score(self, score: float, member: M, new_score: float) -> Optional[Entry[M]]:
        """Move the entry ``(score, member)`` to ``new_score``.

        The entry is updated in place when its position does not change,
        otherwise it is removed and inserted again. Returns the resulting
        entry, or ``None`` when no such entry exists or when
        ``(new_score, member)`` is already present; the list is then left
        unchanged.
        """
        if math.isnan(new_score):
            raise ValueError("score cannot be NaN")
        update = self._predecessors(score, member)
        x = update[0].levels[0].forward
        if x is None or x.score != score or x.member != member:
            return None
        if new_score == score:
            return x
        if self.search(new_score, member) is not None:
            logger.debug("Refusing to move %r onto existing score %r", member, new_score)
            return None
        nxt = x.levels[0].forward
        if (x.backward is None or x.backward.score < new_score) and (
            nxt is None or nxt.score > new_score
        ):
            x.score = new_score
            return x
        self._unlink(x, update)
        return self.insert(new_score, member)

    def delete_range_by_score(self, rng: ScoreRange) -> list[Entry[M]]:
        """Remove every entry whose score lies in ``rng``; return them ascending."""
        update: list[Entry[M]] = [self._header] * MAX_LEVEL
        x = self._header
        for i in reversed(range(self._level)):
            while (nxt := x.levels[i].forward) and not rng.gte_min(nxt.score):
                x = nxt
            update[i] = x
        removed: list[Entry[M]] = []
        x = x.levels[0].forward
        while x is not None and rng.lte_max(x.score):
            nxt = x.levels[0].forward
            self._unlink(x, update)
            removed.append(x)
            x = nxt
        if removed:
            logger.debug("Removed %d entries in score range %s", len(removed), rng)
        return removed

    def delete_range_by_rank(self, start: int, end: int) -> list[Entry[M]]:
        """Remove entries with 1-based ranks in ``[start, end]``; return them ascending."""
        start = max(start, 1)
        update: list[Entry[M]] = [self._header] * MAX_LEVEL
        traversed = 0
        x = self._header
        for i in reversed(range(self._level)):
            while (nxt := x.levels[i].forward) and traversed + x.levels[i].span < start:
                traversed += x.levels[i].span
                x = nxt
            update[i] = x
        removed: list[Entry[M]] = []
        traversed += 1
        x = x.levels[0].forward
        while x is not None and traversed <= end:
            nxt = x.levels[0].forward
            self._unlink(x, update)
            removed.append(x)
            traversed += 1
            x = nxt
        if removed:
            logger.debug("Removed %d entries in rank range [%d, %d]", len(removed), start, end)
        return removed

    def clear(self) -> None:
        logger.debug("Clearing list of %d entries", self._size)
        self._reset()

    # ------------------------------------------------------------------
    # Query API 🔍
    # ------------------------------------------------------------------
    def search(self, score: float, member: M) -> Optional[Entry[M]]:
        x = self._predecessors(score, member)[0].levels[0].forward
        if x is not None and x.score == score and x.member == member:
            return x
        return None

    def get_by_rank(self, rank: int) -> Optional[Entry[M]]:
        """Return the entry at 1-based ``rank`` or ``None`` when out of range."""
        if rank < 1 or rank > self._size:
            return None
        traversed = 0
        x = self._header
        for i in reversed(range(self._level)):
            while (nxt := x.levels[i].forward) and traversed + x.levels[i].span <= rank:
                traversed += x.levels[i].span
                x = nxt
            if traversed == rank:
                return x
        return None

    def get_rank(self, score: float, member: M) -> int:
        """Return the 1-based rank of ``(score, member)``, or 0 if absent."""
        rank = 0
        x = self._header
        for i in reversed(range(self._level)):
            while (nxt := x.levels[i].forward) and (
                nxt.score < score or (nxt.score == score and nxt.member <= member)
            ):
                rank += x.levels[i].span
                x = nxt
            if x is not self._header and x.score == score and x.member == member:
                return rank
        return 0

    def first_in_range(self, rng: ScoreRange) -> Optional[Entry[M]]:
        """Lowest entry whose score lies in ``rng``."""
        if not self._in_range(rng):
            return None
        x = self._header
        for i in reversed(range(self._level)):
            while (nxt := x.levels[i].forward) and not rng.gte_min(nxt.score):
                x = nxt
        x = x.levels[0].forward
        if x is None or not rng.lte_max(x.score):
            return None
        return x

    def last_in_range(self, rng: ScoreRange) -> Optional[Entry[M]]:
        """Highest entry whose score lies in ``rng``."""
        if not self._in_range(rng):
            return None
        x = self._header
        for i in reversed(range(self._level)):
            while (nxt := x.levels[i].forward) and rng.lte_max(nxt.score):
                x = nxt
        if x is self._header or not rng.gte_min(x.score):
            return None
        return x

    def count_in_range(self, rng: ScoreRange) -> int:
        first = self.first_in_range(rng)
        if first is None:
            return 0
        last = self.last_in_range(rng)
        assert last is not None
        return self.get_rank(last.score, last.member) - self.get_rank(first.score, first.member) + 1

    def range_by_score(
        self,
        rng: ScoreRange,
        offset: int = 0,
        limit: Optional[int] = None,
        reverse: bool = False,
    ) -> Iterator[Entry[M]]:
        """Yield entries with scores in ``rng`` after skipping ``offset`` of them.

        As with ``ZRANGEBYSCORE ... LIMIT``, a negative ``offset`` yields
        nothing and a negative ``limit`` means no limit.
        """
        if offset < 0:
            return
        if limit is not None and limit < 0:
            limit = None
        if reverse:
            x = self.last_in_range(rng)
        else:
            x = self.first_in_range(rng)
        while x is not None and offset > 0:
            x = x.backward if reverse else x.levels[0].forward
            offset -= 1
        yielded = 0
        while x is not None and (limit is None or yielded < limit):
            if reverse:
                if not rng.gte_min(x.score):
                    break
            elif not rng.lte_max(x.score):
                break
            yield x
            yielded += 1
            x = x.backward if reverse else x.levels[0].forward

    def range_by_rank(self, start: int, end: int, reverse: bool = False) -> Iterator[Entry[M]]:
        """Yield entries with 1-based ranks in ``[start, end]``.

        ``end`` is clamped to the list length. With ``reverse`` the same
        window is produced from ``end`` down to ``start``.
        """
        end = min(end, self._size)
        if start < 1 or start > end:
            return
        x = self.get_by_rank(end if reverse else start)
        for _ in range(end - start + 1):
            assert x is not None
            yield x
            x = x.backward if reverse else x.levels[0].forward

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    def is_empty(self) -> bool:
        return self._size == 0

    @property
    def level(self) -> int:
        """Current number of active levels."""
        return self._level

    @property
    def head(self) -> Entry[M]:
        """Sentinel entry anchoring every level; it carries no member."""
        return self._header

    @property
    def tail(self) -> Optional[Entry[M]]:
        return self._tail

    @property
    def first(self) -> Optional[Entry[M]]:
        return self._header.levels[0].forward

    @property
    def last(self) -> Optional[Entry[M]]:
        return self._tail

    def __len__(self) -> int:
        return self._size

    # ------------------------------------------------------------------
    # Iteration helpers (ordered)
    # ------------------------------------------------------------------
    def __iter__(self) -> Iterator[Entry[M]]:
        x = self._header.levels[0].forward
        while x is not None:
            yield x
            x = x.levels[0].forward

    def __reversed__(self) -> Iterator[Entry[M]]:
        x = self._tail
        while x is not None:
            yield x
            x = x.backward

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _predecessors(self, score: float, member: M) -> list[Entry[M]]:
        """Per-level last entry strictly before ``(score, member)``."""
        update: list[Entry[M]] = [self._header] * MAX_LEVEL
        x = self._header
        for i in reversed(range(self._level)):
            while (nxt := x.levels[i].forward) and (
                nxt.score < score or (nxt.score == score and nxt.member < member)
            ):
                x = nxt
            update[i] = x
        return update

    def _unlink(self, x: Entry[M], update: list[Entry[M]]) -> None:
        for i in range(self._level):
            prev = update[i].levels[i]
            if prev.forward is x:
                prev.span += x.levels[i].span - 1
                prev.forward = x.levels[i].forward
            else:
                prev.span -= 1
        if (nxt := x.levels[0].forward) is not None:
            nxt.backward = x.backward
        else:
            self._tail = x.backward
        level = self._level
        while self._level > 1 and self._header.levels[self._level - 1].forward is None:
            self._level -= 1
        if self._level != level:
            logger.debug("Lowering list level %d -> %d", level, self._level)
        self._size -= 1

    def _in_range(self, rng: ScoreRange) -> bool:
        """Whether any entry can fall in ``rng``."""
        if rng.is_empty:
            return False
        if self._tail is None or not rng.gte_min(self._tail.score):
            return False
        first = self._header.levels[0].forward
        return first is not None and rng.lte_max(first.score)
