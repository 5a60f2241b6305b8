"""asyncio facade over :class:`~pyzset.SortedSet`.

The sorted set itself never awaits. Tasks sharing one instance go through an
``asyncio.Lock`` so compound operations (read-modify-write such as ``incr``
or the pops) are never interleaved.
"""
from __future__ import annotations

import asyncio
import random
from typing import Any, Generic, Optional, TypeVar

from .ranges import Bound
from .sortedset import Items, SortedSet

__all__ = ["AsyncSortedSet"]

M = TypeVar("M")


class AsyncSortedSet(Generic[M]):
    """Lock-serialised sorted set shared between tasks."""

    def __init__(self, items: Optional[Items[M]] = None, *, rng: Optional[random.Random] = None):
        self._zset: SortedSet[M] = SortedSet(items, rng=rng)
        self._lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    async def add(self, member: M, score: float, *, nx: bool = False, xx: bool = False) -> bool:
        async with self._lock:
            return self._zset.add(member, score, nx=nx, xx=xx)

    async def discard(self, member: M) -> bool:
        async with self._lock:
            return self._zset.discard(member)

    async def incr(self, member: M, delta: float = 1.0) -> float:
        async with self._lock:
            return self._zset.incr(member, delta)

    async def score(self, member: M) -> Optional[float]:
        async with self._lock:
            return self._zset.score(member)

    async def rank(self, member: M, reverse: bool = False) -> Optional[int]:
        async with self._lock:
            return self._zset.rank(member, reverse)

    async def range(
        self, start: int, stop: int, *, reverse: bool = False, withscores: bool = False
    ) -> list[Any]:
        async with self._lock:
            return self._zset.range(start, stop, reverse=reverse, withscores=withscores)

    async def range_by_score(
        self,
        min: Bound,
        max: Bound,
        *,
        reverse: bool = False,
        offset: int = 0,
        count: Optional[int] = None,
        withscores: bool = False,
    ) -> list[Any]:
        async with self._lock:
            return self._zset.range_by_score(
                min, max, reverse=reverse, offset=offset, count=count, withscores=withscores
            )

    async def count(self, min: Bound, max: Bound) -> int:
        async with self._lock:
            return self._zset.count(min, max)

    async def pop_min(self, count: int = 1) -> list[tuple[M, float]]:
        async with self._lock:
            return self._zset.pop_min(count)

    async def pop_max(self, count: int = 1) -> list[tuple[M, float]]:
        async with self._lock:
            return self._zset.pop_max(count)

    async def clear(self) -> None:
        async with self._lock:
            self._zset.clear()

    def __len__(self) -> int:
        return len(self._zset)
