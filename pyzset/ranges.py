"""Score intervals with inclusive or exclusive bounds.

Bounds follow the Redis range syntax when given as strings::

    "1.5"    inclusive
    "(1.5"   exclusive
    "-inf" / "+inf" / "inf"
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union

__all__ = ["ScoreRange", "Bound"]

Bound = Union[float, int, str]


def _parse_bound(bound: Bound) -> tuple[float, bool]:
    """Return ``(value, exclusive)`` for a single bound."""
    exclusive = False
    if isinstance(bound, str):
        text = bound.strip()
        if text.startswith("("):
            exclusive = True
            text = text[1:]
        try:
            value = float(text)
        except ValueError:
            raise ValueError("min or max is not a float") from None
    else:
        value = float(bound)
    if math.isnan(value):
        raise ValueError("min or max is not a float")
    return value, exclusive


@dataclass(frozen=True)
class ScoreRange:
    """Closed, open or half-open interval of scores."""

    min: float
    max: float
    min_exclusive: bool = False
    max_exclusive: bool = False

    @classmethod
    def parse(cls, min: Bound, max: Bound) -> "ScoreRange":
        lo, lo_ex = _parse_bound(min)
        hi, hi_ex = _parse_bound(max)
        return cls(lo, hi, lo_ex, hi_ex)

    @property
    def is_empty(self) -> bool:
        if self.min > self.max:
            return True
        return self.min == self.max and (self.min_exclusive or self.max_exclusive)

    def gte_min(self, value: float) -> bool:
        return value > self.min if self.min_exclusive else value >= self.min

    def lte_max(self, value: float) -> bool:
        return value < self.max if self.max_exclusive else value <= self.max

    def __contains__(self, value: float) -> bool:
        return self.gte_min(value) and self.lte_max(value)

    def __str__(self) -> str:
        lo = "(" if self.min_exclusive else "["
        hi = ")" if self.max_exclusive else "]"
        return f"{lo}{self.min}, {self.max}{hi}"
