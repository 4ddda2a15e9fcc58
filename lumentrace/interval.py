"""
Numeric ranges used to bound valid ray parameters.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
import math


@dataclass(frozen=True)
class Interval:
    """A closed range [min, max] with strict and inclusive membership tests."""
    min: float = math.inf
    max: float = -math.inf

    def size(self) -> float:
        return self.max - self.min

    def surrounds(self, x: float) -> bool:
        """True iff min < x < max. Boundary values are excluded."""
        return self.min < x < self.max

    def contains(self, x: float) -> bool:
        """True iff min <= x <= max."""
        return self.min <= x <= self.max

    def surround_where(self, x: float) -> Optional[float]:
        """Return x if the interval surrounds it, otherwise None."""
        return x if self.surrounds(x) else None

    def contains_where(self, x: float) -> Optional[float]:
        """Return x if the interval contains it, otherwise None."""
        return x if self.contains(x) else None

    def clamp(self, x: float) -> float:
        """Saturate x into [min, max]."""
        if x < self.min:
            return self.min
        if x > self.max:
            return self.max
        return x

    def with_max(self, new_max: float) -> Interval:
        """Copy of this interval with a new upper bound."""
        return Interval(self.min, new_max)


EMPTY = Interval(math.inf, -math.inf)
UNIVERSE = Interval(-math.inf, math.inf)
