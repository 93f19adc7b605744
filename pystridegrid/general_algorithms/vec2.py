"""
Two-component integer vector used for grid positions and sizes.

Positions are signed so callers can probe negative coordinates without casting.
Sizes are the same type with non-negative components; `sat_sub` gives the
saturating subtraction that keeps them non-negative.

Vec2 is a tuple, so it compares equal to plain tuples and unpacks naturally:

    pos = Vec2(3, 4)
    x, y = pos
    assert pos == (3, 4)
    assert pos + (1, 1) == (4, 5)

Note that arithmetic dispatches on the left operand: `(1, 1) + pos` is tuple
concatenation. Keep the Vec2 on the left.
"""

import numbers
import operator
from typing import NamedTuple


class Vec2(NamedTuple):
    x: int
    y: int

    @classmethod
    def of(cls, value) -> "Vec2":
        """
        Coerce a Vec2, a 2-sequence or a scalar (splatted) into a Vec2.

        Raises:
            TypeError: If value has not exactly two components or a component
                is not an integer
        """
        if isinstance(value, Vec2):
            return value
        if isinstance(value, numbers.Integral):
            v = operator.index(value)
            return cls(v, v)
        try:
            x, y = value
        except (TypeError, ValueError):
            raise TypeError(f"Cannot interpret {value!r} as a 2D vector") from None
        return cls(operator.index(x), operator.index(y))

    def __add__(self, other):
        o = Vec2.of(other)
        return Vec2(self.x + o.x, self.y + o.y)

    def __sub__(self, other):
        o = Vec2.of(other)
        return Vec2(self.x - o.x, self.y - o.y)

    def min(self, other) -> "Vec2":
        o = Vec2.of(other)
        return Vec2(min(self.x, o.x), min(self.y, o.y))

    def max(self, other) -> "Vec2":
        o = Vec2.of(other)
        return Vec2(max(self.x, o.x), max(self.y, o.y))

    def clamp(self, lo, hi) -> "Vec2":
        """Componentwise clamp into [lo, hi]."""
        return self.max(lo).min(hi)

    def sat_sub(self, other) -> "Vec2":
        """Componentwise subtraction saturating at zero."""
        o = Vec2.of(other)
        return Vec2(max(0, self.x - o.x), max(0, self.y - o.y))

    def __repr__(self):
        return f"Vec2({self.x}, {self.y})"
