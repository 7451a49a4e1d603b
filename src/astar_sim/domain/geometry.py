from __future__ import annotations

import math
from dataclasses import dataclass


# Core vector type used by the physics and the heuristic
@dataclass(frozen=True)
class Vec2:
    x: float = 0.0  # screen units
    y: float = 0.0

    def __add__(self, other: Vec2) -> Vec2:
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vec2) -> Vec2:
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, k: float) -> Vec2:
        return Vec2(self.x * k, self.y * k)

    __rmul__ = __mul__

    def __neg__(self) -> Vec2:
        return Vec2(-self.x, -self.y)

    def dot(self, other: Vec2) -> float:
        return self.x * other.x + self.y * other.y

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def dist(self, other: Vec2) -> float:
        return math.hypot(other.x - self.x, other.y - self.y)

    def normal_to(self, other: Vec2) -> Vec2:
        """Unit vector pointing from self towards other.

        Coincident points give NaN components; callers skip zero distances.
        """
        d = self.dist(other)
        if d == 0:
            return Vec2(math.nan, math.nan)
        return Vec2((other.x - self.x) / d, (other.y - self.y) / d)

    def with_x(self, x: float) -> Vec2:
        return Vec2(x, self.y)

    def with_y(self, y: float) -> Vec2:
        return Vec2(self.x, y)

    def sanitized(self) -> tuple[Vec2, int]:
        """Replace NaN components with 0; also return how many were replaced."""
        bad = int(math.isnan(self.x)) + int(math.isnan(self.y))
        if not bad:
            return self, 0
        return Vec2(0.0 if math.isnan(self.x) else self.x, 0.0 if math.isnan(self.y) else self.y), bad

    def as_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)


ZERO = Vec2(0.0, 0.0)
