"""
2D value types for cross-section geometry.

All coordinates are metres in the local section frame: X runs from the
upstream face towards the downstream face, Y points up.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple

import numpy as np

from ..errors import InputError

# Geometric tolerance for closure, foundation contact and intersection tests (m)
GEOMETRIC_TOLERANCE = 1e-3

# Tolerance used when grouping vertices on the base or crest line (m)
LEVEL_TOLERANCE = 1e-6


@dataclass(frozen=True)
class Point2D:
    """Immutable point in the section plane."""
    x: float
    y: float

    def distance_to(self, other: Point2D) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def midpoint(self, other: Point2D) -> Point2D:
        return Point2D((self.x + other.x) / 2, (self.y + other.y) / 2)

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def __str__(self) -> str:
        return f"({self.x:.3f}, {self.y:.3f})"


@dataclass(frozen=True)
class Vector2D:
    """Immutable direction or force vector in the section plane."""
    x: float
    y: float

    @property
    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def normalize(self) -> Vector2D:
        """Unit vector; the zero vector normalizes to itself."""
        length = self.length
        if length == 0:
            return Vector2D(0.0, 0.0)
        return Vector2D(self.x / length, self.y / length)


@dataclass(frozen=True)
class BoundingBox2D:
    """Axis-aligned bounding box."""
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> Point2D:
        return Point2D((self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2)

    def overlaps(self, other: BoundingBox2D) -> bool:
        """True when the boxes share any area or touch."""
        return not (self.max_x < other.min_x or other.max_x < self.min_x or
                    self.max_y < other.min_y or other.max_y < self.min_y)

    @classmethod
    def from_points(cls, points: Iterable[Point2D]) -> BoundingBox2D:
        points = list(points)
        if not points:
            return cls(0.0, 0.0, 0.0, 0.0)
        xs = [p.x for p in points]
        ys = [p.y for p in points]
        return cls(min(xs), min(ys), max(xs), max(ys))


Contour = Sequence[Point2D]


def as_points(raw: Iterable) -> Tuple[Point2D, ...]:
    """
    Coerce (x, y) pairs or Point2D instances into a tuple of Point2D.

    Raises:
        InputError: an item is not a pair of numbers
    """
    points = []
    for i, item in enumerate(raw):
        if isinstance(item, Point2D):
            points.append(item)
            continue
        try:
            x, y = item
            points.append(Point2D(float(x), float(y)))
        except (TypeError, ValueError) as exc:
            raise InputError(f"Point {i} is not an (x, y) pair of numbers: {item!r}") from exc
    return tuple(points)


def to_array(contour: Contour) -> np.ndarray:
    """Return an (n, 2) float array of contour coordinates."""
    return np.array([[p.x, p.y] for p in contour], dtype=float).reshape(-1, 2)
