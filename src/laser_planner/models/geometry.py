"""Planar geometry value types."""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Point2D:
    """A 2D coordinate in program units (millimeters by convention)."""

    x: float
    y: float


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned bounding box over segment endpoints.

    An empty box is represented by the sentinel ``min=(+inf, +inf)``,
    ``max=(-inf, -inf)``. Check ``is_empty`` before deriving a scale from
    ``width`` or ``height``.

    Attributes:
        min: Lower-left corner
        max: Upper-right corner
    """

    min: Point2D
    max: Point2D

    @classmethod
    def empty(cls) -> "BoundingBox":
        """Return the sentinel box used for an empty segment sequence."""
        return cls(
            min=Point2D(math.inf, math.inf),
            max=Point2D(-math.inf, -math.inf),
        )

    @property
    def is_empty(self) -> bool:
        """True when the box covers no points."""
        return self.min.x > self.max.x or self.min.y > self.max.y

    @property
    def width(self) -> float:
        return self.max.x - self.min.x

    @property
    def height(self) -> float:
        return self.max.y - self.min.y

    @property
    def center(self) -> Point2D:
        return Point2D((self.min.x + self.max.x) / 2, (self.min.y + self.max.y) / 2)
