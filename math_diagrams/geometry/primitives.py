"""
Basic 2D value types shared by the kernel.

Points are plain ``(x, y)`` pairs everywhere; ``Point`` is a NamedTuple so
kernel results unpack like tuples while reading as ``p.x`` / ``p.y``.
"""

import math
from dataclasses import dataclass
from typing import Iterable, NamedTuple, Optional, Sequence, Tuple

PointLike = Tuple[float, float]


class Point(NamedTuple):
    x: float
    y: float

    def offset(self, dx: float, dy: float) -> 'Point':
        return Point(self.x + dx, self.y + dy)

    def distance_to(self, other: PointLike) -> float:
        return math.hypot(other[0] - self.x, other[1] - self.y)


def lerp(a: PointLike, b: PointLike, t: float) -> Point:
    """Linear interpolation ``a + t * (b - a)``.

    Evaluated as ``(1 - t) * a + t * b`` so that t=0 and t=1 return the
    endpoints exactly.
    """
    return Point((1 - t) * a[0] + t * b[0], (1 - t) * a[1] + t * b[1])


def unit(dx: float, dy: float) -> Optional[Point]:
    """Unit vector along (dx, dy), or None for a zero-length vector."""
    length = math.hypot(dx, dy)
    if length == 0:
        return None
    return Point(dx / length, dy / length)


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in screen space (y grows downward)."""
    x: float
    y: float
    width: float
    height: float

    @classmethod
    def centered(cls, cx: float, cy: float, width: float, height: float) -> 'Rect':
        return cls(cx - width / 2, cy - height / 2, width, height)

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2)

    def padded(self, pad: float) -> 'Rect':
        if not pad:
            return self
        return Rect(self.x - pad, self.y - pad, self.width + 2 * pad, self.height + 2 * pad)

    def contains(self, point: PointLike) -> bool:
        return self.x <= point[0] <= self.right and self.y <= point[1] <= self.bottom

    def corners(self) -> Tuple[Point, Point, Point, Point]:
        return (Point(self.x, self.y), Point(self.right, self.y),
                Point(self.right, self.bottom), Point(self.x, self.bottom))

    def overlaps(self, other: 'Rect', margin: float = 0.0) -> bool:
        """True if the rectangles overlap, with optional margin."""
        return not (self.right + margin < other.x or
                    other.right + margin < self.x or
                    self.bottom + margin < other.y or
                    other.bottom + margin < self.y)


@dataclass
class Extent:
    """Running bounding box. Starts empty; only ever grows."""
    min_x: float = math.inf
    min_y: float = math.inf
    max_x: float = -math.inf
    max_y: float = -math.inf

    @classmethod
    def of_points(cls, points: Iterable[PointLike]) -> 'Extent':
        ext = cls()
        for p in points:
            ext.include_point(p[0], p[1])
        return ext

    def is_empty(self) -> bool:
        return self.min_x > self.max_x or self.min_y > self.max_y

    def include_point(self, x: float, y: float, pad: float = 0.0) -> None:
        self.include_box(x - pad, y - pad, x + pad, y + pad)

    def include_box(self, min_x: float, min_y: float, max_x: float, max_y: float) -> None:
        if not all(math.isfinite(v) for v in (min_x, min_y, max_x, max_y)):
            return
        self.min_x = min(self.min_x, min_x)
        self.min_y = min(self.min_y, min_y)
        self.max_x = max(self.max_x, max_x)
        self.max_y = max(self.max_y, max_y)

    def include_extent(self, other: 'Extent') -> None:
        if not other.is_empty():
            self.include_box(other.min_x, other.min_y, other.max_x, other.max_y)

    def as_box(self) -> Tuple[float, float, float, float]:
        return self.min_x, self.min_y, self.max_x, self.max_y

    def as_rect(self) -> Optional[Rect]:
        if self.is_empty():
            return None
        return Rect(self.min_x, self.min_y, self.max_x - self.min_x, self.max_y - self.min_y)


def bounding_box(points: Sequence[PointLike]) -> Optional[Tuple[float, float, float, float]]:
    """``(min_x, min_y, max_x, max_y)`` of the points, None when empty."""
    if not points:
        return None
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    return min(xs), min(ys), max(xs), max(ys)
