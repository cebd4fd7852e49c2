"""
Collision-avoiding label placement.

Two routines, both total and bounded:

place_label_outward
    Moves a single label away from obstacles along a direction and its
    opposite, one fixed step at a time, and keeps whichever direction
    clears first. Outward wins a tie. Past the iteration cap the last
    attempted position is returned (``clear=False``).

relax_stacked_labels
    1D relaxation for labels sharing an axis (pie-chart callouts): sort by
    preferred coordinate, push apart to a minimum gap within bounds, then
    pull any overflow past the far bound back in a single backward pass.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, Tuple, Union

from math_diagrams.config import (
    FONT_PX_DEFAULT,
    LABEL_BASE_OFFSET,
    LABEL_MAX_ITERATIONS,
    LABEL_RECT_PAD,
    LABEL_STEP,
    STACK_MIN_GAP,
)
from math_diagrams.drawing.text_metrics import estimate_text_width
from math_diagrams.geometry.intersection import polygon_intersects_rect, segment_intersects_rect
from math_diagrams.geometry.primitives import Point, PointLike, Rect, unit
from math_diagrams.geometry.sectors import vertex_centroid

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Obstacles
# ---------------------------------------------------------------------------

@dataclass
class PolygonObstacle:
    """A filled shape: edges, vertices and interior all block."""
    points: Sequence[PointLike]

    def hits(self, rect: Rect, pad: float = 0.0) -> bool:
        return polygon_intersects_rect(self.points, rect, pad)


@dataclass
class SegmentObstacle:
    """Open line work (axes, polylines, leader lines)."""
    segments: Sequence[Tuple[PointLike, PointLike]]

    @classmethod
    def from_polyline(cls, points: Sequence[PointLike]) -> 'SegmentObstacle':
        return cls([(points[i], points[i + 1]) for i in range(len(points) - 1)])

    def hits(self, rect: Rect, pad: float = 0.0) -> bool:
        return any(segment_intersects_rect(a, b, rect, pad) for a, b in self.segments)


@dataclass
class RectObstacle:
    """Boxes of labels placed earlier."""
    rects: List[Rect] = field(default_factory=list)

    def add(self, rect: Rect) -> None:
        self.rects.append(rect)

    def hits(self, rect: Rect, pad: float = 0.0) -> bool:
        return any(rect.overlaps(other, margin=pad) for other in self.rects)


Obstacle = Union[PolygonObstacle, SegmentObstacle, RectObstacle]


# ---------------------------------------------------------------------------
# Outward search
# ---------------------------------------------------------------------------

@dataclass
class LabelCandidate:
    """A label to place: text, center position and search direction."""
    text: str
    position: Point
    width: float
    height: float
    direction: Point

    @classmethod
    def for_text(cls, text: str, position: PointLike, direction: PointLike,
                 font_px: float = FONT_PX_DEFAULT) -> 'LabelCandidate':
        """Size the box from the text estimate (one line of ``font_px``)."""
        return cls(text, Point(position[0], position[1]),
                   estimate_text_width(text, font_px), font_px,
                   Point(direction[0], direction[1]))

    def box_at(self, position: PointLike) -> Rect:
        return Rect.centered(position[0], position[1], self.width, self.height)


@dataclass(frozen=True)
class LabelPlacement:
    position: Point
    iterations: int
    direction: str
    clear: bool

    @property
    def x(self) -> float:
        return self.position.x

    @property
    def y(self) -> float:
        return self.position.y


def collides(rect: Rect, obstacles: Sequence[Any], pad: float = 0.0,
             bounds: Optional[Rect] = None) -> bool:
    """True if ``rect`` hits any obstacle or leaves ``bounds``."""
    if bounds is not None:
        if (rect.x < bounds.x or rect.y < bounds.y or
                rect.right > bounds.right or rect.bottom > bounds.bottom):
            return True
    return any(obstacle.hits(rect, pad) for obstacle in obstacles)


def _search(candidate: LabelCandidate, direction: Point, obstacles: Sequence[Any],
            base_offset: float, step: float, max_iterations: int, pad: float,
            bounds: Optional[Rect]) -> Tuple[Point, int, bool]:
    x = candidate.position.x + direction.x * base_offset
    y = candidate.position.y + direction.y * base_offset
    iterations = 0
    while collides(candidate.box_at((x, y)), obstacles, pad, bounds):
        if iterations >= max_iterations:
            return Point(x, y), iterations, False
        x += direction.x * step
        y += direction.y * step
        iterations += 1
    return Point(x, y), iterations, True


def place_label_outward(candidate: LabelCandidate, obstacles: Sequence[Any], *,
                        base_offset: float = 0.0, step: float = LABEL_STEP,
                        max_iterations: int = LABEL_MAX_ITERATIONS,
                        pad: float = LABEL_RECT_PAD,
                        bounds: Optional[Rect] = None) -> LabelPlacement:
    """Find a clear position for one label along ``±candidate.direction``.

    Args:
        candidate: Label; ``direction`` is normalized here (a zero vector
            leaves the label where it is)
        obstacles: Objects with ``hits(rect, pad)``
        base_offset: Distance from the preferred position where both
            searches start
        step: Distance added per iteration
        max_iterations: Hard cap per direction
        pad: Clearance added around the label box
        bounds: Optional rectangle the label must stay inside

    Returns:
        LabelPlacement. A clear direction beats a capped one; between two
        results the smaller iteration count wins, outward first on ties.
    """
    direction = unit(candidate.direction[0], candidate.direction[1])
    if direction is None:
        clear = not collides(candidate.box_at(candidate.position), obstacles, pad, bounds)
        return LabelPlacement(candidate.position, 0, "none", clear)

    inward = Point(-direction.x, -direction.y)
    results = []
    for name, vec in (("outward", direction), ("inward", inward)):
        position, iterations, clear = _search(candidate, vec, obstacles, base_offset, step,
                                              max_iterations, pad, bounds)
        results.append(LabelPlacement(position, iterations, name, clear))

    chosen = results[0]
    for result in results[1:]:
        if (result.clear, -result.iterations) > (chosen.clear, -chosen.iterations):
            chosen = result

    if not chosen.clear:
        logger.debug("No clear position for label '%s' within %d steps",
                     candidate.text, max_iterations)
    return chosen


def edge_normal(a: PointLike, b: PointLike, polygon: Sequence[PointLike]) -> Optional[Point]:
    """Unit normal of edge a-b pointing away from the polygon's vertex centroid."""
    normal = unit(-(b[1] - a[1]), b[0] - a[0])
    if normal is None:
        return None
    centroid = vertex_centroid(polygon)
    if centroid is not None:
        mx, my = (a[0] + b[0]) / 2, (a[1] + b[1]) / 2
        if normal.x * (mx - centroid.x) + normal.y * (my - centroid.y) < 0:
            normal = Point(-normal.x, -normal.y)
    return normal


def place_edge_label(a: PointLike, b: PointLike, text: str, polygon: Sequence[PointLike], *,
                     font_px: float = FONT_PX_DEFAULT,
                     extra_obstacles: Sequence[Any] = (),
                     base_offset: float = LABEL_BASE_OFFSET,
                     step: float = LABEL_STEP,
                     max_iterations: int = LABEL_MAX_ITERATIONS,
                     pad: float = LABEL_RECT_PAD,
                     bounds: Optional[Rect] = None) -> LabelPlacement:
    """Place a label beside polygon edge a-b, outside the shape when possible.

    A zero-length edge leaves the label on the edge point.
    """
    mid = Point((a[0] + b[0]) / 2, (a[1] + b[1]) / 2)
    normal = edge_normal(a, b, polygon) or Point(0.0, 0.0)
    candidate = LabelCandidate.for_text(text, mid, normal, font_px)
    obstacles = [PolygonObstacle(polygon), *extra_obstacles]
    return place_label_outward(candidate, obstacles, base_offset=base_offset, step=step,
                               max_iterations=max_iterations, pad=pad, bounds=bounds)


# ---------------------------------------------------------------------------
# 1D stack relaxation
# ---------------------------------------------------------------------------

@dataclass
class StackedLabel:
    """A label position along one axis; ``payload`` is carried through."""
    preferred: float
    payload: Any = None
    final: float = math.nan


def relax_stacked_labels(labels: Sequence[StackedLabel], *, lower: float, upper: float,
                         min_gap: float = STACK_MIN_GAP) -> List[StackedLabel]:
    """Spread labels along an axis so neighbours are at least ``min_gap`` apart.

    Args:
        labels: Labels with ``preferred`` coordinates (not modified)
        lower: Smallest allowed coordinate
        upper: Largest allowed coordinate
        min_gap: Minimum distance between consecutive labels

    Returns:
        New StackedLabel objects in ascending preferred order with ``final``
        set, all within [lower, upper]. When the labels cannot all fit, the
        ones nearest ``lower`` end up closer than ``min_gap``.
    """
    ordered = sorted(labels, key=lambda item: item.preferred)
    out: List[StackedLabel] = []

    prev: Optional[float] = None
    for item in ordered:
        y = min(max(item.preferred, lower), upper)
        if prev is not None:
            y = max(y, prev + min_gap)
        out.append(StackedLabel(item.preferred, item.payload, y))
        prev = y

    if out and out[-1].final > upper:
        overflow = out[-1].final - upper
        ceiling = upper
        for item in reversed(out):
            if item.final <= ceiling:
                break
            item.final = max(ceiling, lower)
            ceiling = item.final - min_gap
        logger.debug("Stack overflow %.1f past %.1f pulled back", overflow, upper)

    return out
