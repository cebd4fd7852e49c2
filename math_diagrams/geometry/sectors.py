"""
Ray casting against polygon boundaries and angular sector extraction.

A sector of a polygon is the region swept between two rays cast from an
interior reference point. It is built by walking the polygon's own vertex
list from the first ray's hit to the second's, which generalizes pie-slice
geometry to arbitrary convex shapes.

Angles are atan2-style radians in whatever frame the points are given in;
in screen coordinates (y down) increasing angle turns clockwise on screen.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from math_diagrams.geometry.primitives import Point, PointLike

logger = logging.getLogger(__name__)

_EPS = 1e-12
_FULL_TURN = 2 * math.pi


@dataclass(frozen=True)
class RayHit:
    """Where a ray meets a polygon edge.

    ``t`` is the distance parameter along the ray direction, ``u`` the
    position along edge ``edge_index`` (vertex i to vertex i+1), in [0, 1].
    """
    point: Point
    edge_index: int
    t: float
    u: float


def _cross(ax: float, ay: float, bx: float, by: float) -> float:
    return ax * by - ay * bx


def signed_area(polygon: Sequence[PointLike]) -> float:
    """Shoelace area; positive when vertices run in increasing-angle order."""
    if len(polygon) < 3:
        return 0.0
    pts = np.asarray(polygon, dtype=float)
    x, y = pts[:, 0], pts[:, 1]
    return 0.5 * float(np.dot(x, np.roll(y, -1)) - np.dot(np.roll(x, -1), y))


def polygon_area(polygon: Sequence[PointLike]) -> float:
    return abs(signed_area(polygon))


def vertex_centroid(points: Sequence[PointLike]) -> Optional[Point]:
    """Arithmetic mean of the vertices (None for no points)."""
    if len(points) == 0:
        return None
    mean = np.asarray(points, dtype=float).mean(axis=0)
    return Point(float(mean[0]), float(mean[1]))


def ray_polygon_intersection(origin: PointLike, direction: PointLike,
                             polygon: Sequence[PointLike]) -> Optional[RayHit]:
    """Nearest boundary hit of the ray ``origin + t * direction``, t >= 0.

    Edges parallel to the ray are skipped. When two edges are hit at the
    same distance (the ray passes through a vertex) the lower edge index
    wins.

    Returns:
        RayHit, or None if the ray misses every edge
    """
    n = len(polygon)
    ox, oy = origin[0], origin[1]
    dx, dy = direction[0], direction[1]

    best: Optional[RayHit] = None
    for i in range(n):
        ax, ay = polygon[i][0], polygon[i][1]
        bx, by = polygon[(i + 1) % n][0], polygon[(i + 1) % n][1]
        ex, ey = bx - ax, by - ay

        denom = _cross(dx, dy, ex, ey)
        if abs(denom) < _EPS:
            continue

        wx, wy = ax - ox, ay - oy
        t = _cross(wx, wy, ex, ey) / denom
        u = _cross(wx, wy, dx, dy) / denom
        if t < -1e-9 or u < -1e-9 or u > 1 + 1e-9:
            continue

        if best is None or t < best.t - 1e-9:
            u = min(max(u, 0.0), 1.0)
            best = RayHit(Point(ax + u * ex, ay + u * ey), i, max(t, 0.0), u)

    return best


def polygon_sector(center: PointLike, polygon: Sequence[PointLike],
                   start_angle: float, end_angle: float) -> List[Point]:
    """Closed sub-polygon between rays at ``start_angle`` and ``end_angle``.

    The sweep runs from start to end in increasing angle. The result is
    ``[center, start_hit, <polygon vertices passed>, end_hit]``.

    Edge cases:
        - fewer than 3 vertices or a non-positive sweep: ``[]``
        - sweep of a full turn or more: the whole polygon
        - a ray that misses (center outside the polygon): ``[]``
    """
    n = len(polygon)
    sweep = end_angle - start_angle
    if n < 3 or sweep <= 0:
        return []

    pts = [Point(float(p[0]), float(p[1])) for p in polygon]
    if signed_area(pts) < 0:
        pts.reverse()

    if sweep >= _FULL_TURN - 1e-9:
        return pts

    start_hit = ray_polygon_intersection(
        center, (math.cos(start_angle), math.sin(start_angle)), pts)
    end_hit = ray_polygon_intersection(
        center, (math.cos(end_angle), math.sin(end_angle)), pts)
    if start_hit is None or end_hit is None:
        logger.debug("Sector ray missed polygon (center=%s)", tuple(center))
        return []

    steps = (end_hit.edge_index - start_hit.edge_index) % n
    if steps == 0 and (end_hit.u < start_hit.u or sweep > math.pi):
        steps = n

    sector = [Point(float(center[0]), float(center[1])), start_hit.point]
    edge = start_hit.edge_index
    for _ in range(steps):
        edge = (edge + 1) % n
        sector.append(pts[edge])
    sector.append(end_hit.point)
    return sector


def partition_polygon(center: PointLike, polygon: Sequence[PointLike], parts: int,
                      start_angle: float = -math.pi / 2) -> List[List[Point]]:
    """Split a polygon into ``parts`` equal-angle sectors around ``center``.

    The first sector starts at ``start_angle`` (straight up on screen by
    default). ``parts < 1`` yields no sectors.
    """
    if parts < 1:
        return []
    step = _FULL_TURN / parts
    return [polygon_sector(center, polygon, start_angle + i * step, start_angle + (i + 1) * step)
            for i in range(parts)]


def regular_polygon(n: int, cx: float, cy: float, radius: float,
                    rotation: float = -math.pi / 2) -> List[Point]:
    """Vertices of a regular n-gon, first vertex at ``rotation``."""
    return [Point(cx + radius * math.cos(rotation + 2 * math.pi * k / n),
                  cy + radius * math.sin(rotation + 2 * math.pi * k / n))
            for k in range(n)]
