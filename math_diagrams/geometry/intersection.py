"""
Overlap predicates: point/polygon, segment/segment, segment/rect, polygon/rect.

All predicates are total. Degenerate input has a fixed answer:
- polygons with fewer than 3 vertices contain no points;
- a zero-length segment behaves as a point (it intersects what contains it);
- a polygon with fewer than 2 vertices intersects nothing.

Points exactly on a polygon edge follow the half-open crossing rule used by
point_in_polygon: an edge counts when ``(yi > py) != (yj > py)``, so for an
axis-aligned square a point on the min-x or min-y side reads as inside and a
point on the max-x or max-y side reads as outside.
"""

from typing import Sequence

from math_diagrams.geometry.primitives import PointLike, Rect

COLINEAR, CLOCKWISE, COUNTERCLOCKWISE = 0, 1, 2


def point_in_polygon(point: PointLike, polygon: Sequence[PointLike]) -> bool:
    """Even-odd ray cast toward +x."""
    n = len(polygon)
    if n < 3:
        return False

    px, py = point[0], point[1]
    inside = False
    j = n - 1
    for i in range(n):
        xi, yi = polygon[i][0], polygon[i][1]
        xj, yj = polygon[j][0], polygon[j][1]
        if (yi > py) != (yj > py):
            x_cross = (xj - xi) * (py - yi) / (yj - yi) + xi
            if px < x_cross:
                inside = not inside
        j = i
    return inside


def point_in_rect(point: PointLike, rect: Rect, pad: float = 0.0) -> bool:
    return rect.padded(pad).contains(point)


def orientation(a: PointLike, b: PointLike, c: PointLike) -> int:
    """Turn direction of a -> b -> c in screen coordinates."""
    val = (b[1] - a[1]) * (c[0] - b[0]) - (b[0] - a[0]) * (c[1] - b[1])
    if val == 0:
        return COLINEAR
    return CLOCKWISE if val > 0 else COUNTERCLOCKWISE


def on_segment(p: PointLike, q: PointLike, r: PointLike) -> bool:
    """For colinear p, q, r: does q lie within the bounding box of p-r."""
    return (min(p[0], r[0]) <= q[0] <= max(p[0], r[0]) and
            min(p[1], r[1]) <= q[1] <= max(p[1], r[1]))


def _boxes_disjoint(p1: PointLike, p2: PointLike, q1: PointLike, q2: PointLike) -> bool:
    return (max(p1[0], p2[0]) < min(q1[0], q2[0]) or
            max(q1[0], q2[0]) < min(p1[0], p2[0]) or
            max(p1[1], p2[1]) < min(q1[1], q2[1]) or
            max(q1[1], q2[1]) < min(p1[1], p2[1]))


def segments_intersect(p1: PointLike, p2: PointLike,
                       q1: PointLike, q2: PointLike) -> bool:
    """True if closed segments p1-p2 and q1-q2 share at least one point."""
    if _boxes_disjoint(p1, p2, q1, q2):
        return False

    o1 = orientation(p1, p2, q1)
    o2 = orientation(p1, p2, q2)
    o3 = orientation(q1, q2, p1)
    o4 = orientation(q1, q2, p2)

    if o1 != o2 and o3 != o4:
        return True

    # Colinear and touching
    if o1 == COLINEAR and on_segment(p1, q1, p2):
        return True
    if o2 == COLINEAR and on_segment(p1, q2, p2):
        return True
    if o3 == COLINEAR and on_segment(q1, p1, q2):
        return True
    if o4 == COLINEAR and on_segment(q1, p2, q2):
        return True
    return False


def segment_intersects_rect(p1: PointLike, p2: PointLike,
                            rect: Rect, pad: float = 0.0) -> bool:
    r = rect.padded(pad)

    if (max(p1[0], p2[0]) < r.x or min(p1[0], p2[0]) > r.right or
            max(p1[1], p2[1]) < r.y or min(p1[1], p2[1]) > r.bottom):
        return False

    if r.contains(p1) or r.contains(p2):
        return True

    corners = r.corners()
    for k in range(4):
        if segments_intersect(p1, p2, corners[k], corners[(k + 1) % 4]):
            return True
    return False


def polygon_intersects_rect(polygon: Sequence[PointLike],
                            rect: Rect, pad: float = 0.0) -> bool:
    """Edge crossing, vertex containment, or rect fully inside the polygon."""
    n = len(polygon)
    if n < 2:
        return False

    r = rect.padded(pad)
    for i in range(n):
        if segment_intersects_rect(polygon[i], polygon[(i + 1) % n], r):
            return True

    if any(r.contains(p) for p in polygon):
        return True

    return point_in_polygon(r.center, polygon)
