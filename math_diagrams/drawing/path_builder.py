"""
Chainable SVG path construction with exact bounds.

Every segment added to a PathBuilder grows its bounds by the true extremes
of the curve, not just the control points:

- quadratic and cubic Béziers include the roots of their derivatives;
- elliptical arcs are converted to center parameterization and include
  every axis extreme inside the swept angle.
"""

import math
from typing import Iterable, List, Optional, Tuple, Union

from math_diagrams.geometry.primitives import Extent, Point, PointLike

Number = Union[int, float]


def svg_number(value: float) -> Number:
    """Round to 3 decimals; integral values become ints (``10`` not ``10.0``)."""
    r = round(float(value), 3)
    if r == 0:
        return 0
    return int(r) if r.is_integer() else r


def _fmt(value: float) -> str:
    return str(svg_number(value))


# ---------------------------------------------------------------------------
# Curve extrema
# ---------------------------------------------------------------------------

def _quad_extrema(p0: float, p1: float, p2: float) -> List[float]:
    denom = p0 - 2 * p1 + p2
    if denom == 0:
        return []
    t = (p0 - p1) / denom
    return [t] if 0 < t < 1 else []


def _cubic_extrema(p0: float, p1: float, p2: float, p3: float) -> List[float]:
    # B'(t)/3 = a t^2 + b t + c
    a = -p0 + 3 * p1 - 3 * p2 + p3
    b = 2 * (p0 - 2 * p1 + p2)
    c = p1 - p0
    if abs(a) < 1e-12:
        if abs(b) < 1e-12:
            return []
        roots = [-c / b]
    else:
        disc = b * b - 4 * a * c
        if disc < 0:
            return []
        sq = math.sqrt(disc)
        roots = [(-b + sq) / (2 * a), (-b - sq) / (2 * a)]
    return [t for t in roots if 0 < t < 1]


def _quad_at(p0: float, p1: float, p2: float, t: float) -> float:
    mt = 1 - t
    return mt * mt * p0 + 2 * mt * t * p1 + t * t * p2


def _cubic_at(p0: float, p1: float, p2: float, p3: float, t: float) -> float:
    mt = 1 - t
    return mt ** 3 * p0 + 3 * mt * mt * t * p1 + 3 * mt * t * t * p2 + t ** 3 * p3


def _angle_in_sweep(theta: float, start: float, delta: float) -> bool:
    if delta >= 0:
        return (theta - start) % (2 * math.pi) <= delta
    return (start - theta) % (2 * math.pi) <= -delta


def arc_center(x1: float, y1: float, rx: float, ry: float, phi_deg: float,
               large_arc: bool, sweep: bool, x2: float, y2: float
               ) -> Optional[Tuple[float, float, float, float, float, float]]:
    """Endpoint to center parameterization of an SVG elliptical arc.

    Radii too small to span the endpoints are scaled up, as renderers do.

    Returns:
        ``(cx, cy, rx, ry, theta1, delta_theta)`` in radians, or None when
        the arc is degenerate (zero radius or coincident endpoints)
    """
    rx, ry = abs(rx), abs(ry)
    if rx == 0 or ry == 0 or (x1 == x2 and y1 == y2):
        return None

    phi = math.radians(phi_deg)
    cos_p, sin_p = math.cos(phi), math.sin(phi)
    dx2, dy2 = (x1 - x2) / 2, (y1 - y2) / 2
    x1p = cos_p * dx2 + sin_p * dy2
    y1p = -sin_p * dx2 + cos_p * dy2

    lam = (x1p * x1p) / (rx * rx) + (y1p * y1p) / (ry * ry)
    if lam > 1:
        scale = math.sqrt(lam)
        rx, ry = rx * scale, ry * scale

    num = rx * rx * ry * ry - rx * rx * y1p * y1p - ry * ry * x1p * x1p
    den = rx * rx * y1p * y1p + ry * ry * x1p * x1p
    coef = math.sqrt(max(0.0, num / den)) if den else 0.0
    if large_arc == sweep:
        coef = -coef
    cxp = coef * rx * y1p / ry
    cyp = -coef * ry * x1p / rx

    cx = cos_p * cxp - sin_p * cyp + (x1 + x2) / 2
    cy = sin_p * cxp + cos_p * cyp + (y1 + y2) / 2

    theta1 = math.atan2((y1p - cyp) / ry, (x1p - cxp) / rx)
    theta2 = math.atan2((-y1p - cyp) / ry, (-x1p - cxp) / rx)
    delta = theta2 - theta1
    if sweep and delta < 0:
        delta += 2 * math.pi
    elif not sweep and delta > 0:
        delta -= 2 * math.pi
    return cx, cy, rx, ry, theta1, delta


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------

class PathBuilder:
    """Accumulates path commands and their exact bounding box.

    Drawing commands issued before any ``move_to`` start the subpath at
    their own first point.

    Example:
        path = PathBuilder().move_to(0, 0).line_to(10, 0).arc_to(5, 5, 0, False, True, 0, 0)
        surface.draw_path(path, fill="none", stroke="#333")
    """

    def __init__(self):
        self._commands: List[str] = []
        self._bounds = Extent()
        self._cursor: Optional[Point] = None
        self._subpath_start: Optional[Point] = None

    @property
    def bounds(self) -> Extent:
        return Extent(self._bounds.min_x, self._bounds.min_y,
                      self._bounds.max_x, self._bounds.max_y)

    @property
    def cursor(self) -> Optional[Point]:
        return self._cursor

    def is_empty(self) -> bool:
        return not self._commands

    def _ensure_cursor(self, x: float, y: float) -> Point:
        if self._cursor is None:
            self.move_to(x, y)
        return self._cursor  # type: ignore[return-value]

    def move_to(self, x: float, y: float) -> 'PathBuilder':
        self._commands.append(f"M {_fmt(x)} {_fmt(y)}")
        self._bounds.include_point(x, y)
        self._cursor = self._subpath_start = Point(x, y)
        return self

    def line_to(self, x: float, y: float) -> 'PathBuilder':
        self._ensure_cursor(x, y)
        self._commands.append(f"L {_fmt(x)} {_fmt(y)}")
        self._bounds.include_point(x, y)
        self._cursor = Point(x, y)
        return self

    def polyline(self, points: Iterable[PointLike], close: bool = False) -> 'PathBuilder':
        """``move_to`` the first point, ``line_to`` the rest."""
        for i, p in enumerate(points):
            if i == 0:
                self.move_to(p[0], p[1])
            else:
                self.line_to(p[0], p[1])
        if close and self._cursor is not None:
            self.close()
        return self

    def quadratic_to(self, cx: float, cy: float, x: float, y: float) -> 'PathBuilder':
        x0, y0 = self._ensure_cursor(cx, cy)
        self._commands.append(f"Q {_fmt(cx)} {_fmt(cy)} {_fmt(x)} {_fmt(y)}")
        self._bounds.include_point(x, y)
        for t in _quad_extrema(x0, cx, x):
            self._bounds.include_point(_quad_at(x0, cx, x, t), _quad_at(y0, cy, y, t))
        for t in _quad_extrema(y0, cy, y):
            self._bounds.include_point(_quad_at(x0, cx, x, t), _quad_at(y0, cy, y, t))
        self._cursor = Point(x, y)
        return self

    def cubic_to(self, c1x: float, c1y: float, c2x: float, c2y: float,
                 x: float, y: float) -> 'PathBuilder':
        x0, y0 = self._ensure_cursor(c1x, c1y)
        self._commands.append(
            f"C {_fmt(c1x)} {_fmt(c1y)} {_fmt(c2x)} {_fmt(c2y)} {_fmt(x)} {_fmt(y)}")
        self._bounds.include_point(x, y)
        for t in _cubic_extrema(x0, c1x, c2x, x) + _cubic_extrema(y0, c1y, c2y, y):
            self._bounds.include_point(_cubic_at(x0, c1x, c2x, x, t),
                                       _cubic_at(y0, c1y, c2y, y, t))
        self._cursor = Point(x, y)
        return self

    def arc_to(self, rx: float, ry: float, x_axis_rotation: float,
               large_arc: bool, sweep: bool, x: float, y: float) -> 'PathBuilder':
        """SVG ``A`` command from the current point to (x, y)."""
        x0, y0 = self._ensure_cursor(x, y)
        self._commands.append(
            f"A {_fmt(rx)} {_fmt(ry)} {_fmt(x_axis_rotation)} "
            f"{int(bool(large_arc))} {int(bool(sweep))} {_fmt(x)} {_fmt(y)}")
        self._bounds.include_point(x, y)

        params = arc_center(x0, y0, rx, ry, x_axis_rotation, large_arc, sweep, x, y)
        if params is not None:
            cx, cy, erx, ery, theta1, delta = params
            phi = math.radians(x_axis_rotation)
            cos_p, sin_p = math.cos(phi), math.sin(phi)
            tx = math.atan2(-ery * sin_p, erx * cos_p)
            ty = math.atan2(ery * cos_p, erx * sin_p)
            for theta in (tx, tx + math.pi, ty, ty + math.pi):
                if _angle_in_sweep(theta, theta1, delta):
                    ex = cx + erx * cos_p * math.cos(theta) - ery * sin_p * math.sin(theta)
                    ey = cy + erx * sin_p * math.cos(theta) + ery * cos_p * math.sin(theta)
                    self._bounds.include_point(ex, ey)

        self._cursor = Point(x, y)
        return self

    def close(self) -> 'PathBuilder':
        self._commands.append("Z")
        self._cursor = self._subpath_start
        return self

    def to_d(self) -> str:
        return " ".join(self._commands)

    def __str__(self) -> str:
        return self.to_d()

    # -- shape helpers -----------------------------------------------------

    @classmethod
    def circular_sector(cls, cx: float, cy: float, radius: float,
                        start_angle: float, end_angle: float) -> 'PathBuilder':
        """Pie slice from ``start_angle`` to ``end_angle`` (radians, increasing).

        A full turn is drawn as two half arcs so the outline stays closed.
        """
        path = cls()
        sweep = end_angle - start_angle
        if sweep >= 2 * math.pi - 1e-9:
            path.move_to(cx + radius, cy)
            path.arc_to(radius, radius, 0, False, True, cx - radius, cy)
            path.arc_to(radius, radius, 0, False, True, cx + radius, cy)
            return path.close()

        x1 = cx + radius * math.cos(start_angle)
        y1 = cy + radius * math.sin(start_angle)
        x2 = cx + radius * math.cos(end_angle)
        y2 = cy + radius * math.sin(end_angle)
        path.move_to(cx, cy).line_to(x1, y1)
        path.arc_to(radius, radius, 0, sweep > math.pi, True, x2, y2)
        return path.close()
