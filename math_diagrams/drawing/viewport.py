"""
Fit a data-space point set into a pixel viewport.

``compute_fit`` is the only place where data space turns into screen space:
callers author shapes in their own units, fit once, then project every point
through the returned transform before drawing.

Y orientation: by default data y is copied to screen y unchanged (data
authored y-down in screen convention). With ``flip_y=True`` data is
treated as y-up and mirrored, as for the built-in solids, so the unit
square corners (0,0), (1,0), (1,1), (0,1) in a 100x100 viewport with
padding 10 land on (10,90), (90,90), (90,10), (10,10).
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List

import numpy as np

from math_diagrams.geometry.primitives import Point, PointLike

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FitTransform:
    """Uniform scale plus offset: ``(offset_x + s*x, offset_y + y_sign*s*y)``."""
    scale: float = 1.0
    offset_x: float = 0.0
    offset_y: float = 0.0
    flip_y: bool = False

    @classmethod
    def identity(cls) -> 'FitTransform':
        return cls()

    @property
    def y_sign(self) -> float:
        return -1.0 if self.flip_y else 1.0

    def project(self, point: PointLike) -> Point:
        return Point(self.offset_x + self.scale * point[0],
                     self.offset_y + self.y_sign * self.scale * point[1])

    def project_all(self, points: Iterable[PointLike]) -> List[Point]:
        """Vectorized :meth:`project` over many points."""
        arr = np.asarray(list(points), dtype=float).reshape(-1, 2)
        if arr.size == 0:
            return []
        out = np.empty_like(arr)
        out[:, 0] = self.offset_x + self.scale * arr[:, 0]
        out[:, 1] = self.offset_y + self.y_sign * self.scale * arr[:, 1]
        return [Point(float(x), float(y)) for x, y in out]

    def project_length(self, length: float) -> float:
        """Scale a data-space distance to pixels."""
        return self.scale * length


def compute_fit(points: Iterable[PointLike], viewport_w: float, viewport_h: float,
                padding: float, flip_y: bool = False) -> FitTransform:
    """Aspect-preserving, centered fit of ``points`` into the viewport.

    Args:
        points: Data-space points (any iterable of (x, y))
        viewport_w: Viewport width in px
        viewport_h: Viewport height in px
        padding: Margin kept clear on every side, px
        flip_y: Treat data as y-up

    Returns:
        FitTransform. Identity for an empty point set. A zero-width or
        zero-height point set is measured as 1 unit on that axis.
    """
    arr = np.asarray(list(points), dtype=float).reshape(-1, 2)
    if arr.size == 0:
        return FitTransform.identity()

    min_x, min_y = arr.min(axis=0)
    max_x, max_y = arr.max(axis=0)
    raw_w = float(max_x - min_x) or 1.0
    raw_h = float(max_y - min_y) or 1.0

    scale = min((viewport_w - 2 * padding) / raw_w, (viewport_h - 2 * padding) / raw_h)
    if scale <= 0:
        logger.warning("Viewport %sx%s leaves no room inside padding %s; scale clamped to 0",
                       viewport_w, viewport_h, padding)
        scale = 0.0

    offset_x = (viewport_w - scale * raw_w) / 2 - scale * float(min_x)
    offset_y = (viewport_h - scale * raw_h) / 2 - scale * float(min_y)
    if flip_y:
        offset_y = viewport_h - offset_y

    return FitTransform(scale=scale, offset_x=offset_x, offset_y=offset_y, flip_y=flip_y)
