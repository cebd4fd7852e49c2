"""
Wireframe solids: 3D definition, parallel projection, drawing.

Solids are authored in a right-handed frame with x to the right, y up and
z going away from the viewer. A view matrix maps them to a y-up plane, and
compute_fit (with ``flip_y``) takes that plane to screen pixels.

Hidden edges are part of the solid's definition for the default oblique
view; nothing here computes visibility.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Set, Tuple

import numpy as np

from math_diagrams.config import LineStyle
from math_diagrams.drawing.surface import DrawingSurface
from math_diagrams.drawing.viewport import FitTransform, compute_fit
from math_diagrams.geometry.primitives import Point

logger = logging.getLogger(__name__)

Edge = Tuple[int, int]

_OBLIQUE_DEPTH = 0.5
_OBLIQUE_ANGLE = math.radians(40)
_COS30 = math.cos(math.radians(30))

# ---------------------------------------------------------------------------
# View matrices (world -> view plane)
# Rows map x, y, z; projection of p is p @ M (u right, v up)
# ---------------------------------------------------------------------------
VIEW_MATRICES: Dict[str, np.ndarray] = {
    "front": np.array([
        [1.0, 0.0],
        [0.0, 1.0],
        [0.0, 0.0],
    ]),
    "oblique": np.array([
        [1.0, 0.0],
        [0.0, 1.0],
        [_OBLIQUE_DEPTH * math.cos(_OBLIQUE_ANGLE), _OBLIQUE_DEPTH * math.sin(_OBLIQUE_ANGLE)],
    ]),
    "isometric": np.array([
        [_COS30, -0.5],
        [0.0, 1.0],
        [_COS30, 0.5],
    ]),
}


@dataclass
class Wireframe:
    """Vertices (N x 3), edges as index pairs and named faces."""
    vertices: np.ndarray
    edges: List[Edge]
    faces: Dict[str, List[int]] = field(default_factory=dict)
    hidden_edges: Set[Edge] = field(default_factory=set)

    def is_hidden(self, edge: Edge) -> bool:
        a, b = edge
        return (a, b) in self.hidden_edges or (b, a) in self.hidden_edges


@dataclass
class ProjectedWireframe:
    """Screen-space vertex table and face map, ready for anchor resolution."""
    vertices: List[Point]
    faces: Dict[str, List[Optional[Point]]]
    fit: FitTransform


def project_wireframe(wireframe: Wireframe, width: float, height: float,
                      padding: float, view: str = "oblique") -> ProjectedWireframe:
    """Project a solid and fit it into a ``width`` x ``height`` viewport.

    Unknown view names fall back to ``oblique`` (logged). Face indices that
    do not exist become ``None`` entries in the face map.
    """
    matrix = VIEW_MATRICES.get(view)
    if matrix is None:
        logger.warning("Unknown view '%s', using oblique", view)
        matrix = VIEW_MATRICES["oblique"]

    plane = np.asarray(wireframe.vertices, dtype=float).reshape(-1, 3) @ matrix
    fit = compute_fit(plane, width, height, padding, flip_y=True)
    vertices = fit.project_all(plane)

    faces: Dict[str, List[Optional[Point]]] = {}
    for name, indices in wireframe.faces.items():
        faces[name] = [vertices[i] if 0 <= i < len(vertices) else None for i in indices]
    return ProjectedWireframe(vertices, faces, fit)


def draw_wireframe(surface: DrawingSurface, wireframe: Wireframe,
                   projected: ProjectedWireframe, show_hidden: bool = True,
                   face_fills: Optional[Mapping[str, str]] = None,
                   color: Optional[str] = None) -> int:
    """Draw face fills, then edges (hidden ones dashed or omitted).

    Returns:
        Number of edges drawn
    """
    for name, fill in (face_fills or {}).items():
        points = [p for p in projected.faces.get(name, ()) if p is not None]
        if len(points) >= 3:
            surface.draw_polygon(points, fill=fill, stroke=None, fill_opacity=0.6)

    visible_style = LineStyle.THICK.get_svg_style(color)
    hidden_style = LineStyle.HIDDEN_EDGE.get_svg_style()
    n = len(projected.vertices)
    drawn = 0
    for a, b in wireframe.edges:
        if not (0 <= a < n and 0 <= b < n):
            logger.debug("Edge (%d, %d) references a missing vertex; skipped", a, b)
            continue
        hidden = wireframe.is_hidden((a, b))
        if hidden and not show_hidden:
            continue
        pa, pb = projected.vertices[a], projected.vertices[b]
        style = hidden_style if hidden else visible_style
        surface.draw_line(pa.x, pa.y, pb.x, pb.y, linecap="round", **style)
        drawn += 1
    return drawn


# ---------------------------------------------------------------------------
# Built-in solids
# ---------------------------------------------------------------------------

def rectangular_prism(width: float, height: float, depth: float) -> Wireframe:
    """Box with its front-bottom-left corner at the origin."""
    w, h, d = width, height, depth
    vertices = np.array([
        [0, 0, 0], [w, 0, 0], [w, h, 0], [0, h, 0],  # front
        [0, 0, d], [w, 0, d], [w, h, d], [0, h, d],  # back
    ], dtype=float)
    edges = [(0, 1), (1, 2), (2, 3), (3, 0),
             (4, 5), (5, 6), (6, 7), (7, 4),
             (0, 4), (1, 5), (2, 6), (3, 7)]
    faces = {
        "front": [0, 1, 2, 3],
        "back": [4, 5, 6, 7],
        "top": [3, 2, 6, 7],
        "bottom": [0, 1, 5, 4],
        "left": [0, 3, 7, 4],
        "right": [1, 5, 6, 2],
    }
    return Wireframe(vertices, edges, faces, {(0, 4), (4, 5), (4, 7)})


def triangular_prism(base: float, height: float, depth: float) -> Wireframe:
    """Isosceles triangle cross-section extruded along z."""
    b, h, d = base, height, depth
    vertices = np.array([
        [0, 0, 0], [b, 0, 0], [b / 2, h, 0],
        [0, 0, d], [b, 0, d], [b / 2, h, d],
    ], dtype=float)
    edges = [(0, 1), (1, 2), (2, 0),
             (3, 4), (4, 5), (5, 3),
             (0, 3), (1, 4), (2, 5)]
    faces = {
        "front": [0, 1, 2],
        "back": [3, 4, 5],
        "bottom": [0, 1, 4, 3],
        "left": [0, 2, 5, 3],
        "right": [1, 4, 5, 2],
    }
    return Wireframe(vertices, edges, faces, {(0, 3), (3, 4), (3, 5)})


def square_pyramid(base: float, height: float) -> Wireframe:
    """Square base on the xz plane, apex above its center."""
    b, h = base, height
    vertices = np.array([
        [0, 0, 0], [b, 0, 0], [b, 0, b], [0, 0, b],
        [b / 2, h, b / 2],
    ], dtype=float)
    edges = [(0, 1), (1, 2), (2, 3), (3, 0),
             (0, 4), (1, 4), (2, 4), (3, 4)]
    faces = {
        "base": [0, 1, 2, 3],
        "front": [0, 1, 4],
        "right": [1, 2, 4],
        "back": [2, 3, 4],
        "left": [3, 0, 4],
    }
    return Wireframe(vertices, edges, faces, {(2, 3), (3, 0), (3, 4)})


SOLIDS = {
    "rectangular_prism": rectangular_prism,
    "triangular_prism": triangular_prism,
    "square_pyramid": square_pyramid,
}
