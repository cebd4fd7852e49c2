"""
Symbolic anchors on projected wireframes.

An anchor names a point on a solid without pixel coordinates: a vertex, a
point along an edge, or the centroid of a named face. Anchors are resolved
against the projected vertex table and face map of one render.

Resolution is total. Any missing vertex index, missing face, or ``None``
table entry makes the whole anchor unresolved (``None``); callers skip the
annotation that needed it.
"""

import logging
import numbers
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence, Union

from math_diagrams.geometry.primitives import Point, PointLike, lerp

logger = logging.getLogger(__name__)

VertexTable = Sequence[Optional[PointLike]]
FaceTable = Mapping[str, Sequence[Optional[PointLike]]]


@dataclass(frozen=True)
class Vertex:
    index: int


@dataclass(frozen=True)
class EdgeMidpoint:
    a: int
    b: int


@dataclass(frozen=True)
class EdgePoint:
    """Point at fraction ``t`` of the way from vertex ``a`` to vertex ``b``."""
    a: int
    b: int
    t: float


@dataclass(frozen=True)
class FaceCentroid:
    face: str


Anchor = Union[Vertex, EdgeMidpoint, EdgePoint, FaceCentroid]


def _vertex(vertices: VertexTable, index: Any) -> Optional[Point]:
    if not isinstance(index, numbers.Integral) or isinstance(index, bool):
        return None
    if index < 0 or index >= len(vertices):
        return None
    p = vertices[index]
    if p is None:
        return None
    return Point(float(p[0]), float(p[1]))


def resolve_anchor(anchor: Anchor, vertices: VertexTable,
                   faces: Optional[FaceTable] = None) -> Optional[Point]:
    """Concrete screen point for ``anchor``, or None when unresolvable."""
    if isinstance(anchor, Vertex):
        return _vertex(vertices, anchor.index)

    if isinstance(anchor, (EdgeMidpoint, EdgePoint)):
        a = _vertex(vertices, anchor.a)
        b = _vertex(vertices, anchor.b)
        if a is None or b is None:
            return None
        t = 0.5 if isinstance(anchor, EdgeMidpoint) else anchor.t
        return lerp(a, b, t)

    if isinstance(anchor, FaceCentroid):
        points = [p for p in (faces or {}).get(anchor.face, ()) if p is not None]
        if not points:
            return None
        n = len(points)
        return Point(sum(p[0] for p in points) / n, sum(p[1] for p in points) / n)

    logger.debug("Unknown anchor type %s", type(anchor).__name__)
    return None


def anchor_from_dict(data: Mapping[str, Any]) -> Optional[Anchor]:
    """Parse the declarative anchor shape.

    Accepted forms::

        {"type": "vertex", "index": 0}
        {"type": "edgeMidpoint", "a": 0, "b": 1}
        {"type": "edgePoint", "a": 0, "b": 1, "t": 0.25}
        {"type": "faceCentroid", "face": "frontFace"}

    Returns:
        Anchor, or None (logged) for an unknown type or missing fields
    """
    kind = data.get("type") if isinstance(data, Mapping) else None
    try:
        if kind == "vertex":
            return Vertex(int(data["index"]))
        if kind == "edgeMidpoint":
            return EdgeMidpoint(int(data["a"]), int(data["b"]))
        if kind == "edgePoint":
            return EdgePoint(int(data["a"]), int(data["b"]), float(data["t"]))
        if kind == "faceCentroid":
            return FaceCentroid(str(data["face"]))
    except (KeyError, TypeError, ValueError) as e:
        logger.warning("Malformed %s anchor %r: %s", kind, data, e)
        return None

    logger.warning("Unknown anchor type %r", kind)
    return None
