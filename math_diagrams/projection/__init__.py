"""Wireframe solids, symbolic anchors and anchor-driven annotations."""

from math_diagrams.projection.anchors import (
    Anchor,
    EdgeMidpoint,
    EdgePoint,
    FaceCentroid,
    Vertex,
    anchor_from_dict,
    resolve_anchor,
)

__all__ = [
    "Anchor",
    "EdgeMidpoint",
    "EdgePoint",
    "FaceCentroid",
    "Vertex",
    "anchor_from_dict",
    "resolve_anchor",
]
