"""2D geometry: value types, overlap predicates, polygon sectors."""

from math_diagrams.geometry.intersection import (
    point_in_polygon,
    point_in_rect,
    polygon_intersects_rect,
    segment_intersects_rect,
    segments_intersect,
)
from math_diagrams.geometry.primitives import Extent, Point, Rect
from math_diagrams.geometry.sectors import (
    RayHit,
    partition_polygon,
    polygon_area,
    polygon_sector,
    ray_polygon_intersection,
)

__all__ = [
    "Extent",
    "Point",
    "Rect",
    "RayHit",
    "point_in_polygon",
    "point_in_rect",
    "polygon_intersects_rect",
    "segment_intersects_rect",
    "segments_intersect",
    "partition_polygon",
    "polygon_area",
    "polygon_sector",
    "ray_polygon_intersection",
]
