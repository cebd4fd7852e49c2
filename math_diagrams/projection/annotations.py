"""
Anchor-driven annotations: labelled segments and right-angle markers.

Each annotation resolves its anchors first. If any anchor is unresolved the
annotation is skipped (debug log) and the rest of the diagram is drawn
normally.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from math_diagrams.config import (
    RIGHT_ANGLE_SIZE,
    SEGMENT_LABEL_OFFSET,
    THEME,
    LineStyle,
)
from math_diagrams.drawing.surface import DrawingSurface
from math_diagrams.geometry.primitives import Point, unit
from math_diagrams.projection.anchors import Anchor, FaceTable, VertexTable, resolve_anchor

logger = logging.getLogger(__name__)


@dataclass
class AnchorSegment:
    """Line between two anchors, optionally labelled at its midpoint."""
    start: Anchor
    end: Anchor
    label: Optional[str] = None
    dashed: bool = False
    color: str = THEME.colors.highlight


@dataclass
class RightAngleMarker:
    """Square corner mark at ``at`` between the rays toward ``from_`` and ``to``."""
    at: Anchor
    from_: Anchor
    to: Anchor
    size_px: float = RIGHT_ANGLE_SIZE


def draw_anchor_segments(surface: DrawingSurface, segments: Sequence[AnchorSegment],
                         vertices: VertexTable, faces: Optional[FaceTable] = None) -> int:
    """Draw every resolvable segment; returns how many were drawn."""
    drawn = 0
    for seg in segments:
        p1 = resolve_anchor(seg.start, vertices, faces)
        p2 = resolve_anchor(seg.end, vertices, faces)
        if p1 is None or p2 is None:
            logger.debug("Segment %s -> %s unresolved; skipped", seg.start, seg.end)
            continue

        style = LineStyle.DASHED if seg.dashed else LineStyle.SOLID
        surface.draw_line(p1.x, p1.y, p2.x, p2.y, **style.get_svg_style(seg.color))
        drawn += 1

        if seg.label:
            mid = Point((p1.x + p2.x) / 2, (p1.y + p2.y) / 2)
            # Left-hand normal; degenerate segments label straight above
            normal = unit(-(p2.y - p1.y), p2.x - p1.x) or Point(0.0, -1.0)
            surface.draw_text(mid.x + normal.x * SEGMENT_LABEL_OFFSET,
                              mid.y + normal.y * SEGMENT_LABEL_OFFSET,
                              seg.label, font_px=THEME.font_sizes.medium, fill=seg.color,
                              anchor="middle", baseline="middle", font_weight="bold",
                              stroke=THEME.colors.white, stroke_width=3.0)
    return drawn


def draw_right_angle_markers(surface: DrawingSurface, markers: Sequence[RightAngleMarker],
                             vertices: VertexTable, faces: Optional[FaceTable] = None,
                             color: str = THEME.colors.stroke) -> int:
    """Draw every resolvable marker as two short lines; returns the count."""
    drawn = 0
    for marker in markers:
        at = resolve_anchor(marker.at, vertices, faces)
        p_from = resolve_anchor(marker.from_, vertices, faces)
        p_to = resolve_anchor(marker.to, vertices, faces)
        if at is None or p_from is None or p_to is None:
            logger.debug("Right-angle marker at %s unresolved; skipped", marker.at)
            continue

        u1 = unit(p_from.x - at.x, p_from.y - at.y)
        u2 = unit(p_to.x - at.x, p_to.y - at.y)
        if u1 is None or u2 is None:
            logger.debug("Right-angle marker at %s has a zero-length arm; skipped", marker.at)
            continue

        s = marker.size_px
        p0 = Point(at.x + u1.x * s, at.y + u1.y * s)
        p1 = Point(p0.x + u2.x * s, p0.y + u2.y * s)
        p2 = Point(at.x + u2.x * s, at.y + u2.y * s)
        surface.draw_line(p0.x, p0.y, p1.x, p1.y, stroke=color, stroke_width=1.0)
        surface.draw_line(p1.x, p1.y, p2.x, p2.y, stroke=color, stroke_width=1.0)
        drawn += 1
    return drawn
