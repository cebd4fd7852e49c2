"""
Unit tests for math_diagrams.projection.annotations module.
"""

import logging

from math_diagrams.config import THEME
from math_diagrams.projection.anchors import EdgeMidpoint, Vertex
from math_diagrams.projection.annotations import (
    AnchorSegment,
    RightAngleMarker,
    draw_anchor_segments,
    draw_right_angle_markers,
)
from tests.conftest import parse_body

TRIANGLE = [(0.0, 0.0), (40.0, 0.0), (40.0, 30.0)]


def _lines(surface):
    return parse_body(surface.finalize().body).findall("line")


class TestDrawAnchorSegments:
    """Tests for draw_anchor_segments function."""

    def test_draws_line_between_anchors(self, small_surface):
        count = draw_anchor_segments(small_surface, [AnchorSegment(Vertex(0), Vertex(2))],
                                     TRIANGLE)
        assert count == 1

        line = _lines(small_surface)[0]
        assert (line.get("x1"), line.get("y1"), line.get("x2"), line.get("y2")) == \
            ("0", "0", "40", "30")
        assert line.get("stroke") == THEME.colors.highlight

    def test_unresolved_segment_skipped(self, small_surface, caplog):
        segments = [
            AnchorSegment(Vertex(0), Vertex(9)),
            AnchorSegment(Vertex(0), EdgeMidpoint(1, 2)),
        ]
        with caplog.at_level(logging.DEBUG, logger="math_diagrams.projection.annotations"):
            count = draw_anchor_segments(small_surface, segments, TRIANGLE)

        assert count == 1
        assert len(_lines(small_surface)) == 1
        assert "unresolved" in caplog.text

    def test_label_on_left_normal(self, small_surface):
        draw_anchor_segments(small_surface,
                             [AnchorSegment(Vertex(0), Vertex(1), label="h")], TRIANGLE)

        root = parse_body(small_surface.finalize().body)
        text = root.find("text")
        assert text.text == "h"
        # Midpoint (20, 0) pushed 10px along (0, 1)
        assert (text.get("x"), text.get("y")) == ("20", "10")
        assert text.get("paint-order") == "stroke fill"

    def test_dashed_segment(self, small_surface):
        draw_anchor_segments(small_surface,
                             [AnchorSegment(Vertex(0), Vertex(1), dashed=True)], TRIANGLE)
        assert _lines(small_surface)[0].get("stroke-dasharray") == THEME.dashes.dashed

    def test_empty_list(self, small_surface):
        assert draw_anchor_segments(small_surface, [], TRIANGLE) == 0


class TestDrawRightAngleMarkers:
    """Tests for draw_right_angle_markers function."""

    def test_marker_geometry(self, small_surface):
        marker = RightAngleMarker(at=Vertex(1), from_=Vertex(0), to=Vertex(2))
        assert draw_right_angle_markers(small_surface, [marker], TRIANGLE) == 1

        lines = _lines(small_surface)
        coords = [(l.get("x1"), l.get("y1"), l.get("x2"), l.get("y2")) for l in lines]
        assert coords == [("28", "0", "28", "12"), ("28", "12", "40", "12")]

    def test_custom_size(self, small_surface):
        marker = RightAngleMarker(at=Vertex(1), from_=Vertex(0), to=Vertex(2), size_px=5)
        draw_right_angle_markers(small_surface, [marker], TRIANGLE)
        assert _lines(small_surface)[0].get("x1") == "35"

    def test_zero_length_arm_skipped(self, small_surface):
        marker = RightAngleMarker(at=Vertex(0), from_=Vertex(0), to=Vertex(2))
        assert draw_right_angle_markers(small_surface, [marker], TRIANGLE) == 0

    def test_unresolved_marker_skipped(self, small_surface):
        markers = [
            RightAngleMarker(at=Vertex(5), from_=Vertex(0), to=Vertex(2)),
            RightAngleMarker(at=Vertex(1), from_=Vertex(0), to=Vertex(2)),
        ]
        assert draw_right_angle_markers(small_surface, markers, TRIANGLE) == 1
