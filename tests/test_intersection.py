"""
Unit tests for math_diagrams.geometry.intersection module.

Tests:
- Even-odd point containment and its on-edge rule
- Segment/segment intersection (proper, touching, colinear)
- Segment/rect and polygon/rect overlap
- Degenerate inputs
"""

import pytest

from math_diagrams.geometry import intersection
from math_diagrams.geometry.intersection import (
    CLOCKWISE,
    COLINEAR,
    COUNTERCLOCKWISE,
    orientation,
    point_in_polygon,
    point_in_rect,
    polygon_intersects_rect,
    segment_intersects_rect,
    segments_intersect,
)
from math_diagrams.geometry.primitives import Rect


class TestPointInPolygon:
    """Tests for point_in_polygon function."""

    def test_center_inside(self, square_10):
        assert point_in_polygon((5, 5), square_10)

    def test_outside(self, square_10):
        assert not point_in_polygon((15, 5), square_10)
        assert not point_in_polygon((-1, 5), square_10)

    def test_concave_notch(self):
        """Test a point in the notch of an L shape reads as outside."""
        l_shape = [(0, 0), (6, 0), (6, 2), (2, 2), (2, 5), (0, 5)]
        assert point_in_polygon((1, 4), l_shape)
        assert not point_in_polygon((4, 4), l_shape)

    def test_on_edge_half_open_rule(self, square_10):
        """Test min sides read inside and max sides read outside."""
        assert point_in_polygon((0, 5), square_10)
        assert point_in_polygon((5, 0), square_10)
        assert not point_in_polygon((10, 5), square_10)
        assert not point_in_polygon((5, 10), square_10)

    def test_winding_irrelevant(self, square_10):
        assert point_in_polygon((5, 5), list(reversed(square_10)))

    @pytest.mark.parametrize("polygon", [[], [(0, 0)], [(0, 0), (10, 10)]])
    def test_degenerate_polygon_contains_nothing(self, polygon):
        assert not point_in_polygon((0, 0), polygon)


class TestPointInRect:
    """Tests for point_in_rect function."""

    def test_closed_boundary(self):
        rect = Rect(0, 0, 10, 10)
        assert point_in_rect((10, 10), rect)
        assert not point_in_rect((10.5, 5), rect)

    def test_padding(self):
        assert point_in_rect((10.5, 5), Rect(0, 0, 10, 10), pad=1)


class TestOrientation:
    """Tests for orientation function."""

    def test_colinear(self):
        assert orientation((0, 0), (1, 1), (2, 2)) == COLINEAR

    def test_turns(self):
        assert orientation((0, 0), (1, 0), (1, 1)) == COUNTERCLOCKWISE
        assert orientation((0, 0), (1, 0), (1, -1)) == CLOCKWISE


class TestSegmentsIntersect:
    """Tests for segments_intersect function."""

    def test_proper_crossing(self):
        assert segments_intersect((0, 0), (10, 10), (0, 10), (10, 0))

    def test_parallel_disjoint(self):
        assert not segments_intersect((0, 0), (10, 0), (0, 1), (10, 1))

    def test_endpoint_touch(self):
        assert segments_intersect((0, 0), (5, 5), (5, 5), (10, 0))

    def test_t_junction(self):
        assert segments_intersect((0, 0), (10, 0), (5, 0), (5, 5))

    def test_colinear_overlap(self):
        assert segments_intersect((0, 0), (10, 0), (5, 0), (15, 0))

    def test_colinear_disjoint(self):
        assert not segments_intersect((0, 0), (4, 0), (5, 0), (10, 0))

    def test_symmetric(self):
        args = ((0, 0), (10, 10), (0, 10), (10, 0))
        assert segments_intersect(*args) == segments_intersect(args[2], args[3], args[0], args[1])

    def test_zero_length_segment_on_other(self):
        assert segments_intersect((5, 0), (5, 0), (0, 0), (10, 0))
        assert not segments_intersect((5, 1), (5, 1), (0, 0), (10, 0))

    def test_disjoint_boxes_skip_orientation(self, monkeypatch):
        """Test that far-apart segments are rejected before orientation tests."""
        def fail(*args):
            raise AssertionError("orientation should not be called")

        monkeypatch.setattr(intersection, "orientation", fail)
        assert not segments_intersect((0, 0), (1, 1), (5, 5), (6, 7))


class TestSegmentIntersectsRect:
    """Tests for segment_intersects_rect function."""

    RECT = Rect(10, 10, 20, 10)

    def test_crossing_through(self):
        assert segment_intersects_rect((0, 15), (40, 15), self.RECT)

    def test_fully_inside(self):
        assert segment_intersects_rect((12, 12), (14, 14), self.RECT)

    def test_miss(self):
        assert not segment_intersects_rect((0, 0), (40, 5), self.RECT)

    def test_diagonal_corner_miss(self):
        """Test a diagonal whose bounding box overlaps but which passes the corner."""
        assert not segment_intersects_rect((0, 12), (12, 0), self.RECT)

    def test_padding_catches_near_miss(self):
        assert not segment_intersects_rect((0, 9), (40, 9), self.RECT)
        assert segment_intersects_rect((0, 9), (40, 9), self.RECT, pad=1.5)


class TestPolygonIntersectsRect:
    """Tests for polygon_intersects_rect function."""

    def test_edge_crossing(self, square_10):
        assert polygon_intersects_rect(square_10, Rect(8, 2, 5, 2))

    def test_rect_inside_polygon(self, square_10):
        """Test containment with no edge crossing counts as overlap."""
        assert polygon_intersects_rect(square_10, Rect(3, 3, 2, 2))

    def test_polygon_inside_rect(self, square_10):
        assert polygon_intersects_rect(square_10, Rect(-5, -5, 30, 30))

    def test_disjoint(self, square_10):
        assert not polygon_intersects_rect(square_10, Rect(20, 20, 5, 5))

    def test_padding(self, square_10):
        assert not polygon_intersects_rect(square_10, Rect(11, 2, 4, 4))
        assert polygon_intersects_rect(square_10, Rect(11, 2, 4, 4), pad=1.5)

    def test_two_vertex_polygon_is_a_segment(self):
        assert polygon_intersects_rect([(0, 5), (20, 5)], Rect(5, 0, 5, 10))

    @pytest.mark.parametrize("polygon", [[], [(5, 5)]])
    def test_degenerate_polygon_intersects_nothing(self, polygon):
        assert not polygon_intersects_rect(polygon, Rect(0, 0, 10, 10))
