"""
Unit tests for math_diagrams.projection.anchors module.

Tests:
- Resolution of each anchor kind
- Unresolvable anchors (bad index, missing face, None entries)
- Parsing the declarative dict form
"""

import logging

import numpy as np
import pytest

from math_diagrams.projection.anchors import (
    EdgeMidpoint,
    EdgePoint,
    FaceCentroid,
    Vertex,
    anchor_from_dict,
    resolve_anchor,
)


class TestResolveAnchor:
    """Tests for resolve_anchor function."""

    def test_vertex(self, prism_vertices):
        assert resolve_anchor(Vertex(5), prism_vertices) == (130.0, 75.0)

    def test_edge_midpoint(self):
        assert resolve_anchor(EdgeMidpoint(0, 1), [(0, 0), (10, 0)]) == (5.0, 0.0)

    def test_edge_point_endpoints_exact(self, prism_vertices):
        a, b = prism_vertices[2], prism_vertices[6]
        assert resolve_anchor(EdgePoint(2, 6, 0.0), prism_vertices) == a
        assert resolve_anchor(EdgePoint(2, 6, 1.0), prism_vertices) == b

    def test_edge_point_fraction(self):
        p = resolve_anchor(EdgePoint(0, 1, 0.25), [(0, 0), (8, 4)])
        assert p == pytest.approx((2.0, 1.0))

    def test_face_centroid(self, prism_vertices, prism_faces):
        p = resolve_anchor(FaceCentroid("front"), prism_vertices, prism_faces)
        assert p == pytest.approx((50.0, 70.0))

    def test_face_centroid_skips_none_points(self):
        faces = {"base": [(0, 0), None, (4, 0), (4, 4), (0, 4)]}
        assert resolve_anchor(FaceCentroid("base"), [], faces) == pytest.approx((2.0, 2.0))

    def test_numpy_integer_index(self, prism_vertices):
        assert resolve_anchor(Vertex(np.int64(1)), prism_vertices) == (100.0, 100.0)

    def test_result_is_plain_float(self):
        p = resolve_anchor(Vertex(0), np.array([[3, 4]]))
        assert type(p.x) is float


class TestUnresolvedAnchors:
    """Tests for anchors that cannot be resolved."""

    @pytest.mark.parametrize("anchor", [
        Vertex(8),
        Vertex(-1),
        EdgeMidpoint(0, 99),
        EdgePoint(-2, 1, 0.5),
        Vertex(True),
    ])
    def test_index_out_of_range(self, anchor, prism_vertices):
        assert resolve_anchor(anchor, prism_vertices) is None

    def test_none_entry(self):
        vertices = [(0, 0), None, (5, 5)]
        assert resolve_anchor(Vertex(1), vertices) is None
        assert resolve_anchor(EdgeMidpoint(0, 1), vertices) is None
        assert resolve_anchor(EdgeMidpoint(0, 2), vertices) == (2.5, 2.5)

    def test_missing_face(self, prism_vertices, prism_faces):
        assert resolve_anchor(FaceCentroid("back"), prism_vertices, prism_faces) is None
        assert resolve_anchor(FaceCentroid("front"), prism_vertices) is None

    def test_face_of_only_none(self):
        assert resolve_anchor(FaceCentroid("f"), [], {"f": [None, None]}) is None

    def test_unknown_anchor_object(self, prism_vertices):
        assert resolve_anchor("vertex 0", prism_vertices) is None


class TestAnchorFromDict:
    """Tests for anchor_from_dict function."""

    @pytest.mark.parametrize("data,expected", [
        ({"type": "vertex", "index": 3}, Vertex(3)),
        ({"type": "edgeMidpoint", "a": 0, "b": 1}, EdgeMidpoint(0, 1)),
        ({"type": "edgePoint", "a": 2, "b": 6, "t": 0.25}, EdgePoint(2, 6, 0.25)),
        ({"type": "faceCentroid", "face": "top"}, FaceCentroid("top")),
    ])
    def test_forms(self, data, expected):
        assert anchor_from_dict(data) == expected

    def test_missing_field(self, caplog):
        with caplog.at_level(logging.WARNING, logger="math_diagrams.projection.anchors"):
            assert anchor_from_dict({"type": "edgePoint", "a": 0, "b": 1}) is None
        assert "Malformed" in caplog.text

    def test_non_numeric_index(self):
        assert anchor_from_dict({"type": "vertex", "index": "first"}) is None

    def test_unknown_type(self, caplog):
        with caplog.at_level(logging.WARNING, logger="math_diagrams.projection.anchors"):
            assert anchor_from_dict({"type": "apex"}) is None
        assert "Unknown anchor type" in caplog.text

    def test_not_a_mapping(self):
        assert anchor_from_dict(["vertex", 0]) is None
