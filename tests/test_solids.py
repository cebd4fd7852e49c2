"""
Unit tests for math_diagrams.projection.solids module.

Tests:
- Projection into a viewport for each view
- Face maps and missing face vertices
- Wireframe drawing with and without hidden edges
- Built-in solid definitions
"""

import logging

import numpy as np
import pytest

from math_diagrams.config import THEME
from math_diagrams.projection.solids import (
    SOLIDS,
    VIEW_MATRICES,
    Wireframe,
    draw_wireframe,
    project_wireframe,
    rectangular_prism,
)
from tests.conftest import count_tags, parse_body


@pytest.fixture
def prism():
    return rectangular_prism(4, 3, 2)


class TestProjectWireframe:
    """Tests for project_wireframe function."""

    @pytest.mark.parametrize("view", sorted(VIEW_MATRICES))
    def test_fits_inside_padding(self, prism, view):
        projected = project_wireframe(prism, 200, 150, 10, view=view)

        assert len(projected.vertices) == 8
        for p in projected.vertices:
            assert 10 - 1e-9 <= p.x <= 190 + 1e-9
            assert 10 - 1e-9 <= p.y <= 140 + 1e-9

    def test_y_up_becomes_screen_up(self, prism):
        v = project_wireframe(prism, 200, 150, 10).vertices
        assert v[3].y < v[0].y
        assert v[1].x > v[0].x

    def test_oblique_depth_goes_up_and_right(self, prism):
        v = project_wireframe(prism, 200, 150, 10, view="oblique").vertices
        assert v[4].x > v[0].x
        assert v[4].y < v[0].y

    def test_front_view_drops_depth(self, prism):
        v = project_wireframe(prism, 200, 150, 10, view="front").vertices
        assert v[4] == pytest.approx(v[0])

    def test_unknown_view_falls_back(self, prism, caplog):
        with caplog.at_level(logging.WARNING, logger="math_diagrams.projection.solids"):
            projected = project_wireframe(prism, 200, 150, 10, view="cabinet")

        assert "Unknown view 'cabinet'" in caplog.text
        assert projected.vertices == project_wireframe(prism, 200, 150, 10).vertices

    def test_face_map(self, prism):
        projected = project_wireframe(prism, 200, 150, 10)
        assert projected.faces["front"] == projected.vertices[0:4]
        assert set(projected.faces) == set(prism.faces)

    def test_missing_face_vertex_is_none(self):
        wire = Wireframe(np.array([[0, 0, 0], [1, 0, 0], [0, 1, 0]], dtype=float),
                         [(0, 1)], faces={"bad": [0, 1, 7]})
        projected = project_wireframe(wire, 100, 100, 5)
        assert projected.faces["bad"][2] is None
        assert projected.faces["bad"][0] is not None

    def test_fit_returned(self, prism):
        projected = project_wireframe(prism, 200, 150, 10)
        assert projected.fit.flip_y
        assert projected.fit.scale > 0


class TestDrawWireframe:
    """Tests for draw_wireframe function."""

    def test_all_edges_drawn(self, surface, prism):
        projected = project_wireframe(prism, 400, 300, 20)
        assert draw_wireframe(surface, prism, projected) == 12

        lines = parse_body(surface.finalize().body).findall("line")
        dashed = [l for l in lines if l.get("stroke-dasharray") == THEME.dashes.back_edge]
        assert len(lines) == 12
        assert len(dashed) == 3

    def test_hidden_edges_omitted(self, surface, prism):
        projected = project_wireframe(prism, 400, 300, 20)
        assert draw_wireframe(surface, prism, projected, show_hidden=False) == 9

    def test_face_fills_drawn_first(self, surface, prism):
        projected = project_wireframe(prism, 400, 300, 20)
        draw_wireframe(surface, prism, projected, face_fills={"front": THEME.colors.fill})

        root = parse_body(surface.finalize().body)
        assert root[0].tag == "polygon"
        assert root[0].get("fill") == THEME.colors.fill
        assert count_tags(root)["polygon"] == 1

    def test_fill_for_unknown_face_ignored(self, surface, prism):
        projected = project_wireframe(prism, 400, 300, 20)
        draw_wireframe(surface, prism, projected, face_fills={"lid": "#000"})
        assert "polygon" not in count_tags(parse_body(surface.finalize().body))

    def test_edge_to_missing_vertex_skipped(self, surface):
        wire = Wireframe(np.array([[0, 0, 0], [1, 1, 0]], dtype=float), [(0, 1), (1, 5)])
        projected = project_wireframe(wire, 100, 100, 5)
        assert draw_wireframe(surface, wire, projected) == 1

    def test_custom_color(self, surface, prism):
        projected = project_wireframe(prism, 400, 300, 20)
        draw_wireframe(surface, prism, projected, show_hidden=False, color="#123456")
        lines = parse_body(surface.finalize().body).findall("line")
        assert all(l.get("stroke") == "#123456" for l in lines)


class TestBuiltInSolids:
    """Tests for the SOLIDS table."""

    @pytest.mark.parametrize("name", sorted(SOLIDS))
    def test_definition_consistent(self, name):
        builder = SOLIDS[name]
        wire = builder(*([2.0] * (builder.__code__.co_argcount)))
        n = len(wire.vertices)

        assert wire.vertices.shape == (n, 3)
        assert all(0 <= a < n and 0 <= b < n for a, b in wire.edges)
        for face in wire.faces.values():
            assert len(face) >= 3
            assert all(0 <= i < n for i in face)
        edges = {frozenset(e) for e in wire.edges}
        assert all(frozenset(h) in edges for h in wire.hidden_edges)

    def test_is_hidden_either_orientation(self, prism):
        assert prism.is_hidden((0, 4))
        assert prism.is_hidden((4, 0))
        assert not prism.is_hidden((0, 1))
