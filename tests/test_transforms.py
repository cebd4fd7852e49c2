"""
Unit tests for math_diagrams.drawing.transforms module.

Tests:
- Parsing of each SVG transform function
- Composition order of transform lists
- Tolerance of malformed expressions
- Box transformation
"""

import logging

import numpy as np
import pytest

from math_diagrams.drawing.transforms import (
    apply,
    is_identity,
    parse_transform,
    rotation,
    transform_box,
)


class TestParseTransform:
    """Tests for parse_transform function."""

    def test_empty_is_identity(self):
        assert is_identity(parse_transform(""))

    def test_translate(self):
        assert apply(parse_transform("translate(10, 20)"), 1, 2) == pytest.approx((11, 22))

    def test_translate_single_argument(self):
        assert apply(parse_transform("translate(5)"), 0, 0) == pytest.approx((5, 0))

    def test_scale(self):
        assert apply(parse_transform("scale(2)"), 3, 4) == pytest.approx((6, 8))
        assert apply(parse_transform("scale(2 -1)"), 3, 4) == pytest.approx((6, -4))

    def test_rotate_about_point(self):
        """Test rotate(90, cx, cy) turns clockwise on screen around the center."""
        m = parse_transform("rotate(90, 10, 10)")
        assert apply(m, 20, 10) == pytest.approx((10, 20))
        assert apply(m, 10, 10) == pytest.approx((10, 10))

    def test_matrix(self):
        m = parse_transform("matrix(1 0 0 1 7 -3)")
        assert apply(m, 0, 0) == pytest.approx((7, -3))

    def test_skew(self):
        assert apply(parse_transform("skewX(45)"), 0, 10) == pytest.approx((10, 10))
        assert apply(parse_transform("skewY(45)"), 10, 0) == pytest.approx((10, 10))

    def test_list_applies_right_to_left(self):
        """Test "translate scale" scales first, then translates."""
        m = parse_transform("translate(100, 0) scale(2)")
        assert apply(m, 5, 5) == pytest.approx((110, 10))

    def test_exponent_and_signs(self):
        m = parse_transform("translate(-1e1,+.5)")
        assert apply(m, 0, 0) == pytest.approx((-10, 0.5))

    def test_unknown_function_ignored(self, caplog):
        with caplog.at_level(logging.WARNING, logger="math_diagrams.drawing.transforms"):
            m = parse_transform("perspective(3) translate(1, 1)")

        assert apply(m, 0, 0) == pytest.approx((1, 1))
        assert any("perspective" in r.getMessage() for r in caplog.records)

    def test_wrong_arity_ignored(self, caplog):
        with caplog.at_level(logging.WARNING, logger="math_diagrams.drawing.transforms"):
            m = parse_transform("rotate(10, 5)")

        assert is_identity(m)
        assert len(caplog.records) == 1


class TestTransformBox:
    """Tests for transform_box function."""

    def test_translation(self):
        box = transform_box(parse_transform("translate(10, 5)"), 0, 0, 4, 2)
        assert box == pytest.approx((10, 5, 14, 7))

    def test_rotation_uses_all_corners(self):
        box = transform_box(rotation(45), -1, -1, 1, 1)
        r = np.sqrt(2)
        assert box == pytest.approx((-r, -r, r, r))
