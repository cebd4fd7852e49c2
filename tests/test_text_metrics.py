"""
Unit tests for math_diagrams.drawing.text_metrics module.
"""

import pytest

from math_diagrams.config import TEXT_WIDTH_FACTOR
from math_diagrams.drawing.text_metrics import (
    estimate_text_width,
    estimate_wrapped_text_dimensions,
    wrap_text,
)


class TestEstimateTextWidth:
    """Tests for estimate_text_width function."""

    def test_proportional_to_length(self):
        assert estimate_text_width("abcd", 10) == pytest.approx(4 * 10 * TEXT_WIDTH_FACTOR)

    def test_empty(self):
        assert estimate_text_width("", 12) == 0

    def test_monotone(self):
        assert estimate_text_width("3 cm", 12) < estimate_text_width("3.5 cm", 12)
        assert estimate_text_width("3 cm", 12) < estimate_text_width("3 cm", 14)


class TestWrapText:
    """Tests for wrap_text function."""

    def test_fits_on_one_line(self):
        assert wrap_text("area of the base", 1000, 12) == ["area of the base"]

    def test_wraps_greedily(self):
        # 6 chars at 10px -> 36px per line
        assert wrap_text("aa bb cc dd", 36, 10) == ["aa bb", "cc dd"]

    def test_long_word_kept_whole(self):
        assert wrap_text("hypotenuse is", 20, 10) == ["hypotenuse", "is"]

    def test_explicit_newlines(self):
        assert wrap_text("a\n\nb", 1000, 10) == ["a", "", "b"]


class TestEstimateWrappedTextDimensions:
    """Tests for estimate_wrapped_text_dimensions function."""

    def test_two_lines(self):
        width, height = estimate_wrapped_text_dimensions("aa bb cc dd", 36, font_px=10,
                                                         line_height=1.5)
        assert width == pytest.approx(5 * 10 * TEXT_WIDTH_FACTOR)
        assert height == pytest.approx(2 * 10 * 1.5)
