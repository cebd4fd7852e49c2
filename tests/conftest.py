"""
Pytest configuration and fixtures for math_diagrams.

Provides:
- Surface fixtures (default chart area and a small one)
- Geometry fixtures (unit square, regular pentagon, projected prism tables)
- Package logger reset between tests
- SVG assertion helpers
"""

import logging
import math
import re
from typing import Dict, List
from xml.etree import ElementTree as ET

import pytest

from math_diagrams.drawing.surface import DrawingSurface, SurfaceOptions, create_surface
from math_diagrams.geometry.primitives import Point, Rect
from math_diagrams.geometry.sectors import regular_polygon
from math_diagrams.logging_config import PACKAGE_LOGGER, LogContext

SVG_NS = {'svg': 'http://www.w3.org/2000/svg'}


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo setup_logging() side effects so caplog keeps seeing records."""
    yield
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    for flt in list(logger.filters):
        logger.removeFilter(flt)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    LogContext._active.set(())


# ============================================================================
# Surface Fixtures
# ============================================================================

@pytest.fixture
def surface() -> DrawingSurface:
    """Fresh surface over the default 400x300 chart area."""
    return create_surface()


@pytest.fixture
def small_surface() -> DrawingSurface:
    """Surface whose chart area is the 100x100 square at the origin."""
    return create_surface(SurfaceOptions(chart_area=Rect(0, 0, 100, 100)))


# ============================================================================
# Geometry Fixtures
# ============================================================================

@pytest.fixture
def unit_square() -> List[Point]:
    """Corners (0,0), (1,0), (1,1), (0,1)."""
    return [Point(0.0, 0.0), Point(1.0, 0.0), Point(1.0, 1.0), Point(0.0, 1.0)]


@pytest.fixture
def square_10() -> List[Point]:
    """Axis-aligned 10x10 square at the origin."""
    return [Point(0.0, 0.0), Point(10.0, 0.0), Point(10.0, 10.0), Point(0.0, 10.0)]


@pytest.fixture
def pentagon() -> List[Point]:
    """Regular pentagon of radius 100 centered at (200, 150), first vertex up."""
    return regular_polygon(5, 200.0, 150.0, 100.0)


@pytest.fixture
def prism_vertices() -> List[Point]:
    """Hand-projected 8-vertex box (front face then back face)."""
    return [
        Point(0.0, 100.0), Point(100.0, 100.0), Point(100.0, 40.0), Point(0.0, 40.0),
        Point(30.0, 75.0), Point(130.0, 75.0), Point(130.0, 15.0), Point(30.0, 15.0),
    ]


@pytest.fixture
def prism_faces(prism_vertices) -> Dict[str, List[Point]]:
    """Face map for prism_vertices."""
    v = prism_vertices
    return {
        "front": [v[0], v[1], v[2], v[3]],
        "top": [v[3], v[2], v[6], v[7]],
        "right": [v[1], v[5], v[6], v[2]],
    }


# ============================================================================
# Assertion Helpers
# ============================================================================

def parse_svg(document: str) -> ET.Element:
    """Parse a standalone SVG document (asserts well-formedness)."""
    document = re.sub(r'^<\?xml[^?]*\?>\s*', '', document)
    root = ET.fromstring(document)
    assert root.tag == f"{{{SVG_NS['svg']}}}svg"
    return root


def parse_body(body: str) -> ET.Element:
    """Parse a finalized body fragment by wrapping it in a bare root."""
    return ET.fromstring(f"<root>{body}</root>")


def count_tags(root: ET.Element) -> Dict[str, int]:
    """Element counts by local tag name (namespace stripped)."""
    counts: Dict[str, int] = {}
    for elem in root.iter():
        tag = elem.tag.split('}', 1)[-1]
        counts[tag] = counts.get(tag, 0) + 1
    return counts


def assert_points_close(actual, expected, tol: float = 1e-9) -> None:
    """Assert two point sequences match coordinate-wise within tol."""
    assert len(actual) == len(expected)
    for i, (a, e) in enumerate(zip(actual, expected)):
        assert math.isclose(a[0], e[0], abs_tol=tol) and math.isclose(a[1], e[1], abs_tol=tol), \
            f"Point {i}: expected {tuple(e)}, got {tuple(a)}"
