"""
Sample renders built on the kernel.

Each render function takes a ProjectConfig and returns the FinalizedSvg of
one fresh DrawingSurface. ``render_demo`` wraps one in a standalone SVG
document; ``DEMOS`` lists them by CLI name.

Usage:
    from math_diagrams.demos import render_demo

    svg = render_demo("prism")
"""

import logging
import math
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np

from math_diagrams.config import THEME, LineStyle
from math_diagrams.drawing.label_placer import (
    LabelCandidate,
    PolygonObstacle,
    RectObstacle,
    SegmentObstacle,
    StackedLabel,
    place_edge_label,
    place_label_outward,
    relax_stacked_labels,
)
from math_diagrams.drawing.path_builder import PathBuilder
from math_diagrams.drawing.surface import DrawingSurface, FinalizedSvg, SurfaceOptions, create_surface
from math_diagrams.drawing.text_metrics import estimate_text_width
from math_diagrams.drawing.viewport import compute_fit
from math_diagrams.geometry.primitives import Point, Rect
from math_diagrams.geometry.sectors import partition_polygon, regular_polygon
from math_diagrams.logging_config import LogContext, timed
from math_diagrams.project_config import ProjectConfig
from math_diagrams.projection.anchors import EdgeMidpoint, FaceCentroid, Vertex
from math_diagrams.projection.annotations import (
    AnchorSegment,
    RightAngleMarker,
    draw_anchor_segments,
    draw_right_angle_markers,
)
from math_diagrams.projection.solids import draw_wireframe, project_wireframe, rectangular_prism

logger = logging.getLogger(__name__)

DEFAULT_PIE_DATA: Tuple[Tuple[str, float], ...] = (
    ("Apples", 35), ("Pears", 8), ("Plums", 6), ("Figs", 5), ("Kiwis", 4), ("Limes", 3),
)

L_SHAPE: Tuple[Tuple[float, float], ...] = ((0, 0), (6, 0), (6, 2), (2, 2), (2, 5), (0, 5))


def _new_surface(config: ProjectConfig, chart_area: Optional[Rect] = None) -> DrawingSurface:
    options = SurfaceOptions.from_config(config.surface, config.viewport.width,
                                         config.viewport.height)
    if chart_area is not None:
        options.chart_area = chart_area
    return create_surface(options)


def _draw_placed_label(surface: DrawingSurface, position: Point, text: str,
                       font_px: float, placed: RectObstacle) -> None:
    surface.draw_text(position.x, position.y, text, font_px=font_px,
                      anchor="middle", baseline="middle")
    placed.add(Rect.centered(position.x, position.y,
                             estimate_text_width(text, font_px), font_px))


# ---------------------------------------------------------------------------
# Renders
# ---------------------------------------------------------------------------

@timed()
def render_polygon_fraction(config: ProjectConfig, sides: int = 6, parts: int = 6,
                            shaded: int = 2) -> FinalizedSvg:
    """Regular polygon cut into equal angular sectors, some hatched."""
    vp = config.viewport
    polygon = regular_polygon(sides, 0.0, 0.0, 1.0)
    fit = compute_fit(polygon, vp.width, vp.height, vp.padding, flip_y=vp.flip_y)
    screen = fit.project_all(polygon)
    center = fit.project((0.0, 0.0))

    surface = _new_surface(config)
    hatch = surface.add_hatch_pattern("shade", color=THEME.colors.highlight,
                                      stroke_width=1.5, spacing=6)
    for i, sector in enumerate(partition_polygon(center, screen, parts)):
        surface.draw_polygon(sector, fill=hatch if i < shaded else THEME.colors.white,
                             stroke=THEME.colors.stroke, stroke_linejoin="round")
    surface.draw_polygon(screen, stroke=THEME.colors.black,
                         stroke_width=THEME.stroke_widths.thick)

    bottom = max(p.y for p in screen)
    surface.draw_text(center.x, bottom + 10, f"{shaded}/{parts} shaded",
                      font_px=THEME.font_sizes.medium, anchor="middle", baseline="hanging")
    return surface.finalize(config.surface.padding)


@timed()
def render_prism(config: ProjectConfig) -> FinalizedSvg:
    """Oblique rectangular prism with anchored diagonals and edge labels."""
    vp = config.viewport
    solid = rectangular_prism(4.0, 3.0, 2.5)
    projected = project_wireframe(solid, vp.width, vp.height, vp.padding, view="oblique")

    surface = _new_surface(config)
    draw_wireframe(surface, solid, projected, show_hidden=config.theme.show_hidden_edges,
                   face_fills={"front": THEME.colors.fill})

    segments = [
        AnchorSegment(Vertex(0), Vertex(6), "d", dashed=True),
        AnchorSegment(EdgeMidpoint(3, 2), FaceCentroid("top"), dashed=True,
                      color=THEME.colors.axis),
        # Index 8 exists only on solids with an apex cap; skipped here
        AnchorSegment(Vertex(1), Vertex(8), "h"),
    ]
    drawn = draw_anchor_segments(surface, segments, projected.vertices, projected.faces)
    draw_right_angle_markers(surface, [RightAngleMarker(Vertex(1), Vertex(0), Vertex(2))],
                             projected.vertices, projected.faces)
    logger.debug("Prism annotations: %d of %d segments drawn", drawn, len(segments))

    faces = {name: [p for p in points if p is not None]
             for name, points in projected.faces.items()}
    placed = RectObstacle()
    face_obstacles = [PolygonObstacle(points) for points in faces.values() if len(points) >= 3]
    pc = config.placement
    font_px = THEME.font_sizes.base
    for (a, b), face, text in (((0, 1), "front", "4 cm"),
                               ((3, 0), "front", "3 cm"),
                               ((1, 5), "right", "2.5 cm")):
        placement = place_edge_label(projected.vertices[a], projected.vertices[b], text,
                                     faces[face], font_px=font_px,
                                     extra_obstacles=face_obstacles + [placed],
                                     base_offset=pc.base_offset, step=pc.step,
                                     max_iterations=pc.max_iterations, pad=pc.rect_pad)
        _draw_placed_label(surface, placement.position, text, font_px, placed)

    return surface.finalize(config.surface.padding)


@timed()
def render_pie_labels(config: ProjectConfig,
                      data: Sequence[Tuple[str, float]] = DEFAULT_PIE_DATA) -> FinalizedSvg:
    """Pie chart with callout labels stacked down each side."""
    vp = config.viewport
    cx, cy = vp.width / 2, vp.height / 2
    radius = max(min(vp.width, vp.height) / 2 - vp.padding - 10, 1.0)

    surface = _new_surface(config)
    total = sum(value for _, value in data if value > 0)
    if total <= 0:
        surface.draw_circle(cx, cy, radius, stroke=THEME.colors.hidden_edge)
        surface.draw_text(cx, cy, "No data", anchor="middle", baseline="middle")
        return surface.finalize(config.surface.padding)

    sides: Dict[str, List[StackedLabel]] = {"left": [], "right": []}
    angle = -math.pi / 2
    for i, (name, value) in enumerate(data):
        if value <= 0:
            continue
        sweep = 2 * math.pi * value / total
        surface.draw_path(PathBuilder.circular_sector(cx, cy, radius, angle, angle + sweep),
                          fill=THEME.series_color(i), stroke=THEME.colors.white,
                          stroke_width=THEME.stroke_widths.base)
        mid = angle + sweep / 2
        edge = Point(cx + radius * math.cos(mid), cy + radius * math.sin(mid))
        side = "right" if math.cos(mid) >= 0 else "left"
        sides[side].append(StackedLabel(cy + (radius + 12) * math.sin(mid),
                                        payload=(f"{name} {100 * value / total:.0f}%", edge)))
        angle += sweep

    for side, labels in sides.items():
        sign = 1 if side == "right" else -1
        label_x = cx + sign * (radius + 30)
        elbow_x = cx + sign * (radius + 18)
        relaxed = relax_stacked_labels(labels, lower=vp.padding, upper=vp.height - vp.padding,
                                       min_gap=config.placement.min_gap)
        for label in relaxed:
            text, edge = label.payload
            surface.draw_polyline([edge, (elbow_x, label.final), (label_x, label.final)],
                                  stroke=THEME.colors.axis, stroke_width=THEME.stroke_widths.thin)
            surface.draw_text(label_x + sign * 4, label.final, text,
                              anchor="start" if sign > 0 else "end", baseline="middle")

    return surface.finalize(config.surface.padding)


@timed()
def render_edge_labels(config: ProjectConfig,
                       shape: Sequence[Tuple[float, float]] = L_SHAPE) -> FinalizedSvg:
    """Composite polygon (y-up data) with a length label beside every side."""
    vp = config.viewport
    fit = compute_fit(shape, vp.width, vp.height, vp.padding, flip_y=True)
    screen = fit.project_all(shape)

    surface = _new_surface(config)
    surface.draw_polygon(screen, fill=THEME.colors.fill, stroke=THEME.colors.stroke,
                         stroke_width=THEME.stroke_widths.base)

    pc = config.placement
    font_px = THEME.font_sizes.base
    placed = RectObstacle()
    n = len(shape)
    for i in range(n):
        a, b = shape[i], shape[(i + 1) % n]
        text = f"{math.hypot(b[0] - a[0], b[1] - a[1]):g} m"
        placement = place_edge_label(screen[i], screen[(i + 1) % n], text, screen,
                                     font_px=font_px, extra_obstacles=[placed],
                                     base_offset=pc.base_offset, step=pc.step,
                                     max_iterations=pc.max_iterations, pad=pc.rect_pad)
        _draw_placed_label(surface, placement.position, text, font_px, placed)

    return surface.finalize(config.surface.padding)


@timed()
def render_clipped_plot(config: ProjectConfig) -> FinalizedSvg:
    """Function plot whose series overshoots the axes and is clipped."""
    vp = config.viewport
    area = Rect(vp.padding + 30, vp.padding + 10,
                vp.width - 2 * vp.padding - 40, vp.height - 2 * vp.padding - 30)
    surface = _new_surface(config, chart_area=area)

    def sx(x: float) -> float:
        return area.x + x / (2 * math.pi) * area.width

    def sy(y: float) -> float:
        return area.y + (1 - (y + 1) / 2) * area.height

    for level in (-1.0, -0.5, 0.5, 1.0):
        surface.draw_line(area.x, sy(level), area.right, sy(level),
                          **LineStyle.GRID.get_svg_style())

    arrow = surface.add_arrow_marker("axis-arrow", THEME.colors.axis, size=7)
    axis = LineStyle.AXIS.get_svg_style()
    surface.draw_line(area.x, sy(0), area.right + 12, sy(0), marker_end=arrow, **axis)
    surface.draw_line(area.x, area.bottom, area.x, area.y - 12, marker_end=arrow, **axis)

    for k, tick in enumerate(("0", "π/2", "π", "3π/2", "2π")):
        x = sx(k * math.pi / 2)
        surface.draw_line(x, area.bottom, x, area.bottom + 4, **axis)
        surface.draw_text(x, area.bottom + 6, tick, font_px=THEME.font_sizes.small,
                          anchor="middle", baseline="hanging")

    xs = np.linspace(0.0, 2 * math.pi, 97)
    curve = [(sx(float(x)), sy(1.4 * math.sin(float(x)))) for x in xs]
    surface.draw_in_clipped_region(
        lambda s: s.draw_polyline(curve, stroke=THEME.series_color(0),
                                  stroke_width=THEME.stroke_widths.thick))

    candidate = LabelCandidate.for_text("y = 1.4 sin x", (sx(math.pi / 2), sy(0.5)), (0, 1),
                                        font_px=THEME.font_sizes.base)
    placement = place_label_outward(candidate, [SegmentObstacle.from_polyline(curve)],
                                    step=config.placement.step,
                                    max_iterations=config.placement.max_iterations,
                                    pad=config.placement.rect_pad, bounds=area)
    surface.draw_text(placement.x, placement.y, candidate.text, anchor="middle",
                      baseline="middle", fill=THEME.series_color(0))

    surface.draw_text(area.x - 24, area.y + area.height / 2, "amplitude",
                      font_px=THEME.font_sizes.small, anchor="middle", rotate=-90)
    surface.with_transform(
        f"translate({area.x}, {area.y - 16})",
        lambda s: s.draw_text(0, 0, "Clipped series", font_px=THEME.font_sizes.large,
                              font_weight="bold"))
    return surface.finalize(config.surface.padding)


DEMOS: Dict[str, Callable[[ProjectConfig], FinalizedSvg]] = {
    "polygon-fraction": render_polygon_fraction,
    "prism": render_prism,
    "pie-labels": render_pie_labels,
    "edge-labels": render_edge_labels,
    "clipped-plot": render_clipped_plot,
}


def render_demo(name: str, config: Optional[ProjectConfig] = None) -> str:
    """Render one demo to a standalone SVG document.

    Raises:
        KeyError: If ``name`` is not in DEMOS
    """
    config = config or ProjectConfig()
    render = DEMOS[name]
    with LogContext(demo=name):
        result = render(config)
    return result.to_svg(font_family=config.theme.font_family,
                         font_size=config.theme.font_size)
