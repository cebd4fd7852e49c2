"""
Extent-tracking SVG drawing surface.

A DrawingSurface collects svgwrite elements in draw order and keeps a
running Extent of everything emitted (strokes and estimated text boxes
included). The output viewport is not decided until ``finalize``: the
surface grows to fit its content rather than clipping it.

Scoping follows an explicit push/pop discipline:
- ``push_transform``/``pop_transform`` wrap draws in ``<g transform=...>``;
  the extent of nested draws is mapped through the accumulated matrix.
- ``push_clip``/``pop_clip`` wrap draws in a group clipped to the chart
  area; their extent is clamped to the clip rectangle.
Context-manager (``transform``, ``clipped``) and callback
(``with_transform``, ``draw_in_clipped_region``) forms sit on top of the
stacks and always pop what they pushed.

The surface never validates style values and never raises on drawing input;
degenerate calls are logged and skipped.

One surface serves one render: create, draw, finalize, discard.
"""

import logging
import math
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Tuple, TypeVar, Union
from xml.etree import ElementTree as ET
from xml.sax.saxutils import escape

import numpy as np
import svgwrite

from math_diagrams.config import (
    CLIP_ID,
    FONT_PX_DEFAULT,
    LINE_HEIGHT_DEFAULT,
    PADDING,
    TEXT_ASCENT_FACTOR,
    THEME,
)
from math_diagrams.drawing.path_builder import PathBuilder, svg_number
from math_diagrams.drawing.text_metrics import estimate_text_width, wrap_text
from math_diagrams.drawing.transforms import is_identity, parse_transform, transform_box
from math_diagrams.geometry.primitives import Extent, PointLike, Rect

logger = logging.getLogger(__name__)

T = TypeVar('T')
Box = Tuple[float, float, float, float]

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"


def _quote(value: str) -> str:
    return escape(value, {'"': "&quot;"})


# ---------------------------------------------------------------------------
# Options and result
# ---------------------------------------------------------------------------

@dataclass
class SurfaceOptions:
    """Per-render surface settings.

    ``chart_area`` seeds the extent (an empty surface finalizes to it) and
    is the rectangle used by clipped regions.
    """
    chart_area: Rect = Rect(0.0, 0.0, 400.0, 300.0)
    font_px_default: float = FONT_PX_DEFAULT
    line_height_default: float = LINE_HEIGHT_DEFAULT

    @classmethod
    def from_config(cls, surface_config: Any, width: float, height: float) -> 'SurfaceOptions':
        """Build options from a ``project_config.SurfaceConfig`` section."""
        return cls(chart_area=Rect(0.0, 0.0, width, height),
                   font_px_default=surface_config.font_px_default,
                   line_height_default=surface_config.line_height_default)


@dataclass(frozen=True)
class FinalizedSvg:
    """Finalized markup body plus the viewport that contains it."""
    body: str
    viewport_x: int
    viewport_y: int
    width: int
    height: int

    @property
    def view_box(self) -> str:
        return f"{self.viewport_x} {self.viewport_y} {self.width} {self.height}"

    def to_svg(self, font_family: str = THEME.font_family,
               font_size: float = THEME.font_sizes.base,
               background: Optional[str] = None) -> str:
        """Standalone ``<svg>`` document with explicit pixel size."""
        bg = ""
        if background:
            bg = (f'<rect x="{self.viewport_x}" y="{self.viewport_y}" width="{self.width}" '
                  f'height="{self.height}" fill="{_quote(background)}"/>')
        return (f'<svg xmlns="{SVG_NS}" xmlns:xlink="{XLINK_NS}" '
                f'width="{self.width}" height="{self.height}" viewBox="{self.view_box}" '
                f'font-family="{_quote(font_family)}" '
                f'font-size="{svg_number(font_size)}">{bg}{self.body}</svg>')

    def save(self, path: Union[str, Path], **svg_options: Any) -> Path:
        """Write :meth:`to_svg` output as UTF-8."""
        path = Path(path)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(self.to_svg(**svg_options))
        logger.info("SVG saved to %s (%dx%d)", path, self.width, self.height)
        return path


@dataclass
class _Frame:
    kind: str                      # 'transform' or 'clip'
    group: Any                     # svgwrite Group
    saved_ctm: np.ndarray
    clip_box: Optional[Box] = None  # root-space clip rectangle
    children: int = field(default=0)


# ---------------------------------------------------------------------------
# Surface
# ---------------------------------------------------------------------------

def _attrs(**kwargs: Any) -> Dict[str, Any]:
    """Drop None values and round floats for svgwrite keyword arguments."""
    return {k: (svg_number(v) if isinstance(v, float) else v)
            for k, v in kwargs.items() if v is not None}


def _stroke_pad(stroke: Optional[str], stroke_width: Any) -> float:
    if stroke is None or stroke == "none" or stroke_width is None:
        return 0.0
    try:
        return abs(float(stroke_width)) / 2
    except (TypeError, ValueError):
        return 0.0


def _intersect(a: Box, b: Box) -> Optional[Box]:
    box = (max(a[0], b[0]), max(a[1], b[1]), min(a[2], b[2]), min(a[3], b[3]))
    if box[0] > box[2] or box[1] > box[3]:
        return None
    return box


class DrawingSurface:
    """Command buffer with an incrementally updated extent."""

    def __init__(self, options: Optional[SurfaceOptions] = None):
        self.options = options or SurfaceOptions()
        font_px = self.options.font_px_default
        if not isinstance(font_px, (int, float)) or not math.isfinite(font_px) or font_px <= 0:
            logger.warning("Invalid default font size %r, using %s", font_px, FONT_PX_DEFAULT)
            self.options = replace(self.options, font_px_default=FONT_PX_DEFAULT)

        self._dwg = svgwrite.Drawing(profile='full', debug=False)
        self._elements: List[Any] = []
        self._defs: Dict[str, str] = {}
        self._frames: List[_Frame] = []
        self._ctm = np.eye(3)
        self._result: Optional[FinalizedSvg] = None

        area = self.options.chart_area
        self._extent = Extent()
        self._extent.include_box(area.x, area.y, area.right, area.bottom)

    # -- state ---------------------------------------------------------------

    @property
    def extent(self) -> Extent:
        """Copy of the running extent."""
        e = self._extent
        return Extent(e.min_x, e.min_y, e.max_x, e.max_y)

    @property
    def factory(self) -> svgwrite.Drawing:
        """svgwrite element factory for elements passed to :meth:`add_element`."""
        return self._dwg

    @property
    def depth(self) -> int:
        return len(self._frames)

    @property
    def is_finalized(self) -> bool:
        return self._result is not None

    def _append(self, element: Any) -> None:
        if self._frames:
            frame = self._frames[-1]
            frame.group.add(element)
            frame.children += 1
        else:
            self._elements.append(element)

    def _grow(self, box: Box, local: Optional[np.ndarray] = None) -> None:
        matrix = self._ctm if local is None else self._ctm @ local
        if not is_identity(matrix):
            box = transform_box(matrix, *box)
        for frame in self._frames:
            if frame.clip_box is not None:
                clipped = _intersect(box, frame.clip_box)
                if clipped is None:
                    return
                box = clipped
        self._extent.include_box(*box)

    @staticmethod
    def _local_matrix(transform: Optional[str]) -> Optional[np.ndarray]:
        return parse_transform(transform) if transform else None

    # -- primitives ----------------------------------------------------------

    def add_element(self, element: Any, box: Optional[Box] = None) -> None:
        """Append a prebuilt svgwrite element with caller-supplied bounds."""
        self._append(element)
        if box is not None:
            self._grow(box)

    def draw_line(self, x1: float, y1: float, x2: float, y2: float,
                  stroke: Optional[str] = THEME.colors.stroke, stroke_width: float = 1.0,
                  linecap: Optional[str] = None, transform: Optional[str] = None,
                  **extra: Any) -> None:
        """Line segment. Round and square caps extend the extent by half a width."""
        line = self._dwg.line(
            start=(svg_number(x1), svg_number(y1)), end=(svg_number(x2), svg_number(y2)),
            **_attrs(stroke=stroke, stroke_width=stroke_width, stroke_linecap=linecap,
                     transform=transform, **extra))
        self._append(line)

        pad = _stroke_pad(stroke, stroke_width)
        if linecap in ("round", "square"):
            pad *= 2
        self._grow((min(x1, x2) - pad, min(y1, y2) - pad, max(x1, x2) + pad, max(y1, y2) + pad),
                   self._local_matrix(transform))

    def _draw_points(self, factory: Callable[..., Any], points: Sequence[PointLike],
                     kind: str, fill: Optional[str], stroke: Optional[str],
                     stroke_width: Optional[float], transform: Optional[str],
                     extra: Dict[str, Any]) -> None:
        if len(points) == 0:
            logger.debug("Empty %s skipped", kind)
            return
        coords = [(svg_number(p[0]), svg_number(p[1])) for p in points]
        self._append(factory(points=coords, **_attrs(
            fill=fill, stroke=stroke, stroke_width=stroke_width, transform=transform, **extra)))

        pad = _stroke_pad(stroke, stroke_width)
        xs = [p[0] for p in points]
        ys = [p[1] for p in points]
        self._grow((min(xs) - pad, min(ys) - pad, max(xs) + pad, max(ys) + pad),
                   self._local_matrix(transform))

    def draw_polygon(self, points: Sequence[PointLike], fill: Optional[str] = "none",
                     stroke: Optional[str] = THEME.colors.stroke, stroke_width: float = 1.0,
                     transform: Optional[str] = None, **extra: Any) -> None:
        """Closed polygon. An empty point list draws nothing."""
        self._draw_points(self._dwg.polygon, points, "polygon", fill, stroke,
                          stroke_width, transform, extra)

    def draw_polyline(self, points: Sequence[PointLike], fill: Optional[str] = "none",
                      stroke: Optional[str] = THEME.colors.stroke, stroke_width: float = 1.0,
                      transform: Optional[str] = None, **extra: Any) -> None:
        self._draw_points(self._dwg.polyline, points, "polyline", fill, stroke,
                          stroke_width, transform, extra)

    def draw_circle(self, cx: float, cy: float, r: float, fill: Optional[str] = "none",
                    stroke: Optional[str] = THEME.colors.stroke, stroke_width: float = 1.0,
                    transform: Optional[str] = None, **extra: Any) -> None:
        self._append(self._dwg.circle(
            center=(svg_number(cx), svg_number(cy)), r=svg_number(abs(r)),
            **_attrs(fill=fill, stroke=stroke, stroke_width=stroke_width,
                     transform=transform, **extra)))
        reach = abs(r) + _stroke_pad(stroke, stroke_width)
        self._grow((cx - reach, cy - reach, cx + reach, cy + reach),
                   self._local_matrix(transform))

    def draw_ellipse(self, cx: float, cy: float, rx: float, ry: float,
                     fill: Optional[str] = "none",
                     stroke: Optional[str] = THEME.colors.stroke, stroke_width: float = 1.0,
                     transform: Optional[str] = None, **extra: Any) -> None:
        rx, ry = abs(rx), abs(ry)
        self._append(self._dwg.ellipse(
            center=(svg_number(cx), svg_number(cy)), r=(svg_number(rx), svg_number(ry)),
            **_attrs(fill=fill, stroke=stroke, stroke_width=stroke_width,
                     transform=transform, **extra)))
        pad = _stroke_pad(stroke, stroke_width)
        self._grow((cx - rx - pad, cy - ry - pad, cx + rx + pad, cy + ry + pad),
                   self._local_matrix(transform))

    def draw_rect(self, x: float, y: float, width: float, height: float,
                  fill: Optional[str] = "none",
                  stroke: Optional[str] = THEME.colors.stroke, stroke_width: float = 1.0,
                  rx: Optional[float] = None, transform: Optional[str] = None,
                  **extra: Any) -> None:
        """Rectangle; a negative width or height extends left or up."""
        if width < 0:
            x, width = x + width, -width
        if height < 0:
            y, height = y + height, -height
        self._append(self._dwg.rect(
            insert=(svg_number(x), svg_number(y)), size=(svg_number(width), svg_number(height)),
            **_attrs(rx=rx, fill=fill, stroke=stroke, stroke_width=stroke_width,
                     transform=transform, **extra)))
        pad = _stroke_pad(stroke, stroke_width)
        self._grow((x - pad, y - pad, x + width + pad, y + height + pad),
                   self._local_matrix(transform))

    def draw_path(self, path: Union[PathBuilder, str], fill: Optional[str] = "none",
                  stroke: Optional[str] = THEME.colors.stroke, stroke_width: float = 1.0,
                  bounds: Optional[Box] = None, transform: Optional[str] = None,
                  **extra: Any) -> None:
        """Path from a PathBuilder (exact bounds) or a raw ``d`` string.

        A raw string contributes to the extent only through ``bounds``.
        """
        if isinstance(path, PathBuilder):
            d = path.to_d()
            if bounds is None and not path.bounds.is_empty():
                bounds = path.bounds.as_box()
        else:
            d = str(path)
        if not d.strip():
            logger.debug("Empty path skipped")
            return

        self._append(self._dwg.path(d=d, **_attrs(
            fill=fill, stroke=stroke, stroke_width=stroke_width, transform=transform, **extra)))
        if bounds is not None:
            pad = _stroke_pad(stroke, stroke_width)
            self._grow((bounds[0] - pad, bounds[1] - pad, bounds[2] + pad, bounds[3] + pad),
                       self._local_matrix(transform))

    def draw_text(self, x: float, y: float, text: str, font_px: Optional[float] = None,
                  fill: Optional[str] = THEME.colors.text, anchor: str = "start",
                  baseline: Optional[str] = None, font_weight: Optional[str] = None,
                  rotate: Union[None, float, Tuple[float, float, float]] = None,
                  max_width: Optional[float] = None, line_height: Optional[float] = None,
                  stroke: Optional[str] = None, stroke_width: Optional[float] = None,
                  transform: Optional[str] = None, **extra: Any) -> Box:
        """Text with an estimated bounding box.

        Args:
            x, y: Anchor point
            text: Text; ``\\n`` always breaks, ``max_width`` also wraps words
            font_px: Font size (surface default if None)
            anchor: ``start``, ``middle`` or ``end``
            baseline: ``hanging`` (y is the top), ``middle``/``central``
                (y is the center); anything else treats y as the alphabetic
                baseline of the first line
            rotate: Angle about (x, y), or ``(angle, cx, cy)``
            stroke, stroke_width: Halo stroke; grows the box by half a width

        Returns:
            The untransformed estimated box ``(min_x, min_y, max_x, max_y)``
        """
        font_px = font_px or self.options.font_px_default
        line_height = line_height or self.options.line_height_default
        lines = wrap_text(text, max_width, font_px) if max_width else text.split("\n")

        transforms = [transform] if transform else []
        if rotate is not None:
            angle, cx, cy = rotate if isinstance(rotate, tuple) else (rotate, x, y)
            transforms.append(f"rotate({svg_number(angle)}, {svg_number(cx)}, {svg_number(cy)})")
        transform_attr = " ".join(transforms) or None

        attrs = _attrs(font_size=svg_number(font_px), fill=fill,
                       text_anchor=None if anchor == "start" else anchor,
                       dominant_baseline=baseline, font_weight=font_weight,
                       stroke=stroke, stroke_width=stroke_width,
                       transform=transform_attr, **extra)
        if stroke:
            attrs.setdefault('paint_order', "stroke fill")

        insert = (svg_number(x), svg_number(y))
        if len(lines) == 1:
            element = self._dwg.text(lines[0], insert=insert, **attrs)
        else:
            element = self._dwg.text("", insert=insert, **attrs)
            for i, line in enumerate(lines):
                element.add(self._dwg.tspan(
                    line, x=[insert[0]], dy=["0" if i == 0 else f"{svg_number(line_height)}em"]))
        self._append(element)

        width = max(estimate_text_width(line, font_px) for line in lines)
        height = font_px + (len(lines) - 1) * font_px * line_height
        if anchor == "middle":
            min_x = x - width / 2
        elif anchor == "end":
            min_x = x - width
        else:
            min_x = x
        if baseline in ("hanging", "text-before-edge"):
            min_y = y
        elif baseline in ("middle", "central"):
            min_y = y - height / 2
        else:
            min_y = y - TEXT_ASCENT_FACTOR * font_px

        box = (min_x, min_y, min_x + width, min_y + height)
        pad = _stroke_pad(stroke, stroke_width)
        self._grow((box[0] - pad, box[1] - pad, box[2] + pad, box[3] + pad),
                   self._local_matrix(transform_attr))
        return box

    # -- definitions ---------------------------------------------------------

    def add_def(self, def_id: str, markup: str) -> bool:
        """Register a reusable definition once.

        Returns:
            True if added; False for a repeated id or markup that is not
            well-formed XML (logged, not raised)
        """
        if def_id in self._defs:
            return False
        try:
            # Parsed inside a root that binds the prefixes SVG markup uses
            ET.fromstring(f'<svg xmlns="{SVG_NS}" xmlns:xlink="{XLINK_NS}">{markup}</svg>')
        except ET.ParseError as e:
            logger.error("Definition '%s' rejected: %s", def_id, e)
            return False
        self._defs[def_id] = markup
        return True

    def has_def(self, def_id: str) -> bool:
        return def_id in self._defs

    def add_arrow_marker(self, marker_id: str = "arrow", color: str = THEME.colors.stroke,
                         size: float = 8.0) -> str:
        """Triangular arrowhead marker; returns the ``url(#id)`` reference."""
        marker = self._dwg.marker(insert=(svg_number(size), svg_number(size / 2)),
                                  size=(svg_number(size), svg_number(size)),
                                  orient="auto", id=marker_id, markerUnits="userSpaceOnUse")
        marker.add(self._dwg.path(
            d=f"M 0 0 L {svg_number(size)} {svg_number(size / 2)} L 0 {svg_number(size)} Z",
            fill=color))
        self.add_def(marker_id, marker.tostring())
        return f"url(#{marker_id})"

    def add_hatch_pattern(self, pattern_id: str, color: str = THEME.colors.stroke,
                          stroke_width: float = 1.0, spacing: float = 4.0,
                          angle_deg: float = 45.0) -> str:
        """Parallel-line hatch fill; returns the ``url(#id)`` reference."""
        pattern = self._dwg.pattern(size=(svg_number(spacing), svg_number(spacing)),
                                    id=pattern_id, patternUnits="userSpaceOnUse",
                                    patternTransform=f"rotate({svg_number(angle_deg)})")
        pattern.add(self._dwg.line(start=(0, 0), end=(0, svg_number(spacing)),
                                   stroke=color, stroke_width=svg_number(stroke_width)))
        self.add_def(pattern_id, pattern.tostring())
        return f"url(#{pattern_id})"

    def add_linear_gradient(self, gradient_id: str,
                            stops: Sequence[Tuple[float, str]],
                            start: Tuple[float, float] = (0, 0),
                            end: Tuple[float, float] = (1, 0)) -> str:
        """Linear gradient over ``(offset, color)`` stops (offsets in 0..1)."""
        gradient = self._dwg.linearGradient(start=start, end=end, id=gradient_id)
        for offset, color in stops:
            gradient.add_stop_color(offset=svg_number(offset), color=color)
        self.add_def(gradient_id, gradient.tostring())
        return f"url(#{gradient_id})"

    def add_radial_gradient(self, gradient_id: str,
                            stops: Sequence[Tuple[float, str]],
                            center: Tuple[float, float] = (0.5, 0.5),
                            r: float = 0.5) -> str:
        gradient = self._dwg.radialGradient(center=center, r=r, id=gradient_id)
        for offset, color in stops:
            gradient.add_stop_color(offset=svg_number(offset), color=color)
        self.add_def(gradient_id, gradient.tostring())
        return f"url(#{gradient_id})"

    # -- scopes --------------------------------------------------------------

    def push_transform(self, expr: str) -> None:
        """Open a ``<g transform>`` scope; draws go inside until popped."""
        group = self._dwg.g(transform=expr)
        self._append(group)
        self._frames.append(_Frame('transform', group, self._ctm))
        self._ctm = self._ctm @ parse_transform(expr)

    def pop_transform(self) -> None:
        if not self._frames or self._frames[-1].kind != 'transform':
            logger.warning("pop_transform() without a matching push_transform(); ignored")
            return
        self._ctm = self._frames.pop().saved_ctm

    def push_clip(self) -> None:
        """Open a scope clipped to the chart area."""
        area = self.options.chart_area
        if not self.has_def(CLIP_ID):
            clip = self._dwg.clipPath(id=CLIP_ID)
            clip.add(self._dwg.rect(insert=(svg_number(area.x), svg_number(area.y)),
                                    size=(svg_number(area.width), svg_number(area.height))))
            self.add_def(CLIP_ID, clip.tostring())

        clip_box = transform_box(self._ctm, area.x, area.y, area.right, area.bottom)
        group = self._dwg.g(clip_path=f"url(#{CLIP_ID})")
        self._frames.append(_Frame('clip', group, self._ctm, clip_box=clip_box))

    def pop_clip(self) -> None:
        """Close the innermost clip scope; an empty scope emits nothing."""
        if not self._frames or self._frames[-1].kind != 'clip':
            logger.warning("pop_clip() without a matching push_clip(); ignored")
            return
        frame = self._frames.pop()
        self._ctm = frame.saved_ctm
        if frame.children:
            self._append(frame.group)

    @contextmanager
    def transform(self, expr: str) -> Iterator['DrawingSurface']:
        self.push_transform(expr)
        try:
            yield self
        finally:
            self.pop_transform()

    @contextmanager
    def clipped(self) -> Iterator['DrawingSurface']:
        self.push_clip()
        try:
            yield self
        finally:
            self.pop_clip()

    def with_transform(self, expr: str, body: Callable[['DrawingSurface'], T]) -> T:
        """Run ``body(surface)`` inside a transform scope."""
        with self.transform(expr):
            return body(self)

    def draw_in_clipped_region(self, body: Callable[['DrawingSurface'], T]) -> T:
        """Run ``body(surface)`` clipped to the chart area."""
        with self.clipped():
            return body(self)

    # -- output --------------------------------------------------------------

    def finalize(self, padding: float = PADDING) -> FinalizedSvg:
        """Compute the viewport (extent plus ``padding``) and serialize.

        Intended to be called once, last. Open scopes are closed first; a
        repeated call returns the first result.
        """
        if self._result is not None:
            logger.warning("Surface already finalized; returning the first result")
            return self._result

        while self._frames:
            kind = self._frames[-1].kind
            logger.warning("Unclosed %s scope closed at finalize", kind)
            if kind == 'clip':
                self.pop_clip()
            else:
                self.pop_transform()

        ext = self._extent
        viewport_x = math.floor(ext.min_x - padding)
        viewport_y = math.floor(ext.min_y - padding)
        width = math.ceil(ext.max_x + padding) - viewport_x
        height = math.ceil(ext.max_y + padding) - viewport_y

        parts: List[str] = []
        if self._defs:
            parts.append("<defs>" + "".join(self._defs.values()) + "</defs>")
        parts.extend(element.tostring() for element in self._elements)

        self._result = FinalizedSvg("".join(parts), viewport_x, viewport_y, width, height)
        logger.debug("Surface finalized: viewBox %s, %d elements, %d defs",
                     self._result.view_box, len(self._elements), len(self._defs))
        return self._result


def create_surface(options: Optional[SurfaceOptions] = None) -> DrawingSurface:
    """Fresh surface for one render."""
    return DrawingSurface(options)
