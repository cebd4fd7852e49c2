"""
Static theme table and kernel constants.

Everything here is read-only shared state: renders consult these values but
never mutate them. Per-project overrides live in project_config.py and are
passed explicitly to the functions that need them.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Tuple


# ---------------------------------------------------------------------------
# Theme
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FontSizes:
    small: int = 11
    base: int = 12
    medium: int = 14
    large: int = 16
    xlarge: int = 18


@dataclass(frozen=True)
class Colors:
    text: str = "#333333"
    black: str = "#000000"
    white: str = "#ffffff"
    stroke: str = "#333333"
    hidden_edge: str = "#aaaaaa"
    grid: str = "#dddddd"
    axis: str = "#666666"
    background: str = "#fafafa"
    highlight: str = "#e63946"
    fill: str = "#a8dadc"
    fill_alt: str = "#f4a261"


@dataclass(frozen=True)
class StrokeWidths:
    thin: float = 1.0
    base: float = 1.5
    thick: float = 2.0
    xthick: float = 2.5
    xxthick: float = 3.0
    xxxthick: float = 4.0


@dataclass(frozen=True)
class DashPatterns:
    dotted: str = "2 6"
    dashed_short: str = "4 2"
    dashed: str = "5 3"
    dashed_long: str = "8 6"
    back_edge: str = "3 2"


@dataclass(frozen=True)
class PointRadii:
    small: float = 3.0
    base: float = 4.0
    large: float = 5.0


# Categorical palette used for sectors and chart slices
SERIES_COLORS: Tuple[str, ...] = (
    "#4e79a7", "#f28e2b", "#e15759", "#76b7b2",
    "#59a14f", "#edc948", "#b07aa1", "#ff9da7",
)


@dataclass(frozen=True)
class Theme:
    font_family: str = "sans-serif"
    font_sizes: FontSizes = field(default_factory=FontSizes)
    colors: Colors = field(default_factory=Colors)
    stroke_widths: StrokeWidths = field(default_factory=StrokeWidths)
    dashes: DashPatterns = field(default_factory=DashPatterns)
    point_radii: PointRadii = field(default_factory=PointRadii)
    series: Tuple[str, ...] = SERIES_COLORS

    def series_color(self, index: int) -> str:
        return self.series[index % len(self.series)]


THEME = Theme()


class LineStyle(Enum):
    """Named stroke styles shared by recipes.

    Value is ``(color attribute on Colors, width attribute on StrokeWidths,
    dash attribute on DashPatterns or None)``.
    """
    SOLID = ("stroke", "base", None)
    THIN = ("stroke", "thin", None)
    THICK = ("black", "thick", None)
    HIDDEN_EDGE = ("hidden_edge", "thin", "back_edge")
    DASHED = ("stroke", "thin", "dashed")
    DOTTED = ("axis", "thin", "dotted")
    GRID = ("grid", "thin", None)
    AXIS = ("axis", "base", None)

    @property
    def stroke_width(self) -> float:
        return getattr(THEME.stroke_widths, self.value[1])

    @property
    def svg_pattern(self):
        dash = self.value[2]
        return getattr(THEME.dashes, dash) if dash else None

    def get_svg_style(self, color: str = None) -> Dict[str, object]:
        """Keyword style for svgwrite element factories."""
        style: Dict[str, object] = {
            'stroke': color or getattr(THEME.colors, self.value[0]),
            'stroke_width': self.stroke_width,
        }
        if self.svg_pattern:
            style['stroke_dasharray'] = self.svg_pattern
        return style


# ---------------------------------------------------------------------------
# Surface
# ---------------------------------------------------------------------------

PADDING = 20                 # default finalize padding, px
FONT_PX_DEFAULT = 12
LINE_HEIGHT_DEFAULT = 1.2    # em
TEXT_WIDTH_FACTOR = 0.6      # estimated glyph advance / font size
TEXT_ASCENT_FACTOR = 0.8     # baseline to top of the estimated text box
CLIP_ID = "clip-0"

# ---------------------------------------------------------------------------
# Label placement
# ---------------------------------------------------------------------------

LABEL_BASE_OFFSET = 12.0     # edge label distance from the edge midpoint, px
LABEL_STEP = 2.0
LABEL_MAX_ITERATIONS = 60
LABEL_RECT_PAD = 1.0
STACK_MIN_GAP = 16.0
SEGMENT_LABEL_OFFSET = 10.0  # anchor segment label distance along the normal
RIGHT_ANGLE_SIZE = 12.0
