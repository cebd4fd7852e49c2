"""
Approximate text measurement.

No font rendering is involved: width is a fixed fraction of the font size
per character. Callers rely only on monotonicity (longer text or a larger
font never measures smaller).
"""

from typing import List, Tuple

from math_diagrams.config import LINE_HEIGHT_DEFAULT, TEXT_WIDTH_FACTOR


def estimate_text_width(text: str, font_px: float) -> float:
    return len(text) * font_px * TEXT_WIDTH_FACTOR


def wrap_text(text: str, max_width: float, font_px: float) -> List[str]:
    """Greedy word wrap.

    Explicit newlines always break. A single word wider than ``max_width``
    gets a line of its own rather than being split.
    """
    lines: List[str] = []
    for paragraph in text.split("\n"):
        words = paragraph.split()
        if not words:
            lines.append("")
            continue
        current = words[0]
        for word in words[1:]:
            candidate = f"{current} {word}"
            if estimate_text_width(candidate, font_px) <= max_width:
                current = candidate
            else:
                lines.append(current)
                current = word
        lines.append(current)
    return lines


def estimate_wrapped_text_dimensions(text: str, max_width: float, font_px: float = 16,
                                     line_height: float = LINE_HEIGHT_DEFAULT
                                     ) -> Tuple[float, float]:
    """``(width, height)`` of ``text`` wrapped to ``max_width``.

    Width is the widest wrapped line, height ``font_px * lines * line_height``.
    """
    lines = wrap_text(text, max_width, font_px)
    width = max((estimate_text_width(line, font_px) for line in lines), default=0.0)
    return width, font_px * len(lines) * line_height
