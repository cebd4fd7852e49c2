"""
SVG transform attribute parsing into 3x3 affine matrices.

The surface emits transform expressions verbatim into the markup; the
matrices parsed here are used only to keep the running extent honest for
content drawn inside transformed groups.

Matrices act on column vectors ``[x, y, 1]``. An expression
``"a(...) b(...)"`` maps a point as ``A @ B @ p``, as in SVG.
"""

import logging
import math
import re
from typing import Dict, List, Tuple

import numpy as np

logger = logging.getLogger(__name__)

_FUNC_RE = re.compile(r'([A-Za-z]+)\s*\(([^)]*)\)')
_ARGS_RE = re.compile(r'[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?')

IDENTITY = np.eye(3)


def translation(tx: float, ty: float = 0.0) -> np.ndarray:
    m = np.eye(3)
    m[0, 2], m[1, 2] = tx, ty
    return m


def scaling(sx: float, sy: float = None) -> np.ndarray:
    return np.diag([sx, sx if sy is None else sy, 1.0])


def rotation(angle_deg: float, cx: float = 0.0, cy: float = 0.0) -> np.ndarray:
    """Rotation by ``angle_deg`` (clockwise on screen) about (cx, cy)."""
    a = math.radians(angle_deg)
    c, s = math.cos(a), math.sin(a)
    m = np.array([[c, -s, 0.0],
                  [s, c, 0.0],
                  [0.0, 0.0, 1.0]])
    if cx or cy:
        return translation(cx, cy) @ m @ translation(-cx, -cy)
    return m


def _skew_x(angle_deg: float) -> np.ndarray:
    m = np.eye(3)
    m[0, 1] = math.tan(math.radians(angle_deg))
    return m


def _skew_y(angle_deg: float) -> np.ndarray:
    m = np.eye(3)
    m[1, 0] = math.tan(math.radians(angle_deg))
    return m


def _matrix(a: float, b: float, c: float, d: float, e: float, f: float) -> np.ndarray:
    return np.array([[a, c, e],
                     [b, d, f],
                     [0.0, 0.0, 1.0]])


# name -> (builder, accepted argument counts)
_BUILDERS: Dict[str, Tuple[object, Tuple[int, ...]]] = {
    'matrix': (_matrix, (6,)),
    'translate': (translation, (1, 2)),
    'scale': (scaling, (1, 2)),
    'rotate': (rotation, (1, 3)),
    'skewX': (_skew_x, (1,)),
    'skewY': (_skew_y, (1,)),
}


def parse_transform(expr: str) -> np.ndarray:
    """Parse an SVG transform list.

    Unknown functions and wrong argument counts contribute identity and are
    logged; the rest of the expression still applies.
    """
    result = np.eye(3)
    if not expr:
        return result

    for name, raw_args in _FUNC_RE.findall(expr):
        args: List[float] = [float(a) for a in _ARGS_RE.findall(raw_args)]
        entry = _BUILDERS.get(name)
        if entry is None:
            logger.warning("Unsupported transform function '%s' ignored", name)
            continue
        builder, arities = entry
        if len(args) not in arities:
            logger.warning("Transform %s() expects %s arguments, got %d; ignored",
                           name, "/".join(map(str, arities)), len(args))
            continue
        result = result @ builder(*args)  # type: ignore[operator]
    return result


def apply(matrix: np.ndarray, x: float, y: float) -> Tuple[float, float]:
    v = matrix @ np.array([x, y, 1.0])
    return float(v[0]), float(v[1])


def transform_box(matrix: np.ndarray, min_x: float, min_y: float,
                  max_x: float, max_y: float) -> Tuple[float, float, float, float]:
    """Axis-aligned bounds of a transformed box (all four corners)."""
    corners = np.array([[min_x, min_y, 1.0],
                        [max_x, min_y, 1.0],
                        [max_x, max_y, 1.0],
                        [min_x, max_y, 1.0]])
    mapped = corners @ matrix.T
    lo = mapped[:, :2].min(axis=0)
    hi = mapped[:, :2].max(axis=0)
    return float(lo[0]), float(lo[1]), float(hi[0]), float(hi[1])


def is_identity(matrix: np.ndarray) -> bool:
    return bool(np.allclose(matrix, IDENTITY))
