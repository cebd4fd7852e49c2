"""
Drawing layer.

Modules:
  - surface:       extent-tracking SVG surface with deferred viewport
  - viewport:      data space -> screen space fit
  - path_builder:  chainable path data with exact bounds
  - transforms:    SVG transform parsing for extent tracking
  - text_metrics:  approximate text measurement
  - label_placer:  collision-avoiding label placement
"""

from math_diagrams.drawing.label_placer import (
    LabelCandidate,
    LabelPlacement,
    StackedLabel,
    place_edge_label,
    place_label_outward,
    relax_stacked_labels,
)
from math_diagrams.drawing.path_builder import PathBuilder
from math_diagrams.drawing.surface import (
    DrawingSurface,
    FinalizedSvg,
    SurfaceOptions,
    create_surface,
)
from math_diagrams.drawing.viewport import FitTransform, compute_fit

__all__ = [
    'DrawingSurface',
    'FinalizedSvg',
    'SurfaceOptions',
    'create_surface',
    'FitTransform',
    'compute_fit',
    'PathBuilder',
    'LabelCandidate',
    'LabelPlacement',
    'StackedLabel',
    'place_edge_label',
    'place_label_outward',
    'relax_stacked_labels',
]
