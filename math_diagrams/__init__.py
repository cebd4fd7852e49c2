"""
math_diagrams: shared rendering kernel for educational math diagrams.

Sample renders are produced through main.py (see math_diagrams.demos).
"""

from math_diagrams.logging_config import (
    setup_logging,
    get_logger,
    configure_default_logging,
    log_timing,
    timed,
    LogContext,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "configure_default_logging",
    "log_timing",
    "timed",
    "LogContext",
]
