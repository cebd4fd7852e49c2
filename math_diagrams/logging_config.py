"""
Logging setup for the math_diagrams kernel and its demo CLI.

Provides:
- JSON formatter for machine-readable render logs
- Console formatter for human-readable output
- Timing helpers (context manager and decorator) for render steps
- A context holder that stamps every record with render-scoped fields

Usage:
    from math_diagrams.logging_config import setup_logging, get_logger

    setup_logging(level=logging.DEBUG, json_file="renders.log.json")

    logger = get_logger(__name__)
    logger.info("Surface finalized", extra={"width": 240, "height": 180})
"""

import json
import logging
import sys
import time
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime
from functools import wraps
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, TypeVar, Union

F = TypeVar('F', bound=Callable[..., Any])

PACKAGE_LOGGER = "math_diagrams"

# LogRecord attributes that are never treated as extra fields
_RESERVED_KEYS = frozenset({
    'name', 'msg', 'args', 'created', 'filename', 'funcName',
    'levelname', 'levelno', 'lineno', 'module', 'msecs',
    'pathname', 'process', 'processName', 'relativeCreated',
    'stack_info', 'exc_info', 'exc_text', 'thread', 'threadName',
    'message', 'asctime', 'taskName',
})


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return {k: v for k, v in record.__dict__.items() if k not in _RESERVED_KEYS}


class JSONFormatter(logging.Formatter):
    """One JSON object per line.

    Warnings and debug records carry their source location; extra fields
    passed through ``extra={}`` are copied verbatim when they are JSON
    serializable and stringified otherwise.
    """

    def __init__(self, include_extra: bool = True):
        super().__init__()
        self.include_extra = include_extra

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.levelno >= logging.WARNING or record.levelno <= logging.DEBUG:
            entry["location"] = {
                "file": record.filename,
                "line": record.lineno,
                "function": record.funcName,
            }

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        if self.include_extra:
            for key, value in _extra_fields(record).items():
                try:
                    json.dumps(value)
                    entry[key] = value
                except (TypeError, ValueError):
                    entry[key] = str(value)

        return json.dumps(entry, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    """Compact console output: ``[HH:MM:SS] LEVEL module: message [k=v, ...]``.

    The ``math_diagrams.`` prefix is dropped from logger names so that
    records read as ``drawing.surface`` or ``geometry.sectors``.
    """

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
        'RESET': '\033[0m',
    }

    def __init__(self, use_colors: bool = True, show_extra: bool = True):
        super().__init__()
        self.use_colors = use_colors
        self.show_extra = show_extra

    def _format_level(self, level: str) -> str:
        if self.use_colors and level in self.COLORS:
            return f"{self.COLORS[level]}{level:8}{self.COLORS['RESET']}"
        return f"{level:8}"

    @staticmethod
    def _format_value(key: str, value: Any) -> str:
        if isinstance(value, float):
            return f"{key}={value:.3g}"
        if isinstance(value, (list, tuple)) and len(value) > 3:
            return f"{key}=[...{len(value)} items]"
        return f"{key}={value}"

    def format(self, record: logging.LogRecord) -> str:
        time_str = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")

        name = record.name
        prefix = PACKAGE_LOGGER + "."
        if name.startswith(prefix):
            name = name[len(prefix):]

        extra_str = ""
        if self.show_extra:
            extras = [self._format_value(k, v) for k, v in _extra_fields(record).items()]
            if extras:
                extra_str = " [" + ", ".join(extras) + "]"

        result = (f"[{time_str}] {self._format_level(record.levelname)} "
                  f"{name}: {record.getMessage()}{extra_str}")
        if record.exc_info:
            result += "\n" + self.formatException(record.exc_info)
        return result


def setup_logging(
    level: int = logging.INFO,
    json_file: Optional[Union[str, Path]] = None,
    console: bool = True,
    use_colors: bool = True,
    root_logger: bool = False,
) -> logging.Logger:
    """Configure handlers for the package logger.

    Args:
        level: Minimum log level (default INFO)
        json_file: Optional path for a JSON-lines log file
        console: Attach a stderr handler with ConsoleFormatter
        use_colors: Use ANSI colors on the console
        root_logger: Configure the root logger instead of ``math_diagrams``

    Returns:
        The configured logger
    """
    logger = logging.getLogger("" if root_logger else PACKAGE_LOGGER)
    logger.setLevel(level)
    logger.handlers.clear()

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(ConsoleFormatter(use_colors=use_colors))
        logger.addHandler(console_handler)

    if json_file:
        json_handler = logging.FileHandler(Path(json_file), encoding='utf-8')
        json_handler.setLevel(level)
        json_handler.setFormatter(JSONFormatter())
        logger.addHandler(json_handler)

    if not root_logger:
        logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a module (typically ``__name__``)."""
    return logging.getLogger(name)


@contextmanager
def log_timing(
    logger: logging.Logger,
    operation: str,
    level: int = logging.DEBUG,
    **extra_fields: Any
):
    """Log start, completion and elapsed time of a render step.

    Args:
        logger: Logger instance
        operation: Operation description
        level: Log level (default DEBUG)
        **extra_fields: Additional fields attached to both records

    Yields:
        dict the caller may fill with extra result fields
        (``elapsed_seconds`` is added on completion)

    Example:
        with log_timing(logger, "Rendering prism", view="oblique") as info:
            svg = render_prism(config)
            info["bytes"] = len(svg)
    """
    timing_info: Dict[str, Any] = {}
    start = time.perf_counter()

    logger.log(level, "Starting: %s", operation, extra={
        "event": "start", "operation": operation, **extra_fields,
    })

    try:
        yield timing_info
    except Exception as e:
        elapsed = time.perf_counter() - start
        logger.error("Failed: %s (%.3fs) - %s", operation, elapsed, e, extra={
            "event": "error",
            "operation": operation,
            "elapsed_seconds": elapsed,
            "error": str(e),
            **extra_fields,
        })
        raise

    elapsed = time.perf_counter() - start
    timing_info['elapsed_seconds'] = elapsed
    logger.log(level, "Completed: %s (%.3fs)", operation, elapsed, extra={
        "event": "complete",
        "operation": operation,
        **extra_fields,
        **timing_info,
    })


def timed(
    logger: Optional[logging.Logger] = None,
    level: int = logging.DEBUG,
    operation: Optional[str] = None,
) -> Callable[[F], F]:
    """Decorator form of :func:`log_timing`.

    Uses the decorated function's module logger and name unless given.
    """
    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            func_logger = logger or logging.getLogger(func.__module__)
            with log_timing(func_logger, operation or func.__name__, level):
                return func(*args, **kwargs)

        return wrapper  # type: ignore
    return decorator


class _ContextFilter(logging.Filter):
    """Copies a LogContext's fields onto records logged where it is active."""

    def __init__(self, owner: 'LogContext'):
        super().__init__()
        self.owner = owner

    def filter(self, record: logging.LogRecord) -> bool:
        if self.owner in LogContext._active.get():
            for key, value in self.owner.fields.items():
                setattr(record, key, value)
        return True


class LogContext:
    """Adds fixed fields to every package log record inside a ``with`` block.

    The filter sits on the package logger and on its handlers, so records
    from child loggers (``math_diagrams.demos``) are stamped too. Active
    contexts are tracked per thread (and per asyncio task); a record is only
    stamped by contexts entered in the code path that logs it. Contexts
    nest; the innermost one is reported by :meth:`current`.

    Example:
        with LogContext(demo="pie-labels"):
            logger.info("Placing labels")  # record carries demo=pie-labels
    """

    _active: ContextVar[Tuple['LogContext', ...]] = ContextVar('math_diagrams_log_context', default=())

    def __init__(self, **fields: Any):
        self.fields = fields
        self._filter: Optional[logging.Filter] = None
        self._targets: List[Any] = []

    def __enter__(self) -> 'LogContext':
        LogContext._active.set(LogContext._active.get() + (self,))
        self._filter = _ContextFilter(self)
        package = logging.getLogger(PACKAGE_LOGGER)
        self._targets = [package, *package.handlers]
        for target in self._targets:
            target.addFilter(self._filter)
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._filter:
            for target in self._targets:
                target.removeFilter(self._filter)
            self._filter = None
            self._targets = []
        # Exits may come out of order; drop this context wherever it sits
        LogContext._active.set(tuple(c for c in LogContext._active.get() if c is not self))

    @classmethod
    def current(cls) -> Optional['LogContext']:
        """Innermost active context, if any."""
        active = cls._active.get()
        return active[-1] if active else None


def configure_default_logging(verbose: bool = False) -> logging.Logger:
    """Console logging at INFO, or DEBUG when ``verbose``."""
    level = logging.DEBUG if verbose else logging.INFO
    return setup_logging(level=level, console=True, use_colors=True)
