"""
Render several demos to SVG files in one go.

Every render owns its own surface, so demos can run on a thread pool
without coordination.

Usage:
    from math_diagrams.gallery import render_gallery

    results = render_gallery(output_dir="./renders", parallel=True)
    print(results.summary())
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Union

from math_diagrams.demos import DEMOS, render_demo
from math_diagrams.project_config import ProjectConfig

logger = logging.getLogger(__name__)


@dataclass
class RenderResult:
    """Outcome of one demo render."""
    name: str
    output_path: Optional[Path] = None
    success: bool = False
    error: Optional[str] = None
    duration_seconds: float = 0.0

    @property
    def status(self) -> str:
        return "OK" if self.success else "FAILED"


@dataclass
class GalleryResult:
    """Outcome of a gallery run."""
    results: List[RenderResult] = field(default_factory=list)
    total_duration_seconds: float = 0.0

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def successful(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failed(self) -> int:
        return self.total - self.successful

    def summary(self) -> str:
        lines = [
            "Gallery Summary",
            "=" * 40,
            f"Rendered:   {self.successful}/{self.total}",
            f"Total time: {self.total_duration_seconds:.2f}s",
        ]
        for r in self.results:
            target = r.output_path.name if r.output_path else r.error
            lines.append(f"  [{r.status}] {r.name}: {target}")
        return "\n".join(lines)

    def to_dict(self) -> Dict:
        return {
            'total': self.total,
            'successful': self.successful,
            'failed': self.failed,
            'total_duration_seconds': self.total_duration_seconds,
            'results': [
                {
                    'name': r.name,
                    'output': str(r.output_path) if r.output_path else None,
                    'success': r.success,
                    'error': r.error,
                    'duration': r.duration_seconds,
                }
                for r in self.results
            ],
        }


def output_path_for(name: str, output_dir: Path, config: ProjectConfig) -> Path:
    return output_dir / f"{config.output.prefix}{name}{config.output.suffix}.svg"


def render_single(name: str, output_dir: Path, config: ProjectConfig) -> RenderResult:
    """Render one demo to ``output_dir``; failures are recorded, not raised."""
    start = time.perf_counter()
    result = RenderResult(name=name)
    path = output_path_for(name, output_dir, config)
    try:
        svg = render_demo(name, config)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(svg)
        result.success = True
        result.output_path = path
    except (KeyError, OSError) as e:
        result.error = str(e)
        logger.error("Failed to render %s: %s", name, e)
    result.duration_seconds = time.perf_counter() - start
    return result


def render_gallery(
    output_dir: Optional[Union[str, Path]] = None,
    names: Optional[Iterable[str]] = None,
    config: Optional[ProjectConfig] = None,
    parallel: bool = False,
    max_workers: Optional[int] = None,
    progress_callback: Optional[Callable[[int, int, RenderResult], None]] = None,
) -> GalleryResult:
    """Render the named demos (all by default) into ``output_dir``.

    Args:
        output_dir: Target directory (config.output.output_dir, else cwd)
        names: Demo names; unknown names are reported as failures
        config: Project configuration (defaults if None)
        parallel: Render on a thread pool
        max_workers: Pool size (None = executor default)
        progress_callback: Called after each render: (current, total, result)

    Returns:
        GalleryResult in the order renders completed
    """
    start = time.perf_counter()
    config = config or ProjectConfig()
    out_dir = Path(output_dir or config.output.output_dir or ".")
    selected = list(names) if names is not None else list(DEMOS)

    try:
        out_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error("Cannot create output directory %s: %s", out_dir, e)
        failed = [RenderResult(name=name, error=str(e)) for name in selected]
        return GalleryResult(failed, time.perf_counter() - start)

    logger.info("Rendering %d demos into %s (parallel=%s)", len(selected), out_dir, parallel)

    results: List[RenderResult] = []

    def record(result: RenderResult) -> None:
        results.append(result)
        if progress_callback:
            progress_callback(len(results), len(selected), result)

    if parallel:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [executor.submit(render_single, name, out_dir, config) for name in selected]
            for future in as_completed(futures):
                record(future.result())
    else:
        for name in selected:
            record(render_single(name, out_dir, config))

    gallery = GalleryResult(results, time.perf_counter() - start)
    logger.info("Gallery done: %d/%d rendered", gallery.successful, gallery.total)
    return gallery
