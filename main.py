"""
Entry point: render math_diagrams sample diagrams to SVG.

Usage:
    python main.py <demo> [--output OUTPUT] [--config CONFIG]
    python main.py --all [--output-dir DIR] [--parallel]

Examples:
    python main.py prism --output prism.svg
    python main.py pie-labels -o pie.svg --config .mathdiagram.json
    python main.py --all --output-dir renders -v
    python main.py --list
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from math_diagrams.demos import DEMOS, render_demo
from math_diagrams.gallery import render_gallery
from math_diagrams.logging_config import log_timing, setup_logging
from math_diagrams.project_config import CONFIG_FILENAME, create_sample_config, load_config

logger = logging.getLogger("math_diagrams.cli")


def run_demo(name: str, output: Path, config_path: Optional[str] = None) -> Path:
    """Render one demo into ``output`` and return the written path."""
    config = load_config(explicit_config=config_path, search_dir=output.parent)
    with log_timing(logger, f"Rendering {name}", level=logging.INFO, demo=name):
        svg = render_demo(name, config)
    output.parent.mkdir(parents=True, exist_ok=True)
    with open(output, 'w', encoding='utf-8') as f:
        f.write(svg)
    logger.info("Wrote %s (%d bytes)", output, len(svg.encode('utf-8')))
    return output


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Render sample math diagrams to SVG.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Demos: " + ", ".join(DEMOS),
    )
    parser.add_argument(
        "demo",
        nargs="?",
        choices=sorted(DEMOS),
        help="Demo to render.",
    )
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Output SVG path (default: <demo>.svg).",
    )
    parser.add_argument(
        "--all",
        action="store_true",
        help="Render every demo into --output-dir.",
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        dest="output_dir",
        help="Directory for --all (default: config output_dir or cwd).",
    )
    parser.add_argument(
        "--parallel",
        action="store_true",
        help="With --all, render on a thread pool.",
    )
    parser.add_argument(
        "--config", "-c",
        default=None,
        help=f"Path to a {CONFIG_FILENAME} configuration file.",
    )
    parser.add_argument(
        "--init-config",
        action="store_true",
        dest="init_config",
        help=f"Write a sample {CONFIG_FILENAME} to the current directory and exit.",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List available demos and exit.",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable DEBUG logging.",
    )
    parser.add_argument(
        "--log-json",
        default=None,
        dest="log_json",
        help="Also write JSON-lines logs to this file.",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO,
                  json_file=args.log_json, use_colors=sys.stderr.isatty())

    if args.list:
        for name, render in DEMOS.items():
            doc = (render.__doc__ or "").strip().splitlines()
            print(f"{name:18} {doc[0] if doc else ''}")
        return 0

    if args.init_config:
        create_sample_config(CONFIG_FILENAME)
        return 0

    if args.all:
        config = load_config(explicit_config=args.config, search_dir=args.output_dir)
        result = render_gallery(output_dir=args.output_dir, config=config,
                                parallel=args.parallel)
        print(result.summary())
        return 0 if result.failed == 0 else 1

    if not args.demo:
        logger.error("No demo given; choose one of: %s (or use --all / --list)",
                     ", ".join(DEMOS))
        return 1

    output = Path(args.output or f"{args.demo}.svg")
    try:
        run_demo(args.demo, output, args.config)
    except OSError as exc:
        logger.critical("Cannot write %s: %s", output, exc)
        return 1
    except Exception as exc:
        logger.critical("Unexpected error: %s", exc, exc_info=True)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
