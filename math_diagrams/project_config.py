"""
JSON-based project configuration for math_diagrams renders.

Defaults come from config.py; a ``.mathdiagram.json`` file may override any
section. Search order (first hit wins):
1. Explicit config path (``--config`` on the CLI)
2. .mathdiagram.json in the given search directory
3. .mathdiagram.json in the current working directory
4. ~/.mathdiagram.json

Example .mathdiagram.json:
{
    "surface": {"font_px_default": 14},
    "viewport": {"width": 320, "height": 240, "padding": 24},
    "placement": {"step": 3.0, "max_iterations": 40},
    "theme": {"font_family": "Helvetica"},
    "output": {"output_dir": "renders", "prefix": "demo_"}
}
"""

import json
import logging
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

from math_diagrams import config as cfg

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".mathdiagram.json"


@dataclass
class SurfaceConfig:
    """Drawing surface defaults."""
    font_px_default: float = cfg.FONT_PX_DEFAULT
    line_height_default: float = cfg.LINE_HEIGHT_DEFAULT
    padding: float = cfg.PADDING


@dataclass
class ViewportConfig:
    """Target viewport for compute_fit."""
    width: float = 400.0
    height: float = 300.0
    padding: float = 30.0
    flip_y: bool = False


@dataclass
class PlacementConfig:
    """Label search parameters."""
    base_offset: float = cfg.LABEL_BASE_OFFSET
    step: float = cfg.LABEL_STEP
    max_iterations: int = cfg.LABEL_MAX_ITERATIONS
    rect_pad: float = cfg.LABEL_RECT_PAD
    min_gap: float = cfg.STACK_MIN_GAP


@dataclass
class ThemeConfig:
    """Document-level text defaults written on the root element."""
    font_family: str = cfg.THEME.font_family
    font_size: int = cfg.THEME.font_sizes.base
    show_hidden_edges: bool = True


@dataclass
class OutputConfig:
    """Output file configuration."""
    output_dir: str = ""
    prefix: str = ""
    suffix: str = ""


_SECTIONS = ("surface", "viewport", "placement", "theme", "output")


@dataclass
class ProjectConfig:
    """Complete project configuration."""
    surface: SurfaceConfig = field(default_factory=SurfaceConfig)
    viewport: ViewportConfig = field(default_factory=ViewportConfig)
    placement: PlacementConfig = field(default_factory=PlacementConfig)
    theme: ThemeConfig = field(default_factory=ThemeConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def save(self, path: Union[str, Path]) -> None:
        """Write the configuration as JSON.

        Args:
            path: Output file path
        """
        path = Path(path)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(self.to_json())
        logger.info("Configuration saved to %s", path)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ProjectConfig':
        """Build a configuration, ignoring unknown sections and keys.

        Keys starting with an underscore (``_comment``) are skipped silently;
        other unknown keys are logged at debug level.
        """
        config = cls()
        if not isinstance(data, dict):
            logger.warning("Config root is %s, not an object; using defaults", type(data).__name__)
            return config
        for section in _SECTIONS:
            values = data.get(section)
            if not isinstance(values, dict):
                continue
            target = getattr(config, section)
            for key, value in values.items():
                if hasattr(target, key):
                    setattr(target, key, value)
                elif not key.startswith('_'):
                    logger.debug("Unknown config key %s.%s ignored", section, key)
        return config

    @classmethod
    def from_json(cls, json_str: str) -> 'ProjectConfig':
        return cls.from_dict(json.loads(json_str))

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'ProjectConfig':
        """Load configuration from a JSON file.

        Raises:
            FileNotFoundError: If file doesn't exist
            json.JSONDecodeError: If file is not valid JSON
        """
        path = Path(path)
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        logger.info("Configuration loaded from %s", path)
        return cls.from_dict(data)


def find_config_file(
    explicit_config: Optional[Union[str, Path]] = None,
    search_dir: Optional[Union[str, Path]] = None,
) -> Optional[Path]:
    """Locate a configuration file.

    Args:
        explicit_config: Path given on the command line
        search_dir: Extra directory checked before cwd (e.g. the output dir)

    Returns:
        Path to the config file, or None
    """
    if explicit_config:
        explicit = Path(explicit_config)
        if explicit.exists():
            return explicit
        logger.warning("Explicit config not found: %s", explicit)

    candidates = []
    if search_dir:
        candidates.append(Path(search_dir) / CONFIG_FILENAME)
    candidates.append(Path.cwd() / CONFIG_FILENAME)
    candidates.append(Path.home() / CONFIG_FILENAME)

    for candidate in candidates:
        if candidate.exists():
            return candidate
    return None


def load_config(
    explicit_config: Optional[Union[str, Path]] = None,
    search_dir: Optional[Union[str, Path]] = None,
) -> ProjectConfig:
    """Load configuration, falling back to defaults on any read error."""
    config_path = find_config_file(explicit_config, search_dir)

    if config_path:
        try:
            return ProjectConfig.load(config_path)
        except (json.JSONDecodeError, OSError) as e:
            logger.error("Failed to load config %s: %s", config_path, e)

    return ProjectConfig()


def merge_configs(base: ProjectConfig, override: ProjectConfig) -> ProjectConfig:
    """Merge two configurations; only non-default override values apply."""
    merged = ProjectConfig.from_dict(base.to_dict())
    defaults = ProjectConfig()

    for section in _SECTIONS:
        override_section = getattr(override, section)
        default_section = getattr(defaults, section)
        merged_section = getattr(merged, section)
        for f in fields(override_section):
            value = getattr(override_section, f.name)
            if value != getattr(default_section, f.name):
                setattr(merged_section, f.name, value)

    return merged


def create_sample_config(path: Union[str, Path] = CONFIG_FILENAME) -> None:
    """Write a documented sample configuration file."""
    sample: Dict[str, Any] = {
        "_comment": "math_diagrams render configuration",
        "_version": "1.0",
    }
    comments = {
        "surface": "Drawing surface defaults (px, em)",
        "viewport": "Target viewport for fitted shapes",
        "placement": "Label collision-avoidance search",
        "theme": "Root element text defaults",
        "output": "Output file naming",
    }
    defaults = ProjectConfig().to_dict()
    for section in _SECTIONS:
        sample[section] = {"_comment": comments[section], **defaults[section]}

    path = Path(path)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(sample, f, indent=2, ensure_ascii=False)

    logger.info("Sample configuration created: %s", path)
