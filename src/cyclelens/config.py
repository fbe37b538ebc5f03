"""Configuration loading and management."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from cyclelens.core.decorations import (
    DEFAULT_FALLBACK_COLOR,
    DEFAULT_LEVEL_COLORS,
    DecorationStyle,
)
from cyclelens.types.facts import Level

# Config directory names
PROJECT_DIR = ".cyclelens"
USER_DIR_NAME = ".cyclelens"
CONFIG_FILES = ("config.yaml", "config.yml", "config.json")

DEFAULT_GUTTER_WIDTH = 24


@dataclass(slots=True)
class CycleLensConfig:
    """Merged configuration from all sources.

    Priority: CLI args > env vars > project config > user config > defaults
    """

    # Analyzer
    analyzer: str = ""
    cost_table: str = ""
    sanitize_inline_asm: bool = True

    # Presentation
    gutter_width: int = DEFAULT_GUTTER_WIDTH
    level_colors: dict[str, str] = field(
        default_factory=lambda: {str(level): color for level, color in DEFAULT_LEVEL_COLORS.items()}
    )
    fallback_color: str = DEFAULT_FALLBACK_COLOR

    # Logging
    debug: bool = False
    json_logs: bool = False

    def decoration_style(self) -> DecorationStyle:
        colors = dict(DEFAULT_LEVEL_COLORS)
        for name, color in self.level_colors.items():
            try:
                colors[Level(str(name).lower())] = color
            except ValueError:
                continue
        return DecorationStyle(level_colors=colors, fallback_color=self.fallback_color)


def find_project_root(start: Path | None = None) -> Path | None:
    """Find the project root by looking for .cyclelens/ or .git/."""
    current = start or Path.cwd()
    for parent in [current, *current.parents]:
        if (parent / PROJECT_DIR).exists():
            return parent
        if (parent / ".git").exists():
            return parent
    return None


def get_user_config_dir() -> Path:
    """Get the user-level config directory (~/.cyclelens/)."""
    return Path.home() / USER_DIR_NAME


def load_json_config(path: Path) -> dict[str, Any]:
    """Load a JSON config file, returning empty dict if not found."""
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return data if isinstance(data, dict) else {}
    except (json.JSONDecodeError, OSError):
        return {}


def load_yaml_config(path: Path) -> dict[str, Any]:
    """Load a YAML config file, returning empty dict if not found."""
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        return data if isinstance(data, dict) else {}
    except (yaml.YAMLError, OSError):
        return {}


def load_config_dir(directory: Path) -> dict[str, Any]:
    """Load the first config file found in ``directory``."""
    for name in CONFIG_FILES:
        path = directory / name
        if path.exists():
            if path.suffix == ".json":
                return load_json_config(path)
            return load_yaml_config(path)
    return {}


def load_config(
    *,
    cli_args: dict[str, Any] | None = None,
    working_dir: str | None = None,
) -> CycleLensConfig:
    """Load configuration from all sources with proper priority.

    Priority: CLI args > env vars > project config > user config > defaults
    """
    load_dotenv()
    config = CycleLensConfig()
    cli_args = cli_args or {}

    # 1. User-level config (~/.cyclelens/config.yaml)
    _apply_dict(config, load_config_dir(get_user_config_dir()))

    # 2. Project-level config (.cyclelens/config.yaml)
    project_root = find_project_root(Path(working_dir or os.getcwd()))
    if project_root:
        project_dir = project_root / PROJECT_DIR
        project_config = load_config_dir(project_dir)
        # Relative cost tables are resolved against the project config dir
        table = project_config.get("cost_table")
        if isinstance(table, str) and table and not Path(table).is_absolute():
            project_config["cost_table"] = str(project_dir / table)
        _apply_dict(config, project_config)

    # 3. Environment variables
    if analyzer := os.environ.get("CYCLELENS_ANALYZER"):
        config.analyzer = analyzer
    if cost_table := os.environ.get("CYCLELENS_COST_TABLE"):
        config.cost_table = cost_table
    if debug := os.environ.get("CYCLELENS_DEBUG"):
        config.debug = debug.lower() in ("1", "true", "yes")

    # 4. CLI args (highest priority)
    _apply_dict(config, cli_args)

    return config


def _apply_dict(config: CycleLensConfig, data: dict[str, Any]) -> None:
    """Apply dictionary values to config, only for known fields."""
    field_map = {
        "analyzer": "analyzer",
        "cost_table": "cost_table",
        "sanitize_inline_asm": "sanitize_inline_asm",
        "gutter_width": "gutter_width",
        "fallback_color": "fallback_color",
        "debug": "debug",
        "json_logs": "json_logs",
        # Aliases
        "costTable": "cost_table",
        "sanitizeInlineAsm": "sanitize_inline_asm",
        "gutterWidth": "gutter_width",
        "fallbackColor": "fallback_color",
    }
    for key, attr in field_map.items():
        if key in data and data[key] is not None:
            setattr(config, attr, data[key])
    colors = data.get("level_colors") or data.get("levelColors")
    if isinstance(colors, dict):
        config.level_colors.update({str(k).lower(): str(v) for k, v in colors.items()})
