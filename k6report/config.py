"""Load k6report settings from pyproject.toml and an optional .k6report.toml."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional

from .errors import ConfigError

OUTPUT_FORMATS = ("text", "json")


@dataclass
class ReportConfig:
    """Runtime configuration for k6report."""

    # k6 results log written by `k6 run --out json=<path>`; "-" reads stdin
    input_path: str = "results.json"
    # Where to write the rendered report.  None prints it to stdout.
    output_path: Optional[str] = None
    # Report format, one of OUTPUT_FORMATS
    output_format: str = "text"


def _read_toml(path: Path) -> dict:
    """Read a TOML file; return empty dict if missing or unparseable."""
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError, UnicodeDecodeError):
        return {}


def _tool_section(pyproject: dict, source: Path) -> dict:
    """Return the ``[tool.k6report]`` table of a parsed pyproject.toml."""
    tool = pyproject.get("tool", {})
    section = tool.get("k6report", {}) if isinstance(tool, dict) else {}
    if not isinstance(section, dict):
        raise ConfigError(f"{source}: [tool.k6report] must be a table")
    return section


def _check_value(key: str, value: Any, source: Path) -> str:
    """Return *value* if it is a usable setting for *key*, else raise ConfigError.

    Every setting is a path or a format name, so each must be a non-empty
    string; ``output_format`` must also name a known renderer.
    """
    if not isinstance(value, str) or not value:
        raise ConfigError(
            f"{source}: {key} must be a non-empty string, got {value!r}"
        )
    if key == "output_format" and value not in OUTPUT_FORMATS:
        choices = ", ".join(OUTPUT_FORMATS)
        raise ConfigError(
            f"{source}: output_format must be one of {choices}, got {value!r}"
        )
    return value


def _overlay(cfg: ReportConfig, settings: dict, source: Path) -> None:
    """Set each known key of *settings* on *cfg*; unknown keys are ignored."""
    known = {f.name for f in fields(cfg)}
    for key, value in settings.items():
        if key in known:
            setattr(cfg, key, _check_value(key, value, source))


def load_config(project_root: Optional[Path] = None) -> ReportConfig:
    """Build the config from defaults, [tool.k6report], then .k6report.toml.

    Raises ConfigError when a recognized setting has the wrong type or value.
    """
    root = Path.cwd() if project_root is None else project_root
    cfg = ReportConfig()
    pyproject_path = root / "pyproject.toml"
    section = _tool_section(_read_toml(pyproject_path), pyproject_path)
    _overlay(cfg, section, pyproject_path)
    local_path = root / ".k6report.toml"
    _overlay(cfg, _read_toml(local_path), local_path)
    return cfg
