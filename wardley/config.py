"""Render configuration loaded from ``wardley.yml``.

Example::

    render:
      width: 1000
      height: 700
      stage_colors:
        genesis:
          fill: "#FFAAAA"
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from pathlib import Path

import yaml

from .models import Stage

CONFIG_FILENAME = "wardley.yml"

# Vertical space reserved below the plot for stage labels
STAGE_LABEL_BAND = 40

DEFAULT_STAGE_COLORS = {
    Stage.GENESIS: {"fill": "#FF6B6B", "stroke": "#C92A2A"},
    Stage.CUSTOM: {"fill": "#4ECDC4", "stroke": "#0B7285"},
    Stage.PRODUCT: {"fill": "#45B7D1", "stroke": "#1971C2"},
    Stage.COMMODITY: {"fill": "#96CEB4", "stroke": "#2F9E44"},
}


class ConfigError(ValueError):
    """Invalid configuration file."""


@dataclass(frozen=True)
class RenderOptions:
    width: int = 800
    height: int = 600
    padding: int = 60
    node_radius: int = 8
    font_size: int = 12
    stage_colors: dict[Stage, dict[str, str]] = field(
        default_factory=lambda: {stage: dict(colors) for stage, colors in DEFAULT_STAGE_COLORS.items()}
    )

    def colors_for(self, stage: Stage) -> dict[str, str]:
        return self.stage_colors[stage]


_SIZE_KEYS = {f.name for f in fields(RenderOptions)} - {"stage_colors"}


def find_config(start: Path) -> Path | None:
    """Return ``wardley.yml`` beside ``start`` (a file or directory), if present."""
    directory = start if start.is_dir() else start.parent
    candidate = directory / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def load_render_options(path: Path | None) -> RenderOptions:
    """Load render options from YAML, or return defaults when path is None."""
    options = RenderOptions()
    if path is None:
        return options

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"{path}: invalid YAML: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping at top level")
    if "render" in data:
        data = data["render"] or {}
        if not isinstance(data, dict):
            raise ConfigError(f"{path}: 'render' must be a mapping")

    return _apply(options, data, source=path)


def _apply(options: RenderOptions, data: dict, *, source: Path) -> RenderOptions:
    unknown = sorted(set(data) - _SIZE_KEYS - {"stage_colors"})
    if unknown:
        raise ConfigError(f"{source}: unknown option(s): {', '.join(unknown)}")

    updates = {}
    for key in _SIZE_KEYS & set(data):
        value = data[key]
        if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
            raise ConfigError(f"{source}: '{key}' must be a positive integer, got {value!r}")
        updates[key] = value

    if "stage_colors" in data:
        updates["stage_colors"] = _stage_colors(data["stage_colors"] or {}, options, source=source)

    result = replace(options, **updates)
    if 2 * result.padding >= result.width or 2 * result.padding + STAGE_LABEL_BAND >= result.height:
        raise ConfigError(f"{source}: padding {result.padding} leaves no room to draw")
    return result


def _stage_colors(data: object, options: RenderOptions, *, source: Path) -> dict[Stage, dict[str, str]]:
    if not isinstance(data, dict):
        raise ConfigError(f"{source}: 'stage_colors' must be a mapping")

    colors = {stage: dict(values) for stage, values in options.stage_colors.items()}
    for name, values in data.items():
        try:
            stage = Stage(str(name))
        except ValueError:
            raise ConfigError(
                f"{source}: unknown stage '{name}' in stage_colors. Must be: {', '.join(Stage.names())}"
            ) from None
        if not isinstance(values, dict) or set(values) - {"fill", "stroke"}:
            raise ConfigError(f"{source}: stage_colors.{name} accepts only 'fill' and 'stroke'")
        colors[stage].update({k: str(v) for k, v in values.items()})
    return colors
