"""Configuration loading and runtime settings."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from geometry.rect import MIN_HEIGHT, MIN_WIDTH, Size


def load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML from file, returning empty mapping when missing."""
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")
    return data


def merge_dicts(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge dictionaries."""
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_effective_config(root: Path) -> dict[str, Any]:
    """Load ``config/default.yaml`` with ``config/local.yaml`` layered on top."""
    config_dir = root / "config"
    default_cfg = load_yaml(config_dir / "default.yaml")
    local_cfg = load_yaml(config_dir / "local.yaml")
    return merge_dicts(default_cfg, local_cfg)


@dataclass
class StackSettings:
    """Typed view over the ``windows``/``tabs``/``logging`` config sections."""

    min_width: float = MIN_WIDTH
    min_height: float = MIN_HEIGHT
    default_width: float = 600.0
    default_height: float = 400.0
    placement_base_offset: float = 50.0
    placement_spread: int = 200
    placement_seed: int | None = None
    restore_viewport: Size = Size(1280.0, 800.0)
    windows_label: str = "windows"
    tabs_label: str = "tabs"
    log_level: str = "WARNING"

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> StackSettings:
        windows = config.get("windows", {}) or {}
        placement = windows.get("placement", {}) or {}
        viewport = windows.get("restore_viewport", {}) or {}
        tabs = config.get("tabs", {}) or {}
        logging_cfg = config.get("logging", {}) or {}
        defaults = cls()
        seed = placement.get("seed", defaults.placement_seed)
        return cls(
            min_width=float(windows.get("min_width", defaults.min_width)),
            min_height=float(windows.get("min_height", defaults.min_height)),
            default_width=float(windows.get("default_width", defaults.default_width)),
            default_height=float(windows.get("default_height", defaults.default_height)),
            placement_base_offset=float(
                placement.get("base_offset", defaults.placement_base_offset)
            ),
            placement_spread=int(placement.get("spread", defaults.placement_spread)),
            placement_seed=None if seed is None else int(seed),
            restore_viewport=Size(
                float(viewport.get("width", defaults.restore_viewport.width)),
                float(viewport.get("height", defaults.restore_viewport.height)),
            ),
            windows_label=str(windows.get("label", defaults.windows_label)),
            tabs_label=str(tabs.get("label", defaults.tabs_label)),
            log_level=str(logging_cfg.get("level", defaults.log_level)).upper(),
        )
