"""Configuration loading and defaults."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path

import yaml


def _default_cache_dir() -> Path:
    home = Path.home()
    if sys.platform == "darwin":
        return home / "Library" / "Application Support" / "Granola"
    if sys.platform == "win32":
        return home / "AppData" / "Roaming" / "Granola"
    return home / ".config" / "Granola"


_DEFAULT_CACHE_FILENAME = "cache-v3.json"
_DEFAULT_CONFIG_DIR = Path.home() / ".config" / "granolamcp"
_DEFAULT_CONFIG_PATH = _DEFAULT_CONFIG_DIR / "config.yaml"


@dataclass
class Config:
    cache_dir: Path = field(default_factory=_default_cache_dir)
    cache_filename: str = _DEFAULT_CACHE_FILENAME
    poll_timeout: float = 60.0
    poll_interval: float = 2.0

    @property
    def cache_path(self) -> Path:
        return self.cache_dir / self.cache_filename


def load_config(config_path: Path | None = None) -> Config:
    """Load config from YAML, using defaults for anything not set.

    A missing file is only an error when its path was given explicitly.
    """
    if config_path is None:
        path = _DEFAULT_CONFIG_PATH
        if not path.exists():
            return Config()
    else:
        path = Path(config_path).expanduser()
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

    raw = yaml.safe_load(path.read_text())
    if raw is None:
        return Config()
    if not isinstance(raw, dict):
        raise ValueError(f"Invalid config file: {path}")

    kwargs: dict = {}
    if "cache_dir" in raw:
        kwargs["cache_dir"] = Path(raw["cache_dir"]).expanduser()
    if "cache_filename" in raw:
        kwargs["cache_filename"] = str(raw["cache_filename"])
    for key in ("poll_timeout", "poll_interval"):
        if key in raw:
            value = raw[key]
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
                raise ValueError(f"'{key}' must be a positive number, got {value!r}")
            kwargs[key] = float(value)

    return Config(**kwargs)
