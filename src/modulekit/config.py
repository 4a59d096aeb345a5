"""Configuration loading and dot-path access."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from modulekit.errors import ConfigError, ConfigNotFoundError

__all__ = ["Config"]


class Config:
    """Configuration accessor with dot-path key support.

    Recognised keys:
        modules.root: Directory scanned by ``ModuleManager.load`` when no path is given.
        modules.max_depth: How many levels of subdirectories the scanner descends.
        modules.events.strict: Raise instead of ignoring subscriptions to unknown modules.
        modules.cleanup.isolate_errors: Run every cleanup hook and report failures together.
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = data or {}

    @classmethod
    def from_yaml(cls, path: str | Path) -> Config:
        """Load configuration from a YAML file."""
        config_path = Path(path)
        if not config_path.exists():
            raise ConfigNotFoundError(config_path=str(config_path))

        content = config_path.read_text(encoding="utf-8")
        try:
            parsed = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(message=f"Invalid YAML in config file: {config_path}") from e

        if parsed is None:
            return cls()
        if not isinstance(parsed, dict):
            raise ConfigError(message=f"Config file must be a YAML mapping: {config_path}")
        return cls(parsed)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by dot-path key."""
        parts = key.split(".")
        current: Any = self._data
        for part in parts:
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default
        return current
