"""Companion metadata loading for discovered module files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from modulekit.errors import ConfigError

logger = logging.getLogger(__name__)

__all__ = ["INFO_KEYS", "load_metadata", "merge_module_info", "meta_path_for"]

INFO_KEYS = ("name", "disabled", "required", "events", "scope")


def meta_path_for(module_path: Path) -> Path:
    """Return the companion metadata path for a module file or package directory.

    ``greet.py`` pairs with ``greet_meta.yaml``; a package directory pairs
    with ``meta.yaml`` inside it.
    """
    if module_path.is_dir():
        return module_path / "meta.yaml"
    return module_path.with_name(module_path.stem + "_meta.yaml")


def load_metadata(meta_path: Path) -> dict[str, Any]:
    """Load a companion metadata YAML file.

    Returns empty dict if file does not exist (metadata is optional).
    """
    if not meta_path.exists():
        return {}

    content = meta_path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(message=f"Invalid YAML in metadata file: {meta_path}") from e

    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ConfigError(message=f"Metadata file must be a YAML mapping: {meta_path}")

    unknown = sorted(set(parsed) - set(INFO_KEYS))
    if unknown:
        logger.warning("Ignoring unknown keys in %s: %s", meta_path, ", ".join(unknown))
    return parsed


def merge_module_info(code_info: dict[str, Any], meta: dict[str, Any]) -> dict[str, Any]:
    """Merge YAML metadata over the code-level info dict. YAML wins on conflicts."""
    merged = dict(code_info)
    for key in INFO_KEYS:
        if meta.get(key) is not None:
            merged[key] = meta[key]
    return merged
