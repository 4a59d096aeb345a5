"""Resolve a discovered module file into a ModuleBundle."""

from __future__ import annotations

import importlib.util
import re
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from modulekit.builder import ModuleBuilder
from modulekit.errors import ModuleLoadError
from modulekit.registry.metadata import merge_module_info
from modulekit.registry.types import ModuleBundle, ModuleInfo

__all__ = ["resolve_bundle", "import_module_from_path"]

INFO_EXPORT = "ModuleInfo"
INSTANCE_EXPORT = "ModuleInstance"
CLASSES_EXPORT = "ModuleClasses"
CONSTANTS_EXPORT = "ModuleConstants"


def _import_name(path: Path) -> str:
    slug = re.sub(r"\W", "_", str(path.resolve()))
    return f"modulekit_ext_{slug}"


def import_module_from_path(path: Path) -> Any:
    """Import a module file, or a package directory through its ``__init__.py``."""
    module_name = _import_name(path)
    if path.is_dir():
        spec = importlib.util.spec_from_file_location(
            module_name,
            str(path / "__init__.py"),
            submodule_search_locations=[str(path)],
        )
    else:
        spec = importlib.util.spec_from_file_location(module_name, str(path))
    if spec is None or spec.loader is None:
        raise ModuleLoadError(module_id=str(path), reason=f"Cannot create import spec for {path}")

    mod = importlib.util.module_from_spec(spec)
    # Packages need to be importable by name for their relative imports.
    sys.modules[module_name] = mod
    try:
        spec.loader.exec_module(mod)
    except Exception as exc:
        sys.modules.pop(module_name, None)
        raise ModuleLoadError(module_id=str(path), reason=f"Failed to import module: {exc}") from exc
    return mod


def _info_to_dict(path: Path, raw: Any) -> dict[str, Any]:
    if raw is None:
        return {}
    if isinstance(raw, ModuleBuilder):
        return raw.to_dict()
    if isinstance(raw, ModuleInfo):
        return raw.to_dict()
    if isinstance(raw, dict):
        return dict(raw)
    raise ModuleLoadError(
        module_id=str(path),
        reason=f"{INFO_EXPORT} must be a ModuleBuilder, ModuleInfo or dict, got {type(raw).__name__}",
    )


def resolve_bundle(path: Path, meta: dict[str, Any] | None = None) -> ModuleBundle:
    """Import ``path`` and collect its module exports.

    The file must export ``ModuleInstance`` (a class or factory taking the
    host context) and ``ModuleInfo`` unless ``meta`` supplies the descriptor.
    ``ModuleClasses`` and ``ModuleConstants`` are optional.
    """
    loaded = import_module_from_path(path)

    info_dict = _info_to_dict(path, getattr(loaded, INFO_EXPORT, None))
    if meta:
        info_dict = merge_module_info(info_dict, meta)
    if not info_dict:
        raise ModuleLoadError(module_id=str(path), reason=f"No {INFO_EXPORT} export or metadata found")

    try:
        info = ModuleInfo.from_dict(info_dict)
    except ValidationError as exc:
        raise ModuleLoadError(module_id=str(path), reason=f"Invalid module info: {exc}") from exc

    factory = getattr(loaded, INSTANCE_EXPORT, None)
    if factory is None:
        raise ModuleLoadError(module_id=str(path), reason=f"No {INSTANCE_EXPORT} export found")
    if not callable(factory):
        raise ModuleLoadError(module_id=str(path), reason=f"{INSTANCE_EXPORT} is not callable")

    return ModuleBundle(
        info=info,
        instance_factory=factory,
        classes=getattr(loaded, CLASSES_EXPORT, None),
        constants=getattr(loaded, CONSTANTS_EXPORT, None),
        source=path,
    )
