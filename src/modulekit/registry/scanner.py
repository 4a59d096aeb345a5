"""Directory scanner producing the discovery tree of deferred module bundles."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Generator, Union

from modulekit.errors import ConfigNotFoundError
from modulekit.registry.entry_point import resolve_bundle
from modulekit.registry.metadata import load_metadata, meta_path_for
from modulekit.registry.types import ModuleBundle

logger = logging.getLogger(__name__)

__all__ = ["DeferredBundle", "DiscoveryTree", "scan_modules"]

_SKIP_DIR_NAMES = {"__pycache__"}


class DeferredBundle:
    """A discovered module file that is imported when awaited.

    Awaiting it a second time raises RuntimeError.
    """

    def __init__(self, path: Path, meta_path: Path | None = None) -> None:
        self.path = path
        self.meta_path = meta_path
        self._consumed = False

    def __await__(self) -> Generator[Any, None, ModuleBundle]:
        if self._consumed:
            raise RuntimeError(f"DeferredBundle for {self.path} was already resolved")
        self._consumed = True
        return self._resolve().__await__()

    async def _resolve(self) -> ModuleBundle:
        meta = load_metadata(self.meta_path) if self.meta_path is not None else None
        logger.debug("Resolving module bundle from %s", self.path)
        return resolve_bundle(self.path, meta=meta)

    def __repr__(self) -> str:
        return f"DeferredBundle({str(self.path)!r})"


DiscoveryTree = dict[str, Union[DeferredBundle, "DiscoveryTree"]]


def _deferred(path: Path) -> DeferredBundle:
    meta_path = meta_path_for(path)
    return DeferredBundle(path, meta_path=meta_path if meta_path.exists() else None)


def scan_modules(
    root: Path | str,
    max_depth: int = 1,
    follow_symlinks: bool = False,
) -> DiscoveryTree:
    """Scan a modules directory into an ordered tree.

    Files map to DeferredBundle values keyed by stem; subdirectories map to
    nested dicts, down to ``max_depth`` levels below ``root``. A directory
    holding ``__init__.py`` is a single module, not a subtree. Entries are
    visited in name order.
    """
    root = Path(root).resolve()
    if not root.is_dir():
        raise ConfigNotFoundError(config_path=str(root))

    visited_real_paths: set[Path] = {root}

    def _scan_dir(dir_path: Path, depth: int) -> DiscoveryTree:
        tree: DiscoveryTree = {}
        try:
            entries = sorted(os.scandir(dir_path), key=lambda e: e.name)
        except OSError as e:
            logger.error("OS error scanning %s: %s", dir_path, e)
            return tree

        for entry in entries:
            name = entry.name
            if name.startswith(".") or name.startswith("_"):
                continue
            if name in _SKIP_DIR_NAMES:
                continue

            entry_path = Path(entry.path)
            try:
                is_dir = entry.is_dir(follow_symlinks=follow_symlinks)
                is_file = entry.is_file(follow_symlinks=follow_symlinks)
            except OSError as e:
                logger.error("OS error accessing %s: %s", entry_path, e)
                continue

            if is_dir:
                if entry.is_symlink():
                    real = entry_path.resolve()
                    if real in visited_real_paths:
                        logger.warning("Symlink cycle detected at %s -> %s, skipping", entry_path, real)
                        continue
                    visited_real_paths.add(real)
                if (entry_path / "__init__.py").is_file():
                    tree[name] = _deferred(entry_path)
                elif depth < max_depth:
                    tree[name] = _scan_dir(entry_path, depth + 1)
                else:
                    logger.info("Max depth %d reached at %s, skipping", max_depth, entry_path)
            elif is_file and entry_path.suffix == ".py":
                if entry_path.stem in tree:
                    logger.warning("%s shadows a directory of the same name, skipping", entry_path)
                    continue
                tree[entry_path.stem] = _deferred(entry_path)

        return tree

    return _scan_dir(root, depth=0)
