"""Flatten a discovery tree into module bundles, depth-first."""

from __future__ import annotations

import inspect
from collections.abc import Mapping
from typing import Any, AsyncIterator

from modulekit.errors import ModuleLoadError
from modulekit.registry.types import ModuleBundle

__all__ = ["iter_bundles"]


async def iter_bundles(tree: Mapping[str, Any]) -> AsyncIterator[ModuleBundle]:
    """Yield the bundles of ``tree`` in traversal order.

    A nested mapping is walked completely before its next sibling. Every
    other value must be awaitable and resolve to a ModuleBundle.
    """
    for key, value in tree.items():
        if isinstance(value, Mapping):
            async for bundle in iter_bundles(value):
                yield bundle
            continue

        if not inspect.isawaitable(value):
            raise ModuleLoadError(module_id=str(key), reason=f"Discovery entry is not awaitable: {value!r}")
        bundle = await value
        if not isinstance(bundle, ModuleBundle):
            raise ModuleLoadError(
                module_id=str(key),
                reason=f"Discovery entry resolved to {type(bundle).__name__}, expected ModuleBundle",
            )
        yield bundle
