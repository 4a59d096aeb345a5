"""modulekit registry and module discovery system.

Provides module registration, discovery, requirement checks, event wiring
and lifecycle management.

Usage::

    from modulekit import HostContext
    from modulekit.registry import ModuleManager

    manager = ModuleManager()
    await manager.load(HostContext(), "./modules")
"""

from __future__ import annotations

from modulekit.registry.types import EventSubscription, ModuleBundle, ModuleInfo, ModuleScope
from modulekit.registry.wrapper import METADATA_KEYS, ModuleWrapper
from modulekit.registry.store import ModuleStore
from modulekit.registry.entry_point import resolve_bundle
from modulekit.registry.metadata import load_metadata, merge_module_info
from modulekit.registry.scanner import DeferredBundle, scan_modules
from modulekit.registry.discovery import iter_bundles
from modulekit.registry.manager import ModuleManager

__all__ = [
    "METADATA_KEYS",
    "DeferredBundle",
    "EventSubscription",
    "ModuleBundle",
    "ModuleInfo",
    "ModuleManager",
    "ModuleScope",
    "ModuleStore",
    "ModuleWrapper",
    "iter_bundles",
    "load_metadata",
    "merge_module_info",
    "resolve_bundle",
    "scan_modules",
]
