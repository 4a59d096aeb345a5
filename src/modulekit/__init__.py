"""modulekit - Directory-discovered module registry with a two-phase lifecycle."""

from __future__ import annotations

# Core
from modulekit.context import HostContext
from modulekit.events import EventEmitter, Subscription
from modulekit.registry import ModuleManager, ModuleStore, ModuleWrapper
from modulekit.registry.types import EventSubscription, ModuleBundle, ModuleInfo, ModuleScope

# Authoring
from modulekit.builder import ModuleBuilder

# Config
from modulekit.config import Config

# Errors
from modulekit.errors import (
    CleanupError,
    ConfigError,
    ConfigNotFoundError,
    DuplicateNameError,
    DuplicateScopedNameError,
    ErrorCodes,
    InitializationError,
    InvalidScopeError,
    ModuleError,
    ModuleLoadError,
    UnknownEventSourceError,
    UnmetRequirementError,
)

__version__ = "0.1.0"

__all__ = [
    # Core
    "HostContext",
    "ModuleManager",
    "ModuleStore",
    "ModuleWrapper",
    "EventEmitter",
    "Subscription",
    # Registry types
    "ModuleInfo",
    "ModuleBundle",
    "ModuleScope",
    "EventSubscription",
    # Authoring
    "ModuleBuilder",
    # Config
    "Config",
    # Errors
    "ErrorCodes",
    "ModuleError",
    "ConfigError",
    "ConfigNotFoundError",
    "DuplicateNameError",
    "InvalidScopeError",
    "DuplicateScopedNameError",
    "UnmetRequirementError",
    "InitializationError",
    "UnknownEventSourceError",
    "CleanupError",
    "ModuleLoadError",
]
