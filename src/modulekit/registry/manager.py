"""Lifecycle orchestration: register, validate, wire, initialize, clean up."""

from __future__ import annotations

import inspect
import logging
from collections.abc import AsyncIterable, Iterable
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterator

from modulekit.errors import (
    CleanupError,
    DuplicateNameError,
    InitializationError,
    ModuleLoadError,
    UnknownEventSourceError,
    UnmetRequirementError,
)
from modulekit.events import Subscription, supports_events
from modulekit.registry.discovery import iter_bundles
from modulekit.registry.scanner import scan_modules
from modulekit.registry.store import ModuleStore
from modulekit.registry.types import ModuleBundle
from modulekit.registry.wrapper import ModuleWrapper

if TYPE_CHECKING:
    from modulekit.config import Config

logger = logging.getLogger(__name__)

__all__ = ["ModuleManager"]

_HOST_CONTEXT = "<context>"


class ModuleManager:
    """Discovers, registers and drives the lifecycle of a set of modules.

    ``load()`` runs four phases in order and stops at the first error:

    1. Registration of every enabled module, in discovery order.
    2. Validation that every ``required`` module is registered.
    3. Wiring of declared event subscriptions.
    4. ``init()`` of every module, in registration order.
    """

    def __init__(self, config: Config | None = None, store: ModuleStore | None = None) -> None:
        """Initialize the ModuleManager.

        Args:
            config: Optional Config supplying ``modules.*`` settings.
            store: Store to register into. A fresh one is created if omitted.
        """
        self._config = config
        self._store = store if store is not None else ModuleStore()
        self._loaded = False

    def _setting(self, key: str, default: Any) -> Any:
        if self._config is None:
            return default
        return self._config.get(key, default)

    # ----- Loading -----

    async def load(self, context: Any, path: str | Path | None = None) -> None:
        """Discover modules under ``path`` and bring them up.

        Args:
            context: Host object given to every module factory and used as
                the emitter for subscriptions that name no module.
            path: Modules directory. Defaults to config ``modules.root``.

        Raises:
            ConfigNotFoundError: If the modules directory does not exist.
            ModuleLoadError: If a module file cannot be resolved, or load() was already called.
            DuplicateNameError, InvalidScopeError, DuplicateScopedNameError:
                During registration.
            UnmetRequirementError: During dependency validation.
            InitializationError: If a module's init() returns a falsy result.
        """
        if path is None:
            path = self._setting("modules.root", "./modules")
        tree = scan_modules(Path(path), max_depth=self._setting("modules.max_depth", 1))
        await self.load_bundles(context, iter_bundles(tree))

    async def load_bundles(
        self,
        context: Any,
        bundles: Iterable[ModuleBundle] | AsyncIterable[ModuleBundle],
    ) -> None:
        """Run the four load phases over bundles from any discovery source."""
        if self._loaded:
            raise ModuleLoadError(module_id="*", reason="modules have already been loaded")
        self._loaded = True

        if getattr(context, "modules", False) is None:
            context.modules = self

        if isinstance(bundles, AsyncIterable):
            async for bundle in bundles:
                await self.register_bundle(context, bundle)
        else:
            for bundle in bundles:
                await self.register_bundle(context, bundle)

        self.validate_requirements()
        self.wire_events(context)
        await self.init_modules()
        logger.info("Loaded %d modules", self._store.count)

    @property
    def loaded(self) -> bool:
        """Whether load() has been started on this manager."""
        return self._loaded

    # ----- Phases -----

    async def register_bundle(self, context: Any, bundle: ModuleBundle) -> ModuleWrapper | None:
        """Build and register one bundle. Returns None for disabled modules."""
        info = bundle.info
        if info.disabled:
            logger.debug("Module '%s' is disabled, skipping", info.name)
            return None
        if self._store.has(info.name):
            raise DuplicateNameError(module_name=info.name)

        instance = bundle.instance_factory(context)
        if inspect.isawaitable(instance):
            instance = await instance

        wrapper = self._store.register(info, instance, bundle=bundle)
        if info.scope is not None:
            self._store.register_scoped(wrapper)
        return wrapper

    def validate_requirements(self) -> None:
        """Check that every declared requirement names a registered module.

        Only presence is checked; there is no cycle detection or ordering.
        """
        for name, wrapper in self._store.iter():
            for requirement in wrapper.required:
                if not self._store.has(requirement):
                    raise UnmetRequirementError(module_name=name, requirement=requirement)

    def wire_events(self, context: Any) -> int:
        """Subscribe module handlers to their declared event sources.

        Returns:
            Number of subscriptions attached.
        """
        strict = bool(self._setting("modules.events.strict", False))
        wired = 0
        for name, wrapper in self._store.iter():
            for sub in wrapper.events:
                if sub.module is not None:
                    source = self._store.get(sub.module)
                    emitter = source.instance if source is not None else None
                else:
                    emitter = context

                if emitter is None or not supports_events(emitter):
                    source_name = sub.module or _HOST_CONTEXT
                    if strict:
                        raise UnknownEventSourceError(module_name=name, source=source_name, event=sub.name)
                    logger.warning(
                        "Module '%s' listens for '%s' on '%s', which is not an event source; ignoring",
                        name,
                        sub.name,
                        source_name,
                    )
                    continue

                if not wrapper.has_hook(sub.call):
                    raise ModuleLoadError(
                        module_id=name,
                        reason=f"event handler '{sub.call}' for '{sub.name}' is not a method",
                    )
                emitter.on(sub.name, Subscription.bind(wrapper.instance, sub.call))
                wired += 1
        logger.debug("Wired %d event subscriptions", wired)
        return wired

    async def init_modules(self) -> None:
        """Run init() on every module in registration order.

        A module without init() is already initialized. A result of None
        counts as success; any other falsy result fails the load.
        """
        for name, wrapper in self._store.iter():
            if not wrapper.has_hook("init"):
                continue
            result = await wrapper.call_hook("init")
            if result is not None and not result:
                raise InitializationError(module_name=name)
            logger.debug("Initialized module '%s'", name)

    # ----- Cleanup -----

    async def cleanup(self) -> None:
        """Call cleanup() on every module that has one, in registration order.

        By default the first failure propagates and the remaining modules are
        not cleaned up. With ``modules.cleanup.isolate_errors`` every hook
        runs and failures are raised together as a CleanupError.
        """
        isolate = bool(self._setting("modules.cleanup.isolate_errors", False))
        errors: dict[str, Exception] = {}
        for name, wrapper in self._store.iter():
            if not wrapper.has_hook("cleanup"):
                continue
            if not isolate:
                await wrapper.call_hook("cleanup")
                continue
            try:
                await wrapper.call_hook("cleanup")
            except Exception as e:
                logger.error("cleanup() failed for module '%s': %s", name, e)
                errors[name] = e

        if errors:
            raise CleanupError(errors=errors)
        logger.info("Cleaned up %d modules", self._store.count)

    # ----- Query Methods -----

    @property
    def store(self) -> ModuleStore:
        return self._store

    def get(self, name: str) -> ModuleWrapper | None:
        """Look up a module by name. Returns None if not found."""
        return self._store.get(name)

    def has(self, name: str) -> bool:
        return self._store.has(name)

    def get_scope(self, group: str, create: bool = False) -> dict[str, ModuleWrapper] | None:
        return self._store.get_scope(group, create=create)

    def get_from_scope(self, group: str, name: str) -> ModuleWrapper | None:
        return self._store.get_from_scope(group, name)

    def iter(self) -> Iterator[tuple[str, ModuleWrapper]]:
        return self._store.iter()

    @property
    def names(self) -> list[str]:
        return self._store.names

    @property
    def count(self) -> int:
        return self._store.count
