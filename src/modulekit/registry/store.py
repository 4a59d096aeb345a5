"""Name-keyed store of module wrappers with secondary scope groups."""

from __future__ import annotations

import logging
import threading
from typing import Any, Iterator

from modulekit.errors import DuplicateNameError, DuplicateScopedNameError, InvalidScopeError
from modulekit.registry.types import ModuleBundle, ModuleInfo
from modulekit.registry.wrapper import ModuleWrapper

logger = logging.getLogger(__name__)

__all__ = ["ModuleStore"]


class ModuleStore:
    """Registered modules, kept in registration order."""

    def __init__(self) -> None:
        self._modules: dict[str, ModuleWrapper] = {}
        self._scopes: dict[str, dict[str, ModuleWrapper]] = {}
        self._write_lock = threading.RLock()

    # ----- Registration -----

    def register(self, info: ModuleInfo, instance: Any, bundle: ModuleBundle | None = None) -> ModuleWrapper:
        """Wrap ``instance`` and store it under ``info.name``.

        Raises:
            DuplicateNameError: If the name is already registered. The store is left unchanged.
            ValueError: If ``bundle`` carries a different descriptor than ``info``.
        """
        if bundle is not None:
            if bundle.info != info:
                raise ValueError(
                    f"Bundle for module '{bundle.info.name}' does not match descriptor '{info.name}'"
                )
            wrapper = ModuleWrapper.from_bundle(bundle, instance)
        else:
            wrapper = ModuleWrapper(info=info, instance=instance)

        with self._write_lock:
            if info.name in self._modules:
                raise DuplicateNameError(module_name=info.name)
            self._modules[info.name] = wrapper

        logger.debug("Registered module '%s'", info.name)
        return wrapper

    def register_scoped(self, wrapper: ModuleWrapper) -> None:
        """Add ``wrapper`` to the scope group its descriptor names.

        Raises:
            InvalidScopeError: If the scope group or in-group name is missing.
            DuplicateScopedNameError: If the in-group name is already taken.
        """
        scope = wrapper.scope
        group = scope.group if scope is not None else None
        scoped_name = scope.name if scope is not None else None
        if not group or not scoped_name:
            raise InvalidScopeError(module_name=wrapper.name, group=group, scoped_name=scoped_name)

        with self._write_lock:
            members = self.get_scope(group, create=True)
            if scoped_name in members:
                raise DuplicateScopedNameError(module_name=wrapper.name, group=group, scoped_name=scoped_name)
            members[scoped_name] = wrapper

        logger.debug("Module '%s' registered as '%s' in scope '%s'", wrapper.name, scoped_name, group)

    # ----- Query Methods -----

    def get(self, name: str) -> ModuleWrapper | None:
        """Look up a module by name. Returns None if not found."""
        with self._write_lock:
            return self._modules.get(name)

    def has(self, name: str) -> bool:
        """Check whether a module is registered."""
        with self._write_lock:
            return name in self._modules

    def get_scope(self, group: str, create: bool = False) -> dict[str, ModuleWrapper] | None:
        """Return the members of a scope group, creating the group only if ``create`` is set."""
        with self._write_lock:
            if group not in self._scopes and create:
                self._scopes[group] = {}
            return self._scopes.get(group)

    def get_from_scope(self, group: str, name: str) -> ModuleWrapper | None:
        """Look up a module by its in-group name."""
        members = self.get_scope(group)
        if members is None:
            return None
        return members.get(name)

    def iter(self) -> Iterator[tuple[str, ModuleWrapper]]:
        """Return an iterator of (name, wrapper) tuples in registration order (snapshot-based)."""
        with self._write_lock:
            items = list(self._modules.items())
        return iter(items)

    @property
    def names(self) -> list[str]:
        """Registered module names in registration order."""
        with self._write_lock:
            return list(self._modules)

    @property
    def scopes(self) -> list[str]:
        """Sorted list of scope group names."""
        with self._write_lock:
            return sorted(self._scopes)

    @property
    def count(self) -> int:
        """Number of registered modules."""
        with self._write_lock:
            return len(self._modules)

    def __len__(self) -> int:
        return self.count

    def __contains__(self, name: object) -> bool:
        with self._write_lock:
            return name in self._modules
