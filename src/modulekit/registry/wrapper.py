"""ModuleWrapper: one descriptor bound to one live module instance."""

from __future__ import annotations

import inspect
from typing import Any

from modulekit.registry.types import EventSubscription, ModuleBundle, ModuleInfo, ModuleScope

__all__ = ["ModuleWrapper", "METADATA_KEYS"]

METADATA_KEYS = frozenset({"classes", "constants", "info"})


class ModuleWrapper:
    """Addressable handle for a registered module.

    Metadata (``info``, ``classes``, ``constants``) is read-only and reached
    through the properties or ``metadata()``. Everything else goes to the
    instance: ``get()`` reads from it and ``set()`` always writes to it,
    including keys that share a name with a metadata field.
    """

    __slots__ = ("_info", "_classes", "_constants", "_instance", "_source")

    def __init__(
        self,
        info: ModuleInfo,
        instance: Any,
        classes: Any = None,
        constants: Any = None,
        source: Any = None,
    ) -> None:
        self._info = info
        self._instance = instance
        self._classes = classes
        self._constants = constants
        self._source = source

    @classmethod
    def from_bundle(cls, bundle: ModuleBundle, instance: Any) -> ModuleWrapper:
        return cls(
            info=bundle.info,
            instance=instance,
            classes=bundle.classes,
            constants=bundle.constants,
            source=bundle.source,
        )

    # ----- Metadata -----

    @property
    def info(self) -> ModuleInfo:
        return self._info

    @property
    def classes(self) -> Any:
        return self._classes

    @property
    def constants(self) -> Any:
        return self._constants

    @property
    def source(self) -> Any:
        """Where the module was loaded from, if it came from discovery."""
        return self._source

    @property
    def name(self) -> str:
        return self._info.name

    @property
    def required(self) -> tuple[str, ...]:
        return self._info.required

    @property
    def events(self) -> tuple[EventSubscription, ...]:
        return self._info.events

    @property
    def scope(self) -> ModuleScope | None:
        return self._info.scope

    def metadata(self, key: str) -> Any:
        """Return one of the reserved metadata fields.

        Raises:
            KeyError: If ``key`` is not ``classes``, ``constants`` or ``info``.
        """
        if key not in METADATA_KEYS:
            raise KeyError(key)
        return getattr(self, f"_{key}")

    # ----- Instance access -----

    @property
    def instance(self) -> Any:
        return self._instance

    def get(self, key: str, default: Any = None) -> Any:
        """Read a metadata field or, for any other key, an instance attribute.

        Methods come back bound to the instance. Missing attributes yield
        ``default`` rather than raising.
        """
        if key in METADATA_KEYS:
            return self.metadata(key)
        return getattr(self._instance, key, default)

    def set(self, key: str, value: Any) -> None:
        """Write an attribute on the instance. Metadata is never modified."""
        setattr(self._instance, key, value)

    def has_hook(self, name: str) -> bool:
        """Whether the instance exposes a callable attribute ``name``."""
        return callable(getattr(self._instance, name, None))

    async def call_hook(self, name: str, *args: Any, **kwargs: Any) -> Any:
        """Call an instance hook, awaiting the result if it is awaitable."""
        result = getattr(self._instance, name)(*args, **kwargs)
        if inspect.isawaitable(result):
            result = await result
        return result

    def __repr__(self) -> str:
        return f"ModuleWrapper(name={self.name!r}, instance={type(self._instance).__name__})"
