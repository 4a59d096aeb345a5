"""Host context handed to every module factory."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from modulekit.events import EventEmitter

if TYPE_CHECKING:
    from modulekit.config import Config
    from modulekit.registry.manager import ModuleManager

__all__ = ["HostContext"]


class HostContext(EventEmitter):
    """Default host object passed to module factories.

    It is the fallback emitter for subscriptions that name no source module,
    and it carries the manager so modules can look each other up without a
    process-wide singleton.

    Attributes:
        modules: The ModuleManager loading this context, set by ``ModuleManager.load``
            when left empty.
        config: Optional host configuration.
        data: Free-form host state shared with modules.
    """

    def __init__(
        self,
        modules: ModuleManager | None = None,
        config: Config | None = None,
        data: dict[str, Any] | None = None,
    ) -> None:
        super().__init__()
        self.modules = modules
        self.config = config
        self.data: dict[str, Any] = data if data is not None else {}
