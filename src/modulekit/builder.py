"""Chainable builder used by module authors to declare a module's descriptor."""

from __future__ import annotations

from typing import Any

from modulekit.registry.types import ModuleInfo

__all__ = ["ModuleBuilder"]


class ModuleBuilder:
    """Declare a module's name, events, requirements, scope and disabled flag.

    Every setter returns the builder so calls can be chained::

        ModuleInfo = (
            ModuleBuilder("commands")
            .add_required("database")
            .add_event_listener("gateway", "message", "on_message")
            .set_scope("handlers", "cmd")
        )

    Attributes:
        name: The module's unique name.
        events: Declared subscriptions as ``{"module", "name", "call"}`` dicts.
        required: Names of modules that must be registered for this one to work.
        disabled: Whether the module is skipped at load time.
        scope: ``{"scope", "name"}`` placement in a scope group, or None.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self.events: list[dict[str, Any]] = []
        self.required: list[str] = []
        self.disabled = False
        self.scope: dict[str, str] | None = None

    def add_event_listener(self, module: str | None, name: str, call: str) -> ModuleBuilder:
        """Listen for ``name`` on ``module`` (None for the host context) and call method ``call``."""
        self.events.append({"module": module, "name": name, "call": call})
        return self

    def add_required(self, name: str) -> ModuleBuilder:
        self.required.append(name)
        return self

    def set_disabled(self) -> ModuleBuilder:
        """Mark this module as disabled, preventing it from loading."""
        self.disabled = True
        return self

    def set_scope(self, scope: str, name: str) -> ModuleBuilder:
        """Register this module in scope group ``scope`` under the short name ``name``."""
        self.scope = {"scope": scope, "name": name}
        return self

    def to_dict(self) -> dict[str, Any]:
        return {
            "disabled": self.disabled,
            "name": self.name,
            "events": [dict(e) for e in self.events],
            "required": list(self.required),
            "scope": dict(self.scope) if self.scope is not None else None,
        }

    def build(self) -> ModuleInfo:
        """Validate the declaration and return an immutable ModuleInfo."""
        return ModuleInfo.from_dict(self.to_dict())
