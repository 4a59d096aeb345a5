"""Registry types: ModuleInfo, EventSubscription, ModuleScope, ModuleBundle."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

__all__ = [
    "EventSubscription",
    "ModuleScope",
    "ModuleInfo",
    "ModuleBundle",
    "InstanceFactory",
]

InstanceFactory = Callable[[Any], Any]


class EventSubscription(BaseModel):
    """One declared event subscription.

    Attributes:
        module: Name of the module emitting the event. None means the host context.
        name: Event name.
        call: Name of the subscriber's method to call with the event payload.
    """

    model_config = ConfigDict(frozen=True)

    module: str | None = None
    name: str
    call: str


class ModuleScope(BaseModel):
    """Placement of a module in a named scope group.

    Both fields are optional here so that incomplete scopes reach the
    registry and fail there with InvalidScopeError.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    group: str | None = Field(
        default=None,
        validation_alias=AliasChoices("group", "scope"),
        serialization_alias="scope",
    )
    name: str | None = None


class ModuleInfo(BaseModel):
    """Static descriptor of a module, as produced by ModuleBuilder."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    disabled: bool = False
    required: tuple[str, ...] = ()
    events: tuple[EventSubscription, ...] = ()
    scope: ModuleScope | None = None

    @field_validator("disabled", mode="before")
    @classmethod
    def _none_is_enabled(cls, value: Any) -> Any:
        return False if value is None else value

    @field_validator("required", "events", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        return () if value is None else value

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ModuleInfo:
        """Parse the JSON-like info shape ``{name, disabled?, required?, events?, scope?}``."""
        return cls.model_validate(data)

    def to_dict(self) -> dict[str, Any]:
        """Export the info shape with plain lists and dicts."""
        return self.model_dump(mode="json", by_alias=True)


@dataclass
class ModuleBundle:
    """A resolved discovery result: descriptor plus the means to build the instance."""

    info: ModuleInfo
    instance_factory: InstanceFactory
    classes: Any = None
    constants: Any = None
    source: Path | None = None
