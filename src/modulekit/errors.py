"""Error hierarchy for the modulekit registry."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

__all__ = [
    "ModuleError",
    "ConfigNotFoundError",
    "ConfigError",
    "DuplicateNameError",
    "InvalidScopeError",
    "DuplicateScopedNameError",
    "UnmetRequirementError",
    "InitializationError",
    "UnknownEventSourceError",
    "CleanupError",
    "ModuleLoadError",
    "ErrorCodes",
]


class ModuleError(Exception):
    """Base error for all modulekit errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details: dict[str, Any] = details or {}
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc).isoformat()

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class ConfigNotFoundError(ModuleError):
    """Raised when a configuration file or modules root cannot be found."""

    def __init__(self, config_path: str, **kwargs: Any) -> None:
        super().__init__(
            code="CONFIG_NOT_FOUND",
            message=f"Configuration path not found: {config_path}",
            details={"config_path": config_path},
            **kwargs,
        )


class ConfigError(ModuleError):
    """Raised when configuration is invalid."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(code="CONFIG_INVALID", message=message, **kwargs)


class DuplicateNameError(ModuleError):
    """Raised when two modules register under the same name."""

    def __init__(self, module_name: str, **kwargs: Any) -> None:
        super().__init__(
            code="DUPLICATE_MODULE_NAME",
            message=f'Duplicate module name: "{module_name}"',
            details={"module_name": module_name},
            **kwargs,
        )

    @property
    def module_name(self) -> str:
        """The name that was already registered."""
        return self.details["module_name"]


class InvalidScopeError(ModuleError):
    """Raised when a scoped module is missing its group or in-group name."""

    def __init__(
        self,
        module_name: str,
        group: str | None,
        scoped_name: str | None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            code="INVALID_SCOPE",
            message=(
                f'Module "{module_name}" declares a scope without '
                f"{'a group' if not group else 'a scoped name'}"
            ),
            details={"module_name": module_name, "group": group, "scoped_name": scoped_name},
            **kwargs,
        )


class DuplicateScopedNameError(ModuleError):
    """Raised when a scoped name is already taken within its group."""

    def __init__(self, module_name: str, group: str, scoped_name: str, **kwargs: Any) -> None:
        super().__init__(
            code="DUPLICATE_SCOPED_NAME",
            message=f'Module "{module_name}" is trying to register "{scoped_name}" to scope "{group}" twice',
            details={"module_name": module_name, "group": group, "scoped_name": scoped_name},
            **kwargs,
        )


class UnmetRequirementError(ModuleError):
    """Raised when a module requires a module that is not registered."""

    def __init__(self, module_name: str, requirement: str, **kwargs: Any) -> None:
        super().__init__(
            code="UNMET_REQUIREMENT",
            message=f'Module "{module_name}" has an unmet requirement "{requirement}"',
            details={"module_name": module_name, "requirement": requirement},
            **kwargs,
        )

    @property
    def module_name(self) -> str:
        """The module declaring the requirement."""
        return self.details["module_name"]

    @property
    def requirement(self) -> str:
        """The missing module name."""
        return self.details["requirement"]


class InitializationError(ModuleError):
    """Raised when a module's init() hook reports failure."""

    def __init__(self, module_name: str, **kwargs: Any) -> None:
        super().__init__(
            code="MODULE_INIT_FAILED",
            message=f'Module "{module_name}" failed to initialise',
            details={"module_name": module_name},
            **kwargs,
        )

    @property
    def module_name(self) -> str:
        """The module whose init() returned a falsy result."""
        return self.details["module_name"]


class UnknownEventSourceError(ModuleError):
    """Raised in strict event mode when a subscription names an unknown module."""

    def __init__(self, module_name: str, source: str, event: str, **kwargs: Any) -> None:
        super().__init__(
            code="UNKNOWN_EVENT_SOURCE",
            message=f'Module "{module_name}" listens for "{event}" on unknown module "{source}"',
            details={"module_name": module_name, "source": source, "event": event},
            **kwargs,
        )


class CleanupError(ModuleError):
    """Raised after isolated cleanup when one or more teardown hooks failed."""

    def __init__(self, errors: dict[str, Exception], **kwargs: Any) -> None:
        names = list(errors)
        super().__init__(
            code="MODULE_CLEANUP_FAILED",
            message=f"Cleanup failed for modules: {', '.join(names)}",
            details={"module_names": names, "errors": dict(errors)},
            **kwargs,
        )

    @property
    def errors(self) -> dict[str, Exception]:
        """Mapping of module name to the exception its cleanup raised."""
        return self.details["errors"]


class ModuleLoadError(ModuleError):
    """Raised when a module file cannot be loaded or resolved."""

    def __init__(self, module_id: str, reason: str, **kwargs: Any) -> None:
        super().__init__(
            code="MODULE_LOAD_ERROR",
            message=f"Failed to load module '{module_id}': {reason}",
            details={"module_id": module_id, "reason": reason},
            **kwargs,
        )


class ErrorCodes:
    """All modulekit error codes as constants.

    Example:
        if error.code == ErrorCodes.UNMET_REQUIREMENT:
            report_missing(error.details["requirement"])
    """

    CONFIG_NOT_FOUND = "CONFIG_NOT_FOUND"
    CONFIG_INVALID = "CONFIG_INVALID"
    DUPLICATE_MODULE_NAME = "DUPLICATE_MODULE_NAME"
    INVALID_SCOPE = "INVALID_SCOPE"
    DUPLICATE_SCOPED_NAME = "DUPLICATE_SCOPED_NAME"
    UNMET_REQUIREMENT = "UNMET_REQUIREMENT"
    MODULE_INIT_FAILED = "MODULE_INIT_FAILED"
    UNKNOWN_EVENT_SOURCE = "UNKNOWN_EVENT_SOURCE"
    MODULE_CLEANUP_FAILED = "MODULE_CLEANUP_FAILED"
    MODULE_LOAD_ERROR = "MODULE_LOAD_ERROR"

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("ErrorCodes is immutable")
