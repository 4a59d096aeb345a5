"""Shared test fixtures for the modulekit test suite."""

from __future__ import annotations

import pytest

from modulekit.context import HostContext
from modulekit.registry.manager import ModuleManager


@pytest.fixture
def context() -> HostContext:
    """A fresh host context with no manager attached."""
    return HostContext()


@pytest.fixture
def manager() -> ModuleManager:
    """A ModuleManager with default settings."""
    return ModuleManager()
