"""Shared pytest fixtures for the registry test suite."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import pytest


# ---------------------------------------------------------------------------
# Module file template
# ---------------------------------------------------------------------------

_MODULE_TEMPLATE = """\
from modulekit import EventEmitter, ModuleBuilder

ModuleInfo = ModuleBuilder("{name}"){chain}


class {class_name}(EventEmitter):
    def __init__(self, context):
        super().__init__()
        self.context = context
        self.initialised = False

    def init(self):
        self.initialised = True
        return True


ModuleInstance = {class_name}
ModuleConstants = {{"NAME": "{name}"}}
"""


def module_source(name: str, chain: str = "", class_name: str = "Module") -> str:
    return _MODULE_TEMPLATE.format(name=name, chain=chain, class_name=class_name)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def write_module() -> Callable[..., Path]:
    """Write a module file built from the template and return its path."""

    def _write(path: Path, name: str, chain: str = "", class_name: str = "Module") -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(module_source(name, chain=chain, class_name=class_name))
        return path

    return _write


@pytest.fixture
def tmp_modules_dir(tmp_path: Path, write_module: Callable[..., Path]) -> Path:
    """Create a temp modules dir with a small, valid module tree."""
    root = tmp_path / "modules"
    root.mkdir()

    write_module(root / "database.py", "database")
    write_module(
        root / "gateway.py",
        "gateway",
        chain='.add_required("database")',
    )
    write_module(
        root / "commands" / "help.py",
        "help",
        chain='.add_required("gateway").set_scope("commands", "help")',
    )
    write_module(
        root / "commands" / "ping.py",
        "ping",
        chain='.set_scope("commands", "ping").add_event_listener("gateway", "message", "init")',
    )
    return root


@pytest.fixture
def sample_info() -> dict[str, Any]:
    """A complete info dict in the builder's export shape."""
    return {
        "name": "commands",
        "disabled": False,
        "required": ["database"],
        "events": [{"module": "gateway", "name": "message", "call": "on_message"}],
        "scope": {"scope": "handlers", "name": "cmd"},
    }
