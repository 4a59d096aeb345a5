"""Shared fixtures for integration tests."""

from __future__ import annotations

from pathlib import Path

import pytest


# --- Module file templates ---

DATABASE_MODULE = """\
from modulekit import EventEmitter, ModuleBuilder

ModuleInfo = ModuleBuilder("database").set_scope("storage", "primary")
ModuleConstants = {"DSN": "memory://"}


class Database(EventEmitter):
    def __init__(self, context):
        super().__init__()
        self.context = context
        self.rows = []
        self.closed = False

    def init(self):
        self.context.data.setdefault("journal", []).append("init:database")
        return True

    def insert(self, row):
        self.rows.append(row)
        self.emit("inserted", row)

    async def cleanup(self):
        self.closed = True
        self.context.data["journal"].append("cleanup:database")


ModuleInstance = Database
"""

AUDIT_MODULE = """\
from modulekit import ModuleBuilder

ModuleInfo = (
    ModuleBuilder("audit")
    .add_required("database")
    .add_event_listener("database", "inserted", "record")
    .add_event_listener(None, "shutdown", "record")
)


class Audit:
    def __init__(self, context):
        self.context = context
        self.records = []

    async def init(self):
        self.db = self.context.modules.get("database")
        self.context.data.setdefault("journal", []).append("init:audit")

    def record(self, *payload):
        self.records.append(payload)

    def cleanup(self):
        self.context.data["journal"].append("cleanup:audit")


ModuleInstance = Audit
"""

EXPERIMENTAL_MODULE = """\
from modulekit import ModuleBuilder

ModuleInfo = ModuleBuilder("experimental").add_required("nowhere").set_disabled()


class Experimental:
    def __init__(self, context):
        raise RuntimeError("disabled modules are never constructed")


ModuleInstance = Experimental
"""

CACHE_MODULE = """\
ModuleInfo = {"name": "cache"}


def ModuleInstance(context):
    return Cache(context)


class Cache:
    def __init__(self, context):
        self.context = context
        self.size = 0
"""


@pytest.fixture
def app_modules_dir(tmp_path: Path) -> Path:
    """A modules tree with a nested group, a disabled module and YAML metadata."""
    root = tmp_path / "modules"
    (root / "core").mkdir(parents=True)
    (root / "core" / "database.py").write_text(DATABASE_MODULE)
    (root / "audit.py").write_text(AUDIT_MODULE)
    (root / "experimental.py").write_text(EXPERIMENTAL_MODULE)
    (root / "zcache.py").write_text(CACHE_MODULE)
    (root / "zcache_meta.yaml").write_text("scope:\n  scope: storage\n  name: cache\n")
    return root
