"""Tests for scan_modules() and DeferredBundle."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable

import pytest

from modulekit.errors import ConfigNotFoundError
from modulekit.registry.scanner import DeferredBundle, scan_modules


class TestScanModulesBasic:
    def test_empty_directory(self, tmp_path: Path) -> None:
        assert scan_modules(tmp_path) == {}

    def test_missing_root_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigNotFoundError):
            scan_modules(tmp_path / "missing")

    def test_single_file(self, tmp_path: Path) -> None:
        (tmp_path / "hello.py").write_text("")
        tree = scan_modules(tmp_path)
        assert list(tree) == ["hello"]
        assert isinstance(tree["hello"], DeferredBundle)
        assert tree["hello"].path == (tmp_path / "hello.py").resolve()
        assert tree["hello"].meta_path is None

    def test_entries_sorted_by_name(self, tmp_path: Path) -> None:
        for name in ["zeta.py", "alpha.py", "mid.py"]:
            (tmp_path / name).write_text("")
        assert list(scan_modules(tmp_path)) == ["alpha", "mid", "zeta"]

    def test_subdirectory_becomes_nested_tree(self, tmp_path: Path) -> None:
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "inner.py").write_text("")
        tree = scan_modules(tmp_path)
        assert isinstance(tree["sub"], dict)
        assert isinstance(tree["sub"]["inner"], DeferredBundle)

    def test_meta_yaml_detected(self, tmp_path: Path) -> None:
        (tmp_path / "hello.py").write_text("")
        (tmp_path / "hello_meta.yaml").write_text("name: hello\n")
        tree = scan_modules(tmp_path)
        assert list(tree) == ["hello"]
        assert tree["hello"].meta_path == (tmp_path / "hello_meta.yaml").resolve()


class TestScanModulesDepth:
    def test_default_depth_is_one_level(self, tmp_path: Path) -> None:
        (tmp_path / "a" / "b").mkdir(parents=True)
        (tmp_path / "a" / "one.py").write_text("")
        (tmp_path / "a" / "b" / "two.py").write_text("")
        tree = scan_modules(tmp_path)
        assert list(tree["a"]) == ["one"]

    def test_max_depth_two(self, tmp_path: Path) -> None:
        (tmp_path / "a" / "b").mkdir(parents=True)
        (tmp_path / "a" / "b" / "two.py").write_text("")
        tree = scan_modules(tmp_path, max_depth=2)
        assert list(tree["a"]["b"]) == ["two"]

    def test_max_depth_zero_only_root(self, tmp_path: Path) -> None:
        (tmp_path / "a").mkdir()
        (tmp_path / "a" / "one.py").write_text("")
        (tmp_path / "top.py").write_text("")
        assert list(scan_modules(tmp_path, max_depth=0)) == ["top"]

    def test_package_directory_is_single_module(self, tmp_path: Path) -> None:
        pkg = tmp_path / "pkg"
        pkg.mkdir()
        (pkg / "__init__.py").write_text("")
        (pkg / "helper.py").write_text("")
        tree = scan_modules(tmp_path)
        assert isinstance(tree["pkg"], DeferredBundle)
        assert tree["pkg"].path == pkg.resolve()


class TestScanModulesIgnore:
    @pytest.mark.parametrize("name", ["_private.py", ".hidden.py", "notes.txt", "mod_meta.yaml"])
    def test_skipped_files(self, tmp_path: Path, name: str) -> None:
        (tmp_path / name).write_text("")
        assert scan_modules(tmp_path) == {}

    @pytest.mark.parametrize("name", ["__pycache__", "_internal", ".git"])
    def test_skipped_directories(self, tmp_path: Path, name: str) -> None:
        (tmp_path / name).mkdir()
        (tmp_path / name / "mod.py").write_text("")
        assert scan_modules(tmp_path) == {}

    def test_file_shadowing_directory_skipped(self, tmp_path: Path) -> None:
        (tmp_path / "dup").mkdir()
        (tmp_path / "dup" / "inner.py").write_text("")
        (tmp_path / "dup.py").write_text("")
        tree = scan_modules(tmp_path)
        assert isinstance(tree["dup"], dict)

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
    def test_symlinked_directory_not_followed_by_default(self, tmp_path: Path) -> None:
        real = tmp_path / "real"
        real.mkdir()
        (real / "mod.py").write_text("")
        root = tmp_path / "root"
        root.mkdir()
        os.symlink(real, root / "link")
        assert scan_modules(root) == {}
        assert list(scan_modules(root, follow_symlinks=True)["link"]) == ["mod"]


class TestDeferredBundle:
    @pytest.mark.asyncio
    async def test_resolves_module(self, tmp_path: Path, write_module: Callable[..., Path]) -> None:
        write_module(tmp_path / "database.py", "database")
        bundle = await scan_modules(tmp_path)["database"]
        assert bundle.info.name == "database"
        assert bundle.constants == {"NAME": "database"}
        assert bundle.source == (tmp_path / "database.py").resolve()

    @pytest.mark.asyncio
    async def test_meta_yaml_applied(self, tmp_path: Path, write_module: Callable[..., Path]) -> None:
        write_module(tmp_path / "database.py", "database")
        (tmp_path / "database_meta.yaml").write_text("name: storage\ndisabled: true\n")
        bundle = await scan_modules(tmp_path)["database"]
        assert bundle.info.name == "storage"
        assert bundle.info.disabled is True

    @pytest.mark.asyncio
    async def test_second_await_raises(self, tmp_path: Path, write_module: Callable[..., Path]) -> None:
        write_module(tmp_path / "database.py", "database")
        deferred = scan_modules(tmp_path)["database"]
        await deferred
        with pytest.raises(RuntimeError, match="already resolved"):
            await deferred

    def test_repr(self, tmp_path: Path) -> None:
        assert "x.py" in repr(DeferredBundle(tmp_path / "x.py"))
