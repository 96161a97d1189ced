"""Tests for the module cache path policy."""

from __future__ import annotations

from pathlib import Path

import pytest

from interopkit.build.module_cache import (
    ToolchainKind,
    is_test_mode,
    module_cache_args,
    module_cache_dir,
)
from interopkit.config.schema import ModuleCacheConfig


@pytest.fixture(autouse=True)
def _clear_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("INTEROPKIT_TEST", raising=False)


def test_cache_dir_is_fixed_suffix() -> None:
    assert module_cache_dir("/tmp/build") == Path("/tmp/build/ModuleCache")


def test_clang_uses_single_combined_flag() -> None:
    assert module_cache_args("/tmp/build", ToolchainKind.CLANG) == [
        "-fmodules-cache-path=/tmp/build/ModuleCache"
    ]


def test_swift_uses_separate_tokens() -> None:
    assert module_cache_args("/tmp/build", ToolchainKind.SWIFT) == [
        "-module-cache-path",
        "/tmp/build/ModuleCache",
    ]


@pytest.mark.parametrize("toolchain", list(ToolchainKind))
def test_test_mode_disables_flags(monkeypatch: pytest.MonkeyPatch, toolchain: ToolchainKind) -> None:
    monkeypatch.setenv("INTEROPKIT_TEST", "1")

    assert is_test_mode()
    assert module_cache_args("/tmp/build", toolchain) == []


def test_test_mode_checked_before_path_construction(monkeypatch: pytest.MonkeyPatch) -> None:
    import interopkit.build.module_cache as module_cache

    def _boom(*args, **kwargs):
        raise AssertionError("cache path must not be built in test mode")

    monkeypatch.setattr(module_cache, "module_cache_dir", _boom)

    assert module_cache_args("/tmp/build", ToolchainKind.CLANG, environ={"INTEROPKIT_TEST": ""}) == []


def test_explicit_environ_and_custom_config() -> None:
    config = ModuleCacheConfig(dir_name="Cache", test_env_var="MY_TEST")

    assert module_cache_args("/b", ToolchainKind.CLANG, config, environ={}) == [
        "-fmodules-cache-path=/b/Cache"
    ]
    assert module_cache_args("/b", ToolchainKind.CLANG, config, environ={"MY_TEST": "1"}) == []
