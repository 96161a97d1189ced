"""Tests for manifest loading."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from interopkit.errors import ConfigurationError, ManifestError
from interopkit.graph.manifest import load_manifest
from interopkit.graph.schema import ModuleKind

MANIFEST_TOML = """
[[modules]]
name = "CFoo"
path = "Sources/CFoo/include"
sources = ["Sources/CFoo/foo.c"]

[[modules]]
name = "Foo-Bar"
c99name = "FooBar"
path = "Sources/FooBar/include"

[[modules]]
name = "App"
kind = "swift"
dependencies = ["CFoo", "Foo-Bar"]
"""


def test_load_toml_manifest_resolves_paths(tmp_path: Path) -> None:
    manifest = tmp_path / "package.toml"
    manifest.write_text(MANIFEST_TOML, encoding="utf-8")

    graph = load_manifest(manifest)

    cfoo = graph.get("CFoo")
    assert cfoo.path == (tmp_path / "Sources/CFoo/include").resolve()
    assert cfoo.sources == [(tmp_path / "Sources/CFoo/foo.c").resolve()]
    assert graph.get("Foo-Bar").c99name == "FooBar"
    assert graph.get("App").kind == ModuleKind.SWIFT
    assert [m.name for m in graph.direct_dependencies("App")] == ["CFoo", "Foo-Bar"]


def test_load_json_manifest(tmp_path: Path) -> None:
    manifest = tmp_path / "package.json"
    manifest.write_text(
        json.dumps({"modules": [{"name": "A", "dependencies": ["B"]}, {"name": "B"}]}),
        encoding="utf-8",
    )

    graph = load_manifest(manifest)

    assert len(graph) == 2


def test_inline_manifest_uses_given_root(tmp_path: Path) -> None:
    graph = load_manifest('[[modules]]\nname = "A"\npath = "inc"\n', root=tmp_path)

    assert graph.get("A").path == (tmp_path / "inc").resolve()


def test_manifest_without_modules_array(tmp_path: Path) -> None:
    with pytest.raises(ManifestError):
        load_manifest({"packages": []}, root=tmp_path)


def test_manifest_with_invalid_module(tmp_path: Path) -> None:
    with pytest.raises(ManifestError, match="Invalid module A"):
        load_manifest({"modules": [{"name": "A", "kind": "fortran"}]}, root=tmp_path)


def test_manifest_with_unparseable_text(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError):
        load_manifest("[[modules]\nname=", root=tmp_path)
