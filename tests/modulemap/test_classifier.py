"""Tests for include-directory layout classification."""

from __future__ import annotations

from pathlib import Path

import pytest

from interopkit.config.schema import ModuleMapConfig
from interopkit.errors import UnsupportedLayoutError
from interopkit.graph.schema import ModuleSpec
from interopkit.modulemap.classifier import (
    NO_INCLUDE_DIR_MESSAGE,
    LayoutKind,
    SkipReason,
    classify_layout,
    classify_module,
)


def _touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("// header\n", encoding="utf-8")
    return path


def test_flat_umbrella_header(tmp_path: Path) -> None:
    include = tmp_path / "include"
    header = _touch(include / "Foo.h")

    result = classify_layout("Foo", "Foo", include)

    assert result.decision is not None
    assert result.decision.kind == LayoutKind.FLAT_HEADER
    assert result.decision.path == header
    assert result.diagnostics == []


def test_flat_umbrella_with_other_headers_is_allowed(tmp_path: Path) -> None:
    include = tmp_path / "include"
    _touch(include / "Foo.h")
    _touch(include / "extra.h")

    result = classify_layout("Foo", "Foo", include)

    assert result.decision.kind == LayoutKind.FLAT_HEADER


def test_flat_umbrella_with_subdirectory_is_unsupported(tmp_path: Path) -> None:
    include = tmp_path / "include"
    _touch(include / "Foo.h")
    (include / "detail").mkdir()

    with pytest.raises(UnsupportedLayoutError) as excinfo:
        classify_layout("Foo", "Foo", include)

    assert excinfo.value.module_name == "Foo"


def test_nested_umbrella_header(tmp_path: Path) -> None:
    include = tmp_path / "include"
    header = _touch(include / "Foo" / "Foo.h")
    _touch(include / "Foo" / "Other.h")

    result = classify_layout("Foo", "Foo", include)

    assert result.decision.kind == LayoutKind.NESTED_HEADER
    assert result.decision.path == header


def test_nested_umbrella_with_top_level_header_is_unsupported(tmp_path: Path) -> None:
    include = tmp_path / "include"
    _touch(include / "Foo" / "Foo.h")
    _touch(include / "stray.h")

    with pytest.raises(UnsupportedLayoutError):
        classify_layout("Foo", "Foo", include)


def test_nested_umbrella_with_second_directory_is_unsupported(tmp_path: Path) -> None:
    include = tmp_path / "include"
    _touch(include / "Foo" / "Foo.h")
    (include / "Bar").mkdir()

    with pytest.raises(UnsupportedLayoutError):
        classify_layout("Foo", "Foo", include)


def test_nested_umbrella_ignores_non_header_files(tmp_path: Path) -> None:
    include = tmp_path / "include"
    _touch(include / "Foo" / "Foo.h")
    (include / "README.md").write_text("docs", encoding="utf-8")

    result = classify_layout("Foo", "Foo", include)

    assert result.decision.kind == LayoutKind.NESTED_HEADER


def test_bare_directory_fallback(tmp_path: Path) -> None:
    include = tmp_path / "include"
    _touch(include / "a.h")
    _touch(include / "sub" / "b.h")
    (include / "other").mkdir()

    result = classify_layout("Foo", "Foo", include)

    assert result.decision.kind == LayoutKind.BARE_DIRECTORY
    assert result.decision.path == include
    assert result.diagnostics == []


def test_empty_include_directory_is_bare(tmp_path: Path) -> None:
    include = tmp_path / "include"
    include.mkdir()

    result = classify_layout("Foo", "Foo", include)

    assert result.decision.kind == LayoutKind.BARE_DIRECTORY


def test_missing_include_directory_warns_and_skips(tmp_path: Path) -> None:
    result = classify_layout("Foo", "Foo", tmp_path / "missing")

    assert result.decision is None
    assert result.skipped == SkipReason.NO_INCLUDE_DIR
    assert [d.message for d in result.diagnostics] == [NO_INCLUDE_DIR_MESSAGE]


def test_existing_generated_map_short_circuits(tmp_path: Path) -> None:
    include = tmp_path / "include"
    _touch(include / "Foo.h")
    (include / "nested").mkdir()  # would be unsupported if classified
    out = tmp_path / "out"
    existing = _touch(out / "module.modulemap")

    result = classify_layout("Foo", "Foo", include, output_dir=out)

    assert result.decision is None
    assert result.skipped == SkipReason.EXISTING_MAP
    assert result.existing_map == existing


def test_package_provided_map_short_circuits(tmp_path: Path) -> None:
    include = tmp_path / "include"
    provided = _touch(include / "module.modulemap")

    result = classify_layout("Foo", "Foo", include, output_dir=tmp_path / "out")

    assert result.skipped == SkipReason.EXISTING_MAP
    assert result.existing_map == provided


def test_declared_name_header_triggers_rename_advisory(tmp_path: Path) -> None:
    include = tmp_path / "include"
    _touch(include / "Foo-Bar.h")

    result = classify_layout("FooBar", "Foo-Bar", include)

    assert result.decision.kind == LayoutKind.BARE_DIRECTORY
    assert len(result.diagnostics) == 1
    message = result.diagnostics[0].message
    assert str(include / "Foo-Bar.h") in message
    assert str(include / "FooBar.h") in message
    assert result.diagnostics[0].module == "Foo-Bar"


def test_nested_declared_name_header_triggers_rename_advisory(tmp_path: Path) -> None:
    include = tmp_path / "include"
    _touch(include / "FooBar" / "Foo-Bar.h")

    result = classify_layout("FooBar", "Foo-Bar", include)

    assert result.decision.kind == LayoutKind.BARE_DIRECTORY
    assert len(result.diagnostics) == 1
    assert str(include / "FooBar" / "FooBar.h") in result.diagnostics[0].message


def test_no_advisory_when_names_match(tmp_path: Path) -> None:
    include = tmp_path / "include"
    _touch(include / "other.h")

    result = classify_layout("Foo", "Foo", include)

    assert result.diagnostics == []


def test_custom_header_suffix(tmp_path: Path) -> None:
    include = tmp_path / "include"
    header = _touch(include / "Foo.hpp")

    result = classify_layout(
        "Foo", "Foo", include, config=ModuleMapConfig(header_suffix=".hpp")
    )

    assert result.decision.kind == LayoutKind.FLAT_HEADER
    assert result.decision.path == header


def test_classify_module_uses_normalized_identifier(tmp_path: Path) -> None:
    include = tmp_path / "include"
    header = _touch(include / "Foo_Bar.h")
    module = ModuleSpec(name="Foo-Bar", path=include)

    result = classify_module(module)

    assert result.decision.kind == LayoutKind.FLAT_HEADER
    assert result.decision.path == header


def test_classify_module_without_path_skips() -> None:
    result = classify_module(ModuleSpec(name="Foo"))

    assert result.skipped == SkipReason.NO_INCLUDE_DIR
    assert result.diagnostics[0].module == "Foo"


def test_unsupported_layout_carries_earlier_advisory(tmp_path: Path) -> None:
    include = tmp_path / "include"
    _touch(include / "FooBar" / "FooBar.h")
    _touch(include / "Foo-Bar.h")

    with pytest.raises(UnsupportedLayoutError) as excinfo:
        classify_layout("FooBar", "Foo-Bar", include)

    assert len(excinfo.value.diagnostics) == 1
    assert str(include / "Foo-Bar.h") in excinfo.value.diagnostics[0].message
