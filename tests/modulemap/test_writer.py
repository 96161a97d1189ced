"""Tests for module map rendering and writing."""

from __future__ import annotations

import os
import stat
from pathlib import Path

import pytest

from interopkit.config.schema import ModuleMapConfig
from interopkit.errors import IOFailure, PreconditionViolation
from interopkit.modulemap.classifier import LayoutDecision, LayoutKind
import interopkit.modulemap.writer as writer_module
from interopkit.modulemap.writer import render_module_map, write_module_map


def test_render_flat_header() -> None:
    decision = LayoutDecision(LayoutKind.FLAT_HEADER, Path("/src/Foo/include/Foo.h"))

    assert render_module_map("Foo", decision) == (
        "module Foo {\n"
        '    umbrella header "/src/Foo/include/Foo.h"\n'
        '    link "Foo"\n'
        "    export *\n"
        "}\n"
    )


def test_render_nested_header_uses_umbrella_header_line() -> None:
    decision = LayoutDecision(LayoutKind.NESTED_HEADER, Path("/inc/Foo/Foo.h"))

    text = render_module_map("Foo", decision)

    assert 'umbrella header "/inc/Foo/Foo.h"' in text
    assert 'umbrella "' not in text


def test_render_bare_directory() -> None:
    decision = LayoutDecision(LayoutKind.BARE_DIRECTORY, Path("/inc"))

    text = render_module_map("Foo_Bar", decision)

    assert text.startswith("module Foo_Bar {\n")
    assert '    umbrella "/inc"\n' in text
    assert "umbrella header" not in text
    assert '    link "Foo_Bar"\n' in text


def test_write_creates_missing_directories(tmp_path: Path) -> None:
    out = tmp_path / "a" / "b" / "c"
    decision = LayoutDecision(LayoutKind.BARE_DIRECTORY, tmp_path)

    written = write_module_map("Foo", decision, out)

    assert written == out / "module.modulemap"
    assert written.read_text(encoding="utf-8") == render_module_map("Foo", decision)
    # No temporary files left behind.
    assert os.listdir(out) == ["module.modulemap"]


def test_write_honors_configured_file_name(tmp_path: Path) -> None:
    decision = LayoutDecision(LayoutKind.BARE_DIRECTORY, tmp_path)

    written = write_module_map(
        "Foo", decision, tmp_path / "out", ModuleMapConfig(file_name="Foo.modulemap")
    )

    assert written.name == "Foo.modulemap"


def test_write_rejects_relative_output_dir() -> None:
    decision = LayoutDecision(LayoutKind.BARE_DIRECTORY, Path("/inc"))

    with pytest.raises(PreconditionViolation):
        write_module_map("Foo", decision, Path("relative/out"))


def test_write_reports_io_failure_with_path(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    decision = LayoutDecision(LayoutKind.BARE_DIRECTORY, tmp_path)

    with pytest.raises(IOFailure) as excinfo:
        write_module_map("Foo", decision, blocker / "out")

    assert excinfo.value.path == blocker / "out"
    assert isinstance(excinfo.value.cause, OSError)


def test_written_map_follows_umask(tmp_path: Path) -> None:
    decision = LayoutDecision(LayoutKind.BARE_DIRECTORY, tmp_path)
    previous = os.umask(0o022)
    try:
        written = write_module_map("Foo", decision, tmp_path / "out")
    finally:
        os.umask(previous)

    assert stat.S_IMODE(written.stat().st_mode) == 0o644


def test_cleanup_error_does_not_mask_io_failure(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    def failing_replace(src, dst):
        raise PermissionError("rename refused")

    def failing_unlink(path):
        raise PermissionError("unlink refused")

    monkeypatch.setattr(writer_module.os, "replace", failing_replace)
    monkeypatch.setattr(writer_module.os, "unlink", failing_unlink)
    decision = LayoutDecision(LayoutKind.BARE_DIRECTORY, tmp_path)

    with pytest.raises(IOFailure) as excinfo:
        write_module_map("Foo", decision, tmp_path / "out")

    assert "rename refused" in str(excinfo.value.cause)
