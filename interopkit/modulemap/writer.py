"""Module map rendering and persistence."""

from __future__ import annotations

import contextlib
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from interopkit.config.schema import ModuleMapConfig
from interopkit.errors import IOFailure, PreconditionViolation
from interopkit.modulemap.classifier import LayoutDecision

logger = logging.getLogger("interopkit.modulemap.writer")


def _current_umask() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return umask


def render_module_map(c99name: str, decision: LayoutDecision) -> str:
    """Render the module map text for a layout decision.

    Examples:
        >>> from interopkit.modulemap.classifier import LayoutKind
        >>> print(render_module_map("Foo", LayoutDecision(LayoutKind.FLAT_HEADER, Path("/inc/Foo.h"))), end="")
        module Foo {
            umbrella header "/inc/Foo.h"
            link "Foo"
            export *
        }
    """
    output = f"module {c99name} {{\n"
    if decision.kind.is_header:
        output += f'    umbrella header "{decision.path}"\n'
    else:
        output += f'    umbrella "{decision.path}"\n'
    output += f'    link "{c99name}"\n'
    output += "    export *\n"
    output += "}\n"
    return output


def write_module_map(
    c99name: str,
    decision: LayoutDecision,
    output_dir: Path,
    config: Optional[ModuleMapConfig] = None,
) -> Path:
    """Write a module map into `output_dir`.

    The text is written to a temporary file in the same directory and
    renamed into place, so a partially written map is never visible.

    Args:
        c99name: Normalized module identifier.
        decision: Umbrella strategy to render.
        output_dir: Absolute directory for the map; created if missing.
        config: Module map options (file name).

    Returns:
        Path of the written module map.

    Raises:
        PreconditionViolation: If `output_dir` is not absolute.
        IOFailure: If the directory or file cannot be written.
    """
    output_dir = Path(output_dir)
    if not output_dir.is_absolute():
        raise PreconditionViolation(
            f"module map output directory must be absolute: {output_dir}"
        )
    config = config or ModuleMapConfig()
    module_map_file = output_dir / config.file_name
    content = render_module_map(c99name, decision)

    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise IOFailure(output_dir, e) from e

    tmp_path: Optional[str] = None
    try:
        fd, tmp_path = tempfile.mkstemp(
            prefix=f".{config.file_name}.", suffix=".tmp", dir=output_dir
        )
        # mkstemp creates 0600; give the map the mode a plain open would.
        os.fchmod(fd, 0o666 & ~_current_umask())
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(content)
        os.replace(tmp_path, module_map_file)
        tmp_path = None
    except OSError as e:
        raise IOFailure(module_map_file, e) from e
    finally:
        if tmp_path is not None:
            with contextlib.suppress(OSError):
                os.unlink(tmp_path)

    logger.info("Wrote module map for %s: %s", c99name, module_map_file)
    return module_map_file


__all__ = ["render_module_map", "write_module_map"]
