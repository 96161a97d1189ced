"""Include-directory layout classification.

A module map is generated for a C module `foo` when:

* `include/foo.h` exists and the include directory has no subdirectory
  (umbrella header, flat layout);
* `include/foo/foo.h` exists, `foo` is the only directory under the
  include directory and there are no top-level headers (umbrella header,
  nested layout);
* in all other cases the include directory itself is the umbrella.

An umbrella header silently changes what the compiler treats as the
module interface, so conflicting sibling content is rejected rather than
ignored.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from interopkit.config.schema import ModuleMapConfig
from interopkit.diagnostics import Diagnostic
from interopkit.errors import UnsupportedLayoutError
from interopkit.graph.schema import ModuleSpec

logger = logging.getLogger("interopkit.modulemap.classifier")

NO_INCLUDE_DIR_MESSAGE = (
    "No include directory found, a library can not be imported without "
    "any public headers."
)


class LayoutKind(str, Enum):
    """Umbrella strategy selected for an include directory."""

    FLAT_HEADER = "flat_header"
    NESTED_HEADER = "nested_header"
    BARE_DIRECTORY = "bare_directory"

    @property
    def is_header(self) -> bool:
        return self in (LayoutKind.FLAT_HEADER, LayoutKind.NESTED_HEADER)


@dataclass(frozen=True)
class LayoutDecision:
    """Umbrella strategy plus the header file or directory it points at."""

    kind: LayoutKind
    path: Path


class SkipReason(str, Enum):
    """Why no module map needs to be generated."""

    EXISTING_MAP = "existing_map"
    NO_INCLUDE_DIR = "no_include_dir"


@dataclass
class ClassificationResult:
    """Outcome of classifying one module.

    Exactly one of `decision` and `skipped` is set.
    """

    decision: Optional[LayoutDecision] = None
    skipped: Optional[SkipReason] = None
    existing_map: Optional[Path] = None
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def needs_generation(self) -> bool:
        return self.decision is not None


def _diagnose_invalid_umbrella_header(
    directory: Path,
    c99name: str,
    name: str,
    suffix: str,
) -> Optional[Diagnostic]:
    """Warn when a header is named after the declared name instead of c99name."""
    if c99name == name:
        return None
    umbrella_header = directory / f"{c99name}{suffix}"
    invalid_umbrella_header = directory / f"{name}{suffix}"
    if not invalid_umbrella_header.is_file():
        return None
    return Diagnostic(
        module=name,
        message=(
            f"{invalid_umbrella_header} should be renamed to {umbrella_header} "
            "to be used as an umbrella header"
        ),
        path=invalid_umbrella_header,
    )


def find_existing_module_map(
    include_dir: Optional[Path],
    output_dir: Optional[Path],
    config: Optional[ModuleMapConfig] = None,
) -> Optional[Path]:
    """Return a module map that already exists for the module, if any.

    The package's own map in the include directory wins over a previously
    generated one in the output directory.
    """
    config = config or ModuleMapConfig()
    for directory in (include_dir, output_dir):
        if directory is None:
            continue
        candidate = Path(directory) / config.file_name
        if candidate.is_file():
            return candidate
    return None


def classify_layout(
    c99name: str,
    name: str,
    include_dir: Path,
    output_dir: Optional[Path] = None,
    config: Optional[ModuleMapConfig] = None,
) -> ClassificationResult:
    """Decide which umbrella strategy applies to an include directory.

    Args:
        c99name: Normalized module identifier.
        name: Declared module name, used in errors and advisories.
        include_dir: Module's public include directory.
        output_dir: Where a generated module map would be written.
        config: Module map options (header suffix, map file name).

    Returns:
        ClassificationResult with a decision, or a skip reason.

    Raises:
        UnsupportedLayoutError: If an umbrella header coexists with
            content it cannot account for.
    """
    config = config or ModuleMapConfig()
    suffix = config.header_suffix
    include_dir = Path(include_dir).absolute()
    result = ClassificationResult()

    existing = find_existing_module_map(include_dir, output_dir, config)
    if existing is not None:
        logger.debug("Module map already present for %s: %s", name, existing)
        result.skipped = SkipReason.EXISTING_MAP
        result.existing_map = existing
        return result

    if not include_dir.is_dir():
        result.skipped = SkipReason.NO_INCLUDE_DIR
        result.diagnostics.append(
            Diagnostic(module=name, message=NO_INCLUDE_DIR_MESSAGE, path=include_dir)
        )
        return result

    walked = list(include_dir.iterdir())
    files = [p for p in walked if p.is_file() and p.name.endswith(suffix)]
    dirs = [p for p in walked if p.is_dir()]
    logger.debug(
        "Include dir %s: %d header(s), %d dir(s)", include_dir, len(files), len(dirs)
    )

    umbrella_header_flat = include_dir / f"{c99name}{suffix}"
    if umbrella_header_flat.is_file():
        if dirs:
            raise UnsupportedLayoutError(name, result.diagnostics)
        result.decision = LayoutDecision(LayoutKind.FLAT_HEADER, umbrella_header_flat)
        return result
    diagnostic = _diagnose_invalid_umbrella_header(include_dir, c99name, name, suffix)
    if diagnostic:
        result.diagnostics.append(diagnostic)

    umbrella_header = include_dir / c99name / f"{c99name}{suffix}"
    if umbrella_header.is_file():
        if len(dirs) != 1 or files:
            raise UnsupportedLayoutError(name, result.diagnostics)
        result.decision = LayoutDecision(LayoutKind.NESTED_HEADER, umbrella_header)
        return result
    diagnostic = _diagnose_invalid_umbrella_header(
        include_dir / c99name, c99name, name, suffix
    )
    if diagnostic:
        result.diagnostics.append(diagnostic)

    result.decision = LayoutDecision(LayoutKind.BARE_DIRECTORY, include_dir)
    return result


def classify_module(
    module: ModuleSpec,
    output_dir: Optional[Path] = None,
    config: Optional[ModuleMapConfig] = None,
) -> ClassificationResult:
    """Classify the include directory of `module`.

    A module without a path is treated like a missing include directory.
    """
    if module.path is None:
        return ClassificationResult(
            skipped=SkipReason.NO_INCLUDE_DIR,
            diagnostics=[Diagnostic(module=module.name, message=NO_INCLUDE_DIR_MESSAGE)],
        )
    return classify_layout(module.c99name, module.name, module.path, output_dir, config)


__all__ = [
    "ClassificationResult",
    "LayoutDecision",
    "LayoutKind",
    "NO_INCLUDE_DIR_MESSAGE",
    "SkipReason",
    "classify_layout",
    "classify_module",
    "find_existing_module_map",
]
