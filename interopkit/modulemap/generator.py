"""Scoped classify-then-write module map generation.

The existence check and the write form one critical section per module
identifier: concurrent callers inside a process are serialized on a lock
keyed by the normalized identifier, so a module map is generated at
most once.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from interopkit.config.schema import ModuleMapConfig
from interopkit.diagnostics import Diagnostic
from interopkit.errors import PreconditionViolation
from interopkit.graph.schema import ModuleSpec
from interopkit.modulemap.classifier import (
    ClassificationResult,
    classify_module,
)
from interopkit.modulemap.writer import write_module_map

logger = logging.getLogger("interopkit.modulemap.generator")

_registry_lock = threading.Lock()
_identifier_locks: Dict[str, threading.Lock] = {}


def _lock_for(identifier: str) -> threading.Lock:
    with _registry_lock:
        lock = _identifier_locks.get(identifier)
        if lock is None:
            lock = threading.Lock()
            _identifier_locks[identifier] = lock
        return lock


@dataclass
class GenerationResult:
    """Outcome of module map generation for one module.

    Attributes:
        module: Declared module name.
        classification: Layout classification that drove generation.
        written: Path written by this call, or None if nothing was written.
    """

    module: str
    classification: ClassificationResult
    written: Optional[Path] = None

    @property
    def module_map(self) -> Optional[Path]:
        """Module map usable for this module, generated now or earlier."""
        return self.written or self.classification.existing_map

    @property
    def diagnostics(self) -> List[Diagnostic]:
        return self.classification.diagnostics


def generate_module_map(
    module: ModuleSpec,
    output_dir: Path,
    config: Optional[ModuleMapConfig] = None,
) -> GenerationResult:
    """Ensure a module map exists for `module`.

    Args:
        module: Native module to generate the map for.
        output_dir: Absolute directory receiving the generated map.
        config: Module map options.

    Returns:
        GenerationResult describing what happened.

    Raises:
        PreconditionViolation: If `output_dir` is not absolute.
        UnsupportedLayoutError: If the include layout is ambiguous.
        IOFailure: If writing fails.
    """
    output_dir = Path(output_dir)
    if not output_dir.is_absolute():
        raise PreconditionViolation(
            f"module map output directory must be absolute: {output_dir}"
        )
    config = config or ModuleMapConfig()

    with _lock_for(module.c99name):
        classification = classify_module(module, output_dir, config)
        result = GenerationResult(module=module.name, classification=classification)
        if classification.decision is None:
            logger.debug(
                "Skipping module map for %s (%s)",
                module.name,
                classification.skipped.value if classification.skipped else "none",
            )
            return result
        result.written = write_module_map(
            module.c99name, classification.decision, output_dir, config
        )
        return result


__all__ = ["GenerationResult", "generate_module_map"]
