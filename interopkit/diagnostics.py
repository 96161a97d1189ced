"""Structured, non-fatal diagnostics returned alongside results."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional


class Severity(str, Enum):
    """Diagnostic severity."""

    WARNING = "warning"
    NOTE = "note"


@dataclass(frozen=True)
class Diagnostic:
    """User-facing message produced while preparing a module.

    Attributes:
        module: Declared name of the module the message is about.
        message: Human-readable text.
        severity: Diagnostic severity.
        path: Filesystem path the message refers to, if any.
    """

    module: str
    message: str
    severity: Severity = Severity.WARNING
    path: Optional[Path] = None

    def __str__(self) -> str:
        return f"{self.severity.value}: {self.message}"


def emit_diagnostics(diagnostics: Iterable[Diagnostic], logger: logging.Logger) -> None:
    """Report diagnostics through `logger` at a matching level."""
    for diagnostic in diagnostics:
        level = logging.WARNING if diagnostic.severity == Severity.WARNING else logging.INFO
        logger.log(level, "[%s] %s", diagnostic.module, diagnostic.message)


__all__ = ["Diagnostic", "Severity", "emit_diagnostics"]
