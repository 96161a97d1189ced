"""Module records consumed by build preparation.

The package model owns these records; build preparation only reads them.
`ModuleSpec` validates manifest input with Pydantic and derives the
normalized identifier when the manifest does not provide one.
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from pathlib import Path
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

logger = logging.getLogger("interopkit.graph.schema")

_NON_IDENTIFIER_RE = re.compile(r"[^A-Za-z0-9_]")


class ModuleKind(str, Enum):
    """Kinds of modules that can appear in a dependency graph."""

    # Native-interop module with C/C++/Objective-C sources
    CLANG = "clang"
    # Higher-level module without native sources
    SWIFT = "swift"
    # Module that ships its own module map (system library wrapper)
    SYSTEM = "system"


def normalize_identifier(name: str) -> str:
    """Return a form of `name` usable as a compiler module token.

    Characters outside ``[A-Za-z0-9_]`` become underscores and a leading
    digit is prefixed with an underscore.

    Examples:
        >>> normalize_identifier("Foo-Bar")
        'Foo_Bar'
        >>> normalize_identifier("3rdParty")
        '_3rdParty'
    """
    if not name:
        raise ValueError("module name must not be empty")
    normalized = _NON_IDENTIFIER_RE.sub("_", name)
    if normalized[0].isdigit():
        normalized = "_" + normalized
    return normalized


class ModuleSpec(BaseModel):
    """A module as declared by the package model.

    Attributes:
        name: Declared module name.
        c99name: Normalized identifier; derived from `name` when omitted.
        kind: Module kind.
        path: Include directory for native modules, module directory otherwise.
        sources: Source file paths.
        dependencies: Declared names of direct dependencies.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    c99name: Optional[str] = None
    kind: ModuleKind = ModuleKind.CLANG
    path: Optional[Path] = None
    sources: List[Path] = Field(default_factory=list)
    dependencies: List[str] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Reject empty module names."""
        if not v or not v.strip():
            raise ValueError("module name must not be empty")
        return v

    @field_validator("c99name")
    @classmethod
    def validate_c99name(cls, v: Optional[str]) -> Optional[str]:
        """An explicit identifier must already be normalized."""
        if v is not None and normalize_identifier(v) != v:
            raise ValueError(f"'{v}' is not a valid module identifier")
        return v

    @model_validator(mode="before")
    @classmethod
    def fill_c99name(cls, data: Any) -> Any:
        """Derive the normalized identifier from the declared name."""
        if isinstance(data, dict) and data.get("c99name") is None:
            name = data.get("name")
            if isinstance(name, str) and name.strip():
                data = {**data, "c99name": normalize_identifier(name)}
        return data

    @property
    def is_native(self) -> bool:
        """True for native-interop (C family) modules."""
        return self.kind == ModuleKind.CLANG


__all__ = ["ModuleKind", "ModuleSpec", "normalize_identifier"]
