"""Public module-graph API surface."""

from interopkit.graph.manager import ModuleGraph
from interopkit.graph.manifest import load_manifest, parse_modules
from interopkit.graph.schema import ModuleKind, ModuleSpec, normalize_identifier

__all__ = [
    "ModuleGraph",
    "ModuleKind",
    "ModuleSpec",
    "load_manifest",
    "normalize_identifier",
    "parse_modules",
]
