"""Package manifest loading.

A manifest lists the modules of a package and their dependencies::

    [[modules]]
    name = "CFoo"
    path = "Sources/CFoo/include"
    sources = ["Sources/CFoo/foo.c"]

    [[modules]]
    name = "App"
    kind = "swift"
    dependencies = ["CFoo"]

Relative paths are resolved against the manifest's directory (or the
given `root` for inline manifests).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from interopkit.config.loader import ConfigSource, is_existing_file, load_mapping
from interopkit.errors import ManifestError
from interopkit.graph.manager import ModuleGraph
from interopkit.graph.schema import ModuleSpec

logger = logging.getLogger("interopkit.graph.manifest")


def _resolve_paths(entry: Dict[str, Any], root: Path) -> Dict[str, Any]:
    resolved = dict(entry)
    if resolved.get("path") is not None:
        resolved["path"] = (root / str(resolved["path"])).resolve()
    if resolved.get("sources"):
        resolved["sources"] = [
            (root / str(source)).resolve() for source in resolved["sources"]
        ]
    return resolved


def parse_modules(data: Dict[str, Any], root: Path) -> List[ModuleSpec]:
    """Validate the `modules` array of a manifest mapping.

    Raises:
        ManifestError: If the mapping has no module list or an entry is invalid.
    """
    entries = data.get("modules")
    if not isinstance(entries, list):
        raise ManifestError("Manifest must contain a 'modules' array")

    modules: List[ModuleSpec] = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ManifestError(f"Manifest module #{index} must be a table")
        try:
            modules.append(ModuleSpec.model_validate(_resolve_paths(entry, root)))
        except ValidationError as e:
            label = entry.get("name", f"#{index}")
            raise ManifestError(f"Invalid module {label}: {e}") from e
    return modules


def load_manifest(source: ConfigSource, root: Optional[Path] = None) -> ModuleGraph:
    """Load a manifest and build its dependency graph.

    Args:
        source: Path to a .toml/.json manifest, inline text, or mapping.
        root: Base directory for relative paths. Defaults to the manifest's
            directory for file sources and the working directory otherwise.

    Returns:
        ModuleGraph with every module and dependency edge.
    """
    if root is None:
        if isinstance(source, (str, Path)) and is_existing_file(source):
            root = Path(source).resolve().parent
        else:
            root = Path.cwd()

    data = load_mapping(source)
    modules = parse_modules(data, Path(root))
    graph = ModuleGraph(modules)
    summary = graph.summary()
    logger.info(
        "Loaded manifest with %d modules and %d dependencies",
        summary["modules"],
        summary["dependencies"],
    )
    return graph


__all__ = ["load_manifest", "parse_modules"]
