"""Helpers shared by CLI commands."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Tuple

from rich.console import Console
from rich.table import Table

from interopkit.build.prepare import ModuleFlags
from interopkit.config.loader import load_prep_config
from interopkit.config.schema import PrepConfig
from interopkit.errors import ManifestError
from interopkit.graph.manager import ModuleGraph
from interopkit.graph.manifest import load_manifest

logger = logging.getLogger("interopkit.cli.common")


def load_inputs(args) -> Tuple[ModuleGraph, PrepConfig]:
    """Load the manifest graph and configuration named by CLI args.

    Raises:
        ConfigurationError: If either input is malformed.
    """
    config = load_prep_config(getattr(args, "config", None))
    manifest = Path(args.manifest).expanduser()
    if not manifest.is_file():
        raise ManifestError(f"Manifest not found: {manifest}")
    graph = load_manifest(manifest)
    return graph, config


def resolve_dir(value: str) -> Path:
    """Resolve a CLI directory argument to an absolute path."""
    return Path(value).expanduser().resolve()


def print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, sort_keys=True))


def render_flags_table(flags: list[ModuleFlags], console: Console | None = None) -> None:
    """Print module flags as a rich table."""
    console = console or Console()
    table = Table(title="Module flags")
    table.add_column("Module", style="bold")
    table.add_column("Compile args")
    table.add_column("Link args")
    table.add_column("Module map")
    for item in flags:
        table.add_row(
            item.module,
            " ".join(item.compile_args) or "-",
            " ".join(item.link_args) or "-",
            str(item.module_map) if item.module_map else "-",
        )
    console.print(table)
