"""Module map command implementation."""

from __future__ import annotations

import logging

from interopkit.cli.common import load_inputs, resolve_dir
from interopkit.diagnostics import emit_diagnostics
from interopkit.errors import InteropError
from interopkit.graph.schema import ModuleKind
from interopkit.modulemap.generator import generate_module_map

logger = logging.getLogger("interopkit.cli.modulemap")


def modulemap_command(args) -> int:
    """Generate the module map for a single native module.

    Returns:
        int: Exit code (0 for success or nothing to do, 1 on failure).
    """
    try:
        graph, config = load_inputs(args)
        module = graph.get(args.module)
    except KeyError:
        logger.error("Unknown module: %s", args.module)
        return 1
    except InteropError as e:
        logger.error("Failed to load inputs: %s", e)
        return 1

    if module.kind != ModuleKind.CLANG:
        logger.error("Module %s is not a native module (%s)", module.name, module.kind.value)
        return 1

    try:
        result = generate_module_map(
            module, resolve_dir(args.output_dir), config.module_map
        )
    except InteropError as e:
        emit_diagnostics(getattr(e, "diagnostics", []), logger)
        logger.error("Module map generation failed for %s: %s", module.name, e)
        return 1

    emit_diagnostics(result.diagnostics, logger)
    if result.written:
        print(result.written)
    elif result.module_map:
        logger.info("Module map already exists: %s", result.module_map)
        print(result.module_map)
    return 0
