"""Prepare command implementation."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from interopkit.build.prepare import BuildPreparer
from interopkit.cli.common import load_inputs, print_json, render_flags_table, resolve_dir
from interopkit.diagnostics import emit_diagnostics
from interopkit.errors import InteropError

logger = logging.getLogger("interopkit.cli.prepare")


def prepare_command(args) -> int:
    """Generate module maps and compute flags for every module.

    Args:
        args: Parsed command-line arguments.

    Returns:
        int: Exit code (0 for success, 1 if any module failed).
    """
    try:
        graph, config = load_inputs(args)
        build_dir = resolve_dir(args.build_dir)
        keep_going = getattr(args, "keep_going", False) or config.keep_going
        logger.debug("Build dir: %s (keep_going=%s)", build_dir, keep_going)

        preparer = BuildPreparer(graph, build_dir, config)
        report = preparer.prepare_all(keep_going=keep_going)
    except InteropError as e:
        emit_diagnostics(getattr(e, "diagnostics", []), logger)
        logger.error("Prepare failed: %s", e)
        return 1

    flags = [m.flags for m in report.modules]
    if getattr(args, "json", False):
        print_json(
            {
                "modules": [f.to_dict() for f in flags],
                "diagnostics": [str(d) for d in report.diagnostics],
                "failures": {
                    m.flags.module: str(m.error) for m in report.failures
                },
            }
        )
    else:
        render_flags_table(flags)

    output = getattr(args, "output", None)
    if output:
        try:
            Path(output).write_text(
                json.dumps([f.to_dict() for f in flags], indent=2), encoding="utf-8"
            )
        except OSError as e:
            logger.error("Failed to write flags to %s: %s", output, e)
            return 1
        logger.info("Wrote flags to %s", output)

    for failed in report.failures:
        logger.error("%s: %s", failed.flags.module, failed.error)
    return 0 if report.ok else 1
