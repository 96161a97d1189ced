"""Link-args and cache-args command implementations."""

from __future__ import annotations

import logging

from interopkit.analysis.linkage import CppLinkageResolver
from interopkit.build.module_cache import ToolchainKind, module_cache_args
from interopkit.cli.common import load_inputs, print_json, resolve_dir
from interopkit.config.loader import load_prep_config
from interopkit.errors import InteropError

logger = logging.getLogger("interopkit.cli.linkargs")


def link_args_command(args) -> int:
    """Print the language link arguments for one module."""
    try:
        graph, config = load_inputs(args)
        resolver = CppLinkageResolver(graph, config.linkage)
        link_args = resolver.language_link_args(args.module)
    except KeyError:
        logger.error("Unknown module: %s", args.module)
        return 1
    except InteropError as e:
        logger.error("Failed to resolve link arguments: %s", e)
        return 1

    if getattr(args, "json", False):
        print_json({"module": args.module, "link_args": link_args})
    else:
        for arg in link_args:
            print(arg)
    return 0


def cache_args_command(args) -> int:
    """Print the module cache flags for a toolchain."""
    try:
        config = load_prep_config(getattr(args, "config", None))
    except InteropError as e:
        logger.error("Failed to load configuration: %s", e)
        return 1

    flags = module_cache_args(
        resolve_dir(args.prefix), ToolchainKind(args.toolchain), config.module_cache
    )
    if getattr(args, "json", False):
        print_json({"toolchain": args.toolchain, "args": flags})
    else:
        for flag in flags:
            print(flag)
    return 0
