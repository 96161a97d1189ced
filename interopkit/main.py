"""Main CLI entry point for interopkit.

Provides commands: prepare, modulemap, link-args, cache-args
"""

import argparse
import logging
import sys
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from interopkit.cli.linkargs import cache_args_command, link_args_command
from interopkit.cli.modulemap import modulemap_command
from interopkit.cli.prepare import prepare_command

logger = logging.getLogger("interopkit.cli")


def setup_logging(verbose: bool = False, console: Optional[Console] = None) -> None:
    """Setup logging configuration with Rich integration.

    Args:
        verbose: Enable verbose logging.
        console: Rich Console instance for coordinated output (optional).
    """
    if verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        log_time_format="[%H:%M:%S]",
    )

    logging.basicConfig(
        level=level,
        format="[%(name)s] %(message)s",
        handlers=[handler],
    )


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-c",
        "--config",
        help=(
            "Optional preparation configuration. Path to a TOML/JSON file or an "
            "inline TOML/JSON string. When omitted, built-in defaults are used."
        ),
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print machine-readable JSON instead of text",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="interopkit",
        description="Interopkit - native module interop preparation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    prepare_parser = subparsers.add_parser(
        "prepare",
        help="Generate module maps and compute flags for every module",
    )
    prepare_parser.add_argument("manifest", help="Package manifest (TOML/JSON)")
    prepare_parser.add_argument(
        "-b",
        "--build-dir",
        default=".build",
        help="Build directory for module maps and the module cache (default: .build)",
    )
    prepare_parser.add_argument(
        "-k",
        "--keep-going",
        action="store_true",
        help="Report per-module failures instead of stopping at the first one",
    )
    prepare_parser.add_argument(
        "-o",
        "--output",
        help="Also write the per-module flags as JSON to this file",
    )
    _add_common_arguments(prepare_parser)

    modulemap_parser = subparsers.add_parser(
        "modulemap",
        help="Generate the module map for one native module",
    )
    modulemap_parser.add_argument("manifest", help="Package manifest (TOML/JSON)")
    modulemap_parser.add_argument("module", help="Declared module name")
    modulemap_parser.add_argument(
        "-d",
        "--output-dir",
        required=True,
        help="Directory receiving module.modulemap",
    )
    _add_common_arguments(modulemap_parser)

    link_parser = subparsers.add_parser(
        "link-args",
        help="Print language link arguments for one module",
    )
    link_parser.add_argument("manifest", help="Package manifest (TOML/JSON)")
    link_parser.add_argument("module", help="Declared module name")
    _add_common_arguments(link_parser)

    cache_parser = subparsers.add_parser(
        "cache-args",
        help="Print module cache flags for a toolchain",
    )
    cache_parser.add_argument(
        "-p",
        "--prefix",
        default=".build",
        help="Build directory prefix (default: .build)",
    )
    cache_parser.add_argument(
        "-t",
        "--toolchain",
        choices=["clang", "swift"],
        default="clang",
        help="Compiler flavor (default: clang)",
    )
    _add_common_arguments(cache_parser)

    return parser


def main() -> int:
    """Main CLI entry point.

    Returns:
        int: Exit code.
    """
    parser = build_parser()
    args = parser.parse_args()

    setup_logging(args.verbose)

    if args.command == "prepare":
        return prepare_command(args)
    elif args.command == "modulemap":
        return modulemap_command(args)
    elif args.command == "link-args":
        return link_args_command(args)
    elif args.command == "cache-args":
        return cache_args_command(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
