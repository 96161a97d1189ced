"""Shared compiler module cache policy.

Both toolchains share one cache directory under the build prefix; they
differ only in how the flag is spelled. Automated test runs set the
test-mode environment variable so they do not contend on a shared cache.
"""

from __future__ import annotations

import logging
import os
from enum import Enum
from pathlib import Path
from typing import List, Mapping, Optional, Union

from interopkit.config.schema import ModuleCacheConfig

logger = logging.getLogger("interopkit.build.module_cache")


class ToolchainKind(str, Enum):
    """Compiler flavors that accept a module cache flag."""

    # Single combined flag: -fmodules-cache-path=<dir>
    CLANG = "clang"
    # Flag and path as separate tokens: -module-cache-path <dir>
    SWIFT = "swift"


def module_cache_dir(
    prefix: Union[str, Path],
    config: Optional[ModuleCacheConfig] = None,
) -> Path:
    """Return `<prefix>/ModuleCache`."""
    config = config or ModuleCacheConfig()
    return Path(prefix) / config.dir_name


def is_test_mode(
    config: Optional[ModuleCacheConfig] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> bool:
    """True when the test-mode environment variable is present."""
    config = config or ModuleCacheConfig()
    env = os.environ if environ is None else environ
    return config.test_env_var in env


def module_cache_args(
    prefix: Union[str, Path],
    toolchain: ToolchainKind,
    config: Optional[ModuleCacheConfig] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> List[str]:
    """Return the flags enabling the shared module cache for `toolchain`.

    Args:
        prefix: Build directory prefix.
        toolchain: Compiler flavor.
        config: Cache options (directory name, test env var).
        environ: Environment mapping; defaults to ``os.environ``.

    Returns:
        Flag sequence, empty in test mode.
    """
    config = config or ModuleCacheConfig()
    if is_test_mode(config, environ):
        logger.debug("%s set; module cache flags disabled", config.test_env_var)
        return []

    cache_path = module_cache_dir(prefix, config)
    if toolchain == ToolchainKind.CLANG:
        return [f"-fmodules-cache-path={cache_path}"]
    if toolchain == ToolchainKind.SWIFT:
        return ["-module-cache-path", str(cache_path)]
    raise ValueError(f"Unsupported toolchain kind: {toolchain!r}")


__all__ = ["ToolchainKind", "module_cache_args", "module_cache_dir", "is_test_mode"]
