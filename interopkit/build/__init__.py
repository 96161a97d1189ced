"""Compiler/linker argument assembly for interop modules."""

from interopkit.build.module_cache import (
    ToolchainKind,
    is_test_mode,
    module_cache_args,
    module_cache_dir,
)
from interopkit.build.prepare import (
    BuildPreparer,
    ModuleFlags,
    PreparationReport,
    PreparedModule,
)

__all__ = [
    "BuildPreparer",
    "ModuleFlags",
    "PreparationReport",
    "PreparedModule",
    "ToolchainKind",
    "is_test_mode",
    "module_cache_args",
    "module_cache_dir",
]
