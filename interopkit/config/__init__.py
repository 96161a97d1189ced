"""Configuration schema and loading for interopkit."""

from .schema import (
    LinkageConfig,
    ModuleCacheConfig,
    ModuleMapConfig,
    PrepConfig,
)
from .loader import load_prep_config

__all__ = [
    "LinkageConfig",
    "ModuleCacheConfig",
    "ModuleMapConfig",
    "PrepConfig",
    "load_prep_config",
]
