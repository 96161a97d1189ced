"""Configuration schema for interop build preparation.

Uses Pydantic so malformed configuration fails early with a readable
message instead of surfacing as a wrong flag deep inside a build.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


class ModuleMapConfig(BaseModel):
    """Options controlling module map classification and rendering.

    Attributes:
        header_suffix: Suffix identifying header files in an include directory.
        file_name: File name of generated (and user-provided) module maps.
    """

    header_suffix: str = ".h"
    file_name: str = "module.modulemap"

    model_config = {"extra": "forbid"}

    @field_validator("header_suffix")
    @classmethod
    def validate_suffix(cls, v: str) -> str:
        """Header suffix must look like a file extension."""
        if not v.startswith(".") or len(v) < 2:
            raise ValueError(f"Invalid header suffix '{v}', expected e.g. '.h'")
        return v

    @field_validator("file_name")
    @classmethod
    def validate_file_name(cls, v: str) -> str:
        """Module map name must be a bare file name."""
        if not v or "/" in v or "\\" in v:
            raise ValueError(f"Invalid module map file name '{v}'")
        return v


class LinkageConfig(BaseModel):
    """Options for C++ runtime linkage resolution.

    Attributes:
        cpp_extensions: Source extensions (without dot) treated as C++.
        cpp_link_flag: Flag emitted when C++ runtime linkage is required.
        memoize: Cache transitive results per dependency-graph revision.
    """

    cpp_extensions: List[str] = Field(
        default_factory=lambda: ["cc", "cpp", "cxx", "c++", "C", "mm"]
    )
    cpp_link_flag: str = "-lc++"
    memoize: bool = True

    model_config = {"extra": "forbid"}

    @field_validator("cpp_extensions")
    @classmethod
    def validate_extensions(cls, v: List[str]) -> List[str]:
        """Extensions are stored without a leading dot."""
        if not v:
            raise ValueError("cpp_extensions must contain at least one extension")
        cleaned = []
        for ext in v:
            if not isinstance(ext, str) or not ext.strip(". "):
                raise ValueError(f"Invalid C++ extension: {ext!r}")
            cleaned.append(ext.lstrip("."))
        return cleaned


class ModuleCacheConfig(BaseModel):
    """Options for the shared compiler module cache.

    Attributes:
        dir_name: Fixed directory name appended to the cache prefix.
        test_env_var: Environment variable that disables cache flags.
    """

    dir_name: str = "ModuleCache"
    test_env_var: str = "INTEROPKIT_TEST"

    model_config = {"extra": "forbid"}

    @field_validator("dir_name", "test_env_var")
    @classmethod
    def validate_non_empty(cls, v: str) -> str:
        """Reject empty names."""
        if not v.strip():
            raise ValueError("value must not be empty")
        return v


class PrepConfig(BaseModel):
    """Top-level configuration for build preparation.

    Attributes:
        module_map: Module map classification/rendering options.
        linkage: C++ linkage resolution options.
        module_cache: Module cache policy options.
        keep_going: Collect per-module failures instead of aborting.
    """

    module_map: ModuleMapConfig = Field(default_factory=ModuleMapConfig)
    linkage: LinkageConfig = Field(default_factory=LinkageConfig)
    module_cache: ModuleCacheConfig = Field(default_factory=ModuleCacheConfig)
    keep_going: bool = False

    model_config = {"extra": "forbid"}

    @classmethod
    def default(cls) -> "PrepConfig":
        """Return configuration with built-in defaults."""
        return cls()

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "PrepConfig":
        """Build configuration from a plain mapping.

        Args:
            data: Parsed TOML/JSON mapping, or None for defaults.

        Returns:
            PrepConfig instance.
        """
        if not data:
            return cls.default()
        return cls.model_validate(data)
