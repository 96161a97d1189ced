"""Helpers for loading configuration mappings from TOML/JSON sources.

`load_mapping` accepts:

* None -> empty mapping
* dict -> returned as-is
* Path / path-like string -> .toml/.json read from the filesystem
* Inline JSON/TOML strings

`load_prep_config` wraps it to produce a validated :class:`PrepConfig`.
"""

from __future__ import annotations

import json
import logging
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from interopkit.config.schema import PrepConfig
from interopkit.errors import ConfigurationError

logger = logging.getLogger("interopkit.config.loader")

ConfigSource = Union[str, Path, Dict[str, Any], None]


def is_existing_file(source: Union[str, Path]) -> bool:
    """True if `source` names an existing file (inline text never does)."""
    if isinstance(source, str) and "\n" in source:
        return False
    try:
        return Path(source).is_file()
    except OSError:
        # e.g. inline text longer than the maximum file name length
        return False


def _detect_format(text: str) -> str:
    stripped = text.lstrip()
    return "json" if stripped.startswith(("{", "[")) else "toml"


def load_mapping(source: ConfigSource) -> Dict[str, Any]:
    """Load a top-level mapping from a file path, inline text or dict.

    Args:
        source: Configuration source (see module docstring).

    Returns:
        Parsed mapping.

    Raises:
        ConfigurationError: If the text cannot be parsed or is not a mapping.
        TypeError: If the source type is unsupported.
    """
    if source is None:
        return {}

    if isinstance(source, dict):
        return source

    if not isinstance(source, (str, Path)):
        raise TypeError(f"Unsupported config source type: {type(source)!r}")

    path = Path(source)
    fmt: Optional[str] = None
    if is_existing_file(source):
        text = path.read_text(encoding="utf-8")
        suffix = path.suffix.lower()
        if suffix in {".toml", ".tml"}:
            fmt = "toml"
        elif suffix == ".json":
            fmt = "json"
        else:
            fmt = _detect_format(text)
        logger.info("Loading mapping from file: %s (fmt=%s)", path, fmt)
    else:
        text = str(source)
        fmt = _detect_format(text)
        logger.debug("Loading mapping from inline %s string", fmt)

    try:
        data = json.loads(text) if fmt == "json" else tomllib.loads(text)
    except (json.JSONDecodeError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"Failed to parse {fmt.upper()} input: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError("Top-level configuration must be a mapping/dict")
    return data


def load_prep_config(source: ConfigSource) -> PrepConfig:
    """Load PrepConfig from any supported configuration source.

    Args:
        source: None, dict, path to a .toml/.json file, or inline text.

    Returns:
        PrepConfig instance.

    Raises:
        ConfigurationError: If the configuration is unparseable or invalid.
    """
    if source is None:
        logger.debug("No config source provided; using default PrepConfig")
        return PrepConfig.default()

    data = load_mapping(source)
    try:
        return PrepConfig.from_dict(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


__all__ = ["ConfigSource", "is_existing_file", "load_mapping", "load_prep_config"]
