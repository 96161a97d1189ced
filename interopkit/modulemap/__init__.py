"""Module map classification, rendering and generation."""

from interopkit.modulemap.classifier import (
    ClassificationResult,
    LayoutDecision,
    LayoutKind,
    SkipReason,
    classify_layout,
    classify_module,
    find_existing_module_map,
)
from interopkit.modulemap.generator import GenerationResult, generate_module_map
from interopkit.modulemap.writer import render_module_map, write_module_map

__all__ = [
    "ClassificationResult",
    "GenerationResult",
    "LayoutDecision",
    "LayoutKind",
    "SkipReason",
    "classify_layout",
    "classify_module",
    "find_existing_module_map",
    "generate_module_map",
    "render_module_map",
    "write_module_map",
]
