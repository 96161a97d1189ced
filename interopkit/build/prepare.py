"""Per-module preparation of compiler and linker arguments.

BuildPreparer is the seam the build driver calls: for each module it
generates (or locates) the module map, resolves C++ linkage and adds
module cache flags, returning flags tagged with the module they apply to.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Union

from interopkit.analysis.linkage import CppLinkageResolver
from interopkit.build.module_cache import ToolchainKind, module_cache_args
from interopkit.config.schema import PrepConfig
from interopkit.diagnostics import Diagnostic, emit_diagnostics
from interopkit.errors import InteropError
from interopkit.graph.manager import ModuleGraph
from interopkit.graph.schema import ModuleKind, ModuleSpec
from interopkit.modulemap.classifier import find_existing_module_map
from interopkit.modulemap.generator import generate_module_map

logger = logging.getLogger("interopkit.build.prepare")


@dataclass
class ModuleFlags:
    """Flags for one module.

    Attributes:
        module: Declared module name the flags apply to.
        compile_args: Extra compiler arguments.
        link_args: Extra linker arguments.
        module_map: Module map describing the module, if any.
    """

    module: str
    compile_args: List[str] = field(default_factory=list)
    link_args: List[str] = field(default_factory=list)
    module_map: Optional[Path] = None

    def to_dict(self) -> Dict[str, object]:
        return {
            "module": self.module,
            "compile_args": list(self.compile_args),
            "link_args": list(self.link_args),
            "module_map": str(self.module_map) if self.module_map else None,
        }


@dataclass
class PreparedModule:
    """Preparation outcome for one module."""

    flags: ModuleFlags
    diagnostics: List[Diagnostic] = field(default_factory=list)
    error: Optional[InteropError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class PreparationReport:
    """Outcome of preparing every module of a graph, in build order."""

    modules: List[PreparedModule] = field(default_factory=list)

    @property
    def failures(self) -> List[PreparedModule]:
        return [m for m in self.modules if not m.ok]

    @property
    def diagnostics(self) -> List[Diagnostic]:
        return [d for m in self.modules for d in m.diagnostics]

    @property
    def ok(self) -> bool:
        return not self.failures

    def flags_by_module(self) -> Dict[str, ModuleFlags]:
        return {m.flags.module: m.flags for m in self.modules}


class BuildPreparer:
    """Prepare interop artifacts and flags for modules of a graph."""

    def __init__(
        self,
        graph: ModuleGraph,
        build_dir: Union[str, Path],
        config: Optional[PrepConfig] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        """Initialize the preparer.

        Args:
            graph: Dependency graph (read-only).
            build_dir: Absolute build directory; module maps go to
                `<build_dir>/<c99name>.build/` and the module cache to
                `<build_dir>/ModuleCache`.
            config: Preparation options.
            environ: Environment mapping for the test-mode check.
        """
        self.graph = graph
        self.build_dir = Path(build_dir)
        self.config = config or PrepConfig.default()
        self.environ = environ
        self.linkage = CppLinkageResolver(graph, self.config.linkage)
        self._module_maps: Dict[str, Optional[Path]] = {}
        self._diagnostics: Dict[str, List[Diagnostic]] = {}
        self._failures: Dict[str, InteropError] = {}

    def module_build_dir(self, module: ModuleSpec) -> Path:
        return self.build_dir / f"{module.c99name}.build"

    def module_map_for(self, module: ModuleSpec) -> Optional[Path]:
        """Return the module map of `module`, generating it when needed.

        A failed generation is remembered and re-raised on later calls
        without touching the filesystem again.

        Raises:
            UnsupportedLayoutError: If the include layout is ambiguous.
            IOFailure: If writing the map fails.
        """
        if module.name in self._failures:
            raise self._failures[module.name]
        if module.name in self._module_maps:
            return self._module_maps[module.name]

        module_map: Optional[Path] = None
        if module.kind == ModuleKind.CLANG:
            try:
                result = generate_module_map(
                    module, self.module_build_dir(module), self.config.module_map
                )
            except InteropError as e:
                self._failures[module.name] = e
                raise
            module_map = result.module_map
            self._diagnostics[module.name] = list(result.diagnostics)
        elif module.kind == ModuleKind.SYSTEM:
            module_map = find_existing_module_map(
                module.path, None, self.config.module_map
            )
            if module_map is None:
                self._diagnostics[module.name] = [
                    Diagnostic(
                        module=module.name,
                        message=(
                            f"system module '{module.name}' does not provide "
                            f"{self.config.module_map.file_name}"
                        ),
                        path=module.path,
                    )
                ]
        self._module_maps[module.name] = module_map
        return module_map

    def _cache_args(self, toolchain: ToolchainKind) -> List[str]:
        return module_cache_args(
            self.build_dir, toolchain, self.config.module_cache, self.environ
        )

    def _dependency_map_args(self, module: ModuleSpec) -> List[str]:
        args: List[str] = []
        for dep in self.graph.recursive_dependencies(module.name):
            if dep.kind == ModuleKind.SWIFT:
                continue
            failure = self._failures.get(dep.name)
            if failure is not None:
                self._diagnostics.setdefault(module.name, []).append(
                    Diagnostic(
                        module=module.name,
                        message=f"dependency '{dep.name}' has no module map: {failure}",
                        path=dep.path,
                    )
                )
                continue
            dep_map = self.module_map_for(dep)
            if dep_map is not None:
                args += ["-Xcc", f"-fmodule-map-file={dep_map}"]
        return args

    def module_flags(self, name: str) -> ModuleFlags:
        """Compute flags for a single module.

        Raises:
            KeyError: If the module is unknown.
            UnsupportedLayoutError: If a module map cannot be generated.
            IOFailure: If writing a module map fails.
        """
        module = self.graph.get(name)
        flags = ModuleFlags(module=module.name)

        if module.kind == ModuleKind.CLANG:
            flags.module_map = self.module_map_for(module)
            flags.compile_args = self._cache_args(ToolchainKind.CLANG)
            flags.link_args = self.linkage.language_link_args(module)
        elif module.kind == ModuleKind.SWIFT:
            flags.compile_args = self._cache_args(ToolchainKind.SWIFT)
            flags.compile_args += self._dependency_map_args(module)
            flags.link_args = self.linkage.language_link_args(module)
        else:
            flags.module_map = self.module_map_for(module)
        return flags

    def prepare_module(self, name: str) -> PreparedModule:
        """Prepare one module and report its diagnostics."""
        flags = self.module_flags(name)
        diagnostics = self._diagnostics.pop(name, [])
        emit_diagnostics(diagnostics, logger)
        return PreparedModule(flags=flags, diagnostics=diagnostics)

    def prepare_all(self, keep_going: Optional[bool] = None) -> PreparationReport:
        """Prepare every module, dependencies first.

        Args:
            keep_going: Collect per-module failures instead of raising.
                Defaults to the configured `keep_going`.

        Raises:
            InteropError: First failure, unless keep_going is enabled.
        """
        if keep_going is None:
            keep_going = self.config.keep_going

        report = PreparationReport()
        order = self.graph.build_order()
        logger.info("Preparing %d modules in %s", len(order), self.build_dir)

        for module in order:
            try:
                report.modules.append(self.prepare_module(module.name))
            except InteropError as e:
                if not keep_going:
                    raise
                logger.error("Failed to prepare %s: %s", module.name, e)
                diagnostics = self._diagnostics.pop(module.name, [])
                diagnostics += getattr(e, "diagnostics", [])
                emit_diagnostics(diagnostics, logger)
                report.modules.append(
                    PreparedModule(
                        flags=ModuleFlags(module=module.name),
                        diagnostics=diagnostics,
                        error=e,
                    )
                )

        logger.info(
            "Prepared %d modules (%d failed, %d diagnostics)",
            len(report.modules),
            len(report.failures),
            len(report.diagnostics),
        )
        return report


__all__ = [
    "BuildPreparer",
    "ModuleFlags",
    "PreparationReport",
    "PreparedModule",
]
