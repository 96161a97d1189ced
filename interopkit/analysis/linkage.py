"""C++ runtime linkage resolution.

A native module needs the C++ standard library at link time when it, or
any native module in its transitive dependency set, compiles a C++
source file. The answer is a monotonic OR over the reachable set, so it
does not depend on traversal order.
"""

import logging
from pathlib import Path
from typing import Dict, FrozenSet, List, Optional, Tuple, Union

from interopkit.config.schema import LinkageConfig
from interopkit.graph.manager import ModuleGraph
from interopkit.graph.schema import ModuleSpec

logger = logging.getLogger("interopkit.analysis.linkage")


def source_extension(path: Union[str, Path]) -> Optional[str]:
    """Return the extension of `path` without the dot, or None."""
    suffix = Path(path).suffix
    return suffix[1:] if suffix else None


def is_cpp_source(path: Union[str, Path], extensions: FrozenSet[str]) -> bool:
    ext = source_extension(path)
    return ext is not None and ext in extensions


class CppLinkageResolver:
    """Resolver deciding whether modules must link the C++ runtime.

    Walking the transitive dependency set for every query is expensive on
    large graphs; with `memoize` enabled, results are cached until the
    graph's revision changes.
    """

    def __init__(
        self,
        graph: ModuleGraph,
        config: Optional[LinkageConfig] = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            graph: Dependency graph (read-only).
            config: Linkage options (C++ extensions, link flag, memoization).
        """
        self.graph = graph
        self.config = config or LinkageConfig()
        self._extensions = frozenset(self.config.cpp_extensions)
        self._cache: Dict[str, bool] = {}
        self._cache_revision = graph.revision

    def contains_cpp_files(self, module: ModuleSpec) -> bool:
        """True if any of the module's own sources is a C++ file."""
        return any(is_cpp_source(src, self._extensions) for src in module.sources)

    def _cached(self, name: str) -> Optional[bool]:
        if not self.config.memoize:
            return None
        if self._cache_revision != self.graph.revision:
            self._cache.clear()
            self._cache_revision = self.graph.revision
        return self._cache.get(name)

    def requires_cpp_linkage(self, module: Union[str, ModuleSpec]) -> bool:
        """Decide whether `module` needs C++ standard library linkage.

        Args:
            module: Module spec or declared name present in the graph.

        Returns:
            bool: True if the module or a transitive native dependency
            contains a C++ source file.
        """
        spec = self.graph.get(module) if isinstance(module, str) else module
        # Only the graph's own spec may share the name-keyed cache.
        cacheable = isinstance(module, str) or (
            spec.name in self.graph and self.graph.get(spec.name) is spec
        )
        cached = self._cached(spec.name) if cacheable else None
        if cached is not None:
            return cached

        link_cpp = self.contains_cpp_files(spec)
        culprit: Optional[str] = spec.name if link_cpp else None

        if not link_cpp and spec.name in self.graph:
            for dep in self.graph.recursive_dependencies(spec.name):
                if dep.is_native and self.contains_cpp_files(dep):
                    link_cpp = True
                    culprit = dep.name
                    break

        if link_cpp:
            logger.debug("%s requires C++ linkage (via %s)", spec.name, culprit)
        if cacheable and self.config.memoize:
            self._cache[spec.name] = link_cpp
        return link_cpp

    def language_link_args(self, module: Union[str, ModuleSpec]) -> List[str]:
        """Return language-specific link arguments for `module`."""
        if self.requires_cpp_linkage(module):
            return [self.config.cpp_link_flag]
        return []

    def analyze(self) -> Dict[str, Tuple[str, ...]]:
        """Return link arguments for every native module in the graph."""
        logger.info("Resolving C++ linkage for %d modules", len(self.graph))
        results: Dict[str, Tuple[str, ...]] = {}
        for module in self.graph:
            if module.is_native:
                results[module.name] = tuple(self.language_link_args(module))
        logger.info(
            "%d of %d native modules require C++ linkage",
            sum(1 for args in results.values() if args),
            len(results),
        )
        return results


__all__ = ["CppLinkageResolver", "is_cpp_source", "source_extension"]
