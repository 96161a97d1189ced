"""Module dependency graph.

ModuleGraph wraps a networkx DiGraph whose nodes are declared module
names and whose edges point from a module to the modules it depends on.
The graph is expected to be acyclic, but every traversal tracks visited
nodes so a cyclic input can never loop forever.
"""

import logging
from typing import Dict, Iterable, Iterator, List, Optional, Set

import networkx as nx
from networkx.exception import NetworkXUnfeasible

from interopkit.errors import ManifestError
from interopkit.graph.schema import ModuleSpec

logger = logging.getLogger("interopkit.graph.manager")


class ModuleGraph:
    """Read-mostly dependency graph over module specs.

    Every mutation bumps `revision`, which consumers use to key memoized
    per-snapshot results.
    """

    def __init__(self, modules: Optional[Iterable[ModuleSpec]] = None) -> None:
        """Initialize the graph.

        Args:
            modules: Optional modules to add; dependencies are linked once
                all of them are present.
        """
        self._graph = nx.DiGraph()
        self._revision = 0
        if modules:
            self.add_modules(modules)

    @property
    def revision(self) -> int:
        return self._revision

    def __len__(self) -> int:
        return self._graph.number_of_nodes()

    def __contains__(self, name: object) -> bool:
        return self._graph.has_node(name)

    def __iter__(self) -> Iterator[ModuleSpec]:
        for _, attrs in self._graph.nodes(data=True):
            yield attrs["spec"]

    def add_module(self, module: ModuleSpec) -> None:
        """Add a single module without resolving its dependencies.

        Raises:
            ManifestError: If a module with the same name already exists.
        """
        if self._graph.has_node(module.name):
            raise ManifestError(f"Duplicate module name '{module.name}'")
        self._graph.add_node(module.name, spec=module, kind=module.kind.value)
        self._revision += 1

    def add_modules(self, modules: Iterable[ModuleSpec]) -> None:
        """Add modules and link their declared dependencies.

        Raises:
            ManifestError: On duplicate names or unknown dependencies.
        """
        added: List[ModuleSpec] = []
        for module in modules:
            self.add_module(module)
            added.append(module)
        for module in added:
            for dep_name in module.dependencies:
                self.add_dependency(module.name, dep_name)
        logger.debug("Added %d modules (revision %d)", len(added), self._revision)

    def add_dependency(self, source: str, target: str) -> None:
        """Record that `source` depends on `target`.

        Raises:
            ManifestError: If either module is unknown.
        """
        for name in (source, target):
            if not self._graph.has_node(name):
                raise ManifestError(
                    f"Module '{source}' depends on unknown module '{name}'"
                    if name == target
                    else f"Unknown module '{name}'"
                )
        if source == target:
            logger.warning("Ignoring self-dependency of module '%s'", source)
            return
        self._graph.add_edge(source, target)
        self._revision += 1

    def get(self, name: str) -> ModuleSpec:
        """Return the module spec for `name`.

        Raises:
            KeyError: If the module is unknown.
        """
        if not self._graph.has_node(name):
            raise KeyError(name)
        return self._graph.nodes[name]["spec"]

    def direct_dependencies(self, name: str) -> List[ModuleSpec]:
        """Return direct dependencies of `name` in insertion order."""
        if not self._graph.has_node(name):
            raise KeyError(name)
        return [self.get(dep) for dep in self._graph.successors(name)]

    def recursive_dependencies(self, name: str) -> List[ModuleSpec]:
        """Return the transitive dependency set of `name`.

        Depth-first with an explicit stack and visited set; each reachable
        module appears exactly once and `name` itself is excluded even if
        a cycle leads back to it.
        """
        start = self.get(name)
        visited: Set[str] = {start.name}
        ordered: List[ModuleSpec] = []
        stack = list(reversed(self.direct_dependencies(name)))
        while stack:
            module = stack.pop()
            if module.name in visited:
                continue
            visited.add(module.name)
            ordered.append(module)
            stack.extend(reversed(self.direct_dependencies(module.name)))
        return ordered

    def build_order(self) -> List[ModuleSpec]:
        """Return modules with dependencies before their dependents.

        Uses a topological sort; if the graph unexpectedly contains a
        cycle, falls back to a DFS postorder that still visits each
        module exactly once.
        """
        try:
            names = list(reversed(list(nx.topological_sort(self._graph))))
        except NetworkXUnfeasible:
            cycle = nx.find_cycle(self._graph)
            logger.warning(
                "Dependency cycle detected: %s",
                " -> ".join(edge[0] for edge in cycle),
            )
            names = list(nx.dfs_postorder_nodes(self._graph))
        return [self.get(name) for name in names]

    def summary(self) -> Dict[str, int]:
        """Return node/edge counts for logging."""
        return {
            "modules": self._graph.number_of_nodes(),
            "dependencies": self._graph.number_of_edges(),
        }


__all__ = ["ModuleGraph"]
