"""DependencyGraph: ordering constraints between nodes or stacks.

Wraps a NetworkX DiGraph whose edges point from dependent to dependency.
Keys are opaque strings (node paths or stack names). Every key remembers
the order it was first added in; that order breaks ties in the
topological sort so output is identical across runs on the same input.
"""

from __future__ import annotations

import networkx as nx
from networkx import DiGraph

from arbor.contracts.errors import CyclicDependencyError
from arbor.core.dag.models import DependencyEdge


class DependencyGraph:
    """Directed dependency graph with deterministic topological order.

    Args:
        level: What the keys are ("construct" or "stack"); used in error messages.
    """

    def __init__(self, *, level: str = "construct") -> None:
        self.level = level
        self._graph: DiGraph[str] = nx.DiGraph()
        self._declaration_order: dict[str, int] = {}

    @property
    def node_count(self) -> int:
        """Number of keys in the graph."""
        return self._graph.number_of_nodes()

    @property
    def edge_count(self) -> int:
        """Number of distinct edges in the graph."""
        return self._graph.number_of_edges()

    def has_node(self, key: str) -> bool:
        return self._graph.has_node(key)

    def add_node(self, key: str) -> None:
        """Add key if absent. Re-adding keeps the original declaration position."""
        if key not in self._declaration_order:
            self._declaration_order[key] = len(self._declaration_order)
            self._graph.add_node(key)

    def add_dependency(self, dependent: str, dependency: str, *, explicit: bool = False) -> None:
        """Record that dependent must be emitted after dependency.

        Idempotent: adding the same edge again is a no-op, except that an
        explicit declaration upgrades an edge first seen as implicit.
        """
        self.add_node(dependent)
        self.add_node(dependency)
        if self._graph.has_edge(dependent, dependency):
            if explicit:
                self._graph.edges[dependent, dependency]["explicit"] = True
            return
        self._graph.add_edge(dependent, dependency, explicit=explicit)

    def has_dependency(self, dependent: str, dependency: str) -> bool:
        return self._graph.has_edge(dependent, dependency)

    def dependencies_of(self, key: str, *, explicit_only: bool = False) -> list[str]:
        """Direct dependencies of key, in declaration order."""
        targets = [
            target for _source, target, explicit in self._graph.out_edges(key, data="explicit") if explicit or not explicit_only
        ]
        return sorted(targets, key=self._declaration_order.__getitem__)

    def get_edges(self) -> list[DependencyEdge]:
        """All edges as typed DependencyEdge records."""
        return [
            DependencyEdge(dependent=u, dependency=v, explicit=bool(explicit)) for u, v, explicit in self._graph.edges(data="explicit")
        ]

    def find_cycle(self) -> list[str] | None:
        """Return the keys on one cycle in edge order, or None if acyclic.

        Depth-first search with a recursion stack; the starting point follows
        declaration order, so the reported cycle is stable across runs.
        """
        try:
            cycle_edges = nx.find_cycle(self._graph)
        except nx.NetworkXNoCycle:
            return None
        return [edge[0] for edge in cycle_edges]

    def is_acyclic(self) -> bool:
        return nx.is_directed_acyclic_graph(self._graph)

    def validate(self) -> None:
        """Reject cycles.

        Raises:
            CyclicDependencyError: Naming every key on the cycle
        """
        cycle = self.find_cycle()
        if cycle is not None:
            raise CyclicDependencyError(cycle, level=self.level)

    def topological_order(self) -> list[str]:
        """Return keys with every dependency before its dependents.

        Independent keys keep their declaration order.

        Raises:
            CyclicDependencyError: If the graph has a cycle
        """
        self.validate()
        # Edges point dependent -> dependency; sorting the reverse view puts dependencies first
        return list(nx.lexicographical_topological_sort(self._graph.reverse(copy=False), key=self._declaration_order.__getitem__))
