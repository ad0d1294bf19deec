"""Immutable dependency graph between registers."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ._algorithms import GraphCycleError, topological_sort

if TYPE_CHECKING:
    from collections.abc import Iterable


@dataclass(frozen=True, slots=True)
class DependencyGraph[T]:
    """A directed graph of "depends on" relationships.

    - predecessors[b] = {a} means "b depends on a"
    - successors[a] = {b} means "a is depended on by b"

    Unlike an evaluation order, the graph may contain cycles; use
    `has_cycle` and `cycle_members` to find them.

    Attributes:
        _predecessors: Mapping from node to its direct dependencies.
        _successors: Mapping from node to nodes that depend on it.

    """

    _predecessors: dict[T, frozenset[T]] = field(default_factory=dict)
    _successors: dict[T, frozenset[T]] = field(default_factory=dict)

    @classmethod
    def from_edges(cls, edges: Iterable[tuple[T, T]], nodes: Iterable[T] = ()) -> DependencyGraph[T]:
        """Build a graph from (dependency, dependent) edges.

        An edge (a, b) means "b depends on a".

        Args:
            edges: The (dependency, dependent) pairs.
            nodes: Extra nodes to include even if no edge touches them.

        Example:
            >>> graph = DependencyGraph.from_edges([("x", "total"), ("y", "total")])
            >>> sorted(graph.predecessors("total"))
            ['x', 'y']

        """
        predecessors: defaultdict[T, set[T]] = defaultdict(set)
        successors: defaultdict[T, set[T]] = defaultdict(set)

        for node in nodes:
            predecessors.setdefault(node, set())
            successors.setdefault(node, set())

        for src, dst in edges:
            predecessors[dst].add(src)
            successors[src].add(dst)
            predecessors.setdefault(src, set())
            successors.setdefault(dst, set())

        return cls(
            _predecessors={k: frozenset(v) for k, v in predecessors.items()},
            _successors={k: frozenset(v) for k, v in successors.items()},
        )

    @property
    def nodes(self) -> frozenset[T]:
        """All nodes in the graph."""
        return frozenset(self._predecessors) | frozenset(self._successors)

    def predecessors(self, node: T) -> frozenset[T]:
        """Get the direct dependencies of a node."""
        return self._predecessors.get(node, frozenset())

    def successors(self, node: T) -> frozenset[T]:
        """Get the direct dependents of a node."""
        return self._successors.get(node, frozenset())

    def ancestors(self, node: T) -> frozenset[T]:
        """Get all transitive dependencies of a node.

        The node itself is included only if it lies on a cycle.
        """
        visited: set[T] = set()
        stack = list(self.predecessors(node))
        while stack:
            current = stack.pop()
            if current not in visited:
                visited.add(current)
                stack.extend(self.predecessors(current))
        return frozenset(visited)

    def topological_order(self) -> list[T]:
        """Return nodes with dependencies before dependents.

        Raises:
            GraphCycleError: If the graph contains a cycle.

        """
        return topological_sort(dict(self._successors))

    def has_cycle(self) -> bool:
        try:
            self.topological_order()
        except GraphCycleError:
            return True
        return False

    def cycle_members(self) -> frozenset[T]:
        """Get the nodes that transitively depend on themselves."""
        try:
            self.topological_order()
        except GraphCycleError as e:
            return frozenset(node for node in e.unordered if node in self.ancestors(node))
        return frozenset()

    def __contains__(self, node: object) -> bool:
        return node in self._predecessors or node in self._successors
