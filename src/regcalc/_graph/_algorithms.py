"""Graph algorithms for register dependency graphs."""

from collections import defaultdict, deque
from collections.abc import Collection, Hashable, Mapping


class GraphCycleError(ValueError):
    """Raised when a graph that must be acyclic contains a cycle.

    Attributes:
        unordered: Nodes that could not be placed in the order. These are the
            nodes on a cycle and every node that depends on one.

    """

    def __init__(self, unordered: frozenset) -> None:
        self.unordered = unordered
        super().__init__(f"Cycle detected in graph ({len(unordered)} nodes could not be ordered)")


def topological_sort[T: Hashable](successors: Mapping[T, Collection[T]]) -> list[T]:
    """Sort a graph topologically (dependencies before dependents).

    Args:
        successors: Mapping from node to collection of nodes that depend on it.
            An edge (a -> b) means "b depends on a".

    Returns:
        List of nodes in topological order.

    Raises:
        GraphCycleError: If the graph contains a cycle.

    Example:
        >>> # total depends on price, price depends on base
        >>> topological_sort({"base": ["price"], "price": ["total"], "total": []})
        ['base', 'price', 'total']

    """
    indegree: defaultdict[T, int] = defaultdict(int)
    for node, dependents in successors.items():
        indegree[node] = indegree.get(node, 0)
        for dependent in dependents:
            indegree[dependent] += 1

    queue = deque(node for node, degree in indegree.items() if degree == 0)
    order: list[T] = []

    while queue:
        node = queue.popleft()
        order.append(node)
        for dependent in successors.get(node, ()):
            indegree[dependent] -= 1
            if indegree[dependent] == 0:
                queue.append(dependent)

    if len(order) != len(indegree):
        raise GraphCycleError(frozenset(indegree) - frozenset(order))

    return order
