from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ._graph import DependencyGraph
from ._identifiers import is_integer_literal

if TYPE_CHECKING:
    from ._operations import OperationLog

logger = logging.getLogger(__name__)


def build_dependency_graph(log: OperationLog) -> DependencyGraph[str]:
    """Build the static dependency graph of the registers defined in a log.

    Every defined register is a node. An operation ``source op operand`` adds
    the edge ``operand -> source`` unless the operand is an integer literal or
    the operator is unsupported, since neither contributes a dependency when
    the source is evaluated.
    """
    edges: list[tuple[str, str]] = []
    for operation in log:
        if is_integer_literal(operation.operand):
            continue
        if operation.supported_operator is None:
            logger.debug("Skipping '%s' in dependency graph (unsupported operator)", operation)
            continue
        edges.append((operation.operand, operation.source))

    return DependencyGraph.from_edges(edges, nodes=log.sources())
