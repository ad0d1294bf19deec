"""Entry points that record operations and query registers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ._build import build_dependency_graph
from ._eval import evaluate
from ._operations import Operation, OperationLog

if TYPE_CHECKING:
    from ._graph import DependencyGraph


class Calculator:
    """A register calculator with lazy evaluation.

    The calculator owns its operation log. Operations are validated before
    they are appended, and registers are only evaluated when queried.

    Example:
        >>> calc = Calculator()
        >>> calc.record_operation("a", "add", "10")
        Operation(source='a', operator='add', operand='10')
        >>> calc.record_operation("b", "add", "a")
        Operation(source='b', operator='add', operand='a')
        >>> calc.record_operation("a", "multiply", "2")
        Operation(source='a', operator='multiply', operand='2')
        >>> calc.query_register("b")
        20

    """

    def __init__(self, log: OperationLog | None = None) -> None:
        self.log = log if log is not None else OperationLog()

    def record_operation(self, term1: str, operator: str, term2: str) -> Operation:
        """Validate ``term1 operator term2`` and append it to the log.

        Raises:
            IllegalOperationError: If the triple is malformed. The log is
                left unchanged.

        """
        operation = Operation.from_terms(term1, operator, term2)
        self.log.append(operation)
        return operation

    def query_register(self, name: str) -> int:
        """Evaluate a register against the current log.

        Raises:
            CycleError: If the register transitively depends on itself.

        """
        return evaluate(name, self.log)

    def dependency_graph(self) -> DependencyGraph[str]:
        return build_dependency_graph(self.log)
