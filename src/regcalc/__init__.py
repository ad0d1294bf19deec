"""Register calculator with lazy evaluation."""

__all__ = [
    "Calculator",
    "CycleError",
    "DependencyGraph",
    "IllegalOperationError",
    "Operation",
    "OperationLog",
    "Operator",
    "build_dependency_graph",
    "evaluate",
    "is_integer_literal",
    "is_valid_register",
]

from ._build import build_dependency_graph
from ._calculator import Calculator
from ._eval import CycleError, evaluate
from ._graph import DependencyGraph
from ._identifiers import is_integer_literal, is_valid_register
from ._operations import IllegalOperationError, Operation, OperationLog, Operator
