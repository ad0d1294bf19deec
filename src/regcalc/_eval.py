"""Lazy evaluation of registers against an operation log."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ._identifiers import is_integer_literal

if TYPE_CHECKING:
    from collections.abc import Iterator

    from ._operations import Operation, OperationLog, Operator

logger = logging.getLogger(__name__)


class CycleError(RuntimeError):
    """Raised when a register transitively depends on itself."""

    def __init__(self, register: str) -> None:
        self.register = register
        super().__init__(f"Illegal operation, there is a cycle in the evaluation of '{register}'")


@dataclass(slots=True)
class _Frame:
    """A register whose operations are being folded."""

    register: str
    operations: Iterator[Operation]
    accumulator: int = 0
    pending: Operator | None = None


def evaluate(register: str, log: OperationLog) -> int:
    """Compute the value of a register.

    Integer literals evaluate to themselves. Any other register evaluates to
    the fold of the operations recorded against it, in log order, starting
    from 0. A register without operations is 0.

    Values resolved during this call are memoized, so a register shared by
    several branches is computed once. Nothing is kept between calls: the
    next evaluation sees the log as it is then.

    Dependencies are resolved depth-first on an explicit stack, so the length
    of a dependency chain is not bounded by the interpreter's recursion limit.

    Args:
        register: The register to evaluate.
        log: The operations defining every register. It is only read.

    Returns:
        The integer value of the register.

    Raises:
        CycleError: If resolving the register revisits a register whose
            resolution is still in progress.

    """
    resolved: dict[str, int] = {}
    in_progress: set[str] = set()

    entered = _enter(register, log, resolved, in_progress)
    if isinstance(entered, int):
        return entered
    stack = [entered]

    while True:
        frame = stack[-1]
        for operation in frame.operations:
            operator = operation.supported_operator
            if operator is None:
                logger.warning("Operation: %s is not supported, will be ignored.", operation.operator)
                continue
            entered = _enter(operation.operand, log, resolved, in_progress)
            if isinstance(entered, int):
                frame.accumulator = operator.apply(frame.accumulator, entered)
                continue
            frame.pending = operator
            stack.append(entered)
            break
        else:
            stack.pop()
            resolved[frame.register] = frame.accumulator
            logger.debug("Resolved %s = %d", frame.register, frame.accumulator)
            if not stack:
                return frame.accumulator
            parent = stack[-1]
            if parent.pending is not None:
                parent.accumulator = parent.pending.apply(parent.accumulator, frame.accumulator)
                parent.pending = None


def _enter(
    register: str,
    log: OperationLog,
    resolved: dict[str, int],
    in_progress: set[str],
) -> int | _Frame:
    """Return the register's value if it is already known, else a frame to fold it."""
    if is_integer_literal(register):
        return int(register)

    if register in resolved:
        return resolved[register]

    # Only registers whose fold has not finished can still be in progress here;
    # finished ones were returned from `resolved` above.
    if register in in_progress:
        raise CycleError(register)
    in_progress.add(register)

    return _Frame(register=register, operations=log.operations_for(register))
