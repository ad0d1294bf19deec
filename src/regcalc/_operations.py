"""Recorded operations and the append-only log that holds them."""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import TYPE_CHECKING, Self, assert_never

import pydantic
from pydantic import BaseModel, ConfigDict, field_validator

from ._identifiers import is_definable_register, is_integer_literal, is_valid_register

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

logger = logging.getLogger(__name__)


class IllegalOperationError(ValueError):
    """Raised when an operation triple is malformed."""

    def __init__(self, terms: tuple[str, str, str], reasons: list[str]) -> None:
        self.terms = terms
        self.reasons = reasons
        super().__init__(f"Illegal operation '{' '.join(terms)}': {'; '.join(reasons)}")


class Operator(StrEnum):
    """Operators that fold an operand into a register's running total.

    Each member carries a docstring, following the pattern described in
    https://guicommits.com/add-docstrings-python-enum-members/
    """

    def __new__(cls, value: str, doc: str = "") -> Self:
        obj = str.__new__(cls, value)
        obj._value_ = value
        obj.__doc__ = doc
        return obj

    ADD = "add", "Add the operand to the accumulator."
    SUBTRACT = "subtract", "Subtract the operand from the accumulator."
    MULTIPLY = "multiply", "Multiply the accumulator by the operand."

    @classmethod
    def lookup(cls, name: str) -> Operator | None:
        """Return the operator called ``name``, or None if it is not supported."""
        try:
            return cls(name)
        except ValueError:
            return None

    def apply(self, accumulator: int, value: int) -> int:
        match self:
            case Operator.ADD:
                return accumulator + value
            case Operator.SUBTRACT:
                return accumulator - value
            case Operator.MULTIPLY:
                return accumulator * value
            case _:
                assert_never(self)


class Operation(BaseModel):
    """A recorded ``source operator operand`` contribution.

    The operator is kept verbatim. Unsupported operators are accepted here and
    skipped when the source register is evaluated.
    """

    model_config = ConfigDict(frozen=True)

    source: str
    operator: str
    operand: str

    @field_validator("source")
    @classmethod
    def check_source(cls, value: str) -> str:
        if is_integer_literal(value):
            msg = f"integer '{value}' cannot be redefined"
            raise ValueError(msg)
        if not is_definable_register(value):
            msg = f"'{value}' is not an alphanumeric register name"
            raise ValueError(msg)
        return value

    @field_validator("operand")
    @classmethod
    def check_operand(cls, value: str) -> str:
        if not is_valid_register(value):
            msg = f"'{value}' is neither an integer nor an alphanumeric register name"
            raise ValueError(msg)
        return value

    @classmethod
    def from_terms(cls, term1: str, operator: str, term2: str) -> Self:
        """Build an operation from the three terms of a command.

        Raises:
            IllegalOperationError: If either term is not a usable register.

        """
        try:
            return cls(source=term1, operator=operator, operand=term2)
        except pydantic.ValidationError as e:
            reasons = [str(err.get("ctx", {}).get("error", err["msg"])) for err in e.errors()]
            raise IllegalOperationError((term1, operator, term2), reasons) from e

    @property
    def supported_operator(self) -> Operator | None:
        return Operator.lookup(self.operator)

    def __str__(self) -> str:
        return f"{self.source} {self.operator} {self.operand}"


class OperationLog:
    """Ordered, append-only history of recorded operations.

    Operations are never removed, reordered or deduplicated. The order of
    insertion is the order in which they are folded during evaluation.
    """

    __slots__ = ("_operations",)

    def __init__(self, operations: Iterable[Operation] = ()) -> None:
        self._operations: list[Operation] = list(operations)

    def append(self, operation: Operation) -> None:
        """Add an already validated operation to the end of the log."""
        self._operations.append(operation)
        logger.debug("Recorded '%s' (#%d)", operation, len(self._operations))

    def operations_for(self, source: str) -> Iterator[Operation]:
        """Iterate over the operations targeting ``source`` in insertion order.

        Each call returns a fresh iterator over the current contents.
        """
        return (operation for operation in self._operations if operation.source == source)

    def sources(self) -> list[str]:
        """Return the defined register names in order of first definition."""
        return list(dict.fromkeys(operation.source for operation in self._operations))

    def __iter__(self) -> Iterator[Operation]:
        return iter(self._operations)

    def __len__(self) -> int:
        return len(self._operations)

    def __repr__(self) -> str:
        return f"OperationLog({self._operations!r})"
