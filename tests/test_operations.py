"""Tests for operators, operations and the operation log."""

import pydantic
import pytest

from regcalc import IllegalOperationError, Operation, OperationLog, Operator


class TestOperator:
    """Tests for the Operator enum."""

    @pytest.mark.parametrize(
        ("operator", "expected"),
        [
            (Operator.ADD, 7),
            (Operator.SUBTRACT, 3),
            (Operator.MULTIPLY, 10),
        ],
    )
    def test_apply(self, operator: Operator, expected: int) -> None:
        assert operator.apply(5, 2) == expected

    def test_every_operator_returns_an_int(self) -> None:
        for operator in Operator:
            assert isinstance(operator.apply(3, 4), int)

    def test_values(self) -> None:
        assert [str(op) for op in Operator] == ["add", "subtract", "multiply"]

    def test_members_have_docstrings(self) -> None:
        assert Operator.ADD.__doc__ == "Add the operand to the accumulator."
        assert all(op.__doc__ for op in Operator)

    def test_lookup(self) -> None:
        assert Operator.lookup("multiply") is Operator.MULTIPLY
        assert Operator.lookup("divide") is None

    def test_lookup_is_case_sensitive(self) -> None:
        assert Operator.lookup("ADD") is None


class TestOperation:
    """Tests for building and validating operations."""

    def test_from_terms(self) -> None:
        operation = Operation.from_terms("a", "add", "b")
        assert operation.source == "a"
        assert operation.operator == "add"
        assert operation.operand == "b"
        assert operation.supported_operator is Operator.ADD

    def test_str(self) -> None:
        assert str(Operation.from_terms("total", "multiply", "-2")) == "total multiply -2"

    def test_literal_operand_allowed(self) -> None:
        assert Operation.from_terms("a", "subtract", "-12").operand == "-12"

    def test_unsupported_operator_is_kept(self) -> None:
        operation = Operation.from_terms("a", "divide", "2")
        assert operation.operator == "divide"
        assert operation.supported_operator is None

    def test_literal_source_rejected(self) -> None:
        with pytest.raises(IllegalOperationError, match="cannot be redefined") as exc_info:
            Operation.from_terms("5", "add", "a")
        assert exc_info.value.terms == ("5", "add", "a")

    def test_non_alphanumeric_source_rejected(self) -> None:
        with pytest.raises(IllegalOperationError, match="not an alphanumeric register name"):
            Operation.from_terms("a-b", "add", "1")

    def test_invalid_operand_rejected(self) -> None:
        with pytest.raises(IllegalOperationError, match="neither an integer"):
            Operation.from_terms("a", "add", "b!")

    def test_both_terms_reported(self) -> None:
        with pytest.raises(IllegalOperationError) as exc_info:
            Operation.from_terms("1", "add", "x.y")
        assert len(exc_info.value.reasons) == 2

    def test_illegal_operation_is_value_error(self) -> None:
        with pytest.raises(ValueError, match="Illegal operation '5 add a'"):
            Operation.from_terms("5", "add", "a")

    def test_direct_construction_validates(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            Operation(source="5", operator="add", operand="a")

    def test_frozen(self) -> None:
        operation = Operation.from_terms("a", "add", "b")
        with pytest.raises(pydantic.ValidationError):
            operation.source = "c"  # type: ignore[misc]

    def test_equality_and_hash(self) -> None:
        first = Operation.from_terms("a", "add", "b")
        second = Operation.from_terms("a", "add", "b")
        assert first == second
        assert hash(first) == hash(second)


class TestOperationLog:
    """Tests for the append-only operation log."""

    def test_empty(self) -> None:
        log = OperationLog()
        assert len(log) == 0
        assert list(log) == []
        assert list(log.operations_for("a")) == []

    def test_append_preserves_order(self) -> None:
        log = OperationLog()
        ops = [
            Operation.from_terms("a", "add", "1"),
            Operation.from_terms("b", "add", "a"),
            Operation.from_terms("a", "multiply", "2"),
        ]
        for op in ops:
            log.append(op)
        assert list(log) == ops
        assert len(log) == 3

    def test_duplicates_are_kept(self) -> None:
        op = Operation.from_terms("a", "add", "1")
        log = OperationLog([op, op])
        assert list(log.operations_for("a")) == [op, op]

    def test_operations_for_filters_by_source(self) -> None:
        a1 = Operation.from_terms("a", "add", "1")
        b1 = Operation.from_terms("b", "add", "2")
        a2 = Operation.from_terms("a", "multiply", "3")
        log = OperationLog([a1, b1, a2])
        assert list(log.operations_for("a")) == [a1, a2]
        assert list(log.operations_for("b")) == [b1]
        assert list(log.operations_for("c")) == []

    def test_operations_for_is_case_sensitive(self) -> None:
        log = OperationLog([Operation.from_terms("a", "add", "1")])
        assert list(log.operations_for("A")) == []

    def test_operations_for_restarts_on_each_call(self) -> None:
        log = OperationLog([Operation.from_terms("a", "add", "1")])
        first = list(log.operations_for("a"))
        second = list(log.operations_for("a"))
        assert first == second
        assert len(first) == 1

    def test_operations_for_is_lazy(self) -> None:
        log = OperationLog()
        operations = log.operations_for("a")
        log.append(Operation.from_terms("a", "add", "1"))
        assert len(list(operations)) == 1

    def test_sources_in_first_definition_order(self) -> None:
        log = OperationLog(
            [
                Operation.from_terms("b", "add", "1"),
                Operation.from_terms("a", "add", "b"),
                Operation.from_terms("b", "add", "2"),
            ],
        )
        assert log.sources() == ["b", "a"]
