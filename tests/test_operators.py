import pytest

from minipl.errors import (
    DivisionByZeroError,
    IntegerOverflowError,
    MplRuntimeError,
    OperatorArityError,
    TypeMismatchError,
)
from minipl.operators import BINARY_OPERATIONS, UNARY_OPERATIONS, Operator, apply_binary, apply_unary
from minipl.value import Bool, Int, String, Value


def test_every_operator_has_an_implementation() -> None:
    assert set(BINARY_OPERATIONS) | set(UNARY_OPERATIONS) == set(Operator)
    assert set(UNARY_OPERATIONS) == {Operator.NOT}


@pytest.mark.parametrize(
    "left, operator, right, expected",
    [
        pytest.param(Int(2), Operator.ADD, Int(3), Int(5)),
        pytest.param(String("ab"), Operator.ADD, String("cd"), String("abcd")),
        pytest.param(String(""), Operator.ADD, String(""), String("")),
        pytest.param(Int(2), Operator.SUB, Int(3), Int(-1)),
        pytest.param(Int(-4), Operator.MUL, Int(3), Int(-12)),
        pytest.param(Int(7), Operator.DIV, Int(2), Int(3)),
        pytest.param(Int(-7), Operator.DIV, Int(2), Int(-3)),
        pytest.param(Int(7), Operator.DIV, Int(-2), Int(-3)),
        pytest.param(Int(-7), Operator.DIV, Int(-2), Int(3)),
        pytest.param(Int(0), Operator.DIV, Int(5), Int(0)),
        pytest.param(Bool(True), Operator.AND, Bool(True), Bool(True)),
        pytest.param(Bool(True), Operator.AND, Bool(False), Bool(False)),
        pytest.param(Int(1), Operator.EQUAL, Int(1), Bool(True)),
        pytest.param(Int(1), Operator.EQUAL, Int(2), Bool(False)),
        pytest.param(String("a"), Operator.EQUAL, String("a"), Bool(True)),
        pytest.param(Int(1), Operator.EQUAL, String("1"), Bool(False)),
        pytest.param(Bool(False), Operator.EQUAL, Int(0), Bool(False)),
        pytest.param(Int(1), Operator.LESS, Int(2), Bool(True)),
        pytest.param(Int(2), Operator.LESS, Int(2), Bool(False)),
        pytest.param(String("abc"), Operator.LESS, String("abd"), Bool(True)),
        pytest.param(String("b"), Operator.LESS, String("abc"), Bool(False)),
        pytest.param(Bool(False), Operator.LESS, Bool(True), Bool(True)),
        pytest.param(Bool(True), Operator.LESS, Bool(False), Bool(False)),
    ],
)
def test_binary(left: Value, operator: Operator, right: Value, expected: Value) -> None:
    assert apply_binary(operator, left, right) == expected


@pytest.mark.parametrize(
    "left, operator, right",
    [
        pytest.param(Int(1), Operator.ADD, String("a")),
        pytest.param(String("a"), Operator.ADD, Int(1)),
        pytest.param(String("a"), Operator.ADD, Bool(True)),
        pytest.param(Bool(True), Operator.ADD, Bool(True)),
        pytest.param(String("a"), Operator.SUB, String("b")),
        pytest.param(Int(1), Operator.MUL, Bool(True)),
        pytest.param(Bool(True), Operator.DIV, Int(1)),
        pytest.param(Int(1), Operator.AND, Int(1)),
        pytest.param(Bool(False), Operator.AND, Int(1)),
        pytest.param(Int(1), Operator.LESS, String("2")),
        pytest.param(Bool(False), Operator.LESS, Int(1)),
    ],
)
def test_binary_type_mismatch(left: Value, operator: Operator, right: Value) -> None:
    with pytest.raises(TypeMismatchError):
        apply_binary(operator, left, right)


def test_division_by_zero() -> None:
    with pytest.raises(DivisionByZeroError):
        apply_binary(Operator.DIV, Int(1), Int(0))


@pytest.mark.parametrize(
    "left, operator, right",
    [
        pytest.param(Int(2147483647), Operator.ADD, Int(1)),
        pytest.param(Int(-2147483648), Operator.SUB, Int(1)),
        pytest.param(Int(65536), Operator.MUL, Int(65536)),
        pytest.param(Int(-2147483648), Operator.DIV, Int(-1)),
    ],
)
def test_integer_overflow(left: Value, operator: Operator, right: Value) -> None:
    with pytest.raises(IntegerOverflowError):
        apply_binary(operator, left, right)


def test_not() -> None:
    assert apply_unary(Operator.NOT, Bool(True)) == Bool(False)
    assert apply_unary(Operator.NOT, Bool(False)) == Bool(True)
    with pytest.raises(TypeMismatchError):
        apply_unary(Operator.NOT, Int(0))


def test_arity_errors() -> None:
    with pytest.raises(OperatorArityError) as exc_info:
        apply_binary(Operator.NOT, Bool(True), Bool(True))
    assert "unary operator" in exc_info.value.errmsg
    with pytest.raises(OperatorArityError):
        apply_unary(Operator.SUB, Int(1))


def test_errors_are_runtime_errors() -> None:
    with pytest.raises(MplRuntimeError) as exc_info:
        apply_binary(Operator.ADD, Bool(True), Int(1))
    assert str(exc_info.value) == "[Runtime error] Expected integer or string, got boolean"
