"""Operator table. Each operation type-checks its operands before computing a new value."""
from typing import Callable

from minipl.errors import DivisionByZeroError, OperatorArityError, TypeMismatchError, UnknownOperatorError
from minipl.utils import PrintableEnum
from minipl.value import BinaryOperationImpl, Bool, Int, String, UnaryOperationImpl, Value


class Operator(PrintableEnum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    AND = "&"
    EQUAL = "="
    LESS = "<"
    NOT = "!"

    @property
    def symbol(self) -> str:
        return self.value


BINARY_OPERATIONS: dict[Operator, BinaryOperationImpl] = dict()
UNARY_OPERATIONS: dict[Operator, UnaryOperationImpl] = dict()


def register_binary(operator: Operator):
    def decorator(fn: BinaryOperationImpl) -> BinaryOperationImpl:
        BINARY_OPERATIONS[operator] = fn
        return fn

    return decorator


def register_unary(operator: Operator):
    def decorator(fn: UnaryOperationImpl) -> UnaryOperationImpl:
        UNARY_OPERATIONS[operator] = fn
        return fn

    return decorator


def apply_binary(operator: Operator, left: Value, right: Value) -> Value:
    impl = BINARY_OPERATIONS.get(operator)
    if impl is not None:
        return impl(left, right)
    elif operator in UNARY_OPERATIONS:
        raise OperatorArityError(f"{operator.symbol} is a unary operator")
    else:
        raise UnknownOperatorError(f"Unknown operator: {operator.symbol}")


def apply_unary(operator: Operator, operand: Value) -> Value:
    impl = UNARY_OPERATIONS.get(operator)
    if impl is not None:
        return impl(operand)
    elif operator in BINARY_OPERATIONS:
        raise OperatorArityError(f"{operator.symbol} is not a unary operator")
    else:
        raise UnknownOperatorError(f"Unknown operator: {operator.symbol}")


def _int_operation(fn: Callable[[int, int], int]) -> BinaryOperationImpl:
    def impl(left: Value, right: Value) -> Value:
        return Int.checked(fn(left.to_int(), right.to_int()))

    return impl


@register_binary(Operator.ADD)
def add(left: Value, right: Value) -> Value:
    # the left operand picks between addition and concatenation
    if isinstance(left, Int):
        return Int.checked(left.v + right.to_int())
    elif isinstance(left, String):
        return String(left.v + right.to_str())
    else:
        raise TypeMismatchError(f"Expected integer or string, got {left.type_name()}")


register_binary(Operator.SUB)(_int_operation(lambda a, b: a - b))
register_binary(Operator.MUL)(_int_operation(lambda a, b: a * b))


@register_binary(Operator.DIV)
def divide(left: Value, right: Value) -> Value:
    dividend, divisor = left.to_int(), right.to_int()
    if divisor == 0:
        raise DivisionByZeroError("Division by zero")
    quotient = abs(dividend) // abs(divisor)
    if (dividend < 0) != (divisor < 0):
        quotient = -quotient
    return Int.checked(quotient)


@register_binary(Operator.AND)
def and_(left: Value, right: Value) -> Value:
    a, b = left.to_bool(), right.to_bool()
    return Bool(a and b)


@register_binary(Operator.EQUAL)
def equal(left: Value, right: Value) -> Value:
    return Bool(left == right)


@register_binary(Operator.LESS)
def less(left: Value, right: Value) -> Value:
    if isinstance(left, Int):
        return Bool(left.v < right.to_int())
    elif isinstance(left, String):
        return Bool(left.v < right.to_str())
    elif isinstance(left, Bool):
        return Bool(left.v < right.to_bool())
    else:
        raise TypeMismatchError(f"Cannot compare {left.type_name()}")


@register_unary(Operator.NOT)
def not_(operand: Value) -> Value:
    return Bool(not operand.to_bool())
