import abc
import re
from dataclasses import dataclass
from typing import Callable

from minipl.errors import InputError, IntegerOverflowError, MplRuntimeError, TypeMismatchError
from minipl.utils import PrintableEnum

INT_MIN = -(2**31)
INT_MAX = 2**31 - 1


class MplType(PrintableEnum):
    INT = "int"
    STRING = "string"
    BOOL = "bool"


class Value(abc.ABC):
    """Immutable scalar. Conversions never coerce: a tag mismatch is a TypeMismatchError."""

    @classmethod
    @abc.abstractmethod
    def type_name(cls) -> str:
        ...

    @classmethod
    @abc.abstractmethod
    def mpl_type(cls) -> MplType:
        ...

    @abc.abstractmethod
    def display(self) -> str:
        ...

    def _mismatch(self, expected: type["Value"]) -> TypeMismatchError:
        return TypeMismatchError(f"Expected {expected.type_name()}, got {self.type_name()}")

    def to_int(self) -> int:
        raise self._mismatch(Int)

    def to_str(self) -> str:
        raise self._mismatch(String)

    def to_bool(self) -> bool:
        raise self._mismatch(Bool)

    def is_of(self, type_: MplType) -> bool:
        return self.mpl_type() is type_


UnaryOperationImpl = Callable[[Value], Value]
BinaryOperationImpl = Callable[[Value, Value], Value]


@dataclass(frozen=True)
class Int(Value):
    v: int

    @classmethod
    def type_name(cls) -> str:
        return "integer"

    @classmethod
    def mpl_type(cls) -> MplType:
        return MplType.INT

    @classmethod
    def checked(cls, v: int) -> "Int":
        if not INT_MIN <= v <= INT_MAX:
            raise IntegerOverflowError(f"Integer overflow: {v} does not fit in 32 bits")
        return cls(v)

    def display(self) -> str:
        return str(self.v)

    def to_int(self) -> int:
        return self.v


@dataclass(frozen=True)
class String(Value):
    v: str

    @classmethod
    def type_name(cls) -> str:
        return "string"

    @classmethod
    def mpl_type(cls) -> MplType:
        return MplType.STRING

    def display(self) -> str:
        return self.v

    def to_str(self) -> str:
        return self.v


@dataclass(frozen=True)
class Bool(Value):
    v: bool

    @classmethod
    def type_name(cls) -> str:
        return "boolean"

    @classmethod
    def mpl_type(cls) -> MplType:
        return MplType.BOOL

    def display(self) -> str:
        return "true" if self.v else "false"

    def to_bool(self) -> bool:
        return self.v


def default_value(type_: MplType) -> Value:
    if type_ is MplType.INT:
        return Int(0)
    elif type_ is MplType.STRING:
        return String("")
    elif type_ is MplType.BOOL:
        return Bool(False)
    else:
        raise MplRuntimeError(f"Unexpected type: {type_}")


_INT_INPUT = re.compile(r"[+-]?[0-9]+")


def parse_input(line: str, type_: MplType) -> Value:
    """Converts one line of console input to a value of the given type"""
    text = line.strip()
    if type_ is MplType.STRING:
        return String(text)
    elif type_ is MplType.INT:
        if not _INT_INPUT.fullmatch(text):
            raise InputError(f"Invalid integer input: {text!r}")
        try:
            return Int.checked(int(text))
        except IntegerOverflowError:
            raise InputError(f"Integer input out of range: {text!r}") from None
    elif type_ is MplType.BOOL:
        if text == "true":
            return Bool(True)
        elif text == "false":
            return Bool(False)
        raise InputError(f"Invalid boolean input: {text!r}")
    else:
        raise MplRuntimeError(f"Unexpected type: {type_}")
