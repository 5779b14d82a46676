import logging
import sys
from typing import Optional, TextIO

from minipl.errors import (
    AssertionFailedError,
    InputError,
    MplRuntimeError,
    TypeMismatchError,
    UndeclaredIdentifierError,
)
from minipl.operators import apply_binary, apply_unary
from minipl.parser import (
    Assert,
    Assignment,
    BinaryExpression,
    Declaration,
    Empty,
    Expression,
    For,
    Operand,
    Print,
    Program,
    Read,
    SimpleExpression,
    Statement,
    UnaryExpression,
    Variable,
    parse,
)
from minipl.tokenizer import tokenize
from minipl.value import Bool, Int, MplType, Value, default_value, parse_input

logger = logging.getLogger(__name__)


class Environment:
    """Flat name table of one program run. A name keeps its declared type until it is redeclared."""

    def __init__(self) -> None:
        self.values: dict[str, Value] = dict()
        self.types: dict[str, MplType] = dict()

    def __contains__(self, name: str) -> bool:
        return name in self.values

    def declare(self, name: str, type_: MplType, value: Value) -> None:
        if not value.is_of(type_):
            raise TypeMismatchError(f"Type {type_.value} does not match value {value.display()!r} of {name}")
        if name in self.values:
            logger.debug("Redeclaring %s as %s", name, type_.value)
        self.types[name] = type_
        self.values[name] = value

    def declared_type(self, name: str) -> MplType:
        if name not in self.types:
            raise UndeclaredIdentifierError(f"Identifier {name} not initialized")
        return self.types[name]

    def assign(self, name: str, value: Value) -> None:
        if name not in self.values:
            raise UndeclaredIdentifierError(f"Identifier {name} used before declaration")
        type_ = self.types[name]
        if not value.is_of(type_):
            raise TypeMismatchError(f"Cannot assign {value.type_name()} to {name} declared as {type_.value}")
        self.values[name] = value

    def lookup(self, name: str) -> Value:
        if name not in self.values:
            raise UndeclaredIdentifierError(f"Identifier {name} used before assignment")
        return self.values[name]


class Interpreter:
    """Tree-walking evaluator. Console streams default to sys.stdin and sys.stdout at the time of use."""

    def __init__(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None):
        self.env = Environment()
        self._stdin = stdin
        self._stdout = stdout

    @property
    def stdin(self) -> TextIO:
        return self._stdin if self._stdin is not None else sys.stdin

    @property
    def stdout(self) -> TextIO:
        return self._stdout if self._stdout is not None else sys.stdout

    def run(self, program: Program) -> None:
        for statement in program:
            self.execute(statement)

    def execute(self, statement: Statement) -> None:
        if isinstance(statement, Declaration):
            if statement.initializer is not None:
                value = self.evaluate_expression(statement.initializer)
            else:
                value = default_value(statement.type)
            self.env.declare(statement.identifier, statement.type, value)
        elif isinstance(statement, Assignment):
            self.env.assign(statement.identifier, self.evaluate_expression(statement.expression))
        elif isinstance(statement, For):
            self.execute_for(statement)
        elif isinstance(statement, Read):
            self.execute_read(statement)
        elif isinstance(statement, Print):
            value = self.evaluate_expression(statement.expression)
            self.stdout.write(value.display())
            self.stdout.flush()
        elif isinstance(statement, Assert):
            value = self.evaluate_expression(statement.expression)
            if not isinstance(value, Bool):
                raise TypeMismatchError(f"Assert expected boolean argument, got {value.type_name()}")
            if not value.to_bool():
                raise AssertionFailedError("Assertion failed")
        elif isinstance(statement, Empty):
            pass
        else:
            raise MplRuntimeError(f"Unexpected statement type: {statement}")

    def execute_for(self, statement: For) -> None:
        begin = self.evaluate_expression(statement.begin).to_int()
        end = self.evaluate_expression(statement.end).to_int()
        if statement.identifier not in self.env:
            raise UndeclaredIdentifierError(f"Identifier {statement.identifier} not initialized")
        logger.debug("Loop over %s in %d..%d", statement.identifier, begin, end)
        for i in range(begin, end + 1):
            self.env.assign(statement.identifier, Int(i))
            for body_statement in statement.body:
                self.execute(body_statement)

    def execute_read(self, statement: Read) -> None:
        type_ = self.env.declared_type(statement.identifier)
        try:
            line = self.stdin.readline()
        except OSError as e:
            raise InputError(f"IO error: {e}") from e
        if not line:
            raise InputError("IO error: end of input")
        self.env.assign(statement.identifier, parse_input(line, type_))

    def evaluate_expression(self, expression: Expression) -> Value:
        if isinstance(expression, SimpleExpression):
            return self.evaluate_operand(expression.operand)
        elif isinstance(expression, BinaryExpression):
            left = self.evaluate_operand(expression.left)
            right = self.evaluate_operand(expression.right)
            return apply_binary(expression.operator, left, right)
        elif isinstance(expression, UnaryExpression):
            return apply_unary(expression.operator, self.evaluate_operand(expression.operand))
        else:
            raise MplRuntimeError(f"Unexpected expression type: {expression}")

    def evaluate_operand(self, operand: Operand) -> Value:
        if isinstance(operand, Value):
            return operand
        elif isinstance(operand, Variable):
            return self.env.lookup(operand.name)
        else:
            return self.evaluate_expression(operand)


def evaluate(program: Program, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> Environment:
    interpreter = Interpreter(stdin=stdin, stdout=stdout)
    interpreter.run(program)
    return interpreter.env


def run(code: str, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> Environment:
    """Tokenizes, parses and evaluates a whole program in a fresh environment"""
    return evaluate(parse(tokenize(code)), stdin=stdin, stdout=stdout)
