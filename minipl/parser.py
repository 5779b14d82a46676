import logging
from dataclasses import dataclass
from typing import Optional, Union

from minipl.errors import MplError
from minipl.operators import Operator
from minipl.tokenizer import Keyword, Token, TokenType, untokenize
from minipl.utils import pointer_lines
from minipl.value import Bool, Int, MplType, String, Value

logger = logging.getLogger(__name__)


@dataclass
class ParserError(MplError):
    errmsg: str
    tokens: list[Token]
    error_token_idx: int

    stage = "Syntax error"

    def __str__(self) -> str:
        source = untokenize(self.tokens)
        if self.error_token_idx < len(self.tokens):
            error_token = self.tokens[self.error_token_idx]
            caret_idx = len(untokenize(self.tokens[: self.error_token_idx + 1])) - len(error_token.lexeme)
        else:
            caret_idx = len(source)
        return "\n".join([f"[{self.stage}] {self.errmsg}", *pointer_lines(source, caret_idx, context=30)])


@dataclass(frozen=True)
class Variable:
    name: str


@dataclass(frozen=True)
class SimpleExpression:
    operand: "Operand"


@dataclass(frozen=True)
class BinaryExpression:
    left: "Operand"
    operator: Operator
    right: "Operand"


@dataclass(frozen=True)
class UnaryExpression:
    operator: Operator
    operand: "Operand"


Expression = Union[SimpleExpression, BinaryExpression, UnaryExpression]
# a parenthesized sub-expression is stored as the Expression itself
Operand = Union[Value, Variable, Expression]


@dataclass(frozen=True)
class Declaration:
    identifier: str
    type: MplType
    initializer: Optional[Expression]


@dataclass(frozen=True)
class Assignment:
    identifier: str
    expression: Expression


@dataclass(frozen=True)
class For:
    identifier: str
    begin: Expression
    end: Expression
    body: tuple["Statement", ...]


@dataclass(frozen=True)
class Read:
    identifier: str


@dataclass(frozen=True)
class Print:
    expression: Expression


@dataclass(frozen=True)
class Assert:
    expression: Expression


@dataclass(frozen=True)
class Empty:
    pass


Statement = Union[Declaration, Assignment, For, Read, Print, Assert, Empty]
Program = list[Statement]

TYPE_KEYWORDS = {
    Keyword.INT: MplType.INT,
    Keyword.STRING: MplType.STRING,
    Keyword.BOOL: MplType.BOOL,
}


def _describe(token: Token) -> str:
    return f"{token.type} {token.lexeme!r}"


class Parser:
    """Recursive descent parser with a single token of lookahead.

    A token read but not used by an expression is put back into the `peeked` slot and handed out
    again by the next call to next().
    """

    def __init__(self, tokens: list[Token]):
        self.tokens = tokens
        self.i = 0
        self.peeked: Optional[Token] = None

    def error(self, errmsg: str, at_end: bool = False) -> ParserError:
        idx = len(self.tokens) if at_end else self.i - 1
        return ParserError(errmsg, tokens=self.tokens, error_token_idx=idx)

    def at_end(self) -> bool:
        return self.peeked is None and self.i >= len(self.tokens)

    def next(self, expected: str) -> Token:
        if self.peeked is not None:
            token, self.peeked = self.peeked, None
            return token
        if self.i >= len(self.tokens):
            raise self.error(f"Unexpected end of input, expected {expected}", at_end=True)
        token = self.tokens[self.i]
        self.i += 1
        return token

    def push_back(self, token: Token) -> None:
        if self.peeked is not None:
            raise self.error("Internal error, lookahead slot is already taken")
        self.peeked = token

    def expect(self, type_: TokenType, expected: str) -> Token:
        token = self.next(expected)
        if token.type is not type_:
            raise self.error(f"Expected {expected}, found {_describe(token)}")
        return token

    def expect_keyword(self, keyword: Keyword) -> None:
        token = self.next(f"'{keyword.value}'")
        if token.type is not TokenType.KEYWORD or token.value is not keyword:
            raise self.error(f"Expected '{keyword.value}', found {_describe(token)}")

    def expect_end(self) -> None:
        self.expect(TokenType.STATEMENT_END, "';'")

    def parse_program(self) -> Program:
        statements: Program = []
        while not self.at_end():
            statements.append(self.parse_statement(self.next("statement")))
        return statements

    def parse_statement(self, token: Token) -> Statement:
        if token.type is TokenType.IDENTIFIER:
            return self.parse_assignment(token.value)
        elif token.type is TokenType.STATEMENT_END:
            return Empty()
        elif token.type is TokenType.KEYWORD:
            if token.value is Keyword.VAR:
                return self.parse_declaration()
            elif token.value is Keyword.FOR:
                return self.parse_for()
            elif token.value is Keyword.READ:
                return self.parse_read()
            elif token.value is Keyword.PRINT:
                return self.parse_print()
            elif token.value is Keyword.ASSERT:
                return self.parse_assert()
        raise self.error(f"Expected statement, found {_describe(token)}")

    def parse_declaration(self) -> Declaration:
        # var <ident> : <type> [ := <expr> ] ;
        identifier = self.expect(TokenType.IDENTIFIER, "identifier").value
        self.expect(TokenType.TYPE_DECL, "':'")
        type_token = self.next("type")
        if type_token.type is not TokenType.KEYWORD or type_token.value not in TYPE_KEYWORDS:
            raise self.error(f"Expected type, found {_describe(type_token)}")

        token = self.next("';' or ':='")
        if token.type is TokenType.STATEMENT_END:
            initializer = None
        elif token.type is TokenType.ASSIGNMENT:
            initializer = self.parse_expression()
            self.expect_end()
        else:
            raise self.error(f"Expected ';' or ':=', found {_describe(token)}")
        return Declaration(identifier=identifier, type=TYPE_KEYWORDS[type_token.value], initializer=initializer)

    def parse_assignment(self, identifier: str) -> Assignment:
        # <ident> := <expr> ;
        self.expect(TokenType.ASSIGNMENT, "':='")
        expression = self.parse_expression()
        self.expect_end()
        return Assignment(identifier=identifier, expression=expression)

    def parse_for(self) -> For:
        # for <ident> in <expr> .. <expr> do <stmts> end for ;
        identifier = self.expect(TokenType.IDENTIFIER, "identifier").value
        self.expect_keyword(Keyword.IN)
        begin = self.parse_expression()
        self.expect(TokenType.RANGE, "'..'")
        end = self.parse_expression()
        self.expect_keyword(Keyword.DO)

        body: list[Statement] = []
        while True:
            token = self.next("'end'")
            if token.type is TokenType.KEYWORD and token.value is Keyword.END:
                break
            body.append(self.parse_statement(token))

        self.expect_keyword(Keyword.FOR)
        self.expect_end()
        return For(identifier=identifier, begin=begin, end=end, body=tuple(body))

    def parse_read(self) -> Read:
        identifier = self.expect(TokenType.IDENTIFIER, "identifier").value
        self.expect_end()
        return Read(identifier)

    def parse_print(self) -> Print:
        expression = self.parse_expression()
        self.expect_end()
        return Print(expression)

    def parse_assert(self) -> Assert:
        self.expect(TokenType.BRACKET_OPEN, "'('")
        expression = self.parse_expression()
        self.expect(TokenType.BRACKET_CLOSE, "')'")
        self.expect_end()
        return Assert(expression)

    def parse_expression(self) -> Expression:
        token = self.next("expression")
        if token.type is TokenType.OPERATOR:
            operand = self.parse_operand(self.next("operand"))
            return UnaryExpression(operator=Operator(token.value), operand=operand)

        left = self.parse_operand(token)
        if self.at_end():
            return SimpleExpression(left)
        token = self.next("operator")
        if token.type is not TokenType.OPERATOR:
            self.push_back(token)
            return SimpleExpression(left)

        right = self.parse_operand(self.next("operand"))
        if not self.at_end():
            following = self.next("operator")
            if following.type is TokenType.OPERATOR:
                raise self.error("Only one operator is allowed per expression, use parentheses")
            self.push_back(following)
        return BinaryExpression(left=left, operator=Operator(token.value), right=right)

    def parse_operand(self, token: Token) -> Operand:
        if token.type is TokenType.INTEGER:
            return Int(token.value)
        elif token.type is TokenType.STRING:
            return String(token.value)
        elif token.type is TokenType.BOOLEAN:
            return Bool(token.value)
        elif token.type is TokenType.IDENTIFIER:
            return Variable(token.value)
        elif token.type is TokenType.BRACKET_OPEN:
            expression = self.parse_expression()
            self.expect(TokenType.BRACKET_CLOSE, "')'")
            return expression
        else:
            raise self.error(f"Expected operand, found {_describe(token)}")


def parse(tokens: list[Token]) -> Program:
    program = Parser(tokens).parse_program()
    logger.debug("Parsed %d statements", len(program))
    return program


def _quote(s: str) -> str:
    return '"' + s.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n") + '"'


def unparse_operand(operand: Operand) -> str:
    if isinstance(operand, String):
        return _quote(operand.v)
    elif isinstance(operand, Value):
        return operand.display()
    elif isinstance(operand, Variable):
        return operand.name
    else:
        return f"({unparse_expression(operand)})"


def unparse_expression(expression: Expression) -> str:
    if isinstance(expression, SimpleExpression):
        return unparse_operand(expression.operand)
    elif isinstance(expression, BinaryExpression):
        left = unparse_operand(expression.left)
        right = unparse_operand(expression.right)
        return f"{left} {expression.operator.symbol} {right}"
    elif isinstance(expression, UnaryExpression):
        return f"{expression.operator.symbol}{unparse_operand(expression.operand)}"
    else:
        raise TypeError(f"Unexpected expression type: {expression}")


def unparse_statement(statement: Statement, indent: str = "") -> str:
    if isinstance(statement, Declaration):
        declaration = f"var {statement.identifier} : {statement.type.value}"
        if statement.initializer is not None:
            declaration += f" := {unparse_expression(statement.initializer)}"
        return f"{indent}{declaration};"
    elif isinstance(statement, Assignment):
        return f"{indent}{statement.identifier} := {unparse_expression(statement.expression)};"
    elif isinstance(statement, For):
        begin = unparse_expression(statement.begin)
        end = unparse_expression(statement.end)
        lines = [f"{indent}for {statement.identifier} in {begin}..{end} do"]
        lines.extend(unparse_statement(s, indent + "    ") for s in statement.body)
        lines.append(f"{indent}end for;")
        return "\n".join(lines)
    elif isinstance(statement, Read):
        return f"{indent}read {statement.identifier};"
    elif isinstance(statement, Print):
        return f"{indent}print {unparse_expression(statement.expression)};"
    elif isinstance(statement, Assert):
        return f"{indent}assert ({unparse_expression(statement.expression)});"
    elif isinstance(statement, Empty):
        return f"{indent};"
    else:
        raise TypeError(f"Unexpected statement type: {statement}")


def unparse(program: Program) -> str:
    return "".join(unparse_statement(statement) + "\n" for statement in program)
