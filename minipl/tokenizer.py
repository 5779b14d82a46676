import enum
import logging
from dataclasses import dataclass
from typing import Optional, Union

from minipl.errors import MplError
from minipl.utils import PrintableEnum, pointer_lines
from minipl.value import INT_MAX

logger = logging.getLogger(__name__)


@dataclass
class TokenizerError(MplError):
    errmsg: str
    code: str
    error_char_idx: int

    stage = "Lexical error"

    def __str__(self) -> str:
        return "\n".join([f"[{self.stage}] {self.errmsg}", *pointer_lines(self.code, self.error_char_idx)])


class Keyword(PrintableEnum):
    VAR = "var"
    FOR = "for"
    END = "end"
    IN = "in"
    DO = "do"
    READ = "read"
    PRINT = "print"
    ASSERT = "assert"
    INT = "int"
    STRING = "string"
    BOOL = "bool"


class TokenType(PrintableEnum):
    KEYWORD = enum.auto()
    IDENTIFIER = enum.auto()
    INTEGER = enum.auto()
    STRING = enum.auto()
    BOOLEAN = enum.auto()
    OPERATOR = enum.auto()
    BRACKET_OPEN = enum.auto()
    BRACKET_CLOSE = enum.auto()
    ASSIGNMENT = enum.auto()
    TYPE_DECL = enum.auto()
    RANGE = enum.auto()
    DOT = enum.auto()
    STATEMENT_END = enum.auto()


TokenValue = Union[Keyword, str, int, bool, None]


@dataclass(frozen=True)
class Token:
    type: TokenType
    lexeme: str
    value: TokenValue = None

    def __str__(self) -> str:
        return f"<{self.type}>{self.lexeme}"


class State(PrintableEnum):
    IDLE = enum.auto()
    LINE_COMMENT = enum.auto()
    BLOCK_COMMENT = enum.auto()
    BLOCK_COMMENT_STAR = enum.auto()
    AMBIGUOUS = enum.auto()
    STRING = enum.auto()
    STRING_ESCAPE = enum.auto()
    INTEGER = enum.auto()
    WORD = enum.auto()


OPERATOR_CHARS = "+-*&!=<"  # "/" is ambiguous with comment start
AMBIGUOUS_CHARS = ":./"

SINGLE_CHAR_TOKENS = {
    "(": TokenType.BRACKET_OPEN,
    ")": TokenType.BRACKET_CLOSE,
    ";": TokenType.STATEMENT_END,
}

STRING_ESCAPES = {
    '"': '"',
    "\\": "\\",
    "n": "\n",
}

KEYWORDS = {k.value: k for k in Keyword}
BOOLEANS = {"true": True, "false": False}

UNTERMINATED = {
    State.STRING: "string literal",
    State.STRING_ESCAPE: "string literal",
    State.INTEGER: "integer literal",
    State.WORD: "identifier",
    State.BLOCK_COMMENT: "comment",
    State.BLOCK_COMMENT_STAR: "comment",
}


def _is_digit(s: str) -> bool:
    return "0" <= s <= "9"


def _is_valid_in_word(s: str) -> bool:
    return s.isascii() and (s.isalnum() or s == "_")


class Tokenizer:
    """Character-driven state machine. Feed characters with consume(), then call finish()"""

    def __init__(self, code: str):
        self.code = code
        self.tokens: list[Token] = []
        self.state = State.IDLE
        self.buffer: list[str] = []
        self.token_start_idx = 0
        self.idx = 0

    def error(self, errmsg: str, idx: Optional[int] = None) -> TokenizerError:
        return TokenizerError(errmsg, code=self.code, error_char_idx=self.idx if idx is None else idx)

    def emit(self, type_: TokenType, value: TokenValue = None, end_idx: Optional[int] = None) -> None:
        end_idx = self.idx + 1 if end_idx is None else end_idx
        self.tokens.append(Token(type=type_, lexeme=self.code[self.token_start_idx : end_idx], value=value))
        self.buffer = []
        self.state = State.IDLE

    def consume(self, c: str) -> None:
        if self.state is State.IDLE:
            self._consume_idle(c)
        elif self.state is State.LINE_COMMENT:
            if c == "\n":
                self.state = State.IDLE
        elif self.state is State.BLOCK_COMMENT:
            if c == "*":
                self.state = State.BLOCK_COMMENT_STAR
        elif self.state is State.BLOCK_COMMENT_STAR:
            if c == "/":
                self.state = State.IDLE
            elif c != "*":
                self.state = State.BLOCK_COMMENT
        elif self.state is State.AMBIGUOUS:
            self._resolve_ambiguous(c)
        elif self.state is State.STRING:
            if c == '"':
                self.emit(TokenType.STRING, "".join(self.buffer))
            elif c == "\\":
                self.state = State.STRING_ESCAPE
            else:
                self.buffer.append(c)
        elif self.state is State.STRING_ESCAPE:
            # unknown escapes are kept as written
            self.buffer.append(STRING_ESCAPES.get(c, "\\" + c))
            self.state = State.STRING
        elif self.state is State.INTEGER:
            if _is_digit(c):
                self.buffer.append(c)
            else:
                self._emit_integer()
                self._consume_idle(c)
        elif self.state is State.WORD:
            if _is_valid_in_word(c):
                self.buffer.append(c)
            else:
                self._emit_word()
                self._consume_idle(c)
        else:
            raise self.error(f"Internal error, unexpected tokenizer state {self.state}")

    def _consume_idle(self, c: str) -> None:
        self.token_start_idx = self.idx
        if c.isspace():
            pass
        elif c == '"':
            self.state = State.STRING
        elif _is_digit(c):
            self.buffer.append(c)
            self.state = State.INTEGER
        elif _is_valid_in_word(c):
            self.buffer.append(c)
            self.state = State.WORD
        elif c in AMBIGUOUS_CHARS:
            self.buffer.append(c)
            self.state = State.AMBIGUOUS
        elif c in OPERATOR_CHARS:
            self.emit(TokenType.OPERATOR, c)
        elif c in SINGLE_CHAR_TOKENS:
            self.emit(SINGLE_CHAR_TOKENS[c])
        else:
            raise self.error(f"Illegal character: {c!r}")

    def _resolve_ambiguous(self, c: str) -> None:
        prefix = self.buffer[0]
        pair = prefix + c
        if pair == ":=":
            self.emit(TokenType.ASSIGNMENT)
        elif pair == "..":
            self.emit(TokenType.RANGE)
        elif pair == "//":
            self.buffer = []
            self.state = State.LINE_COMMENT
        elif pair == "/*":
            self.buffer = []
            self.state = State.BLOCK_COMMENT
        else:
            # the prefix stands alone, c starts something new
            single = {":": TokenType.TYPE_DECL, ".": TokenType.DOT, "/": TokenType.OPERATOR}[prefix]
            self.emit(single, prefix if single is TokenType.OPERATOR else None, end_idx=self.idx)
            self._consume_idle(c)

    def _emit_integer(self) -> None:
        literal = "".join(self.buffer)
        value = int(literal)
        if value > INT_MAX:
            raise self.error(f"Integer literal {literal} does not fit in 32 bits", idx=self.token_start_idx)
        self.emit(TokenType.INTEGER, value, end_idx=self.idx)

    def _emit_word(self) -> None:
        word = "".join(self.buffer)
        if word in KEYWORDS:
            self.emit(TokenType.KEYWORD, KEYWORDS[word], end_idx=self.idx)
        elif word in BOOLEANS:
            self.emit(TokenType.BOOLEAN, BOOLEANS[word], end_idx=self.idx)
        else:
            self.emit(TokenType.IDENTIFIER, word, end_idx=self.idx)

    def finish(self) -> list[Token]:
        # input may only end between tokens
        if self.state is State.AMBIGUOUS:
            raise self.error(f"Unexpected end of input after {self.buffer[0]!r}", idx=self.token_start_idx)
        elif self.state in UNTERMINATED:
            raise self.error(f"Unterminated {UNTERMINATED[self.state]}", idx=self.token_start_idx)
        return self.tokens


def tokenize(code: str) -> list[Token]:
    tokenizer = Tokenizer(code)
    for i, c in enumerate(code):
        tokenizer.idx = i
        tokenizer.consume(c)
    tokenizer.idx = len(code)
    tokens = tokenizer.finish()
    logger.debug("Tokenized %d characters into %d tokens", len(code), len(tokens))
    return tokens


def untokenize(tokens: list[Token]) -> str:
    result = []
    for i, token in enumerate(tokens):
        glue = (
            i == 0
            or token.type in (TokenType.STATEMENT_END, TokenType.BRACKET_CLOSE)
            or tokens[i - 1].type is TokenType.BRACKET_OPEN
        )
        if not glue:
            result.append(" ")
        result.append(token.lexeme)
    return "".join(result)
