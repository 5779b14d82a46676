"""Error types shared by the pipeline stages, and the command-line error handler.

Every stage raises a subclass of MplError and never recovers from it. The stage-specific
exceptions live next to the stage (TokenizerError, ParserError); runtime errors live here because
both the value model and the evaluator raise them.
"""
import logging
import sys
from dataclasses import dataclass

from termcolor import colored

logger = logging.getLogger(__name__)


class MplError(Exception):
    """Base class for lexical, syntax and runtime errors"""

    stage = "Error"


@dataclass
class MplRuntimeError(MplError):
    errmsg: str

    stage = "Runtime error"

    def __str__(self) -> str:
        return f"[{self.stage}] {self.errmsg}"


class TypeMismatchError(MplRuntimeError):
    pass


class UndeclaredIdentifierError(MplRuntimeError):
    pass


class DivisionByZeroError(MplRuntimeError):
    pass


class IntegerOverflowError(MplRuntimeError):
    pass


class AssertionFailedError(MplRuntimeError):
    pass


class InputError(MplRuntimeError):
    pass


class UnknownOperatorError(MplRuntimeError):
    pass


class OperatorArityError(MplRuntimeError):
    """A unary operator in binary position, or a binary one used as unary"""


class ErrorHandler:
    """Context manager that reports pipeline errors on stderr and exits.

    MplErrors are printed as diagnostics; anything else reaching the handler is an internal error.
    """

    ERROR = "red"

    def __init__(self, fatal: bool = True, color: bool = True, stream=None):
        self.fatal = fatal
        self.color = color
        self.stream = stream
        self.exit_code = 0

    def _colored(self, text: str, attrs: list[str]) -> str:
        if not self.color:
            return text
        return colored(text, ErrorHandler.ERROR, attrs=attrs)

    def throw(self, error: BaseException, internal: bool = False, exit_code: int = 1) -> None:
        stream = self.stream if self.stream is not None else sys.stderr
        lines = str(error).splitlines() or [type(error).__name__]
        if internal:
            lines[0] = f"[internal] {type(error).__name__}: {lines[0]}"
        print(self._colored(lines[0], ["bold"]), file=stream)
        for line in lines[1:]:
            print(line, file=stream)

        self.exit_code = exit_code
        if self.fatal:
            sys.exit(exit_code)

    def __enter__(self) -> "ErrorHandler":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_type is None or exc_type is SystemExit:
            return False
        if exc_type is KeyboardInterrupt:
            self.throw(MplRuntimeError("keyboard interrupt"), exit_code=130)
        elif issubclass(exc_type, MplError):
            self.throw(exc_val)
        else:
            logger.debug("Internal error", exc_info=(exc_type, exc_val, exc_tb))
            self.throw(exc_val, internal=True)
        return True
