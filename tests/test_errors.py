import io

import pytest

from minipl.errors import ErrorHandler, MplError, TypeMismatchError
from minipl.parser import ParserError
from minipl.tokenizer import TokenizerError


def test_stage_errors_share_a_base() -> None:
    for error_type in (TokenizerError, ParserError, TypeMismatchError):
        assert issubclass(error_type, MplError)


def test_handler_reports_pipeline_error() -> None:
    stream = io.StringIO()
    handler = ErrorHandler(fatal=False, color=False, stream=stream)
    with handler:
        raise TypeMismatchError("Expected integer, got string")
    assert handler.exit_code == 1
    assert stream.getvalue() == "[Runtime error] Expected integer, got string\n"


def test_handler_reports_internal_error() -> None:
    stream = io.StringIO()
    handler = ErrorHandler(fatal=False, color=False, stream=stream)
    with handler:
        raise KeyError("boom")
    assert handler.exit_code == 1
    assert stream.getvalue().startswith("[internal] KeyError:")


def test_handler_keyboard_interrupt() -> None:
    stream = io.StringIO()
    handler = ErrorHandler(fatal=False, color=False, stream=stream)
    with handler:
        raise KeyboardInterrupt
    assert handler.exit_code == 130
    assert "keyboard interrupt" in stream.getvalue()


def test_fatal_handler_exits() -> None:
    with pytest.raises(SystemExit) as exc_info:
        with ErrorHandler(color=False, stream=io.StringIO()):
            raise TypeMismatchError("bad")
    assert exc_info.value.code == 1


def test_handler_passes_success_through() -> None:
    handler = ErrorHandler(fatal=False, stream=io.StringIO())
    with handler:
        pass
    assert handler.exit_code == 0
