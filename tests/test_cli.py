import io
from pathlib import Path

import pytest

from minipl.cli import main


@pytest.fixture
def program_file(tmp_path: Path):
    def write(code: str) -> str:
        path = tmp_path / "program.mpl"
        path.write_text(code, encoding="utf-8")
        return str(path)

    return write


def test_runs_program(program_file, capsys: pytest.CaptureFixture[str]) -> None:
    path = program_file('var i : int;\nfor i in 1..3 do\n    print i;\nend for;\nprint "\\n";\n')
    assert main([path, "--no-color"]) == 0
    assert capsys.readouterr().out == "123\n"


def test_reads_console_input(program_file, capsys: pytest.CaptureFixture[str], monkeypatch) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("21\n"))
    path = program_file("var x : int; read x; print x * 2;")
    assert main([path]) == 0
    assert capsys.readouterr().out == "42"


@pytest.mark.parametrize(
    "code, expected_first_line",
    [
        pytest.param("print 1 $ 2;", "[Lexical error] Illegal character: '$'"),
        pytest.param("print 1 + 2 + 3;", "[Syntax error] Only one operator is allowed per expression, use parentheses"),
        pytest.param("assert (2 < 1);", "[Runtime error] Assertion failed"),
    ],
)
def test_reports_errors(program_file, capsys: pytest.CaptureFixture[str], code: str, expected_first_line: str) -> None:
    assert main([program_file(code), "--no-color"]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.splitlines()[0] == expected_first_line


def test_partial_output_before_error(program_file, capsys: pytest.CaptureFixture[str]) -> None:
    assert main([program_file('print "partial"; print x;'), "--no-color"]) == 1
    captured = capsys.readouterr()
    assert captured.out == "partial"
    assert "Identifier x used before assignment" in captured.err


def test_missing_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main([str(tmp_path / "missing.mpl"), "--no-color"]) == 1
    assert "Cannot read" in capsys.readouterr().err


def test_dump_tokens_and_ast(program_file, capsys: pytest.CaptureFixture[str]) -> None:
    assert main([program_file("print (1+2);"), "--tokens", "--ast"]) == 0
    out_lines = capsys.readouterr().out.splitlines()
    assert out_lines[0] == "<KEYWORD>print <BRACKET_OPEN>( <INTEGER>1 <OPERATOR>+ <INTEGER>2 <BRACKET_CLOSE>) <STATEMENT_END>;"
    assert out_lines[1] == "print (1 + 2);"
    assert out_lines[2] == "3"


def test_usage_error_without_file() -> None:
    with pytest.raises(SystemExit) as exc_info:
        main([])
    assert exc_info.value.code == 2
