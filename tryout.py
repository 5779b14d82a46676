import io

from minipl.errors import MplRuntimeError
from minipl.parser import ParserError, parse, unparse
from minipl.runtime import evaluate
from minipl.tokenizer import TokenizerError, tokenize

for code in [
    'var x : int := 4 + (6 * 2);\nprint x;',
    'var s : string := "a\\tb\\n";\nprint s;',
    "var i : int;\nfor i in 1..3 do\n    print i;\nend for;",
    "for i in 1..3 do print i; end for;",
    "var b : bool := !(1 < 2);\nassert (b = false);",
    "assert (2 < 1);",
    'print "a" + 1;',
    "print 7 / 0;",
    "print 1 + 2 + 3;",
    "var n : int := 99999999999;",
    'print "unterminated',
    "/* block\n   comment */ print 1; // line comment",
]:
    print("=" * 10)
    print(f"code: {code!r}")
    try:
        tokens = tokenize(code)
    except TokenizerError as e:
        print(e)
        continue

    print(f"tokens: {' '.join(str(t) for t in tokens)}")

    try:
        statements = parse(tokens)
    except ParserError as e:
        print(e)
        continue
    print(f"ast:\n{unparse(statements)}", end="")

    stdout = io.StringIO()
    try:
        env = evaluate(statements, stdin=io.StringIO(""), stdout=stdout)
    except MplRuntimeError as e:
        print(f"output: {stdout.getvalue()!r}")
        print(e)
        continue
    print(f"output: {stdout.getvalue()!r}")
    print(f"variables: {({name: value.display() for name, value in env.values.items()})}")
