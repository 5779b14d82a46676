"""Command-line entry point: plint FILE"""
import argparse
import logging
import sys
from typing import Optional

from minipl.errors import ErrorHandler, MplRuntimeError
from minipl.parser import parse, unparse
from minipl.runtime import evaluate
from minipl.tokenizer import tokenize

logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="plint", description="Run a Mini-PL program")
    parser.add_argument("file", help="program source file")
    parser.add_argument("--tokens", action="store_true", help="print the token stream before running")
    parser.add_argument("--ast", action="store_true", help="print the parsed program before running")
    parser.add_argument("--no-color", action="store_true", help="do not color error messages")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    error_handler = ErrorHandler(fatal=False, color=not args.no_color)
    with error_handler:
        try:
            with open(args.file, encoding="utf-8") as f:
                code = f.read()
        except OSError as e:
            raise MplRuntimeError(f"Cannot read {args.file}: {e.strerror}") from e
        logger.debug("Read %d characters from %s", len(code), args.file)

        tokens = tokenize(code)
        if args.tokens:
            print(" ".join(str(t) for t in tokens))
        program = parse(tokens)
        if args.ast:
            print(unparse(program), end="")
        evaluate(program)
    return error_handler.exit_code


if __name__ == "__main__":
    sys.exit(main())
