from minipl.errors import MplRuntimeError
from minipl.parser import ParserError, parse
from minipl.runtime import Interpreter
from minipl.tokenizer import TokenizerError, tokenize


if __name__ == "__main__":
    # one interpreter for the whole session, so declarations persist between lines
    interpreter = Interpreter()

    while True:
        try:
            code = input("> ")
        except EOFError:
            break

        try:
            tokens = tokenize(code)
        except TokenizerError as e:
            print(e)
            continue

        try:
            statements = parse(tokens)
        except ParserError as e:
            print(e)
            continue

        try:
            interpreter.run(statements)
        except MplRuntimeError as e:
            print(e)
