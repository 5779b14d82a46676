import io
import random

from minipl.errors import MplError
from minipl.runtime import run


def eval_py(a: int, op: str, b: int) -> int | str:
    if op == "+":
        res = a + b
    elif op == "-":
        res = a - b
    elif op == "*":
        res = a * b
    else:
        if b == 0:
            return "Division by zero"
        res = abs(a) // abs(b) * (-1 if (a < 0) != (b < 0) else 1)
    if not -(2**31) <= res <= 2**31 - 1:
        return "Integer overflow"
    return res


def eval_my(a: int, op: str, b: int) -> int | str:
    # negative numbers have no literal form
    operand_a = str(a) if a >= 0 else f"(0 - {-a})"
    operand_b = str(b) if b >= 0 else f"(0 - {-b})"
    stdout = io.StringIO()
    try:
        run(f"print {operand_a} {op} {operand_b};", stdout=stdout)
    except MplError as e:
        return str(e)
    return int(stdout.getvalue())


if __name__ == "__main__":

    def generate() -> int:
        magnitude = random.choice([10, 1000, 2**16, 2**31 - 1])
        return random.randint(-magnitude, magnitude)

    while True:
        a, op, b = generate(), random.choice("+-*/"), generate()
        res_py = eval_py(a, op, b)
        res_my = eval_my(a, op, b)
        if isinstance(res_py, int) and res_py == res_my:
            continue
        if isinstance(res_py, str) and isinstance(res_my, str) and res_py in res_my:
            continue
        print(f"{a} {op} {b}\npy: {res_py}\nmy: {res_my}\n\n")
