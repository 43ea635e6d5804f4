import argparse
import logging
from typing import Callable

from stackcalc.interpreter import interpret
from stackcalc.runtime import VariableStore
from stackcalc.utils import CalculatorError, format_values


def parse_args() -> argparse.Namespace:
    arg_parser = argparse.ArgumentParser(description="Line-by-line arithmetic calculator")
    arg_parser.add_argument("-v", "--verbose", action="store_true", help="log every pipeline stage to stderr")
    arg_parser.add_argument("--show-stack", action="store_true", help="print the whole value stack, not its top")
    return arg_parser.parse_args()


def handle_line(code: str, variables: VariableStore, output: Callable[[str], None], show_stack: bool = False) -> None:
    if not code.strip():
        return

    try:
        results = interpret(code, variables)
    except CalculatorError as e:
        output(str(e))
        return

    if show_stack:
        output(format_values(results))
    elif results:
        output(str(results[-1]))


def run_session(
    read: Callable[[str], str] = input, output: Callable[[str], None] = print, show_stack: bool = False
) -> VariableStore:
    variables: VariableStore = dict()
    while True:
        try:
            code = read("> ")
        except EOFError:
            break
        handle_line(code, variables, output, show_stack=show_stack)
    return variables


if __name__ == "__main__":
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s: %(message)s",
    )
    run_session(show_stack=args.show_stack)
