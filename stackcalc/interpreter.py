from typing import Optional

from stackcalc.linearizer import linearize
from stackcalc.parser import parse_line
from stackcalc.runtime import VariableStore, run_line
from stackcalc.value import Value


def interpret(code: str, variables: Optional[VariableStore] = None) -> list[Value]:
    """Evaluates one line; assignments land in `variables`, a fresh store is used if it is None"""
    if variables is None:
        variables = dict()
    return run_line(linearize(parse_line(code)), variables)
