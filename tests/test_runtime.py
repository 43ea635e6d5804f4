import math

import pytest

from stackcalc.interpreter import interpret
from stackcalc.linearizer import Operate, PushNumber, ReadVariable, WriteVariable
from stackcalc.runtime import (
    StackUnderflowError,
    TypeMismatchError,
    UndefinedVariableError,
    UnknownOperatorError,
    VariableStore,
    execute_operator,
    ieee_div,
    run_line,
)
from stackcalc.tokenizer import Operator
from stackcalc.value import Float, PendingWrite


def test_write_variable_pushes_marker() -> None:
    variables: VariableStore = {}
    assert run_line([WriteVariable("a")], variables) == [PendingWrite("a")]
    assert variables == {}


def test_assignment_updates_store_and_pushes_nothing() -> None:
    variables: VariableStore = {"a": 1.0}
    stack = run_line([WriteVariable("a"), PushNumber(5.0), Operate(Operator.ASSIGN)], variables)
    assert stack == []
    assert variables == {"a": 5.0}


def test_sequence_is_noop() -> None:
    stack = run_line([PushNumber(1.0), PushNumber(2.0), Operate(Operator.SEQUENCE)], {})
    assert stack == [Float(1.0), Float(2.0)]


def test_read_variable() -> None:
    assert run_line([ReadVariable("pi")], {"pi": 3.0}) == [Float(3.0)]


def test_undefined_variable() -> None:
    with pytest.raises(UndefinedVariableError) as exc_info:
        interpret("x + 1", {})
    assert exc_info.value.name == "x"
    assert "'x'" in str(exc_info.value)


@pytest.mark.parametrize(
    "code",
    [
        pytest.param("a = (b = 5)", id="nested assignment"),
        pytest.param("a = b = 5", id="chained assignment"),
        pytest.param("(a = 1) + 2", id="assignment has no value"),
    ],
)
def test_stack_underflow(code: str) -> None:
    with pytest.raises(StackUnderflowError):
        interpret(code)


def test_stack_underflow_on_raw_program() -> None:
    with pytest.raises(StackUnderflowError) as exc_info:
        run_line([PushNumber(1.0), Operate(Operator.MUL)], {})
    assert exc_info.value.operator is Operator.MUL


@pytest.mark.parametrize(
    "code",
    [
        pytest.param("1 = 2", id="assign to number"),
        pytest.param("a + b = 2", id="assign to sum"),
    ],
)
def test_type_mismatch_on_assignment(code: str) -> None:
    with pytest.raises(TypeMismatchError):
        interpret(code, {"a": 1.0, "b": 2.0})


def test_type_mismatch_on_arithmetic() -> None:
    with pytest.raises(TypeMismatchError) as exc_info:
        run_line([WriteVariable("a"), PushNumber(1.0), Operate(Operator.ADD)], {})
    assert exc_info.value.operator is Operator.ADD


def test_assignment_of_pending_write_is_type_mismatch() -> None:
    with pytest.raises(TypeMismatchError):
        run_line([WriteVariable("a"), WriteVariable("b"), Operate(Operator.ASSIGN)], {})


def test_unknown_operator() -> None:
    with pytest.raises(UnknownOperatorError):
        execute_operator("%", [Float(1.0), Float(2.0)], {})  # type: ignore


def test_failed_line_keeps_completed_assignments() -> None:
    variables: VariableStore = {}
    with pytest.raises(UndefinedVariableError):
        interpret("a = 1; b = 2; c = missing", variables)
    assert variables == {"a": 1.0, "b": 2.0}


@pytest.mark.parametrize(
    "a, b, expected",
    [
        pytest.param(1.0, 0.0, math.inf),
        pytest.param(-1.0, 0.0, -math.inf),
        pytest.param(1.0, -0.0, -math.inf),
        pytest.param(6.0, 3.0, 2.0),
    ],
)
def test_ieee_div(a: float, b: float, expected: float) -> None:
    assert ieee_div(a, b) == expected


def test_division_by_zero_does_not_raise() -> None:
    assert interpret("1 / 0") == [Float(math.inf)]
    (result,) = interpret("0 / 0")
    assert isinstance(result, Float) and math.isnan(result.v)
