import logging
import math
from dataclasses import dataclass
from typing import Callable, Type

from stackcalc.linearizer import Instruction, Operate, PushNumber, ReadVariable, WriteVariable
from stackcalc.tokenizer import Operator
from stackcalc.utils import CalculatorError, format_values
from stackcalc.value import Float, PendingWrite, Value

logger = logging.getLogger(__name__)

VariableStore = dict[str, float]


@dataclass
class CalcRuntimeError(CalculatorError):
    errmsg: str

    def __str__(self) -> str:
        return f"[Runtime error] {self.errmsg}"


@dataclass
class UndefinedVariableError(CalcRuntimeError):
    name: str


@dataclass
class StackUnderflowError(CalcRuntimeError):
    operator: Operator


@dataclass
class TypeMismatchError(CalcRuntimeError):
    operator: Operator


@dataclass
class UnknownOperatorError(CalcRuntimeError):
    operator: object


def run_line(instructions: list[Instruction], variables: VariableStore) -> list[Value]:
    stack: list[Value] = []
    for instruction in instructions:
        if isinstance(instruction, PushNumber):
            stack.append(Float(instruction.value))
        elif isinstance(instruction, ReadVariable):
            if instruction.name not in variables:
                raise UndefinedVariableError(
                    f"Reference to undefined variable {instruction.name!r}", name=instruction.name
                )
            stack.append(Float(variables[instruction.name]))
        elif isinstance(instruction, WriteVariable):
            stack.append(PendingWrite(instruction.name))
        elif isinstance(instruction, Operate):
            execute_operator(instruction.operator, stack, variables)
        else:
            raise CalcRuntimeError(f"Unexpected instruction: {instruction}")

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("stack: %s", format_values(stack))
        logger.debug("variables: %s", variables)
    return stack


def execute_operator(operator: Operator, stack: list[Value], variables: VariableStore) -> None:
    if operator is Operator.SEQUENCE:
        return

    if operator is Operator.ASSIGN:
        left, right = _pop_operands(operator, stack)
        if not isinstance(left, PendingWrite) or not isinstance(right, Float):
            raise TypeMismatchError(
                f"Assignment is not defined for {left.type_name()} and {right.type_name()}", operator=operator
            )
        variables[left.name] = right.v
        logger.debug("%s <- %s", left.name, right.v)
        return

    table = arithmetic_impls.get(operator)
    if table is None:
        raise UnknownOperatorError(f"Unexpected operator: {operator}", operator=operator)
    left, right = _pop_operands(operator, stack)
    stack.append(eval_binary_operation(operator, table=table, a=left, b=right))


def _pop_operands(operator: Operator, stack: list[Value]) -> tuple[Value, Value]:
    if len(stack) < 2:
        raise StackUnderflowError(
            f"Operator {str(operator)!r} needs 2 operands, found {len(stack)}", operator=operator
        )
    right = stack.pop()
    left = stack.pop()
    return left, right


BinaryOperationImpl = Callable[[Value, Value], Value]
BinaryOperationImplTable = list[tuple[tuple[Type[Value], Type[Value]], BinaryOperationImpl]]


def eval_binary_operation(operator: Operator, table: BinaryOperationImplTable, a: Value, b: Value) -> Value:
    for (type_a, type_b), impl in table:
        if isinstance(a, type_a) and isinstance(b, type_b):
            return impl(a, b)
    else:
        raise TypeMismatchError(
            f"Operator {str(operator)!r} is not defined for {a.type_name()} and {b.type_name()}", operator=operator
        )


def ieee_div(a: float, b: float) -> float:
    if b != 0.0:
        return a / b
    if a == 0.0 or math.isnan(a):
        return math.nan
    return math.copysign(math.inf, math.copysign(1.0, a) * math.copysign(1.0, b))


add_impls: BinaryOperationImplTable = [((Float, Float), lambda a, b: Float(a.v + b.v))]  # type: ignore
sub_impls: BinaryOperationImplTable = [((Float, Float), lambda a, b: Float(a.v - b.v))]  # type: ignore
mul_impls: BinaryOperationImplTable = [((Float, Float), lambda a, b: Float(a.v * b.v))]  # type: ignore
div_impls: BinaryOperationImplTable = [((Float, Float), lambda a, b: Float(ieee_div(a.v, b.v)))]  # type: ignore

arithmetic_impls: dict[Operator, BinaryOperationImplTable] = {
    Operator.ADD: add_impls,
    Operator.SUB: sub_impls,
    Operator.MUL: mul_impls,
    Operator.DIV: div_impls,
}
