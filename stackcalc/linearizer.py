import logging
from dataclasses import dataclass

from stackcalc.parser import BinaryOperation, Expression, Variable
from stackcalc.tokenizer import Operator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PushNumber:
    value: float

    def __str__(self) -> str:
        return f"push {self.value}"


@dataclass(frozen=True)
class ReadVariable:
    name: str

    def __str__(self) -> str:
        return f"read {self.name}"


@dataclass(frozen=True)
class WriteVariable:
    name: str

    def __str__(self) -> str:
        return f"write {self.name}"


@dataclass(frozen=True)
class Operate:
    operator: Operator

    def __str__(self) -> str:
        return f"op {self.operator}"


Instruction = PushNumber | ReadVariable | WriteVariable | Operate


def linearize(expression: Expression) -> list[Instruction]:
    instructions: list[Instruction] = []
    # post-order walk without recursion; an Operate entry is emitted after both of its operands
    pending: list[tuple[Expression | Operate, bool]] = [(expression, False)]
    while pending:
        node, is_assignment_target = pending.pop()
        if isinstance(node, Operate):
            instructions.append(node)
        elif isinstance(node, BinaryOperation):
            pending.append((Operate(node.operator), False))
            pending.append((node.right, False))
            pending.append((node.left, node.operator is Operator.ASSIGN))
        elif isinstance(node, Variable):
            if is_assignment_target:
                instructions.append(WriteVariable(node.name))
            else:
                instructions.append(ReadVariable(node.name))
        else:
            instructions.append(PushNumber(float(node)))

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("instructions: %s", "; ".join(str(i) for i in instructions))
    return instructions
