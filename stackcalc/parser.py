import logging
from dataclasses import dataclass

from stackcalc.grouper import ParserError, TokenTree, group, ungroup
from stackcalc.tokenizer import Operator, Token, TokenType, tokenize

logger = logging.getLogger(__name__)


class MalformedExpressionError(ParserError):
    pass


@dataclass(frozen=True)
class BinaryOperation:
    operator: Operator
    left: "Expression"
    right: "Expression"

    @property
    def operands(self) -> tuple["Expression", "Expression"]:
        return self.left, self.right

    def __str__(self) -> str:
        return f"({self.left} {self.operator} {self.right})"


@dataclass(frozen=True)
class Variable:
    name: str

    def __str__(self) -> str:
        return self.name


Expression = float | Variable | BinaryOperation


@dataclass(frozen=True)
class PrecedenceLevel:
    operators: frozenset[Operator]
    # chains of equal-precedence operators fold to the left
    left_associative: bool


# loosest binding first
PRECEDENCE_LEVELS = [
    PrecedenceLevel(frozenset({Operator.SEQUENCE}), left_associative=False),
    PrecedenceLevel(frozenset({Operator.ASSIGN}), left_associative=False),
    PrecedenceLevel(frozenset({Operator.ADD, Operator.SUB}), left_associative=True),
    PrecedenceLevel(frozenset({Operator.MUL, Operator.DIV}), left_associative=True),
]


def parse_line(code: str) -> Expression:
    tokens = tokenize(code)
    try:
        expression = build_tree(group(tokens))
    except RecursionError:
        raise MalformedExpressionError("Expression is nested too deeply", tokens=tokens, error_token_idx=0) from None
    logger.debug("expression: %s", expression)
    return expression


def build_tree(tree: TokenTree) -> Expression:
    """Builds the expression tree from grouped tokens, loosest operators first.

    `;` and `=` nest to the right (`a = b = 1` is `a = (b = 1)`). Chains of `+ -`
    and `* /` nest to the left, `1 - 2 - 3` is `((1 - 2) - 3)`, so they evaluate
    like ordinary infix arithmetic rather than splitting at the first operator.
    Each chain is folded in a loop, so long lines do not recurse per operator.
    """
    while len(tree) == 1 and not isinstance(tree[0], Token):
        tree = tree[0]

    for level in PRECEDENCE_LEVELS:
        split_indices = _find_operators(tree, level)
        if not split_indices:
            continue

        bounds = [-1, *split_indices, len(tree)]
        segments = [tree[start + 1 : end] for start, end in zip(bounds, bounds[1:])]
        for segment_idx, segment in enumerate(segments):
            if segment:
                continue
            if segment_idx == 0:
                split_idx, side = split_indices[0], "Left"
            else:
                split_idx, side = split_indices[segment_idx - 1], "Right"
            operator_token = tree[split_idx]
            assert isinstance(operator_token, Token)
            raise MalformedExpressionError(
                f"{side} operand expected for {operator_token.lexeme!r}",
                tokens=ungroup(tree),
                error_token_idx=_flat_index(tree, split_idx),
            )

        operators = [_operator_at(tree, i) for i in split_indices]
        operands = [build_tree(segment) for segment in segments]
        if level.left_associative:
            result = operands[0]
            for operator, operand in zip(operators, operands[1:]):
                result = BinaryOperation(operator=operator, left=result, right=operand)
        else:
            result = operands[-1]
            for operator, operand in zip(reversed(operators), reversed(operands[:-1])):
                result = BinaryOperation(operator=operator, left=operand, right=result)
        return result

    if not tree:
        raise MalformedExpressionError("Empty expression", tokens=[], error_token_idx=0)
    if len(tree) > 1:
        raise MalformedExpressionError(
            "Operator expected between operands", tokens=ungroup(tree), error_token_idx=_flat_index(tree, 1)
        )

    element = tree[0]
    assert isinstance(element, Token)  # single nested groups are unwrapped above
    if element.type is TokenType.NUMBER:
        return element.number
    elif element.type is TokenType.NAME:
        return Variable(element.lexeme)
    else:
        raise MalformedExpressionError(
            f"Number, name or bracketed expression expected, found {element.type}",
            tokens=[element],
            error_token_idx=0,
        )


def _find_operators(tree: TokenTree, level: PrecedenceLevel) -> list[int]:
    return [
        i
        for i, element in enumerate(tree)
        if isinstance(element, Token) and element.type is TokenType.OPERATOR and element.operator in level.operators
    ]


def _operator_at(tree: TokenTree, idx: int) -> Operator:
    element = tree[idx]
    assert isinstance(element, Token)
    return element.operator


def _flat_index(tree: TokenTree, idx: int) -> int:
    return len(ungroup(tree[:idx]))
