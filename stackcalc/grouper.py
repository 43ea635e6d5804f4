import logging
from dataclasses import dataclass

from stackcalc.tokenizer import Token, TokenType, untokenize
from stackcalc.utils import CalculatorError

logger = logging.getLogger(__name__)

TokenTree = list["Token | TokenTree"]


@dataclass
class ParserError(CalculatorError):
    errmsg: str
    tokens: list[Token]
    error_token_idx: int

    def __str__(self) -> str:
        parsed_tokens = self.tokens[: self.error_token_idx]
        filler_whitespace = " " * len(untokenize(parsed_tokens)) + (" " if parsed_tokens else "")
        return "\n".join([f"Parser error: {self.errmsg}", untokenize(self.tokens), filler_whitespace + "^"])


class UnmatchedParenthesisError(ParserError):
    pass


def group(tokens: list[Token]) -> TokenTree:
    tree = _group(tokens, 0, len(tokens))
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("grouped: %s", format_tree(tree))
    return tree


def _group(tokens: list[Token], start: int, end: int) -> TokenTree:
    result: TokenTree = []
    i = start
    while i < end:
        token = tokens[i]
        if token.type is TokenType.BRACKET_OPEN:
            close_idx = _find_matching_bracket(tokens, i, end)
            result.append(_group(tokens, i + 1, close_idx))
            i = close_idx
        elif token.type is TokenType.BRACKET_CLOSE:
            raise UnmatchedParenthesisError("Unexpected closing bracket", tokens=tokens, error_token_idx=i)
        else:
            result.append(token)
        i += 1
    return result


def _find_matching_bracket(tokens: list[Token], open_idx: int, end: int) -> int:
    depth = 0
    for j in range(open_idx, end):
        if tokens[j].type is TokenType.BRACKET_OPEN:
            depth += 1
        elif tokens[j].type is TokenType.BRACKET_CLOSE:
            depth -= 1
            if depth == 0:
                return j
    raise UnmatchedParenthesisError("Unclosed bracket", tokens=tokens, error_token_idx=open_idx)


def ungroup(tree: TokenTree) -> list[Token]:
    tokens: list[Token] = []
    for element in tree:
        if isinstance(element, Token):
            tokens.append(element)
        else:
            tokens.append(Token(type=TokenType.BRACKET_OPEN, lexeme="("))
            tokens.extend(ungroup(element))
            tokens.append(Token(type=TokenType.BRACKET_CLOSE, lexeme=")"))
    return tokens


def format_tree(tree: TokenTree) -> str:
    return "[" + ", ".join(e.lexeme if isinstance(e, Token) else format_tree(e) for e in tree) + "]"
