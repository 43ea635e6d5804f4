import enum
import logging
import re
import string
from dataclasses import dataclass

from stackcalc.utils import CalculatorError, PrintableEnum, SymbolEnum

logger = logging.getLogger(__name__)


@dataclass
class TokenizerError(CalculatorError):
    errmsg: str
    code: str
    error_char_idx: int

    def __str__(self) -> str:
        print_start_idx = max(0, self.error_char_idx - 10)
        print_ellipsis_pre = print_start_idx > 0
        print_end_idx = min(len(self.code), self.error_char_idx + 10)
        print_ellipsis_post = print_end_idx < len(self.code)
        return "\n".join(
            [
                f"[Tokenizer error] {self.errmsg}",
                (
                    ("..." if print_ellipsis_pre else "")
                    + f"{self.code[print_start_idx:print_end_idx]}"
                    + ("..." if print_ellipsis_post else "")
                ),
                " " * (self.error_char_idx - print_start_idx + (3 if print_ellipsis_pre else 0)) + "^",
            ]
        )


class InvalidCharacterError(TokenizerError):
    @property
    def char(self) -> str:
        return self.code[self.error_char_idx]


class TokenType(PrintableEnum):
    NUMBER = enum.auto()
    OPERATOR = enum.auto()
    NAME = enum.auto()
    BRACKET_OPEN = enum.auto()
    BRACKET_CLOSE = enum.auto()


class Operator(SymbolEnum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    ASSIGN = "="
    SEQUENCE = ";"


@dataclass(frozen=True)
class Token:
    type: TokenType
    lexeme: str

    def __str__(self) -> str:
        return f"<{self.type}>{self.lexeme}"

    @property
    def number(self) -> float:
        if self.type is not TokenType.NUMBER:
            raise ValueError(f"{self} is not a number token")
        return float(self.lexeme)

    @property
    def operator(self) -> Operator:
        if self.type is not TokenType.OPERATOR:
            raise ValueError(f"{self} is not an operator token")
        return Operator(self.lexeme)


def _is_valid_in_number(s: str) -> bool:
    return s in string.digits


def _is_identifier_start(s: str) -> bool:
    return s in string.ascii_letters or s == "_"


def _is_valid_in_identifier(s: str) -> bool:
    return _is_identifier_start(s) or s in string.digits


SINGLE_CHAR_TOKENS = {
    "(": TokenType.BRACKET_OPEN,
    ")": TokenType.BRACKET_CLOSE,
    **{op.value: TokenType.OPERATOR for op in Operator},
}


def tokenize(code: str) -> list[Token]:
    i = 0
    tokens: list[Token] = []
    while i < len(code):
        if _is_valid_in_number(code[i]):
            number_end_idx = i + 1
            while number_end_idx < len(code) and _is_valid_in_number(code[number_end_idx]):
                number_end_idx += 1
            tokens.append(Token(type=TokenType.NUMBER, lexeme=code[i:number_end_idx]))
            i = number_end_idx - 1  # to account for += 1 later
        elif _is_identifier_start(code[i]):
            ident_end_idx = i + 1
            while ident_end_idx < len(code) and _is_valid_in_identifier(code[ident_end_idx]):
                ident_end_idx += 1
            tokens.append(Token(type=TokenType.NAME, lexeme=code[i:ident_end_idx]))
            i = ident_end_idx - 1  # to account for += 1 later
        elif code[i] in SINGLE_CHAR_TOKENS:
            tokens.append(Token(type=SINGLE_CHAR_TOKENS[code[i]], lexeme=code[i]))
        elif code[i].isspace():
            pass
        else:
            raise InvalidCharacterError(f"Unexpected character: {code[i]!r}", code=code, error_char_idx=i)
        i += 1

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("tokens: %s", " ".join(str(t) for t in tokens))
    return tokens


def untokenize(tokens: list[Token]) -> str:
    result = " ".join(t.lexeme for t in tokens)

    result = re.sub(r"\s+;", ";", result)

    # ( 1 + 2 ) => (1 + 2)
    result = re.sub(r"\(\s+", "(", result)
    result = re.sub(r"\s+\)", ")", result)
    return result
