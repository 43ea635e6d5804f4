import enum
from typing import Iterable


class CalculatorError(Exception):
    pass


class PrintableEnum(enum.Enum):
    def __str__(self) -> str:
        return self.name

    __repr__ = __str__


class SymbolEnum(enum.Enum):
    def __str__(self) -> str:
        return str(self.value)

    __repr__ = __str__


def format_values(values: Iterable[object]) -> str:
    return " ".join(str(v) for v in values)
