import abc
from dataclasses import dataclass


class Value(abc.ABC):
    @classmethod
    @abc.abstractmethod
    def type_name(cls) -> str:
        ...


@dataclass(frozen=True)
class Float(Value):
    v: float

    @classmethod
    def type_name(cls) -> str:
        return "Float"

    def __str__(self) -> str:
        return str(self.v)


@dataclass(frozen=True)
class PendingWrite(Value):
    """Assignment target pushed by WriteVariable, consumed by '='"""

    name: str

    @classmethod
    def type_name(cls) -> str:
        return "Variable reference"

    def __str__(self) -> str:
        return f"&{self.name}"
