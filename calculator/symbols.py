from dataclasses import dataclass
from typing import Mapping

from calculator.utils import CalculatorError


@dataclass
class UndefinedVariable(CalculatorError):
    name: str


@dataclass
class DuplicateDeclaration(CalculatorError):
    name: str


class SymbolTable:
    """Variable bindings of one session; names are bound at most once and never removed"""

    def __init__(self, initial: Mapping[str, float] | None = None) -> None:
        self._values: dict[str, float] = dict()
        for name, value in (initial or {}).items():
            self.define(name, value)

    def get(self, name: str) -> float:
        if name not in self._values:
            raise UndefinedVariable(f"get: undefined variable {name}", name=name)
        return self._values[name]

    def set(self, name: str, value: float) -> None:
        if name not in self._values:
            raise UndefinedVariable(f"set: undefined variable {name}", name=name)
        self._values[name] = value

    def is_declared(self, name: str) -> bool:
        return name in self._values

    def define(self, name: str, value: float) -> float:
        if self.is_declared(name):
            raise DuplicateDeclaration(f"{name} declared twice", name=name)
        self._values[name] = value
        return value

