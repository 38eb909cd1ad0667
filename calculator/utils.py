import enum
from dataclasses import dataclass


class PrintableEnum(enum.Enum):
    def __str__(self) -> str:
        return self.name

    __repr__ = __str__


@dataclass
class CalculatorError(Exception):
    """Base for errors a session reports and recovers from by skipping to the next statement"""

    errmsg: str

    def __str__(self) -> str:
        return self.errmsg
