import math
from dataclasses import dataclass
from typing import Callable

from calculator.parser import (
    BinaryOperation,
    BinaryOperator,
    Declaration,
    Expression,
    Statement,
    UnaryOperation,
    UnaryOperator,
    Variable,
)
from calculator.symbols import SymbolTable
from calculator.utils import CalculatorError


@dataclass
class DivisionByZero(CalculatorError):
    pass


def evaluate_statement(statement: Statement, symbols: SymbolTable) -> float:
    if isinstance(statement, Declaration):
        return symbols.define(statement.name, evaluate_expression(statement.value, symbols))
    return evaluate_expression(statement, symbols)


def evaluate_expression(expression: Expression, symbols: SymbolTable) -> float:
    if isinstance(expression, float):
        return expression
    elif isinstance(expression, Variable):
        return symbols.get(expression.name)
    elif isinstance(expression, BinaryOperation):
        # left-associative chains nest on the left, walk them in a loop
        chain: list[BinaryOperation] = []
        left: Expression = expression
        while isinstance(left, BinaryOperation):
            chain.append(left)
            left = left.left
        result = evaluate_expression(left, symbols)
        for operation in reversed(chain):
            right_res = evaluate_expression(operation.right, symbols)
            result = binary_impls[operation.operator](result, right_res)
        return result
    elif isinstance(expression, UnaryOperation):
        operand = evaluate_expression(expression.operand, symbols)
        return unary_impls[expression.operator](operand)
    else:
        raise RuntimeError(f"Unexpected expression type: {expression}")


def _divide(a: float, b: float) -> float:
    if b == 0:
        raise DivisionByZero("divide by zero")
    return a / b


def _remainder(a: float, b: float) -> float:
    if b == 0:
        raise DivisionByZero("%: divide by zero")
    if math.isinf(a):
        # IEEE-754 remainder of an infinite dividend is NaN, math.fmod raises instead
        return math.nan
    return math.fmod(a, b)


BinaryOperationImpl = Callable[[float, float], float]
UnaryOperationImpl = Callable[[float], float]

binary_impls: dict[BinaryOperator, BinaryOperationImpl] = {
    BinaryOperator.ADD: lambda a, b: a + b,
    BinaryOperator.SUB: lambda a, b: a - b,
    BinaryOperator.MUL: lambda a, b: a * b,
    BinaryOperator.DIV: _divide,
    BinaryOperator.MOD: _remainder,
}

unary_impls: dict[UnaryOperator, UnaryOperationImpl] = {
    UnaryOperator.NEG: lambda a: -a,
    UnaryOperator.POS: lambda a: a,
}
