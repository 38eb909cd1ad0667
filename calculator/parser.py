import enum
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

from calculator.tokenizer import Token, TokenStream, TokenType
from calculator.utils import CalculatorError, PrintableEnum


@dataclass
class ParserError(CalculatorError):
    token: Token

    def __str__(self) -> str:
        found = "end of input" if self.token.type is TokenType.END else repr(self.token.lexeme)
        return f"Parser error: {self.errmsg}, found {found}"


class BinaryOperator(PrintableEnum):
    ADD = enum.auto()
    SUB = enum.auto()
    MUL = enum.auto()
    DIV = enum.auto()
    MOD = enum.auto()


@dataclass
class BinaryOperation:
    operator: BinaryOperator
    left: "Expression"
    right: "Expression"


class UnaryOperator(PrintableEnum):
    NEG = enum.auto()
    POS = enum.auto()


@dataclass
class UnaryOperation:
    operator: UnaryOperator
    operand: "Expression"


@dataclass
class Variable:
    name: str


@dataclass
class Declaration:
    name: str
    value: "Expression"


Expression = float | Variable | BinaryOperation | UnaryOperation
Statement = Declaration | Expression


ADDITIVE_OPERATORS = {
    TokenType.PLUS: BinaryOperator.ADD,
    TokenType.MINUS: BinaryOperator.SUB,
}

MULTIPLICATIVE_OPERATORS = {
    TokenType.STAR: BinaryOperator.MUL,
    TokenType.SLASH: BinaryOperator.DIV,
    TokenType.PERCENT: BinaryOperator.MOD,
}

# brackets and unary signs nested deeper than this are rejected before the call stack runs out
MAX_NESTING_DEPTH = 200

UNARY_OPERATORS = {
    TokenType.MINUS: UnaryOperator.NEG,
    TokenType.PLUS: UnaryOperator.POS,
}

OPERATOR_SYMBOLS: dict[BinaryOperator | UnaryOperator, str] = {
    BinaryOperator.ADD: "+",
    BinaryOperator.SUB: "-",
    BinaryOperator.MUL: "*",
    BinaryOperator.DIV: "/",
    BinaryOperator.MOD: "%",
    UnaryOperator.NEG: "-",
    UnaryOperator.POS: "+",
}


class Parser:
    """Recursive descent over a token stream, one method per grammar level.

    Every method consumes exactly the tokens of the construct it recognizes; the single
    token of lookahead it needs to decide where that construct ends is put back.
    """

    def __init__(self, tokens: TokenStream) -> None:
        self.tokens = tokens
        self._depth = 0

    def statement(self) -> Statement:
        token = self.tokens.next()
        if token.type is TokenType.LET:
            return self.declaration()
        self.tokens.putback(token)
        return self.expression()

    def declaration(self) -> Declaration:
        name = self.tokens.next()
        if name.type is not TokenType.NAME:
            raise ParserError("name expected", token=name)
        equal = self.tokens.next()
        if equal.type is not TokenType.EQUAL:
            raise ParserError("= missing", token=equal)
        return Declaration(name=name.lexeme, value=self.expression())

    def expression(self) -> Expression:
        left = self.term()
        while True:
            token = self.tokens.next()
            operator = ADDITIVE_OPERATORS.get(token.type)
            if operator is None:
                self.tokens.putback(token)
                return left
            left = BinaryOperation(operator=operator, left=left, right=self.term())

    def term(self) -> Expression:
        left = self.primary()
        while True:
            token = self.tokens.next()
            operator = MULTIPLICATIVE_OPERATORS.get(token.type)
            if operator is None:
                self.tokens.putback(token)
                return left
            left = BinaryOperation(operator=operator, left=left, right=self.primary())

    def primary(self) -> Expression:
        token = self.tokens.next()
        if token.type is TokenType.BRACKET_OPEN:
            with self._nested(token):
                inner = self.expression()
            closing = self.tokens.next()
            if closing.type is not TokenType.BRACKET_CLOSE:
                raise ParserError("')' expected", token=closing)
            return inner
        elif token.type is TokenType.NUMBER:
            return float(token.lexeme)
        elif token.type in UNARY_OPERATORS:
            with self._nested(token):
                operand = self.primary()
            return UnaryOperation(operator=UNARY_OPERATORS[token.type], operand=operand)
        elif token.type is TokenType.NAME:
            return Variable(token.lexeme)
        else:
            raise ParserError("primary expected", token=token)

    @contextmanager
    def _nested(self, token: Token) -> Iterator[None]:
        if self._depth >= MAX_NESTING_DEPTH:
            raise ParserError("expression nested too deeply", token=token)
        self._depth += 1
        try:
            yield
        finally:
            self._depth -= 1


def format_expression(statement: Statement) -> str:
    if isinstance(statement, Declaration):
        return f"let {statement.name} = {format_expression(statement.value)}"
    elif isinstance(statement, float):
        return str(statement)
    elif isinstance(statement, Variable):
        return statement.name
    elif isinstance(statement, UnaryOperation):
        return f"({OPERATOR_SYMBOLS[statement.operator]}{format_expression(statement.operand)})"
    elif isinstance(statement, BinaryOperation):
        chain: list[BinaryOperation] = []
        left: Expression = statement
        while isinstance(left, BinaryOperation):
            chain.append(left)
            left = left.left
        result = format_expression(left)
        for operation in reversed(chain):
            result = f"({result} {OPERATOR_SYMBOLS[operation.operator]} {format_expression(operation.right)})"
        return result
    else:
        raise RuntimeError(f"Unexpected statement type: {statement}")
