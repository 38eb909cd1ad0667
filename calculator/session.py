import logging
import sys
from typing import Mapping, TextIO

from calculator.parser import Parser, ParserError, format_expression
from calculator.runtime import evaluate_statement
from calculator.symbols import SymbolTable
from calculator.tokenizer import CharStream, TokenStream, TokenType
from calculator.utils import CalculatorError

logger = logging.getLogger(__name__)

PROMPT = "> "
RESULT_MARKER = "= "

PREDEFINED_CONSTANTS: dict[str, float] = {
    "pi": 3.1415926535,
    "e": 2.7182818284,
}


class Session:
    """Reads statements from the input one at a time, printing a result or an error for each.

    A failing statement never ends the session: the error is reported and the input is skipped
    up to the next ';' so that the following statement starts clean. The session ends on 'q' or
    at the end of input.
    """

    def __init__(
        self,
        source: TextIO | str,
        output: TextIO | None = None,
        errors: TextIO | None = None,
        constants: Mapping[str, float] | None = None,
        prompt: str = PROMPT,
        result_marker: str = RESULT_MARKER,
    ) -> None:
        self.tokens = TokenStream(CharStream(source))
        self.parser = Parser(self.tokens)
        self.symbols = SymbolTable(PREDEFINED_CONSTANTS if constants is None else constants)
        self.output = output if output is not None else sys.stdout
        self.errors = errors if errors is not None else sys.stderr
        self.prompt = prompt
        self.result_marker = result_marker

    def run(self) -> None:
        while self.step():
            pass
        self.output.flush()

    def step(self) -> bool:
        """Handles one statement, returns False once the session is over"""
        self.output.write(self.prompt)
        self.output.flush()
        try:
            token = self.tokens.next()
            while token.type is TokenType.PRINT:
                token = self.tokens.next()
            if token.type in (TokenType.QUIT, TokenType.END):
                logger.debug("Session over on %s", token.type)
                return False
            self.tokens.putback(token)

            statement = self.parser.statement()
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug("Parsed statement: %s", format_expression(statement))
            result = evaluate_statement(statement, self.symbols)
        except CalculatorError as e:
            logger.debug("Statement failed, skipping to next %s", TokenType.PRINT, exc_info=True)
            self.errors.write(f"{e}\n")
            self.tokens.discard_until(TokenType.PRINT)
            return True

        self.output.write(f"{self.result_marker}{result}\n")
        return True


def calculate(code: str, symbols: SymbolTable | None = None) -> float:
    """Evaluates a single statement, optionally terminated with ';'"""
    tokens = TokenStream(CharStream(code))
    statement = Parser(tokens).statement()

    trailing = tokens.next()
    while trailing.type is TokenType.PRINT:
        trailing = tokens.next()
    if trailing.type is not TokenType.END:
        raise ParserError("unexpected input after statement", token=trailing)

    return evaluate_statement(statement, symbols if symbols is not None else SymbolTable(PREDEFINED_CONSTANTS))
