import enum
import io
import logging
import string
from dataclasses import dataclass
from typing import TextIO

from calculator.utils import CalculatorError, PrintableEnum

logger = logging.getLogger(__name__)


@dataclass
class LexError(CalculatorError):
    char: str

    def __str__(self) -> str:
        return f"[Tokenizer error] {self.errmsg}: {self.char!r}"


class TokenType(PrintableEnum):
    NUMBER = enum.auto()
    NAME = enum.auto()
    LET = enum.auto()
    PRINT = enum.auto()
    QUIT = enum.auto()
    EQUAL = enum.auto()
    BRACKET_OPEN = enum.auto()
    BRACKET_CLOSE = enum.auto()
    PLUS = enum.auto()
    MINUS = enum.auto()
    STAR = enum.auto()
    SLASH = enum.auto()
    PERCENT = enum.auto()
    END = enum.auto()


@dataclass(frozen=True)
class Token:
    type: TokenType
    lexeme: str

    def __str__(self) -> str:
        return f"<{self.type}>{self.lexeme}"


SINGLE_CHAR_TOKENS = {
    ";": TokenType.PRINT,
    "q": TokenType.QUIT,
    "(": TokenType.BRACKET_OPEN,
    ")": TokenType.BRACKET_CLOSE,
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.STAR,
    "/": TokenType.SLASH,
    "%": TokenType.PERCENT,
    "=": TokenType.EQUAL,
}

TOKEN_LITERALS = {token_type: char for char, token_type in SINGLE_CHAR_TOKENS.items()}

LET_KEYWORD = "let"


def _is_digit(s: str) -> bool:
    return s != "" and s in string.digits


def _is_valid_in_number(s: str) -> bool:
    return _is_digit(s) or s == "."


class CharStream:
    """Characters pulled one at a time from a text stream; '' marks end of input"""

    def __init__(self, source: TextIO | str) -> None:
        self._source = io.StringIO(source) if isinstance(source, str) else source
        self._pushed_back: list[str] = []

    def get(self) -> str:
        if self._pushed_back:
            return self._pushed_back.pop()
        return self._source.read(1)

    def putback(self, ch: str) -> None:
        if ch:
            self._pushed_back.append(ch)


class TokenStream:
    def __init__(self, chars: CharStream) -> None:
        self.chars = chars
        self._buffer: Token | None = None

    def next(self) -> Token:
        if self._buffer is not None:
            token, self._buffer = self._buffer, None
            return token

        ch = self.chars.get()
        while ch and ch.isspace():
            ch = self.chars.get()

        if not ch:
            return Token(type=TokenType.END, lexeme="")
        elif ch in SINGLE_CHAR_TOKENS:
            return Token(type=SINGLE_CHAR_TOKENS[ch], lexeme=ch)
        elif _is_valid_in_number(ch):
            self.chars.putback(ch)
            return self._read_number()
        elif ch.isalpha():
            name = ch
            ch = self.chars.get()
            while ch and ch.isalnum():
                name += ch
                ch = self.chars.get()
            self.chars.putback(ch)
            if name == LET_KEYWORD:
                return Token(type=TokenType.LET, lexeme=name)
            return Token(type=TokenType.NAME, lexeme=name)
        else:
            raise LexError("bad token", char=ch)

    def putback(self, token: Token) -> None:
        if self._buffer is not None:
            raise RuntimeError("putback() into a full buffer")
        self._buffer = token

    def discard_until(self, token_type: TokenType) -> None:
        """Skips input up to and including the next token of the given single-char type"""
        if self._buffer is not None:
            buffered, self._buffer = self._buffer, None
            if buffered.type is token_type:
                return

        target = TOKEN_LITERALS[token_type]
        discarded = ""
        ch = self.chars.get()
        while ch and ch != target:
            discarded += ch
            ch = self.chars.get()
        logger.debug("Discarded %r while looking for %s", discarded, token_type)

    def _read_digits(self) -> str:
        digits = ""
        ch = self.chars.get()
        while _is_digit(ch):
            digits += ch
            ch = self.chars.get()
        self.chars.putback(ch)
        return digits

    def _read_number(self) -> Token:
        lexeme = self._read_digits()
        ch = self.chars.get()
        if ch == ".":
            lexeme += ch + self._read_digits()
        else:
            self.chars.putback(ch)

        if lexeme.strip(".") == "":
            raise LexError("malformed numeric literal", char=lexeme)

        marker = self.chars.get()
        if marker in ("e", "E"):
            sign = self.chars.get()
            if sign not in ("+", "-"):
                self.chars.putback(sign)
                sign = ""
            exponent = self._read_digits()
            if exponent:
                lexeme += marker + sign + exponent
            else:
                # "2e" is the number 2 followed by the name e
                self.chars.putback(sign)
                self.chars.putback(marker)
        else:
            self.chars.putback(marker)

        return Token(type=TokenType.NUMBER, lexeme=lexeme)


def tokenize(code: str) -> list[Token]:
    stream = TokenStream(CharStream(code))
    tokens: list[Token] = []
    while True:
        token = stream.next()
        tokens.append(token)
        if token.type is TokenType.END:
            return tokens
