import io

import pytest

from calculator.tokenizer import CharStream, LexError, Token, TokenStream, TokenType, tokenize


def token_stream(code: str) -> TokenStream:
    return TokenStream(CharStream(code))


@pytest.mark.parametrize(
    "code, expected_tokens",
    [
        pytest.param(
            "let x = 3.5*(y%2);",
            [
                Token(TokenType.LET, "let"),
                Token(TokenType.NAME, "x"),
                Token(TokenType.EQUAL, "="),
                Token(TokenType.NUMBER, "3.5"),
                Token(TokenType.STAR, "*"),
                Token(TokenType.BRACKET_OPEN, "("),
                Token(TokenType.NAME, "y"),
                Token(TokenType.PERCENT, "%"),
                Token(TokenType.NUMBER, "2"),
                Token(TokenType.BRACKET_CLOSE, ")"),
                Token(TokenType.PRINT, ";"),
            ],
        ),
        pytest.param(" 1\t+\n- 2 / 4 ", ["1", "+", "-", "2", "/", "4"]),
        pytest.param("1e5 2E-3 4e+1", ["1e5", "2E-3", "4e+1"]),
        pytest.param("2e", ["2", "e"], id="dangling-exponent-is-a-name"),
        pytest.param("1e+", ["1", "e", "+"]),
        pytest.param("1.2.3", ["1.2", ".3"]),
        pytest.param("5. .5", ["5.", ".5"]),
        pytest.param("let2 letx let", ["let2", "letx", "let"]),
        pytest.param("abc1 x2y", ["abc1", "x2y"]),
        pytest.param("quux", ["q", "uux"], id="q-always-quits"),
        pytest.param("", []),
    ],
)
def test_tokenize(code: str, expected_tokens: list) -> None:
    tokens = tokenize(code)
    assert tokens[-1] == Token(TokenType.END, "")
    if expected_tokens and isinstance(expected_tokens[0], Token):
        assert tokens[:-1] == expected_tokens
    else:
        assert [t.lexeme for t in tokens[:-1]] == expected_tokens


def test_keyword_and_names() -> None:
    assert [t.type for t in tokenize("let letter q")][:-1] == [TokenType.LET, TokenType.NAME, TokenType.QUIT]


@pytest.mark.parametrize("code, bad_char", [("$", "$"), ("1 + #", "#"), ("!", "!"), ("^", "^")])
def test_bad_token(code: str, bad_char: str) -> None:
    with pytest.raises(LexError) as e:
        tokenize(code)
    assert e.value.char == bad_char
    assert str(e.value) == f"[Tokenizer error] bad token: {bad_char!r}"


def test_malformed_number() -> None:
    with pytest.raises(LexError, match="malformed numeric literal"):
        tokenize(". 1")


def test_end_of_input_repeats() -> None:
    stream = token_stream("  ")
    assert stream.next().type is TokenType.END
    assert stream.next().type is TokenType.END


def test_reads_from_text_stream() -> None:
    stream = TokenStream(CharStream(io.StringIO("12 + x")))
    assert [stream.next().lexeme for _ in range(3)] == ["12", "+", "x"]


def test_putback_returns_same_token_first() -> None:
    stream = token_stream("1 + 2")
    first = stream.next()
    stream.putback(first)
    assert stream.next() == first
    assert stream.next() == Token(TokenType.PLUS, "+")


def test_putback_into_full_buffer_is_fatal() -> None:
    stream = token_stream("1 + 2")
    stream.putback(stream.next())
    with pytest.raises(RuntimeError, match="full buffer"):
        stream.putback(Token(TokenType.PLUS, "+"))


def test_discard_until_drops_buffered_terminator_only() -> None:
    stream = token_stream("; 7")
    stream.putback(stream.next())
    stream.discard_until(TokenType.PRINT)
    assert stream.next() == Token(TokenType.NUMBER, "7")


def test_discard_until_skips_raw_input() -> None:
    stream = token_stream("1 $ 2 ) ; 3")
    stream.putback(stream.next())
    stream.discard_until(TokenType.PRINT)
    assert stream.next() == Token(TokenType.NUMBER, "3")


def test_discard_until_stops_at_end_of_input() -> None:
    stream = token_stream("1 2 3")
    stream.discard_until(TokenType.PRINT)
    assert stream.next().type is TokenType.END
