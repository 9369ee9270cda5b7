"""Tests for syntaxtree.notation.tokenizer."""
from __future__ import annotations

import pytest

from syntaxtree.notation import (
    ParseError,
    Token,
    TokenType,
    UnterminatedStringError,
    tokenize,
)

T = TokenType


def _types(text: str) -> list[TokenType]:
    return [t.type for t in tokenize(text)]


def test_simple_phrase() -> None:
    assert tokenize("[S [NP John]]") == [
        Token(T.BRACKET_OPEN),
        Token(T.STRING, "S"),
        Token(T.BRACKET_OPEN),
        Token(T.STRING, "NP"),
        Token(T.STRING, "John"),
        Token(T.BRACKET_CLOSE),
        Token(T.BRACKET_CLOSE),
    ]


def test_whitespace_is_skipped() -> None:
    assert tokenize(" \t[A\n\r\v\fb\b]  ") == [
        Token(T.BRACKET_OPEN),
        Token(T.STRING, "A"),
        Token(T.STRING, "b"),
        Token(T.BRACKET_CLOSE),
    ]


def test_empty_input() -> None:
    assert tokenize("") == []
    assert tokenize("   ") == []


@pytest.mark.parametrize(
    "text, kind",
    [("->", T.ARROW_TO), ("<-", T.ARROW_FROM), ("<>", T.ARROW_BOTH), (".>", T.ARROW_DOTTED_TO)],
)
def test_arrow_operators(text: str, kind: TokenType) -> None:
    assert tokenize(f"{text}12") == [Token(kind), Token(T.NUMBER, 12)]


def test_arrow_glued_to_word_stays_in_the_string() -> None:
    """Arrows are only recognized at the start of a token."""
    assert tokenize("G->1") == [Token(T.STRING, "G->1")]


def test_sub_and_superscript_prefixes() -> None:
    assert _types("N_s") == [T.STRING, T.SUBSCRIPT_PREFIX, T.STRING]
    assert _types("N^s") == [T.STRING, T.SUPERSCRIPT_PREFIX, T.STRING]


def test_numbers_are_non_negative_integers() -> None:
    assert tokenize("007") == [Token(T.NUMBER, 7)]
    assert tokenize("12ab") == [Token(T.NUMBER, 12), Token(T.STRING, "ab")]
    assert tokenize("-5") == [Token(T.STRING, "-5")]
    assert tokenize("1.5") == [Token(T.NUMBER, 1), Token(T.STRING, ".5")]


def test_quoted_string_is_verbatim() -> None:
    assert tokenize('"Main clause"') == [Token(T.QUOTED_STRING, "Main clause")]
    assert tokenize('"a [b] _c\\"') == [Token(T.QUOTED_STRING, "a [b] _c\\")]
    assert tokenize('""') == [Token(T.QUOTED_STRING, "")]


def test_quote_ends_an_unquoted_string() -> None:
    assert tokenize('ab"cd"') == [Token(T.STRING, "ab"), Token(T.QUOTED_STRING, "cd")]


def test_unterminated_quoted_string() -> None:
    with pytest.raises(UnterminatedStringError) as exc:
        tokenize('[A "oops]')
    assert isinstance(exc.value, ParseError)
    assert '"oops]' in str(exc.value)


def test_standalone_comma_is_a_separator_token() -> None:
    assert tokenize("a , b") == [Token(T.STRING, "a"), Token(T.COMMA, ","), Token(T.STRING, "b")]


def test_comma_glued_to_a_word_stays_in_the_string() -> None:
    assert tokenize("a, b") == [Token(T.STRING, "a,"), Token(T.STRING, "b")]
    assert tokenize(",,") == [Token(T.STRING, ",,")]


def test_case_and_feature_words_are_plain_strings() -> None:
    assert tokenize("{Acc} +FEAT") == [Token(T.STRING, "{Acc}"), Token(T.STRING, "+FEAT")]


def test_tokens_are_immutable() -> None:
    token = tokenize("x")[0]
    with pytest.raises(AttributeError):
        token.value = "y"
