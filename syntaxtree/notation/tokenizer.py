"""
Tokenize labelled bracket notation: brackets, strings, numbers, sub/superscript prefixes, arrows.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Tuple, Union

from .errors import UnconsumedInputError, UnterminatedStringError

logger = logging.getLogger(__name__)

WHITESPACE = frozenset(" \b\f\n\r\t\v")
CONTROL_CHARACTERS = frozenset('[]^_"')


class TokenType(str, Enum):
    BRACKET_OPEN = "BRACKET_OPEN"
    BRACKET_CLOSE = "BRACKET_CLOSE"
    STRING = "STRING"
    QUOTED_STRING = "QUOTED_STRING"
    NUMBER = "NUMBER"
    COMMA = "COMMA"
    SUBSCRIPT_PREFIX = "SUBSCRIPT_PREFIX"
    SUPERSCRIPT_PREFIX = "SUPERSCRIPT_PREFIX"
    ARROW_TO = "ARROW_TO"
    ARROW_FROM = "ARROW_FROM"
    ARROW_BOTH = "ARROW_BOTH"
    ARROW_DOTTED_TO = "ARROW_DOTTED_TO"


ARROW_TYPES = frozenset({
    TokenType.ARROW_TO,
    TokenType.ARROW_FROM,
    TokenType.ARROW_BOTH,
    TokenType.ARROW_DOTTED_TO,
})


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: Union[str, int, None] = None


ScanResult = Tuple[Optional[Token], int]

_CONTROL_TOKENS = {
    "[": TokenType.BRACKET_OPEN,
    "]": TokenType.BRACKET_CLOSE,
    "_": TokenType.SUBSCRIPT_PREFIX,
    "^": TokenType.SUPERSCRIPT_PREFIX,
}

_ARROW_TOKENS = {
    "->": TokenType.ARROW_TO,
    "<-": TokenType.ARROW_FROM,
    "<>": TokenType.ARROW_BOTH,
    ".>": TokenType.ARROW_DOTTED_TO,
}


def _skip_whitespace(text: str, offset: int) -> ScanResult:
    consumed = 0
    while offset + consumed < len(text) and text[offset + consumed] in WHITESPACE:
        consumed += 1
    return None, consumed


def _scan_control(text: str, offset: int) -> ScanResult:
    kind = _CONTROL_TOKENS.get(text[offset])
    if kind is None:
        return None, 0
    return Token(kind), 1


def _scan_arrow(text: str, offset: int) -> ScanResult:
    kind = _ARROW_TOKENS.get(text[offset:offset + 2])
    if kind is None:
        return None, 0
    return Token(kind), 2


def _scan_number(text: str, offset: int) -> ScanResult:
    end = offset
    while end < len(text) and "0" <= text[end] <= "9":
        end += 1
    if end == offset:
        return None, 0
    return Token(TokenType.NUMBER, int(text[offset:end])), end - offset


def _scan_string(text: str, offset: int) -> ScanResult:
    end = offset
    while end < len(text) and text[end] not in WHITESPACE and text[end] not in CONTROL_CHARACTERS:
        end += 1
    if end == offset:
        return None, 0
    value = text[offset:end]
    if value == ",":
        return Token(TokenType.COMMA, value), 1
    return Token(TokenType.STRING, value), end - offset


def _scan_quoted_string(text: str, offset: int) -> ScanResult:
    if text[offset] != '"':
        return None, 0
    close = text.find('"', offset + 1)
    if close < 0:
        raise UnterminatedStringError(text[offset:])
    return Token(TokenType.QUOTED_STRING, text[offset + 1:close]), close - offset + 1


# Tried in this order at every offset; the first one that consumes input wins.
SCANNERS: tuple[Callable[[str, int], ScanResult], ...] = (
    _skip_whitespace,
    _scan_control,
    _scan_arrow,
    _scan_number,
    _scan_string,
    _scan_quoted_string,
)


def tokenize(text: str) -> list[Token]:
    """Scan text left to right into tokens. Raises UnconsumedInputError or UnterminatedStringError."""
    tokens: list[Token] = []
    offset = 0
    while offset < len(text):
        for scan in SCANNERS:
            token, consumed = scan(text, offset)
            if consumed:
                if token is not None:
                    tokens.append(token)
                offset += consumed
                break
        else:
            raise UnconsumedInputError(text[offset:])
    logger.debug("Tokenized %d chars into %d tokens", len(text), len(tokens))
    return tokens
