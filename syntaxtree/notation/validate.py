"""
Coarse structural checks run on the token list before parsing.
"""
from __future__ import annotations

from .errors import MissingWrappingBracketsError, PhraseTooShortError, UnbalancedBracketsError
from .tokenizer import Token, TokenType

MIN_TOKENS = 3


def count_open_brackets(tokens: list[Token]) -> int:
    """Opens minus closes; 0 when balanced."""
    count = 0
    for token in tokens:
        if token.type is TokenType.BRACKET_OPEN:
            count += 1
        elif token.type is TokenType.BRACKET_CLOSE:
            count -= 1
    return count


def validate_tokens(tokens: list[Token]) -> None:
    if len(tokens) < MIN_TOKENS:
        raise PhraseTooShortError()
    if tokens[0].type is not TokenType.BRACKET_OPEN or tokens[-1].type is not TokenType.BRACKET_CLOSE:
        raise MissingWrappingBracketsError()
    count = count_open_brackets(tokens)
    if count != 0:
        raise UnbalancedBracketsError(count)
