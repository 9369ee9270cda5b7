"""Notation: tokenize, validate and parse labelled bracket phrases."""
from .errors import (
    ParseError,
    UnconsumedInputError,
    UnterminatedStringError,
    PhraseTooShortError,
    MissingWrappingBracketsError,
    UnbalancedBracketsError,
    GrammarError,
    MissingLabelError,
    MalformedSubscriptError,
    UnterminatedNodeError,
    MissingArrowTargetError,
    UnexpectedTokenError,
)
from .tokenizer import Token, TokenType, tokenize
from .validate import validate_tokens, count_open_brackets
from .parser import ArrowDirective, NodeType, SyntaxNode, parse, count_leaves


def parse_phrase(text: str) -> SyntaxNode:
    """Tokenize, validate and parse one phrase."""
    tokens = tokenize(text)
    validate_tokens(tokens)
    return parse(tokens)


__all__ = [
    "ParseError",
    "UnconsumedInputError",
    "UnterminatedStringError",
    "PhraseTooShortError",
    "MissingWrappingBracketsError",
    "UnbalancedBracketsError",
    "GrammarError",
    "MissingLabelError",
    "MalformedSubscriptError",
    "UnterminatedNodeError",
    "MissingArrowTargetError",
    "UnexpectedTokenError",
    "Token",
    "TokenType",
    "tokenize",
    "validate_tokens",
    "count_open_brackets",
    "ArrowDirective",
    "NodeType",
    "SyntaxNode",
    "parse",
    "parse_phrase",
    "count_leaves",
]
