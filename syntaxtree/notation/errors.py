"""
Errors raised while reading bracket notation. All of them mean bad input.
"""
from __future__ import annotations


class ParseError(ValueError):
    """Base class for every tokenizer, validation and parser error."""


class UnconsumedInputError(ParseError):
    def __init__(self, remainder: str) -> None:
        self.remainder = remainder
        super().__init__(f"Unable to parse [{remainder}] ...")


class UnterminatedStringError(ParseError):
    def __init__(self, remainder: str) -> None:
        self.remainder = remainder
        super().__init__(f'Unterminated quoted string. Missing " after [{remainder}]')


class PhraseTooShortError(ParseError):
    def __init__(self) -> None:
        super().__init__("Phrase too short")


class MissingWrappingBracketsError(ParseError):
    def __init__(self) -> None:
        super().__init__("Phrase must start with [ and end with ]")


class UnbalancedBracketsError(ParseError):
    """count > 0: brackets left open; count < 0: too many closing brackets."""

    def __init__(self, count: int) -> None:
        self.count = count
        if count > 0:
            msg = f"{count} bracket(s) open ["
        else:
            msg = f"{abs(count)} too many closed bracket(s) ]"
        super().__init__(msg)


class GrammarError(ParseError):
    """Parser-level error tied to a token index."""

    def __init__(self, position: int, message: str) -> None:
        self.position = position
        super().__init__(f"{position}: {message}")


class MissingLabelError(GrammarError):
    def __init__(self, position: int) -> None:
        super().__init__(position, "Expected label string after [")


class MalformedSubscriptError(GrammarError):
    def __init__(self, position: int) -> None:
        super().__init__(position, "Expected subscript string after _ or ^")


class UnterminatedNodeError(GrammarError):
    def __init__(self, position: int) -> None:
        super().__init__(position, "Missing closing bracket ] ...")


class MissingArrowTargetError(GrammarError):
    def __init__(self, position: int) -> None:
        super().__init__(position, "Expected column number after arrow")


class UnexpectedTokenError(GrammarError):
    def __init__(self, position: int, token_type: str) -> None:
        self.token_type = token_type
        super().__init__(position, f"Unexpected {token_type}")
