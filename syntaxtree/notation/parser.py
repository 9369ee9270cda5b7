"""
Parse tokens into a syntax tree: ROOT -> NODE ([label ...]) -> VALUE (leaf words).
Recursive descent, one token of lookahead, no backtracking.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from .errors import (
    MalformedSubscriptError,
    MissingArrowTargetError,
    MissingLabelError,
    UnexpectedTokenError,
    UnterminatedNodeError,
)
from .tokenizer import ARROW_TYPES, Token, TokenType

logger = logging.getLogger(__name__)

FEATURE_RE = re.compile(r"^\+")
CASE_RE = re.compile(r"^\{.*\}$")
TRAILING_CASE_RE = re.compile(r"^(.*)\s*(\{.*\})$")

# Token types that can start a leaf or serve as a label.
LABEL_TYPES = frozenset({TokenType.STRING, TokenType.QUOTED_STRING, TokenType.COMMA})
# Token types absorbed into a multi-word leaf label.
WORD_TYPES = frozenset({TokenType.STRING, TokenType.COMMA})


class NodeType(str, Enum):
    ROOT = "ROOT"
    NODE = "NODE"
    VALUE = "VALUE"


@dataclass
class ArrowDirective:
    """Arrow from the owning leaf to the target-th leaf (1-based, left to right)."""
    target: int
    ends_to: bool = False
    ends_from: bool = False
    label: Optional[str] = None
    dotted: bool = False


@dataclass
class SyntaxNode:
    """One of ROOT, NODE or VALUE; consumers branch on `type`."""
    type: NodeType
    label: Optional[str] = None
    subscript: Optional[str] = None
    superscript: Optional[str] = None
    values: list["SyntaxNode"] = field(default_factory=list)
    features: list[str] = field(default_factory=list)
    case_feature: Optional[str] = None
    arrows: list[ArrowDirective] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Plain JSON-ready view of the tree (None/empty fields omitted)."""
        out: dict[str, Any] = {"type": self.type.value}
        for key in ("label", "subscript", "superscript", "case_feature"):
            value = getattr(self, key)
            if value is not None:
                out[key] = value
        if self.features:
            out["features"] = list(self.features)
        if self.arrows:
            out["arrows"] = [
                {
                    "target": a.target,
                    "ends_to": a.ends_to,
                    "ends_from": a.ends_from,
                    "label": a.label,
                    "dotted": a.dotted,
                }
                for a in self.arrows
            ]
        if self.type is not NodeType.VALUE:
            out["values"] = [child.to_dict() for child in self.values]
        return out


def parse(tokens: list[Token]) -> SyntaxNode:
    """Parse a full token list; every top-level construct becomes a child of ROOT."""
    root = SyntaxNode(NodeType.ROOT)
    current = 0
    while current < len(tokens):
        current, node = _parse_token(tokens, current)
        root.values.append(node)
    logger.debug("Parsed %d top-level construct(s), %d leaves", len(root.values), count_leaves(root))
    return root


def count_leaves(node: SyntaxNode) -> int:
    """Number of VALUE nodes under node; arrow targets index into this order."""
    if node.type is NodeType.VALUE:
        return 1
    return sum(count_leaves(child) for child in node.values)


def _parse_token(tokens: list[Token], current: int) -> tuple[int, SyntaxNode]:
    kind = tokens[current].type
    if kind is TokenType.BRACKET_OPEN:
        return _parse_node(tokens, current)
    if kind in LABEL_TYPES:
        return _parse_value(tokens, current)
    raise UnexpectedTokenError(current, kind.value)


def _parse_script(tokens: list[Token], current: int, node: SyntaxNode) -> int:
    """Consume an optional `_text` or `^text` after a label."""
    if current >= len(tokens):
        return current
    kind = tokens[current].type
    if kind not in (TokenType.SUBSCRIPT_PREFIX, TokenType.SUPERSCRIPT_PREFIX):
        return current
    current += 1
    if current >= len(tokens) or tokens[current].type not in LABEL_TYPES:
        raise MalformedSubscriptError(current)
    if kind is TokenType.SUPERSCRIPT_PREFIX:
        node.superscript = tokens[current].value
    else:
        node.subscript = tokens[current].value
    return current + 1


def _parse_node(tokens: list[Token], current: int) -> tuple[int, SyntaxNode]:
    node = SyntaxNode(NodeType.NODE)
    current += 1
    if current >= len(tokens) or tokens[current].type not in LABEL_TYPES:
        raise MissingLabelError(current)
    node.label = tokens[current].value
    current = _parse_script(tokens, current + 1, node)

    while current < len(tokens) and tokens[current].type is not TokenType.BRACKET_CLOSE:
        current, child = _parse_token(tokens, current)
        _file_child(node, child)

    if current >= len(tokens):
        raise UnterminatedNodeError(current - 1)
    return current + 1, node


def _split_trailing_case(value: SyntaxNode) -> bool:
    """Move a trailing `{...}` from value.label into value.case_feature."""
    match = TRAILING_CASE_RE.match(value.label)
    if not match:
        return False
    value.label = match.group(1).strip()
    value.case_feature = match.group(2)
    return True


def _file_child(node: SyntaxNode, child: SyntaxNode) -> None:
    """Features go to node.features, bare case leaves to the previous sibling, the rest to values."""
    if child.type is NodeType.VALUE and FEATURE_RE.match(child.label):
        node.features.append(child.label)
        return
    if child.type is NodeType.VALUE and CASE_RE.match(child.label):
        if node.values:
            prev = node.values[-1]
            if prev.type is NodeType.VALUE and not prev.case_feature:
                if not _split_trailing_case(prev):
                    prev.case_feature = child.label
        else:
            logger.debug("Dropping case marker %s with no preceding sibling", child.label)
        return
    if child.type is NodeType.VALUE:
        _split_trailing_case(child)
    node.values.append(child)


def _arrow_ends(kind: TokenType) -> tuple[bool, bool]:
    ends_to = kind in (TokenType.ARROW_TO, TokenType.ARROW_BOTH, TokenType.ARROW_DOTTED_TO)
    ends_from = kind in (TokenType.ARROW_FROM, TokenType.ARROW_BOTH)
    return ends_to, ends_from


def _parse_arrows(tokens: list[Token], current: int, value: SyntaxNode) -> int:
    """Consume `->N label , <-M ...` after a leaf label."""
    while current < len(tokens) and tokens[current].type in ARROW_TYPES:
        kind = tokens[current].type
        current += 1
        if current >= len(tokens) or tokens[current].type is not TokenType.NUMBER:
            raise MissingArrowTargetError(current)
        ends_to, ends_from = _arrow_ends(kind)
        arrow = ArrowDirective(
            target=tokens[current].value,
            ends_to=ends_to,
            ends_from=ends_from,
            dotted=kind is TokenType.ARROW_DOTTED_TO,
        )
        current += 1
        if current < len(tokens) and tokens[current].type in (TokenType.STRING, TokenType.QUOTED_STRING):
            arrow.label = tokens[current].value
            current += 1
        value.arrows.append(arrow)

        if current < len(tokens) and tokens[current].type is TokenType.COMMA:
            current += 1
        else:
            break
    return current


def _parse_value(tokens: list[Token], current: int) -> tuple[int, SyntaxNode]:
    value = SyntaxNode(NodeType.VALUE)
    if tokens[current].type in WORD_TYPES:
        words = []
        while current < len(tokens) and tokens[current].type in WORD_TYPES:
            words.append(tokens[current].value)
            current += 1
        value.label = " ".join(words)
    else:
        value.label = tokens[current].value
        current += 1

    current = _parse_script(tokens, current, value)
    current = _parse_arrows(tokens, current, value)

    if CASE_RE.match(value.label):
        value.case_feature = value.label
    return current, value
