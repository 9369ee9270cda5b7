"""
Layout: syntax tree -> drawable tree with widths, depths, auto-subscripts and pixel positions.

Widths are measured through a text measurer: any object with
``text_width(text, font_size) -> float``. The render surfaces provide one;
tests use a fixed-width stand-in.
"""
from __future__ import annotations

import logging
import re
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

from ..config import Alignment, RenderOptions
from ..notation import ArrowDirective, NodeType, SyntaxNode

logger = logging.getLogger(__name__)

# Horizontal padding around every label; half of it is the top margin.
NODE_PADDING = 20
CASE_SCALE = 0.7
SCRIPT_SCALE = 3 / 4
MAX_CASE_CHARS = 100

LINE_BREAK_RE = re.compile(r"\\n|\n")
TRAILING_CASE_RE = re.compile(r"\s*\{.*\}$")
CASE_ONLY_RE = re.compile(r"^\{.*\}$")
FEATURE_ARROW_RE = re.compile(r"^(\+\S+?)(?:\s*(->|\.>)(\d+))?$")


class TextMeasurer(Protocol):
    def text_width(self, text: str, font_size: Optional[float] = None) -> float: ...


@dataclass
class Drawable:
    """Render-ready mirror of a syntax node; left/top are set by the position phase."""
    label: str
    width: float
    depth: int
    is_leaf: bool
    is_root: bool = False
    subscript: Optional[str] = None
    superscript: Optional[str] = None
    arrows: list[ArrowDirective] = field(default_factory=list)
    features: list[str] = field(default_factory=list)
    case_feature: Optional[str] = None
    children: list["Drawable"] = field(default_factory=list)
    left: float = 0.0
    top: float = 0.0
    # Set on the root by the position phase: some leaf carries an arrow directive.
    has_arrows: bool = False

    @property
    def center(self) -> float:
        return self.left + self.width / 2

    def walk(self):
        """Pre-order iteration over this node and its descendants."""
        yield self
        for child in self.children:
            yield from child.walk()

    def leaves(self) -> list["Drawable"]:
        return [d for d in self.walk() if d.is_leaf]

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "subscript": self.subscript,
            "superscript": self.superscript,
            "width": self.width,
            "depth": self.depth,
            "is_leaf": self.is_leaf,
            "left": self.left,
            "top": self.top,
            "features": list(self.features),
            "case_feature": self.case_feature,
            "children": [c.to_dict() for c in self.children],
        }


def label_lines(label: Optional[str]) -> list[str]:
    """Split a label on real newlines or the two characters backslash-n."""
    return LINE_BREAK_RE.split(str(label or ""))


def case_text(case_feature: str) -> str:
    """`{Acc}` -> `[Acc]`, truncated past MAX_CASE_CHARS."""
    text = "[" + case_feature[1:-1] + "]"
    if len(text) > MAX_CASE_CHARS:
        text = text[:MAX_CASE_CHARS] + "…]"
    return text


def parse_feature(feature: str) -> tuple[str, Optional[str], Optional[int]]:
    """`+PAST->1` -> ("+PAST", "->", 1); plain features have no operator or target."""
    match = FEATURE_ARROW_RE.match(feature)
    if not match:
        return feature, None, None
    name, op, target = match.groups()
    return name, op, int(target) if target else None


def feature_text(features: list[str]) -> str:
    return "[" + ", ".join(parse_feature(f)[0] for f in features) + "]"


def _label_width(
    measurer: TextMeasurer,
    font_size: float,
    label: str,
    *,
    is_root: bool = False,
    is_leaf: bool = False,
    subscript: Optional[str] = None,
    superscript: Optional[str] = None,
    features: Optional[list[str]] = None,
    case_feature: Optional[str] = None,
) -> float:
    width = 0.0
    if not is_root:
        width = max(measurer.text_width(line, font_size) for line in label_lines(label)) + NODE_PADDING
    script = subscript or superscript
    if script:
        width += measurer.text_width(script, font_size) * SCRIPT_SCALE * 2
    if features:
        width = max(width, measurer.text_width(feature_text(features), font_size))
    if is_leaf and case_feature:
        case_width = measurer.text_width(case_text(case_feature), font_size) * CASE_SCALE + NODE_PADDING
        width = max(width, case_width)
    return width


def _drawable_label(node: SyntaxNode) -> tuple[str, Optional[str]]:
    """Label to draw and case feature to keep for this node."""
    label = node.label or ""
    if node.type is NodeType.VALUE and node.case_feature and label and not CASE_ONLY_RE.match(label):
        return TRAILING_CASE_RE.sub("", label).strip(), node.case_feature
    return label, None


def drawable_from_node(measurer: TextMeasurer, node: SyntaxNode, font_size: float, depth: int = -1) -> Drawable:
    """Mirror node into a Drawable tree; width = max(own label width, sum of child widths)."""
    is_leaf = node.type is NodeType.VALUE
    is_root = node.type is NodeType.ROOT
    label, case_feature = _drawable_label(node)
    drawable = Drawable(
        label=label,
        width=0.0,
        depth=depth,
        is_leaf=is_leaf,
        is_root=is_root,
        subscript=node.subscript,
        superscript=node.superscript,
        arrows=list(node.arrows),
        features=list(node.features),
        case_feature=case_feature,
    )
    if not is_leaf:
        drawable.children = [drawable_from_node(measurer, child, font_size, depth + 1) for child in node.values]
    own = _label_width(
        measurer,
        font_size,
        label,
        is_root=is_root,
        is_leaf=is_leaf,
        subscript=node.subscript,
        superscript=node.superscript,
        features=drawable.features,
        case_feature=case_feature,
    )
    drawable.width = max(own, sum(c.width for c in drawable.children))
    return drawable


def get_max_depth(drawable: Drawable) -> int:
    return max([drawable.depth] + [get_max_depth(c) for c in drawable.children])


def move_leaves_to_bottom(drawable: Drawable, bottom: int) -> None:
    for d in drawable.walk():
        if d.is_leaf:
            d.depth = bottom


def move_parents_down(drawable: Drawable) -> None:
    """Post-order: each branch sits one level above its shallowest child. Depth-0 nodes stay put."""
    if drawable.is_leaf:
        return
    for child in drawable.children:
        move_parents_down(child)
    if drawable.depth != 0 and drawable.children:
        drawable.depth = min(c.depth for c in drawable.children) - 1


def _branches(drawable: Drawable):
    return (d for d in drawable.walk() if not d.is_leaf and not d.is_root)


def calculate_auto_subscript(drawable: Drawable) -> None:
    """Number repeated branch labels 1, 2, ... in pre-order; explicit scripts are left alone."""
    counts = Counter(d.label for d in _branches(drawable) if not d.subscript and not d.superscript)
    repeated = {label for label, n in counts.items() if n > 1}
    tally: Counter = Counter()
    for d in _branches(drawable):
        if d.subscript or d.superscript or d.label not in repeated:
            continue
        tally[d.label] += 1
        d.subscript = str(tally[d.label])


def calculate_drawable_positions(
    drawable: Drawable,
    font_size: float,
    vertical_scale: float = 1.0,
    parent_offset: float = 0.0,
) -> bool:
    """Assign left/top to every descendant; True if any of them carries an arrow."""
    has_arrow = bool(drawable.arrows)
    offset = 0.0
    for child in drawable.children:
        child.top = child.depth * (font_size * 3 * vertical_scale) + NODE_PADDING / 2
        child.left = offset + parent_offset
        if calculate_drawable_positions(child, font_size, vertical_scale, child.left):
            has_arrow = True
        offset += child.width
    return has_arrow


def find_target(root: Drawable, index: int) -> Optional[Drawable]:
    """The index-th leaf (1-based) in left-to-right order, or None."""
    if index < 1:
        return None
    leaves = root.leaves()
    return leaves[index - 1] if index <= len(leaves) else None


def layout(root: SyntaxNode, measurer: TextMeasurer, options: Optional[RenderOptions] = None) -> Drawable:
    """Build, align, subscript and position the drawable tree for root."""
    options = options or RenderOptions()
    drawables = drawable_from_node(measurer, root, options.font_size)
    max_depth = get_max_depth(drawables)
    if options.alignment is not Alignment.TOP_ALIGNED:
        move_leaves_to_bottom(drawables, max_depth)
    if options.alignment is Alignment.BOTTOM_ALIGNED:
        move_parents_down(drawables)
    if options.auto_subscript:
        calculate_auto_subscript(drawables)
    drawables.has_arrows = calculate_drawable_positions(drawables, options.font_size, options.vertical_scale)
    logger.debug(
        "Layout: width=%.1f max_depth=%d alignment=%s",
        drawables.width, max_depth, options.alignment.value,
    )
    return drawables
