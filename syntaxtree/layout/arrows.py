"""
Arrow routing: drawable tree -> Bezier arrows between leaves, plus greedy label placement.

Each arrow is a cubic Bezier from (from_x, from_y) to (to_x, to_y) whose two
control points share the height `bottom`, giving a symmetric dip under the
leaves it spans.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from .drawable import CASE_SCALE, Drawable, TextMeasurer, find_target, label_lines, feature_text, parse_feature

logger = logging.getLogger(__name__)

LINE_HEIGHT = 1.1
FEATURE_SCALE = 0.65
ANCHOR_MARGIN = 2
BOTTOM_CLEARANCE = 1.4

LABEL_SCALE = 0.75
LABEL_PADDING = 4
LABEL_SHIFT = 0.8
MAX_LABEL_SHIFTS = 15
CURVE_SAMPLES = 20

FEATURE_ARROW_BEND = 30


@dataclass
class Arrow:
    from_x: float
    from_y: float
    to_x: float
    to_y: float
    bottom: float
    ends_to: bool = False
    ends_from: bool = False
    label: Optional[str] = None
    dotted: bool = False

    def point(self, t: float) -> tuple[float, float]:
        """Point on the curve at parameter t in [0, 1]."""
        return (
            bezier_point(t, self.from_x, self.to_x, self.from_x, self.to_x),
            bezier_point(t, self.from_y, self.to_y, self.bottom, self.bottom),
        )

    def samples(self) -> list[tuple[float, float]]:
        return [self.point(i / CURVE_SAMPLES) for i in range(CURVE_SAMPLES + 1)]


@dataclass
class ArrowSet:
    arrows: list[Arrow] = field(default_factory=list)
    max_bottom: float = 0.0

    def add(self, arrow: Arrow) -> None:
        self.arrows.append(arrow)
        self.max_bottom = max(self.max_bottom, arrow.bottom)

    def extend(self, other: "ArrowSet") -> None:
        for arrow in other.arrows:
            self.add(arrow)

    def __len__(self) -> int:
        return len(self.arrows)

    def __iter__(self):
        return iter(self.arrows)


@dataclass
class LabelPlacement:
    """Label box: x is the horizontal centre, y the top edge."""
    x: float
    y: float
    width: float
    height: float
    attempts: int = 0
    settled: bool = True

    @property
    def left(self) -> float:
        return self.x - self.width / 2

    def contains(self, px: float, py: float) -> bool:
        return self.left <= px <= self.left + self.width and self.y <= py <= self.y + self.height

    def overlaps(self, other: "LabelPlacement", padding: float = LABEL_PADDING) -> bool:
        return not (
            self.left + self.width + padding < other.left
            or self.left > other.left + other.width + padding
            or self.y + self.height + padding < other.y
            or self.y > other.y + other.height + padding
        )


@dataclass
class FeatureArrow:
    """Curve from a feature annotation (`+PAST->1`) down to a leaf."""
    from_x: float
    from_y: float
    to_x: float
    to_y: float
    dotted: bool = False

    @property
    def controls(self) -> tuple[float, float, float, float]:
        return (
            self.from_x, self.from_y + FEATURE_ARROW_BEND,
            self.to_x, self.to_y - FEATURE_ARROW_BEND,
        )


def bezier_point(t: float, p0: float, p1: float, c0: float, c1: float) -> float:
    """One coordinate of a cubic Bezier from p0 to p1 with control points c0, c1."""
    mt = 1 - t
    return mt * mt * mt * p0 + 3 * mt * mt * t * c0 + 3 * mt * t * t * c1 + t * t * t * p1


def anchor_y(leaf: Drawable, font_size: float) -> float:
    """Just below the leaf's label block (and its case line, if any)."""
    y = leaf.top + len(label_lines(leaf.label)) * font_size * LINE_HEIGHT + ANCHOR_MARGIN
    if leaf.case_feature:
        y += font_size * CASE_SCALE + ANCHOR_MARGIN
    return y


def find_max_top_between(drawable: Drawable, left: float, right: float) -> float:
    """Largest top of any leaf whose left edge lies in [left, right]; 0 if none."""
    tops = [d.top for d in drawable.walk() if d.is_leaf and left <= d.left <= right]
    return max(tops, default=0.0)


def route(root: Drawable, font_size: float) -> ArrowSet:
    """Resolve every arrow directive in the tree into a routed Arrow."""
    arrow_set = _route_on(root, root, font_size)
    logger.debug("Routed %d arrow(s), max bottom %.1f", len(arrow_set), arrow_set.max_bottom)
    return arrow_set


def _route_on(root: Drawable, drawable: Drawable, font_size: float) -> ArrowSet:
    arrow_set = ArrowSet()
    for child in drawable.children:
        arrow_set.extend(_route_on(root, child, font_size))

    if not drawable.is_leaf or not drawable.arrows:
        return arrow_set

    for directive in drawable.arrows:
        target = find_target(root, directive.target)
        if target is None:
            logger.debug("Arrow from %r to leaf %d: no such leaf, dropped", drawable.label, directive.target)
            continue
        bottom = BOTTOM_CLEARANCE * find_max_top_between(
            root,
            min(drawable.left, target.left),
            max(drawable.left, target.left),
        )
        arrow_set.add(
            Arrow(
                from_x=drawable.center,
                from_y=anchor_y(drawable, font_size),
                to_x=target.center,
                to_y=anchor_y(target, font_size),
                bottom=bottom,
                ends_to=directive.ends_to,
                ends_from=directive.ends_from,
                label=directive.label or None,
                dotted=directive.dotted,
            )
        )
    return arrow_set


def _overlaps_curve(rect: LabelPlacement, arrow: Arrow) -> bool:
    return any(rect.contains(x, y) for x, y in arrow.samples())


def place_labels(
    arrows: list[Arrow],
    measurer: TextMeasurer,
    font_size: float,
) -> list[Optional[LabelPlacement]]:
    """
    Place each arrow label at the curve midpoint, shifting it down while it hits an earlier
    label or its own curve. Gives up after MAX_LABEL_SHIFTS and keeps the last position.
    Returns one entry per arrow (None for unlabelled arrows).
    """
    placed: list[LabelPlacement] = []
    result: list[Optional[LabelPlacement]] = []
    label_size = font_size * LABEL_SCALE
    shift = font_size * LABEL_SHIFT
    for arrow in arrows:
        if not arrow.label:
            result.append(None)
            continue
        mx, my = arrow.point(0.5)
        rect = LabelPlacement(
            x=mx,
            y=my,
            width=measurer.text_width(arrow.label, label_size),
            height=label_size,
        )
        while any(rect.overlaps(other) for other in placed) or _overlaps_curve(rect, arrow):
            if rect.attempts >= MAX_LABEL_SHIFTS:
                rect.settled = False
                break
            rect.y += shift
            rect.attempts += 1
        if not rect.settled:
            logger.debug("Label %r still overlaps after %d shifts", arrow.label, rect.attempts)
        placed.append(rect)
        result.append(rect)
    return result


def route_feature_arrows(root: Drawable, measurer: TextMeasurer, font_size: float) -> list[FeatureArrow]:
    """Arrows from `+FEAT->N` / `+FEAT.>N` annotations to the N-th leaf."""
    out: list[FeatureArrow] = []
    feature_size = font_size * FEATURE_SCALE
    for drawable in root.walk():
        if not drawable.features:
            continue
        text = feature_text(drawable.features)
        text_left = drawable.center - measurer.text_width(text, feature_size) / 2
        y = drawable.top + ANCHOR_MARGIN + len(label_lines(drawable.label)) * font_size * LINE_HEIGHT
        for i, feature in enumerate(drawable.features):
            name, op, index = parse_feature(feature)
            if op is None or index is None:
                continue
            target = find_target(root, index)
            if target is None:
                logger.debug("Feature arrow %r: no leaf %d, dropped", feature, index)
                continue
            # Text drawn before this feature's name: "[" plus the earlier names.
            prefix = "[" + "".join(parse_feature(f)[0] + ", " for f in drawable.features[:i])
            x = text_left + measurer.text_width(prefix, feature_size) + measurer.text_width(name, feature_size) / 2
            out.append(FeatureArrow(x, y, target.center, target.top, dotted=op == ".>"))
    return out
