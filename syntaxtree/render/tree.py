"""
Draw a parsed syntax tree on a canvas: labels, sub/superscripts, case and feature brackets,
connectors, movement arrows with placed labels, and feature arrows.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from ..config import RenderOptions
from ..layout import (
    ArrowSet,
    Drawable,
    FeatureArrow,
    LabelPlacement,
    case_text,
    feature_text,
    get_max_depth,
    label_lines,
    layout,
    place_labels,
    route,
    route_feature_arrows,
)
from ..layout.arrows import FEATURE_SCALE, LABEL_SCALE, LINE_HEIGHT
from ..layout.drawable import CASE_SCALE, SCRIPT_SCALE
from ..notation import SyntaxNode, parse_phrase
from .canvas import PillowCanvas
from .svg_canvas import SvgCanvas

logger = logging.getLogger(__name__)

LEAF_COLOR = "#CC0000"
BRANCH_COLOR = "#0000CC"
PLAIN_COLOR = "black"
CASE_COLOR = "#0000CC"
FEATURE_ARROW_COLOR = "#008080"
EXTRA_HEIGHT = 50

# High-contrast colours cycled over arrows when node colouring is on.
ARROW_PALETTE = [
    "#e6194b", "#3cb44b", "#4363d8", "#f58231", "#911eb4", "#46f0f0", "#f032e6", "#bcf60c",
    "#008080", "#e6beff", "#9a6324", "#800000", "#808000", "#000075", "#808080", "#000000",
]


@dataclass
class Diagram:
    """Everything computed for one render."""
    syntax_tree: SyntaxNode
    root: Drawable
    arrows: ArrowSet
    placements: list[Optional[LabelPlacement]] = field(default_factory=list)
    feature_arrows: list[FeatureArrow] = field(default_factory=list)
    width: float = 0.0
    height: float = 0.0


class TreeRenderer:
    """Runs layout and routing for a syntax tree and issues the draw calls on canvas."""

    def __init__(self, canvas, options: Optional[RenderOptions] = None) -> None:
        self.canvas = canvas
        self.options = options or RenderOptions()

    @property
    def font_size(self) -> float:
        return self.options.font_size

    def draw(self, syntax_tree: SyntaxNode) -> Diagram:
        opts = self.options
        self.canvas.set_font_size(opts.font_size)
        drawables = layout(syntax_tree, self.canvas, opts)
        max_depth = get_max_depth(drawables)
        arrow_set = route(drawables, opts.font_size)

        height = (max_depth + 1) * (opts.font_size * opts.vertical_scale * 3)
        if drawables.has_arrows and arrow_set.max_bottom > 0:
            arrow_scaler = (math.sqrt(arrow_set.max_bottom) / arrow_set.max_bottom) ** (1 / 50)
            height = max(height, arrow_set.max_bottom * arrow_scaler)
        width = drawables.width + 1
        self.canvas.resize(width, height + EXTRA_HEIGHT)
        self.canvas.translate(0, opts.font_size / 2)

        for child in drawables.children:
            self._draw_node(child)
        feature_arrows = route_feature_arrows(drawables, self.canvas, opts.font_size)
        self._draw_feature_arrows(feature_arrows)
        placements = self._draw_arrows(arrow_set)
        logger.debug("Drew %d node(s), %d arrow(s)", sum(1 for _ in drawables.walk()) - 1, len(arrow_set))
        return Diagram(
            syntax_tree=syntax_tree,
            root=drawables,
            arrows=arrow_set,
            placements=placements,
            feature_arrows=feature_arrows,
            width=width,
            height=height + EXTRA_HEIGHT,
        )

    def _draw_node(self, drawable: Drawable) -> None:
        self._draw_label(drawable)
        self._draw_subscript(drawable)
        for child in drawable.children:
            self._draw_node(child)
            self._draw_connector(drawable, child)

    def _node_color(self, drawable: Drawable) -> str:
        if not self.options.color_nodes:
            return PLAIN_COLOR
        return LEAF_COLOR if drawable.is_leaf else BRANCH_COLOR

    def _draw_label(self, drawable: Drawable) -> None:
        fs = self.font_size
        canvas = self.canvas
        color = self._node_color(drawable)
        canvas.set_font_size(fs)
        canvas.set_fill_style(color)
        lines = label_lines(drawable.label)
        line_height = fs * LINE_HEIGHT
        base_y = drawable.top + 2
        for i, line in enumerate(lines):
            canvas.text(line, drawable.center, base_y + i * line_height)

        block_height = len(lines) * line_height
        if drawable.is_leaf and drawable.case_feature:
            canvas.set_font_size(fs * CASE_SCALE)
            canvas.set_fill_style(CASE_COLOR)
            canvas.text(case_text(drawable.case_feature), drawable.center, base_y + block_height)
            canvas.set_fill_style(color)
            block_height += fs * CASE_SCALE

        if drawable.features:
            canvas.set_font_size(fs * FEATURE_SCALE)
            canvas.text(feature_text(drawable.features), drawable.center, base_y + block_height)
        canvas.set_font_size(fs)

    def _draw_subscript(self, drawable: Drawable) -> None:
        script = drawable.subscript or drawable.superscript
        if not script:
            return
        fs = self.font_size
        offset = 1 + drawable.center + self.canvas.text_width(drawable.label, fs) / 2
        self.canvas.set_font_size(fs * SCRIPT_SCALE)
        offset += self.canvas.text_width(script) / 2
        y = drawable.top + fs / 2 if drawable.subscript else drawable.top
        self.canvas.text(script, offset, y)
        self.canvas.set_font_size(fs)

    def _draw_connector(self, parent: Drawable, child: Drawable) -> None:
        fs = self.font_size
        self.canvas.set_stroke_style(PLAIN_COLOR)
        self.canvas.set_line_width(1)
        self.canvas.set_dashed(False)
        top = parent.top + fs + 2
        bottom = child.top - 3
        if self.options.show_triangles and child.is_leaf and " " in child.label:
            text_width = self.canvas.text_width(label_lines(child.label)[0], fs)
            self.canvas.triangle(
                parent.center, top,
                child.center + text_width / 2 - 4, bottom,
                child.center - text_width / 2 + 4, bottom,
            )
        else:
            self.canvas.line(parent.center, top, child.center, bottom)

    def _draw_arrow_head(self, x: float, y: float) -> None:
        cx = self.font_size / 4
        cy = self.font_size / 2
        self.canvas.triangle(x, y, x - cx, y + cy, x + cx, y + cy, True)

    def _draw_arrows(self, arrow_set: ArrowSet) -> list[Optional[LabelPlacement]]:
        canvas = self.canvas
        placements = place_labels(arrow_set.arrows, canvas, self.font_size)
        for idx, (arrow, placement) in enumerate(zip(arrow_set.arrows, placements)):
            if self.options.color_nodes:
                color = ARROW_PALETTE[idx % len(ARROW_PALETTE)]
            else:
                color = self.options.arrow_color
            canvas.set_fill_style(color)
            canvas.set_stroke_style(color)
            canvas.set_line_width(2)
            canvas.set_dashed(arrow.dotted)
            canvas.curve(
                arrow.from_x, arrow.from_y, arrow.to_x, arrow.to_y,
                arrow.from_x, arrow.bottom, arrow.to_x, arrow.bottom,
            )
            canvas.set_dashed(False)
            if arrow.ends_to:
                self._draw_arrow_head(arrow.to_x, arrow.to_y)
            if arrow.ends_from:
                self._draw_arrow_head(arrow.from_x, arrow.from_y)
            if placement is not None:
                canvas.set_font_size(self.font_size * LABEL_SCALE)
                canvas.text(arrow.label, placement.x, placement.y)
                canvas.set_font_size(self.font_size)
        return placements

    def _draw_feature_arrows(self, feature_arrows: list[FeatureArrow]) -> None:
        canvas = self.canvas
        for fa in feature_arrows:
            canvas.set_stroke_style(FEATURE_ARROW_COLOR)
            canvas.set_fill_style(FEATURE_ARROW_COLOR)
            canvas.set_line_width(1.5)
            canvas.set_dashed(fa.dotted)
            cx1, cy1, cx2, cy2 = fa.controls
            canvas.curve(fa.from_x, fa.from_y, fa.to_x, fa.to_y, cx1, cy1, cx2, cy2)
            canvas.set_dashed(False)
            self._draw_arrow_head(fa.to_x, fa.to_y)


def make_canvas(out_path: Path | str, options: RenderOptions):
    """PillowCanvas for .png (default), SvgCanvas for .svg."""
    if Path(out_path).suffix.lower() == ".svg":
        return SvgCanvas(font_path=options.font_path, font_size=options.font_size)
    return PillowCanvas(font_path=options.font_path, font_size=options.font_size)


def render_phrase(
    phrase: str,
    out_path: Path | str,
    options: Optional[RenderOptions] = None,
) -> tuple[Path, Diagram]:
    """
    Parse phrase, draw it and save to out_path (PNG or SVG by suffix).
    Raises ParseError on bad input; nothing is written in that case.
    """
    options = options or RenderOptions()
    syntax_tree = parse_phrase(phrase)
    canvas = make_canvas(out_path, options)
    diagram = TreeRenderer(canvas, options).draw(syntax_tree)
    saved = canvas.save(out_path)
    logger.info("Rendered %s (%dx%d)", saved.name, *canvas.size)
    return saved, diagram
