"""Render: Pillow (PNG) and SVG canvases; draw program for syntax trees."""
from .canvas import PillowCanvas, FontBook, load_font, bezier_points, dash_polyline
from .svg_canvas import SvgCanvas
from .tree import TreeRenderer, Diagram, ARROW_PALETTE, make_canvas, render_phrase

__all__ = [
    "PillowCanvas",
    "FontBook",
    "load_font",
    "bezier_points",
    "dash_polyline",
    "SvgCanvas",
    "TreeRenderer",
    "Diagram",
    "ARROW_PALETTE",
    "make_canvas",
    "render_phrase",
]
