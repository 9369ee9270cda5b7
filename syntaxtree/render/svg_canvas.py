"""
Vector drawing surface: same primitives as PillowCanvas, exported as an SVG document.
Text widths are measured with Pillow fonts so layout matches the PNG output.
"""
from __future__ import annotations

import html
import math
from pathlib import Path
from typing import Optional

from .canvas import FontBook


def _svg_esc(s: str) -> str:
    return html.escape(str(s), quote=True)


def _n(v: float) -> str:
    return f"{v:.2f}".rstrip("0").rstrip(".")


class SvgCanvas:
    """Collects SVG elements; text is centred on x with y at the top (dominant-baseline hanging)."""

    def __init__(
        self,
        width: int = 1,
        height: int = 1,
        *,
        font_path: Optional[str] = None,
        font_size: float = 16,
        font_family: str = "sans-serif",
        background: str = "white",
    ) -> None:
        self.fonts = FontBook(font_path)
        self.font_size = font_size
        self.font_family = font_family
        self.background = background
        self.fill_style = "black"
        self.stroke_style = "black"
        self.line_width = 1.0
        self.dashed = False
        self.resize(width, height)

    def resize(self, width: float, height: float) -> None:
        self.width = max(1, math.ceil(width))
        self.height = max(1, math.ceil(height))
        self.elements: list[str] = []
        self.offset = (0.0, 0.0)

    def translate(self, dx: float, dy: float) -> None:
        self.offset = (self.offset[0] + dx, self.offset[1] + dy)

    def set_font_size(self, size: float) -> None:
        self.font_size = size

    def set_fill_style(self, color: str) -> None:
        self.fill_style = color

    def set_stroke_style(self, color: str) -> None:
        self.stroke_style = color

    def set_line_width(self, width: float) -> None:
        self.line_width = width

    def set_dashed(self, dashed: bool) -> None:
        self.dashed = dashed

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)

    def text_width(self, text: str, font_size: Optional[float] = None) -> float:
        return self.fonts.width(text, font_size or self.font_size)

    def _xy(self, x: float, y: float) -> str:
        return f"{_n(x + self.offset[0])} {_n(y + self.offset[1])}"

    def _stroke_attrs(self) -> str:
        dash = ' stroke-dasharray="4 2"' if self.dashed else ""
        return f'stroke="{_svg_esc(self.stroke_style)}" stroke-width="{_n(self.line_width)}"{dash}'

    def text(self, text: str, x: float, y: float) -> None:
        if not text:
            return
        self.elements.append(
            f'<text x="{_n(x + self.offset[0])}" y="{_n(y + self.offset[1])}" text-anchor="middle" '
            f'dominant-baseline="hanging" font-family="{_svg_esc(self.font_family)}" '
            f'font-size="{_n(self.font_size)}" fill="{_svg_esc(self.fill_style)}">{_svg_esc(text)}</text>'
        )

    def line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        self.elements.append(f'<path d="M {self._xy(x1, y1)} L {self._xy(x2, y2)}" fill="none" {self._stroke_attrs()}/>')

    def triangle(self, x1: float, y1: float, x2: float, y2: float, x3: float, y3: float, fill: bool = False) -> None:
        points = " ".join(self._xy(x, y).replace(" ", ",") for x, y in ((x1, y1), (x2, y2), (x3, y3)))
        if fill:
            color = _svg_esc(self.fill_style)
            self.elements.append(f'<polygon points="{points}" fill="{color}" stroke="{color}"/>')
        else:
            self.elements.append(
                f'<polygon points="{points}" fill="none" stroke="{_svg_esc(self.stroke_style)}" '
                f'stroke-width="{_n(self.line_width)}"/>'
            )

    def curve(
        self,
        x1: float, y1: float, x2: float, y2: float,
        cx1: float, cy1: float, cx2: float, cy2: float,
    ) -> None:
        d = f"M {self._xy(x1, y1)} C {self._xy(cx1, cy1)}, {self._xy(cx2, cy2)}, {self._xy(x2, y2)}"
        self.elements.append(f'<path d="{d}" fill="none" {self._stroke_attrs()}/>')

    def to_svg(self) -> str:
        body = "\n  ".join(self.elements)
        return f'''<?xml version="1.0" encoding="UTF-8"?>
<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 {self.width} {self.height}" width="{self.width}" height="{self.height}">
  <rect width="100%" height="100%" fill="{_svg_esc(self.background)}"/>
  {body}
</svg>
'''

    def save(self, out_path: Path | str) -> Path:
        out_path = Path(out_path)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(self.to_svg(), encoding="utf-8")
        return out_path
