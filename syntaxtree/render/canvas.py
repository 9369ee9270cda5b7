"""
Raster drawing surface on Pillow: text, lines, triangles, cubic Bezier curves; PNG export.
"""
from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import List, Optional, Tuple

from PIL import Image, ImageDraw, ImageFont

logger = logging.getLogger(__name__)

Point = Tuple[float, float]

FONT_CANDIDATES = [
    "/System/Library/Fonts/Supplemental/Arial Unicode.ttf",
    "/System/Library/Fonts/Helvetica.ttc",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/noto/NotoSans-Regular.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    "C:/Windows/Fonts/arial.ttf",
]
DASH_PATTERN = (4, 2)
CURVE_STEPS = 48


def load_font(size: float, font_path: Optional[str] = None):
    """TrueType font at size: font_path if given, else the first system font found, else Pillow's default."""
    candidates = [font_path] if font_path else FONT_CANDIDATES
    for try_path in candidates:
        try:
            return ImageFont.truetype(try_path, size)
        except (OSError, IOError):
            continue
    if font_path:
        logger.warning("Font %s could not be loaded, using Pillow default", font_path)
    return ImageFont.load_default(size=size)


class FontBook:
    """Fonts cached per size; measures text width in pixels."""

    def __init__(self, font_path: Optional[str] = None) -> None:
        self.font_path = font_path
        self._fonts: dict[float, object] = {}

    def font(self, size: float):
        size = round(size, 2)
        if size not in self._fonts:
            self._fonts[size] = load_font(size, self.font_path)
        return self._fonts[size]

    def width(self, text: str, size: float) -> float:
        if not text:
            return 0.0
        return float(self.font(size).getlength(text))


def bezier_points(p0: Point, p1: Point, c0: Point, c1: Point, steps: int = CURVE_STEPS) -> List[Point]:
    """Polyline approximation of the cubic Bezier p0 -> p1 with control points c0, c1."""
    out = []
    for i in range(steps + 1):
        t = i / steps
        mt = 1 - t
        a, b, c, d = mt * mt * mt, 3 * mt * mt * t, 3 * mt * t * t, t * t * t
        out.append((
            a * p0[0] + b * c0[0] + c * c1[0] + d * p1[0],
            a * p0[1] + b * c0[1] + c * c1[1] + d * p1[1],
        ))
    return out


def dash_polyline(points: List[Point], pattern: Tuple[float, float] = DASH_PATTERN) -> List[Tuple[Point, Point]]:
    """Split a polyline into the 'on' segments of a dash pattern."""
    on_len, off_len = pattern
    segments: List[Tuple[Point, Point]] = []
    drawing, remaining = True, on_len
    for (x1, y1), (x2, y2) in zip(points, points[1:]):
        seg_len = math.hypot(x2 - x1, y2 - y1)
        pos = 0.0
        while seg_len - pos > 1e-9:
            step = min(remaining, seg_len - pos)
            t0, t1 = pos / seg_len, (pos + step) / seg_len
            if drawing:
                segments.append((
                    (x1 + (x2 - x1) * t0, y1 + (y2 - y1) * t0),
                    (x1 + (x2 - x1) * t1, y1 + (y2 - y1) * t1),
                ))
            pos += step
            remaining -= step
            if remaining <= 1e-9:
                drawing = not drawing
                remaining = on_len if drawing else off_len
    return segments


class PillowCanvas:
    """
    Canvas primitives over a Pillow image. Text is drawn centred on x with y at the top of the glyph box.
    """

    def __init__(
        self,
        width: int = 1,
        height: int = 1,
        *,
        font_path: Optional[str] = None,
        font_size: float = 16,
        background: str = "white",
    ) -> None:
        self.fonts = FontBook(font_path)
        self.font_size = font_size
        self.background = background
        self.fill_style = "black"
        self.stroke_style = "black"
        self.line_width = 1.0
        self.dashed = False
        self.resize(width, height)

    # state

    def resize(self, width: float, height: float) -> None:
        self.image = Image.new("RGB", (max(1, math.ceil(width)), max(1, math.ceil(height))), self.background)
        self.draw = ImageDraw.Draw(self.image)
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
    def size(self) -> Tuple[int, int]:
        return self.image.size

    # measurement

    def text_width(self, text: str, font_size: Optional[float] = None) -> float:
        return self.fonts.width(text, font_size or self.font_size)

    # drawing

    def _xy(self, x: float, y: float) -> Point:
        return (x + self.offset[0], y + self.offset[1])

    def _stroke_width(self) -> int:
        return max(1, round(self.line_width))

    def text(self, text: str, x: float, y: float) -> None:
        if not text:
            return
        left = x - self.text_width(text) / 2
        self.draw.text(self._xy(left, y), text, fill=self.fill_style, font=self.fonts.font(self.font_size))

    def line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        self._polyline([(x1, y1), (x2, y2)])

    def triangle(self, x1: float, y1: float, x2: float, y2: float, x3: float, y3: float, fill: bool = False) -> None:
        xy = [self._xy(x1, y1), self._xy(x2, y2), self._xy(x3, y3)]
        if fill:
            self.draw.polygon(xy, fill=self.fill_style, outline=self.fill_style)
        else:
            self.draw.polygon(xy, outline=self.stroke_style)

    def curve(
        self,
        x1: float, y1: float, x2: float, y2: float,
        cx1: float, cy1: float, cx2: float, cy2: float,
    ) -> None:
        self._polyline(bezier_points((x1, y1), (x2, y2), (cx1, cy1), (cx2, cy2)))

    def _polyline(self, points: List[Point]) -> None:
        width = self._stroke_width()
        if self.dashed:
            for a, b in dash_polyline(points):
                self.draw.line([self._xy(*a), self._xy(*b)], fill=self.stroke_style, width=width)
            return
        self.draw.line([self._xy(*p) for p in points], fill=self.stroke_style, width=width, joint="curve")

    # export

    def save(self, out_path: Path | str) -> Path:
        out_path = Path(out_path)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        self.image.save(out_path, "PNG")
        return out_path
