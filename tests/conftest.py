"""Pytest configuration and shared fixtures."""
from __future__ import annotations

from typing import Optional

import pytest

# Every character is half the font size wide: 8 px at the default 16 px.
CHAR_RATIO = 0.5


class FixedWidthMeasurer:
    """Deterministic text measurer for layout tests."""

    def __init__(self, font_size: float = 16) -> None:
        self.font_size = font_size

    def text_width(self, text: str, font_size: Optional[float] = None) -> float:
        return len(text) * (font_size or self.font_size) * CHAR_RATIO


class RecordingCanvas(FixedWidthMeasurer):
    """Canvas stand-in that records every draw call with the style active at the time."""

    def __init__(self, font_size: float = 16) -> None:
        super().__init__(font_size)
        self.calls: list[tuple] = []
        self.fill_style = "black"
        self.stroke_style = "black"
        self.dashed = False
        self.line_width = 1.0
        self.size = (0, 0)

    def resize(self, width, height):
        self.size = (width, height)
        self.calls.append(("resize", width, height))

    def translate(self, dx, dy):
        self.calls.append(("translate", dx, dy))

    def set_font_size(self, size):
        self.font_size = size

    def set_fill_style(self, color):
        self.fill_style = color

    def set_stroke_style(self, color):
        self.stroke_style = color

    def set_line_width(self, width):
        self.line_width = width

    def set_dashed(self, dashed):
        self.dashed = dashed

    def text(self, text, x, y):
        self.calls.append(("text", text, x, y, self.fill_style, self.font_size))

    def line(self, x1, y1, x2, y2):
        self.calls.append(("line", x1, y1, x2, y2, self.stroke_style))

    def triangle(self, x1, y1, x2, y2, x3, y3, fill=False):
        color = self.fill_style if fill else self.stroke_style
        self.calls.append(("triangle", (x1, y1), (x2, y2), (x3, y3), fill, color))

    def curve(self, x1, y1, x2, y2, cx1, cy1, cx2, cy2):
        self.calls.append(("curve", (x1, y1), (x2, y2), (cx1, cy1), (cx2, cy2), self.stroke_style, self.dashed))

    def of(self, kind: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == kind]


@pytest.fixture
def measurer() -> FixedWidthMeasurer:
    return FixedWidthMeasurer()


@pytest.fixture
def recording_canvas() -> RecordingCanvas:
    return RecordingCanvas()


@pytest.fixture(autouse=True)
def isolate_env(monkeypatch):
    """Avoid picking up SYNTAXTREE_* settings from the environment in tests."""
    for key in (
        "SYNTAXTREE_FONT_PATH",
        "SYNTAXTREE_FONT_SIZE",
        "SYNTAXTREE_ARROW_COLOR",
        "SYNTAXTREE_OUTPUT_DIR",
    ):
        monkeypatch.delenv(key, raising=False)
