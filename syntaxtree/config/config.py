"""
Load .env from project root; expose SYNTAXTREE_* settings and render options.
Call load_env() before using in main or other modules.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

DEFAULT_FONT_SIZE = 16
DEFAULT_ARROW_COLOR = "Purple"


class Alignment(str, Enum):
    """Vertical placement policy for leaves and branches."""
    TOP_ALIGNED = "top"
    LEAVES_ALIGNED = "leaves"
    BOTTOM_ALIGNED = "bottom"


def _project_root() -> Path:
    """Project root (directory containing syntaxtree/, main.py)."""
    p = Path(__file__).resolve()
    # First of config/, syntaxtree/ or their parent holding main.py or .env
    for _ in range(3):
        p = p.parent
        if (p / "main.py").is_file() or (p / ".env").is_file():
            return p
    return Path.cwd()


def load_env() -> None:
    """Load env vars from project root .env if present."""
    root = _project_root()
    env_file = root / ".env"
    if not env_file.is_file():
        return
    for line in env_file.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        k, _, v = line.partition("=")
        k, v = k.strip(), v.strip().strip("'\"")
        if k and v:
            os.environ.setdefault(k, v)


def get_output_dir() -> Path:
    """Where rendered diagrams go; default <project_root>/output."""
    load_env()
    out_dir = os.environ.get("SYNTAXTREE_OUTPUT_DIR")
    if out_dir:
        return Path(out_dir)
    return _project_root() / "output"


def get_font_path() -> str | None:
    """TrueType font for labels (SYNTAXTREE_FONT_PATH). None: Pillow default font."""
    load_env()
    return os.environ.get("SYNTAXTREE_FONT_PATH") or None


def get_font_size() -> int:
    """Label font size in pixels (SYNTAXTREE_FONT_SIZE). Default: 16."""
    load_env()
    raw = os.environ.get("SYNTAXTREE_FONT_SIZE")
    if not raw:
        return DEFAULT_FONT_SIZE
    try:
        size = int(raw)
    except ValueError:
        raise ValueError(f"SYNTAXTREE_FONT_SIZE must be an integer, got {raw!r}") from None
    if size <= 0:
        raise ValueError(f"SYNTAXTREE_FONT_SIZE must be positive, got {size}")
    return size


def get_arrow_color() -> str:
    """Arrow colour used when node colouring is off (SYNTAXTREE_ARROW_COLOR)."""
    load_env()
    return os.environ.get("SYNTAXTREE_ARROW_COLOR", DEFAULT_ARROW_COLOR)


@dataclass
class RenderOptions:
    """Options recognized by the layout, routing and drawing stages."""
    alignment: Alignment = Alignment.TOP_ALIGNED
    auto_subscript: bool = True
    vertical_scale: float = 1.0
    font_size: int = DEFAULT_FONT_SIZE
    show_triangles: bool = True
    color_nodes: bool = True
    arrow_color: str = DEFAULT_ARROW_COLOR
    font_path: str | None = None

    def __post_init__(self) -> None:
        self.alignment = Alignment(self.alignment)
        if self.vertical_scale <= 0:
            raise ValueError(f"vertical_scale must be positive, got {self.vertical_scale}")
        if self.font_size <= 0:
            raise ValueError(f"font_size must be positive, got {self.font_size}")

    @classmethod
    def from_env(cls, **overrides) -> "RenderOptions":
        """Defaults from SYNTAXTREE_* env vars; keyword overrides win."""
        values = {
            "font_size": get_font_size(),
            "arrow_color": get_arrow_color(),
            "font_path": get_font_path(),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
