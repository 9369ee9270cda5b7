"""Config: load .env, expose SYNTAXTREE_* settings and RenderOptions."""
from .config import (
    Alignment,
    RenderOptions,
    load_env,
    get_output_dir,
    get_font_path,
    get_font_size,
    get_arrow_color,
)

__all__ = [
    "Alignment",
    "RenderOptions",
    "load_env",
    "get_output_dir",
    "get_font_path",
    "get_font_size",
    "get_arrow_color",
]
