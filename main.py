#!/usr/bin/env python3
"""
Root entry: labelled bracket phrase -> syntax tree diagram (PNG or SVG).
Supports --file (read the phrase from a file), --json (dump the parsed tree) and --debug (HTML layout preview).
"""
from __future__ import annotations

import argparse
import json
import logging
import re
import sys
import time
from pathlib import Path

_ROOT = Path(__file__).resolve().parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from syntaxtree.config import Alignment, RenderOptions, load_env, get_output_dir
from syntaxtree.notation import ParseError
from syntaxtree.layout import write_layout_preview_html
from syntaxtree.render import render_phrase

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

OUTPUT_EXTENSIONS = {".png", ".svg"}


def _safe_file_name(phrase: str) -> str:
    """Turn a phrase into a filesystem-safe base name, e.g. '[S [NP John]]' -> 'S_NP_John'."""
    s = re.sub(r'[\[\]/\\:*?"<>|^_.,+{}-]', " ", phrase)
    s = re.sub(r"\s+", "_", s.strip()) or "syntax_tree"
    return s[:80]


def _read_phrase(args: argparse.Namespace) -> str | None:
    if args.file:
        path = Path(args.file)
        if not path.is_file():
            logger.error("Phrase file not found: %s", path)
            return None
        return path.read_text(encoding="utf-8").strip()
    if args.phrase:
        return args.phrase
    logger.error("No phrase given. Pass it as an argument or use --file.")
    return None


def _resolve_output(args: argparse.Namespace, phrase: str) -> Path | None:
    if args.output:
        out_path = Path(args.output)
    else:
        out_path = get_output_dir() / f"{_safe_file_name(phrase)}.png"
    if out_path.suffix.lower() not in OUTPUT_EXTENSIONS:
        logger.error("Unsupported output type %s (supported: %s)", out_path.suffix or "(none)", ", ".join(sorted(OUTPUT_EXTENSIONS)))
        return None
    return out_path


def _options_from_args(args: argparse.Namespace) -> RenderOptions:
    return RenderOptions.from_env(
        alignment=Alignment(args.alignment),
        auto_subscript=not args.no_auto_subscript,
        vertical_scale=args.spacing / 100,
        font_size=args.font_size,
        show_triangles=not args.no_triangles,
        color_nodes=not args.no_color,
        arrow_color=args.arrow_color,
        font_path=args.font,
    )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Draw a syntax tree from labelled bracket notation, e.g. \"[S [NP John][VP [V runs]]]\"."
    )
    parser.add_argument("phrase", nargs="?", default=None, help="Phrase in labelled bracket notation")
    parser.add_argument("--file", metavar="PATH", default=None, help="Read the phrase from a text file")
    parser.add_argument(
        "-o",
        "--output",
        metavar="PATH",
        default=None,
        help="Output image (.png or .svg). Default: output/<phrase>.png",
    )
    parser.add_argument("--font", metavar="TTF", default=None, help="TrueType font for labels")
    parser.add_argument("--font-size", type=int, default=None, help="Label font size in pixels")
    parser.add_argument(
        "--alignment",
        choices=[a.value for a in Alignment],
        default=Alignment.TOP_ALIGNED.value,
        help="top: nodes by depth; leaves: all leaves on the bottom row; bottom: branches pulled down too",
    )
    parser.add_argument("--no-auto-subscript", action="store_true", help="Do not number repeated node labels")
    parser.add_argument("--no-triangles", action="store_true", help="Draw lines instead of triangles above multi-word leaves")
    parser.add_argument("--no-color", action="store_true", help="Draw nodes in black and arrows in --arrow-color")
    parser.add_argument("--arrow-color", default=None, help="Arrow colour used with --no-color (default Purple)")
    parser.add_argument("--spacing", type=float, default=100.0, help="Vertical spacing in percent (default 100)")
    parser.add_argument("--json", action="store_true", help="Also write the parsed tree as JSON next to the image")
    parser.add_argument("--debug", action="store_true", help="Also write an HTML layout preview next to the image")
    args = parser.parse_args(argv)

    load_env()
    phrase = _read_phrase(args)
    if phrase is None:
        return 1
    out_path = _resolve_output(args, phrase)
    if out_path is None:
        return 1
    if args.spacing <= 0:
        logger.error("--spacing must be positive, got %s", args.spacing)
        return 1

    try:
        options = _options_from_args(args)
    except ValueError as e:
        logger.error("%s", e)
        return 1

    t0 = time.perf_counter()
    try:
        saved, diagram = render_phrase(phrase, out_path, options)
    except ParseError as e:
        logger.error("Parse error: %s", e)
        return 1
    except OSError as e:
        logger.error("Failed to write %s: %s", out_path, e)
        return 1
    logger.info(
        "Diagram: %s (%d arrow(s)) in %.2fs",
        saved, len(diagram.arrows), time.perf_counter() - t0,
    )

    if args.json:
        json_path = saved.with_suffix(".json")
        tree = diagram.syntax_tree.to_dict()
        json_path.write_text(json.dumps(tree, ensure_ascii=False, indent=2), encoding="utf-8")
        logger.info("Tree JSON: %s", json_path.name)
    if args.debug:
        try:
            preview = write_layout_preview_html(
                phrase,
                diagram.root,
                diagram.arrows,
                saved.with_name(saved.stem + "_layout.html"),
                placements=diagram.placements,
            )
            logger.info("Debug preview: %s", preview.name)
        except OSError as e:
            logger.warning("Failed to write layout preview: %s", e)
    return 0


if __name__ == "__main__":
    sys.exit(main())
