"""
Layout debug: HTML preview of drawable nodes (label, depth, left/top, width) and routed arrows.
"""
from __future__ import annotations

import html
from pathlib import Path
from typing import Optional

from .arrows import ArrowSet, LabelPlacement
from .drawable import Drawable


def _esc(s: object) -> str:
    return html.escape(str(s))


def _num(v: float) -> str:
    return f"{v:.1f}"


def write_layout_preview_html(
    phrase: str,
    root: Drawable,
    arrow_set: ArrowSet,
    out_path: Path | str,
    *,
    placements: Optional[list[Optional[LabelPlacement]]] = None,
) -> Path:
    """
    Write layout_preview.html: one table of drawables (pre-order) and one of arrows.
    """
    out_path = Path(out_path)
    parts = []
    parts.append("""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8"/>
<meta name="viewport" content="width=device-width, initial-scale=1"/>
<title>Syntax tree layout</title>
<style>
  body { font-family: sans-serif; margin: 1rem; background: #fafafa; }
  h1 { font-size: 1.2rem; }
  h2 { font-size: 1rem; margin-top: 1.5rem; }
  table { border-collapse: collapse; width: 100%; max-width: 900px; background: #fff; box-shadow: 0 1px 3px rgba(0,0,0,0.1); }
  th, td { border: 1px solid #ddd; padding: 0.4rem 0.6rem; text-align: left; }
  th { background: #333; color: #fff; }
  tr:nth-child(even) { background: #f9f9f9; }
  .num { font-variant-numeric: tabular-nums; }
  .leaf { color: #CC0000; }
  .branch { color: #0000CC; }
  code { background: #eee; padding: 0.1em 0.3em; border-radius: 3px; }
</style>
</head>
<body>
<h1>Syntax tree layout</h1>
""")
    parts.append(f"<p><code>{_esc(phrase)}</code></p>\n")

    nodes = [d for d in root.walk() if not d.is_root]
    parts.append(f"<h2>Nodes ({len(nodes)})</h2>")
    parts.append("""<table>
<thead><tr><th>#</th><th>label</th><th>script</th><th>depth</th><th>left</th><th>top</th><th>width</th><th>features</th><th>case</th></tr></thead>
<tbody>
""")
    for i, d in enumerate(nodes):
        css = "leaf" if d.is_leaf else "branch"
        script = d.subscript and f"_{d.subscript}" or d.superscript and f"^{d.superscript}" or ""
        parts.append(
            f'<tr><td class="num">{i}</td><td class="{css}">{_esc(d.label)}</td><td>{_esc(script)}</td>'
            f'<td class="num">{d.depth}</td><td class="num">{_num(d.left)}</td><td class="num">{_num(d.top)}</td>'
            f'<td class="num">{_num(d.width)}</td><td>{_esc(", ".join(d.features))}</td>'
            f'<td>{_esc(d.case_feature or "")}</td></tr>\n'
        )
    parts.append("</tbody></table>\n")

    parts.append(f"<h2>Arrows ({len(arrow_set)}, max bottom {_num(arrow_set.max_bottom)})</h2>")
    parts.append("""<table>
<thead><tr><th>#</th><th>from</th><th>to</th><th>bottom</th><th>ends</th><th>dotted</th><th>label</th><th>label at</th></tr></thead>
<tbody>
""")
    for i, a in enumerate(arrow_set.arrows):
        ends = ("<" if a.ends_from else "-") + (">" if a.ends_to else "-")
        placement = placements[i] if placements and i < len(placements) else None
        at = ""
        if placement is not None:
            at = f"{_num(placement.x)}, {_num(placement.y)} ({placement.attempts} shift(s))"
        parts.append(
            f'<tr><td class="num">{i}</td><td class="num">{_num(a.from_x)}, {_num(a.from_y)}</td>'
            f'<td class="num">{_num(a.to_x)}, {_num(a.to_y)}</td><td class="num">{_num(a.bottom)}</td>'
            f"<td><code>{_esc(ends)}</code></td><td>{'yes' if a.dotted else ''}</td>"
            f'<td>{_esc(a.label or "")}</td><td class="num">{_esc(at)}</td></tr>\n'
        )
    parts.append("</tbody></table>\n")
    parts.append("</body></html>")
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text("".join(parts), encoding="utf-8")
    return out_path
