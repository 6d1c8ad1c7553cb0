"""Render command - turn map source into SVG, HTML or JSON."""

from __future__ import annotations

import json
from pathlib import Path

from rich.console import Console

from ..config import find_config, load_render_options
from ..extract import load_document
from ..map import LayoutTracer, LoggingTracer, layout
from ..render import placed_graph_to_dict, render_svg, wrap_html
from .common import parse_block, print_parse_errors, read_document, select_block


def run_render(
    input_path: Path,
    *,
    out: Path | None = None,
    fmt: str = "svg",
    block: int = 1,
    config_path: Path | None = None,
    trace: bool = False,
) -> int:
    """Render one map from ``input_path``.

    Args:
        input_path: ``.wardley`` source or Markdown note with ```wardley blocks
        out: Output file; prints to stdout if None
        fmt: svg|html|json
        block: 1-based block number for Markdown input
        config_path: Render options YAML (default: wardley.yml beside the input, if present)
        trace: Log each layout step

    Returns:
        Exit code (0 = rendered, 1 = parse errors)
    """
    console = Console(stderr=True)

    document = read_document(input_path)
    parsed = parse_block(document, select_block(document, block))
    if parsed.graph is None:
        print_parse_errors(console, document, parsed)
        return 1

    tracer = LoggingTracer() if trace else LayoutTracer()
    placed = layout(parsed.graph, tracer)

    if fmt == "json":
        text = json.dumps(placed_graph_to_dict(placed), indent=2) + "\n"
    else:
        options = load_render_options(config_path or find_config(input_path))
        text = render_svg(placed, options)
        if fmt == "html":
            text = wrap_html(text, title=placed.title or input_path.stem)

    if out:
        out.write_text(text, encoding="utf-8")
        console.print(
            f"Wrote {fmt} for {len(placed.components)} components to {out}", style="green"
        )
    else:
        print(text, end="" if text.endswith("\n") else "\n")

    return 0


def render_file(input_path: Path, out_dir: Path, *, config_path: Path | None = None) -> list[Path]:
    """Render every map in ``input_path`` to SVG files in ``out_dir``.

    Blocks that fail to parse are skipped, as are files with no map at all.
    Returns the written paths.
    """
    document = load_document(input_path)
    if not document.blocks:
        return []
    options = load_render_options(config_path or find_config(input_path))
    out_dir.mkdir(parents=True, exist_ok=True)

    written = []
    for block in document.blocks:
        parsed = parse_block(document, block)
        if parsed.graph is None:
            continue
        suffix = f"-{block.index}" if len(document.blocks) > 1 else ""
        target = out_dir / f"{input_path.stem}{suffix}.svg"
        target.write_text(render_svg(layout(parsed.graph), options), encoding="utf-8")
        written.append(target)
    return written
