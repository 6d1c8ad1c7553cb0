"""Layout command - inspect computed component positions."""

from __future__ import annotations

import json
from pathlib import Path

from rich.console import Console
from rich.table import Table

from ..map import layout
from ..models import PlacedGraph
from ..render import placed_graph_to_dict
from .common import parse_block, print_parse_errors, read_document, select_block


def run_layout(input_path: Path, *, block: int = 1, output_json: bool = False) -> int:
    """Print the placed components of one map.

    Returns:
        Exit code (0 = success, 1 = parse errors)
    """
    console = Console(stderr=True)

    document = read_document(input_path)
    parsed = parse_block(document, select_block(document, block))
    if parsed.graph is None:
        print_parse_errors(console, document, parsed)
        return 1

    placed = layout(parsed.graph)

    if output_json:
        print(json.dumps(placed_graph_to_dict(placed), indent=2))
    else:
        _print_table(placed, console=Console())
    return 0


def _print_table(placed: PlacedGraph, *, console: Console) -> None:
    table = Table(title=placed.title or "Component positions")
    table.add_column("Component", style="bold")
    table.add_column("Stage")
    table.add_column("Anchor", justify="center")
    table.add_column("Layer", justify="right")
    table.add_column("x", justify="right")
    table.add_column("y", justify="right")

    for c in placed.components:
        table.add_row(
            c.name,
            c.stage.label,
            "✓" if c.is_anchor else "",
            str(c.layer),
            f"{c.x:.4f}",
            f"{c.y:.4f}",
        )

    console.print(table)
    console.print(
        f"{len(placed.components)} components, {len(placed.dependencies)} dependencies, "
        f"{len(placed.evolutions)} evolutions, {placed.max_layer + 1} layers",
        style="dim",
    )
