"""Check command - report parse errors and layout findings."""

from __future__ import annotations

import json
from pathlib import Path

from rich.console import Console
from rich.table import Table

from ..checks import LayoutFinding, audit_layout
from ..config import find_config, load_render_options
from ..extract import MapDocument
from ..map import layout
from ..render import parse_errors_to_list
from .common import ParsedBlock, parse_block, print_parse_errors, read_document, select_block


def run_check(
    input_path: Path,
    *,
    block: int | None = None,
    output_json: bool = False,
    config_path: Path | None = None,
) -> int:
    """Check one block (or every block) of a map file.

    Args:
        input_path: ``.wardley`` source or Markdown note
        block: 1-based block number; None checks all blocks
        output_json: Output results as JSON instead of human-readable
        config_path: Render options YAML used for label checks (default: wardley.yml beside the input)

    Returns:
        Exit code (0 = clean, 1 = parse errors or layout errors found)
    """
    console = Console(stderr=True)

    document = read_document(input_path)
    blocks = document.blocks if block is None else [select_block(document, block)]
    options = load_render_options(config_path or find_config(input_path))

    reports: list[tuple[ParsedBlock, list[LayoutFinding]]] = []
    for map_block in blocks:
        parsed = parse_block(document, map_block)
        findings = audit_layout(layout(parsed.graph), options) if parsed.graph is not None else []
        reports.append((parsed, findings))

    failed = any(parsed.errors or any(f.level == "error" for f in findings) for parsed, findings in reports)

    if output_json:
        _output_json(document, reports)
    else:
        _print_human_output(console, document, reports)

    return 1 if failed else 0


def _output_json(document: MapDocument, reports: list[tuple[ParsedBlock, list[LayoutFinding]]]) -> None:
    payload = {
        "path": str(document.path),
        "blocks": [
            {
                "block": parsed.block.index,
                "start_line": parsed.block.start_line,
                "valid": parsed.graph is not None,
                "errors": parse_errors_to_list(parsed.errors),
                "findings": [
                    {"level": f.level, "rule": f.rule, "component": f.component, "message": f.message}
                    for f in findings
                ],
            }
            for parsed, findings in reports
        ],
    }
    print(json.dumps(payload, indent=2))


def _print_human_output(
    console: Console,
    document: MapDocument,
    reports: list[tuple[ParsedBlock, list[LayoutFinding]]],
) -> None:
    level_styles = {"error": "red", "warning": "yellow", "info": "blue"}

    for parsed, findings in reports:
        if parsed.errors:
            print_parse_errors(console, document, parsed)
            continue

        label = f"block {parsed.block.index}" if len(document.blocks) > 1 else document.path.name
        if not findings:
            graph = parsed.graph
            console.print(
                f"✓ {label}: {len(graph.components)} components, "
                f"{len(graph.dependencies)} dependencies, {len(graph.evolutions)} evolutions",
                style="green",
            )
            continue

        table = Table(title=f"Layout findings ({label})")
        table.add_column("Level")
        table.add_column("Rule")
        table.add_column("Component")
        table.add_column("Message")
        for f in findings:
            style = level_styles.get(f.level, "")
            table.add_row(f"[{style}]{f.level.upper()}[/]", f.rule, f.component or "", f.message)
        console.print(table)
