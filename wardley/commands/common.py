"""Helpers shared by the map commands."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path

import click
from rich.console import Console

from ..extract import MapBlock, MapDocument, load_document
from ..map import ParseError, parse
from ..models import DeclaredGraph


@dataclass
class ParsedBlock:
    block: MapBlock
    graph: DeclaredGraph | None
    errors: list[ParseError]


def read_document(path: Path) -> MapDocument:
    """Load a file and insist it holds at least one map."""
    document = load_document(path)
    if not document.blocks:
        raise click.ClickException(f"No ```wardley code blocks found in {path}")
    return document


def select_block(document: MapDocument, number: int) -> MapBlock:
    if not 1 <= number <= len(document.blocks):
        raise click.ClickException(
            f"{document.path} has {len(document.blocks)} map block(s); --block {number} is out of range"
        )
    return document.blocks[number - 1]


def parse_block(document: MapDocument, block: MapBlock) -> ParsedBlock:
    """Parse one block, falling back to the document's frontmatter title."""
    graph, errors = parse(block.source)
    if graph is not None and graph.title is None and document.title:
        graph = replace(graph, title=document.title)
    return ParsedBlock(block=block, graph=graph, errors=errors)


def print_parse_errors(console: Console, document: MapDocument, parsed: ParsedBlock) -> None:
    multi = len(document.blocks) > 1 or parsed.block.start_line != 1
    where = f" (block {parsed.block.index})" if len(document.blocks) > 1 else ""
    console.print(f"✗ Parse errors in {document.path}{where}:", style="bold red")
    for error in parsed.errors:
        location = f"Line {error.line}"
        if multi:
            location += f" (file line {parsed.block.file_line(error.line)})"
        console.print(f"  {location}: [{error.kind.value}] {error.message}", markup=False, highlight=False)
