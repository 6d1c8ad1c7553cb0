"""
Convert map parse errors to LSP diagnostics and hover text.

Everything here is a pure function of a document's path and text, so the
server only wires these into protocol handlers.
"""

from __future__ import annotations

from pathlib import Path

from lsprotocol import types as lsp

from ..extract import load_document
from ..map import layout, parse

SOURCE = "wardley"


def diagnostics_for_document(path: Path, content: str) -> list[lsp.Diagnostic]:
    """One Error diagnostic per parse error, across every map block in the file."""
    document = load_document(path, content)
    lines = content.split("\n")

    diagnostics = []
    for block in document.blocks:
        _, errors = parse(block.source)
        for error in errors:
            line = block.file_line(error.line) - 1
            length = len(lines[line]) if 0 <= line < len(lines) else 0
            diagnostics.append(
                lsp.Diagnostic(
                    range=lsp.Range(
                        start=lsp.Position(line=line, character=0),
                        end=lsp.Position(line=line, character=length),
                    ),
                    message=error.message,
                    severity=lsp.DiagnosticSeverity.Error,
                    source=SOURCE,
                    code=error.kind.value,
                )
            )
    return diagnostics


def hover_for_position(path: Path, content: str, line: int, character: int) -> str | None:
    """Describe the component whose name spans the 0-based position, if any."""
    lines = content.split("\n")
    if not 0 <= line < len(lines):
        return None
    text = lines[line]

    document = load_document(path, content)
    for block in document.blocks:
        block_line = (line + 1) - block.start_line + 1
        if not 1 <= block_line <= len(block.source.split("\n")):
            continue

        graph, _ = parse(block.source)
        if graph is None:
            return None
        placed = layout(graph)

        # Prefer the longest name covering the cursor ("Hot Water" over "Water")
        for component in sorted(placed.components, key=lambda c: len(c.name), reverse=True):
            start = text.find(component.name)
            while start != -1:
                if start <= character <= start + len(component.name):
                    kind = "anchor" if component.is_anchor else "component"
                    return (
                        f"**{component.name}** ({kind})\n\n"
                        f"- Stage: {component.stage.label}\n"
                        f"- Layer: {component.layer} of {placed.max_layer}\n"
                        f"- Position: x={component.x:.3f}, y={component.y:.3f}"
                    )
                start = text.find(component.name, start + 1)
        return None

    return None
