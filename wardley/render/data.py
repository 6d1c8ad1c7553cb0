"""JSON-ready views of maps and parse errors."""

from __future__ import annotations

from ..map.parser import ParseError
from ..models import PlacedGraph


def placed_graph_to_dict(placed: PlacedGraph) -> dict:
    return {
        "title": placed.title,
        "max_layer": placed.max_layer,
        "components": [
            {
                "name": c.name,
                "stage": c.stage.value,
                "anchor": c.is_anchor,
                "layer": c.layer,
                "x": c.x,
                "y": c.y,
            }
            for c in placed.components
        ],
        "dependencies": [
            {"from": d.source, "to": d.target, "label": d.label} for d in placed.dependencies
        ],
        "evolutions": [
            {"from": e.source, "to": e.target, "stage": e.stage.value} for e in placed.evolutions
        ],
        "annotations": [{"id": a.id, "text": a.text} for a in placed.annotations],
        "notes": list(placed.notes),
    }


def parse_errors_to_list(errors: list[ParseError]) -> list[dict]:
    return [{"line": e.line, "kind": e.kind.value, "message": e.message} for e in errors]
