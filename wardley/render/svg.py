"""SVG rendering of placed maps."""

from __future__ import annotations

import html

from ..config import STAGE_LABEL_BAND, RenderOptions
from ..models import PlacedComponent, PlacedGraph, Stage

DEPENDENCY_COLOR = "#4A90E2"
EVOLUTION_COLOR = "#9B59B6"
GRID_COLOR = "#e0e0e0"
LABEL_COLOR = "#666"
AXIS_COLOR = "#333"


def esc(s: str) -> str:
    return html.escape(s, quote=True)


def _num(value: float) -> str:
    """Format a pixel coordinate compactly and deterministically."""
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


class Canvas:
    """Maps unit coordinates to pixels."""

    def __init__(self, options: RenderOptions):
        self.options = options
        self.plot_width = options.width - 2 * options.padding
        self.plot_height = options.height - 2 * options.padding - STAGE_LABEL_BAND

    def x(self, unit: float) -> float:
        return self.options.padding + unit * self.plot_width

    def y(self, unit: float) -> float:
        return self.options.padding + unit * self.plot_height

    def point(self, component: PlacedComponent) -> tuple[str, str]:
        return _num(self.x(component.x)), _num(self.y(component.y))


def render_svg(placed: PlacedGraph, options: RenderOptions | None = None) -> str:
    """Render a placed map as a standalone SVG document."""
    options = options or RenderOptions()
    canvas = Canvas(options)
    width, height, padding = options.width, options.height, options.padding

    parts: list[str] = []
    parts.append(
        f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 {width} {height}" class="wardley-map">'
    )

    # Arrow markers must precede their first use
    parts.append("<defs>")
    for marker_id, color in (("arrowhead", DEPENDENCY_COLOR), ("arrowhead-evolution", EVOLUTION_COLOR)):
        parts.append(
            f'<marker id="{marker_id}" markerWidth="10" markerHeight="10" refX="9" refY="3" orient="auto">'
            f'<polygon points="0 0, 10 3, 0 6" fill="{color}"/></marker>'
        )
    parts.append("</defs>")

    parts.append(f'<rect width="{width}" height="{height}" fill="white"/>')

    # Stage grid
    stage_label_y = height - padding + 30
    for stage in Stage:
        x = _num(canvas.x(stage.center))
        parts.append(
            f'<line x1="{x}" y1="{padding}" x2="{x}" y2="{height - padding}" '
            f'stroke="{GRID_COLOR}" stroke-width="1" stroke-dasharray="4,4"/>'
        )
        parts.append(
            f'<text x="{x}" y="{stage_label_y}" text-anchor="middle" font-size="11" '
            f'fill="{LABEL_COLOR}">{esc(stage.label)}</text>'
        )

    # Axes
    parts.append(
        f'<text x="{_num(width / 2)}" y="{height - 10}" text-anchor="middle" font-size="12" '
        f'font-weight="bold" fill="{AXIS_COLOR}">Evolution →</text>'
    )
    parts.append(
        f'<text x="20" y="{_num(height / 2)}" text-anchor="middle" font-size="12" font-weight="bold" '
        f'fill="{AXIS_COLOR}" transform="rotate(-90, 20, {_num(height / 2)})">Value Chain ↑</text>'
    )

    if placed.title:
        parts.append(
            f'<text x="{_num(width / 2)}" y="30" text-anchor="middle" font-size="18" '
            f'font-weight="bold" fill="#000">{esc(placed.title)}</text>'
        )

    # Edges first (under nodes)
    parts.append('<g class="dependencies">')
    for dep in placed.dependencies:
        source, target = placed.component(dep.source), placed.component(dep.target)
        if source is None or target is None:
            continue
        (x1, y1), (x2, y2) = canvas.point(source), canvas.point(target)
        parts.append(
            f'<line x1="{x1}" y1="{y1}" x2="{x2}" y2="{y2}" stroke="{DEPENDENCY_COLOR}" '
            f'stroke-width="2" marker-end="url(#arrowhead)"/>'
        )
        if dep.label:
            mid_x = (canvas.x(source.x) + canvas.x(target.x)) / 2
            mid_y = (canvas.y(source.y) + canvas.y(target.y)) / 2
            parts.append(
                f'<text x="{_num(mid_x)}" y="{_num(mid_y - 5)}" text-anchor="middle" font-size="10" '
                f'fill="{LABEL_COLOR}">{esc(dep.label)}</text>'
            )
    parts.append("</g>")

    parts.append('<g class="evolutions">')
    for evo in placed.evolutions:
        source, target = placed.component(evo.source), placed.component(evo.target)
        if source is None or target is None:
            continue
        (x1, y1), (x2, y2) = canvas.point(source), canvas.point(target)
        parts.append(
            f'<line x1="{x1}" y1="{y1}" x2="{x2}" y2="{y2}" stroke="{EVOLUTION_COLOR}" '
            f'stroke-width="2" stroke-dasharray="5,5" marker-end="url(#arrowhead-evolution)"/>'
        )
    parts.append("</g>")

    parts.append('<g class="components">')
    for component in placed.components:
        x, y = canvas.point(component)
        colors = options.colors_for(component.stage)
        css_class = "anchor" if component.is_anchor else "component"
        parts.append(
            f'<circle cx="{x}" cy="{y}" r="{options.node_radius}" fill="{colors["fill"]}" '
            f'stroke="{colors["stroke"]}" stroke-width="2" class="{css_class}"/>'
        )
        label_y = _num(canvas.y(component.y) - options.node_radius - 5)
        parts.append(
            f'<text x="{x}" y="{label_y}" text-anchor="middle" font-size="{options.font_size}" '
            f'font-weight="bold" fill="#000">{esc(component.name)}</text>'
        )
    parts.append("</g>")

    annotation_y = height - 35
    for annotation in placed.annotations:
        parts.append(
            f'<text x="{padding}" y="{annotation_y}" font-size="10" fill="{LABEL_COLOR}">'
            f"[{esc(annotation.id)}] {esc(annotation.text)}</text>"
        )
        annotation_y += 12

    parts.append("</svg>")
    return "\n".join(parts) + "\n"


def wrap_html(svg: str, *, title: str) -> str:
    """Embed an SVG document in a minimal standalone HTML page."""
    return "\n".join(
        [
            "<!doctype html>",
            '<html lang="en">',
            "<head>",
            '<meta charset="utf-8"/>',
            f"<title>{esc(title)}</title>",
            "<style>body{margin:0;background:#fafafa}.wardley-map{max-width:100%;height:auto}</style>",
            "</head>",
            "<body>",
            svg.rstrip("\n"),
            "</body>",
            "</html>",
            "",
        ]
    )
