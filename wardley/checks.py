"""Audit rules for placed maps.

Each rule checks one layout guarantee on a finished ``PlacedGraph``. A clean
layout from ``layout()`` produces no errors; the rules exist to catch
regressions and to vet graphs built by other tools.
"""

from dataclasses import dataclass
from typing import Literal

from .config import RenderOptions
from .map.layout import BASE_SPREAD, ROW_PRECISION
from .models import STAGE_BAND_WIDTH, PlacedGraph
from .render.svg import Canvas

# Two components closer than this on both axes count as a collision
COLLISION_TOLERANCE = 1e-6

# Estimated label width per character at font size 12, in pixels
CHAR_WIDTH_AT_12PX = 7


@dataclass
class LayoutFinding:
    """A single audit finding."""

    level: Literal["error", "warning", "info"]
    rule: str
    message: str
    component: str | None = None

    def __str__(self) -> str:
        loc = f" {self.component} -" if self.component else ""
        return f"{self.level.upper()}: [{self.rule}]{loc} {self.message}"


RULE_EXPLANATIONS = {
    "position-out-of-range": "Every coordinate must lie in [0, 1].",
    "anchor-not-top": "Anchors represent user needs and sit on the top row (y = 0).",
    "evolution-misaligned": "An evolution target shares its source's row; evolution is horizontal.",
    "outside-stage-band": "x stays within the stage band, widened by at most half the overlap spread.",
    "position-collision": "No two components may occupy the same point.",
    "label-overlap": "Labels on the same row should not run into each other at the rendered size.",
}


class LayoutRules:
    """Collection of audit rules for a placed map."""

    def __init__(self, placed: PlacedGraph, options: RenderOptions | None = None):
        self.placed = placed
        self.options = options or RenderOptions()

    def run_all(self) -> list[LayoutFinding]:
        results = []
        results.extend(self.check_range())
        results.extend(self.check_anchors())
        results.extend(self.check_evolutions())
        results.extend(self.check_stage_bands())
        results.extend(self.check_collisions())
        results.extend(self.check_label_overlaps())
        return results

    def check_range(self) -> list[LayoutFinding]:
        # Overlap spreading may push x slightly past the unit square at the edges
        results = []
        for c in self.placed.components:
            if not 0.0 <= c.y <= 1.0:
                results.append(
                    LayoutFinding("error", "position-out-of-range", f"y={c.y:.4f} outside [0, 1]", c.name)
                )
            if not 0.0 <= c.x <= 1.0:
                results.append(
                    LayoutFinding("warning", "position-out-of-range", f"x={c.x:.4f} outside [0, 1]", c.name)
                )
        return results

    def check_anchors(self) -> list[LayoutFinding]:
        return [
            LayoutFinding("error", "anchor-not-top", f"Anchor placed at y={c.y:.4f}", c.name)
            for c in self.placed.components
            if c.is_anchor and c.y != 0.0
        ]

    def check_evolutions(self) -> list[LayoutFinding]:
        """Check evolution targets sit on their source's row.

        A target that is itself an anchor is pinned to the top and only
        reported as info.
        """
        results = []
        for evo in self.placed.evolutions:
            source = self.placed.component(evo.source)
            target = self.placed.component(evo.target)
            if source is None or target is None or source.y == target.y:
                continue
            level = "info" if target.is_anchor else "error"
            results.append(
                LayoutFinding(
                    level,
                    "evolution-misaligned",
                    f"Evolved from '{source.name}' (y={source.y:.4f}) but placed at y={target.y:.4f}",
                    target.name,
                )
            )
        return results

    def check_stage_bands(self) -> list[LayoutFinding]:
        group_sizes: dict[tuple, int] = {}
        for c in self.placed.components:
            key = (round(c.y, ROW_PRECISION), c.stage)
            group_sizes[key] = group_sizes.get(key, 0) + 1

        results = []
        for c in self.placed.components:
            n = group_sizes[(round(c.y, ROW_PRECISION), c.stage)]
            spread = BASE_SPREAD * max(1.0, n / 3) if n > 1 else 0.0
            half_band = STAGE_BAND_WIDTH / 2 + spread / 2
            if abs(c.x - c.stage.center) > half_band + COLLISION_TOLERANCE:
                results.append(
                    LayoutFinding(
                        "error",
                        "outside-stage-band",
                        f"x={c.x:.4f} is outside the {c.stage.label} band",
                        c.name,
                    )
                )
        return results

    def check_collisions(self) -> list[LayoutFinding]:
        results = []
        components = self.placed.components
        for i, a in enumerate(components):
            for b in components[i + 1 :]:
                if abs(a.x - b.x) < COLLISION_TOLERANCE and abs(a.y - b.y) < COLLISION_TOLERANCE:
                    results.append(
                        LayoutFinding(
                            "error",
                            "position-collision",
                            f"Shares position ({a.x:.4f}, {a.y:.4f}) with '{b.name}'",
                            a.name,
                        )
                    )
        return results

    def check_label_overlaps(self) -> list[LayoutFinding]:
        """Flag neighbouring labels on one row whose estimated extents overlap.

        Label width is estimated from the character count and font size;
        labels are centred on their component.
        """
        canvas = Canvas(self.options)
        char_width = CHAR_WIDTH_AT_12PX * self.options.font_size / 12

        rows: dict[int, list[tuple[float, float, str]]] = {}
        for c in self.placed.components:
            half = len(c.name) * char_width / 2
            rows.setdefault(round(canvas.y(c.y)), []).append((canvas.x(c.x), half, c.name))

        results = []
        for labels in rows.values():
            labels.sort()
            for (x, half, name), (next_x, next_half, next_name) in zip(labels, labels[1:]):
                overlap = (x + half) - (next_x - next_half)
                if overlap > 0:
                    results.append(
                        LayoutFinding(
                            "warning",
                            "label-overlap",
                            f"Label overlaps '{next_name}' by about {overlap:.0f}px",
                            name,
                        )
                    )
        return results


def audit_layout(placed: PlacedGraph, options: RenderOptions | None = None) -> list[LayoutFinding]:
    """Run every rule and return findings, errors first.

    ``options`` sets the canvas and font size used for label checks.
    """
    level_order = {"error": 0, "warning": 1, "info": 2}
    results = LayoutRules(placed, options).run_all()
    results.sort(key=lambda r: level_order.get(r.level, 99))
    return results
