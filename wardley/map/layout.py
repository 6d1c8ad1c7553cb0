"""Deterministic layout of a declared map in the unit square.

x follows the evolution stage, y follows dependency depth:

1. stage positioning (x = centre of the stage band)
2. topological layering (y from the longest dependency path below a node)
3. anchor pin (y = 0)
4. evolution alignment (target takes the source's y), then the anchor pin again
5. overlap resolution (spread same-row, same-stage siblings along x)
"""

from __future__ import annotations

from collections import deque

from ..models import DeclaredGraph, PlacedComponent, PlacedGraph, Stage
from .graph import MapGraph
from .trace import LayoutTracer

# Horizontal spread for a group of up to three overlapping components
BASE_SPREAD = 0.12
# Decimal places used when grouping components by row
ROW_PRECISION = 3


def assign_layers(graph: MapGraph, tracer: LayoutTracer | None = None) -> dict[str, int]:
    """Assign each component a layer; dependents sit strictly above their dependencies.

    Kahn's algorithm over the reversed dependency graph. Components with no
    dependencies start at layer 0; every other component takes one more than
    the deepest layer proposed by its dependencies.
    """
    tracer = tracer or LayoutTracer()

    # Remaining unresolved dependencies per component
    in_degree = {name: graph.out_degree(name) for name in graph.nodes}
    layers: dict[str, int] = {}

    queue = deque()
    for name in graph.nodes:
        if in_degree[name] == 0:
            layers[name] = 0
            queue.append(name)

    resolved = set()
    while queue:
        current = queue.popleft()
        resolved.add(current)
        current_layer = layers[current]

        for dependent in graph.get_dependents(current):
            in_degree[dependent] -= 1
            layers[dependent] = max(layers.get(dependent, 0), current_layer + 1)
            if in_degree[dependent] == 0:
                queue.append(dependent)

    unresolved = [name for name in graph.nodes if name not in resolved]
    if unresolved:
        tracer.unresolved(unresolved)

    return {name: layers.get(name, 0) for name in graph.nodes}


def layout(declared: DeclaredGraph, tracer: LayoutTracer | None = None) -> PlacedGraph:
    """Place every component of a valid declared graph in [0, 1] x [0, 1].

    Pure function of its input; the tracer only observes. Raises ValueError
    if an edge references an undeclared component, which the parser never
    lets through.
    """
    tracer = tracer or LayoutTracer()
    graph = MapGraph.from_declared(declared)

    for evo in declared.evolutions:
        for endpoint in (evo.source, evo.target):
            if endpoint not in graph.nodes:
                raise ValueError(f"Evolution references undeclared component '{endpoint}'")

    # Stage positioning
    xs = {c.name: c.stage.center for c in declared.components}

    # Topological layering
    layers = assign_layers(graph, tracer)
    max_layer = max(layers.values(), default=0)
    tracer.layered(layers, max_layer)
    ys = {name: (max_layer - layer) / (max_layer + 1) for name, layer in layers.items()}

    _pin_anchors(declared, ys, tracer)
    _align_evolutions(declared, ys, tracer)
    _pin_anchors(declared, ys, tracer)

    _spread_overlaps(declared, xs, ys, tracer)

    placed = []
    for component in declared.components:
        item = PlacedComponent(
            component=component,
            x=xs[component.name],
            y=ys[component.name],
            layer=layers[component.name],
        )
        tracer.placed(item)
        placed.append(item)

    return PlacedGraph(
        title=declared.title,
        components=tuple(placed),
        dependencies=declared.dependencies,
        evolutions=declared.evolutions,
        annotations=declared.annotations,
        notes=declared.notes,
        max_layer=max_layer,
    )


def _pin_anchors(declared: DeclaredGraph, ys: dict[str, float], tracer: LayoutTracer) -> None:
    for component in declared.anchors:
        if ys[component.name] != 0.0:
            ys[component.name] = 0.0
            tracer.pinned(component.name)


def _align_evolutions(declared: DeclaredGraph, ys: dict[str, float], tracer: LayoutTracer) -> None:
    """Give each evolution target its source's y.

    Repeats until stable so that chains align whatever order they were
    declared in. One pass per edge is enough for any acyclic chain.
    """
    for _ in range(len(declared.evolutions)):
        changed = False
        for evo in declared.evolutions:
            y = ys[evo.source]
            if ys[evo.target] != y:
                ys[evo.target] = y
                tracer.aligned(evo.source, evo.target, y)
                changed = True
        if not changed:
            break


def _spread_overlaps(
    declared: DeclaredGraph,
    xs: dict[str, float],
    ys: dict[str, float],
    tracer: LayoutTracer,
) -> None:
    """Fan out components that share a row and a stage, keeping declaration order."""
    groups: dict[tuple[float, Stage], list[str]] = {}
    for component in declared.components:
        key = (round(ys[component.name], ROW_PRECISION), component.stage)
        groups.setdefault(key, []).append(component.name)

    for (row, stage), names in groups.items():
        n = len(names)
        if n < 2:
            continue

        base_x = xs[names[0]]
        spread = BASE_SPREAD * max(1.0, n / 3)
        step = spread / max(n - 1, 1)
        for i, name in enumerate(names):
            xs[name] = base_x + (i - (n - 1) / 2) * step
        tracer.spread(stage, row, names)
