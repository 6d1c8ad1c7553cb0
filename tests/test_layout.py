"""Tests for the layout engine."""

import pytest

from wardley.map import LayoutTracer, MapGraph, assign_layers, layout, parse
from wardley.map.layout import BASE_SPREAD
from wardley.models import DeclaredComponent, DeclaredGraph, DependencyEdge, Stage


def _layout(source: str):
    graph, errors = parse(source)
    assert errors == []
    return layout(graph)


class RecordingTracer(LayoutTracer):
    def __init__(self):
        self.events = []

    def layered(self, layers, max_layer):
        self.events.append(("layered", max_layer))

    def unresolved(self, names):
        self.events.append(("unresolved", tuple(names)))

    def pinned(self, name):
        self.events.append(("pinned", name))

    def aligned(self, source, target, y):
        self.events.append(("aligned", source, target))

    def spread(self, stage, y, names):
        self.events.append(("spread", stage, tuple(names)))


def test_two_component_regression_scenario():
    placed = _layout("component A [genesis]\ncomponent B [commodity]\nA -> B\n")
    a, b = placed.component("A"), placed.component("B")
    assert placed.max_layer == 1
    assert (a.layer, b.layer) == (1, 0)
    assert a.y == 0.0
    assert b.y == 0.5
    assert a.x == 0.125
    assert b.x == 0.875


def test_stage_positions_are_band_centres():
    placed = _layout(
        "component G [genesis]\ncomponent C [custom]\ncomponent P [product]\ncomponent M [commodity]\n"
    )
    assert [c.x for c in placed.components] == [0.125, 0.375, 0.625, 0.875]


def test_every_component_is_placed_in_unit_square(tea_shop_graph, tea_shop_placed):
    assert [c.name for c in tea_shop_placed.components] == [c.name for c in tea_shop_graph.components]
    for c in tea_shop_placed.components:
        assert 0.0 <= c.x <= 1.0
        assert 0.0 <= c.y <= 1.0


def test_layout_is_deterministic(tea_shop_path):
    text = tea_shop_path.read_text(encoding="utf-8")
    first = layout(parse(text)[0]).positions()
    second = layout(parse(text)[0]).positions()
    assert first == second


def test_node_sits_above_its_deepest_dependency():
    placed = _layout(
        "\n".join(
            [
                "component Top [custom]",
                "component Mid [product]",
                "component Low [commodity]",
                "Top -> Mid -> Low",
                "Top -> Low",
            ]
        )
    )
    layers = {c.name: c.layer for c in placed.components}
    assert layers == {"Top": 2, "Mid": 1, "Low": 0}
    ys = placed.positions()
    assert ys["Top"][1] < ys["Mid"][1] < ys["Low"][1]


def test_dependency_edges_layer_strictly(tea_shop_graph):
    graph = MapGraph.from_declared(tea_shop_graph)
    layers = assign_layers(graph)
    for dep in tea_shop_graph.dependencies:
        assert layers[dep.source] > layers[dep.target]


def test_anchor_is_pinned_to_top():
    placed = _layout("anchor User [genesis]\ncomponent A [custom]\ncomponent B [product]\nA -> B\n")
    user = placed.component("User")
    # A lone anchor would otherwise sit on the bottom layer
    assert user.layer == 0
    assert user.y == 0.0


def test_evolution_target_shares_source_row():
    placed = _layout(
        "\n".join(
            [
                "component A [custom]",
                "component B [product]",
                "component C [commodity]",
                "component B2 [commodity]",
                "A -> B -> C",
                "evolve B -> B2 [commodity]",
            ]
        )
    )
    assert placed.component("B2").y == placed.component("B").y
    # Without alignment B2 would sink to C's row
    assert placed.component("B2").y != placed.component("C").y


def test_evolution_chains_align_in_any_declaration_order():
    placed = _layout(
        "\n".join(
            [
                "component Root [genesis]",
                "component Base [commodity]",
                "component V1 [custom]",
                "component V2 [product]",
                "Root -> Base",
                "evolve V1 -> V2 [product]",
                "evolve Root -> V1 [custom]",
            ]
        )
    )
    root_y = placed.component("Root").y
    assert placed.component("V1").y == root_y
    assert placed.component("V2").y == root_y


def test_anchor_wins_over_evolution_alignment():
    placed = _layout(
        "component Old [custom]\ncomponent Base [commodity]\nanchor New [product]\n"
        "Old -> Base\nevolve Base -> New [product]\n"
    )
    assert placed.component("New").y == 0.0


def test_overlapping_siblings_are_spread_symmetrically():
    placed = _layout(
        "\n".join(
            [
                "component Top [genesis]",
                "component A [commodity]",
                "component B [commodity]",
                "component C [commodity]",
                "Top -> A",
                "Top -> B",
                "Top -> C",
            ]
        )
    )
    xs = [placed.component(n).x for n in ("A", "B", "C")]
    assert xs == pytest.approx([0.815, 0.875, 0.935])
    assert xs[0] < xs[1] < xs[2]
    assert (xs[0] + xs[2]) / 2 == pytest.approx(0.875)
    assert len({c.y for c in placed.components if c.name != "Top"}) == 1


def test_pair_spread_uses_base_width():
    placed = _layout("anchor U1 [product]\nanchor U2 [product]\n")
    u1, u2 = placed.component("U1"), placed.component("U2")
    assert u2.x - u1.x == pytest.approx(BASE_SPREAD)
    assert (u1.x + u2.x) / 2 == pytest.approx(0.625)


def test_large_groups_widen_the_spread():
    names = [f"N{i}" for i in range(6)]
    source = "\n".join(f"component {n} [custom]" for n in names)
    placed = _layout(source)
    xs = [placed.component(n).x for n in names]
    spread = BASE_SPREAD * 2  # 6 / 3
    assert xs[-1] - xs[0] == pytest.approx(spread)
    assert len(set(xs)) == 6
    assert xs == sorted(xs)


def test_spreading_never_changes_y():
    placed = _layout("component A [custom]\ncomponent B [custom]\ncomponent C [genesis]\nC -> A\nC -> B\n")
    assert placed.component("A").y == placed.component("B").y == 0.5


def test_value_chain_fixture(tea_shop_placed):
    placed = tea_shop_placed
    assert placed.max_layer == 4

    kettle = placed.component("Kettle")
    assert placed.component("Electric Kettle").y == kettle.y == pytest.approx(0.6)

    for name in ("Business", "Public"):
        assert placed.component(name).y == 0.0

    assert placed.component("Cup of Tea").y == pytest.approx(0.2)
    assert placed.component("Hot Water").y == pytest.approx(0.4)

    # Cup, Tea and Water share the bottom commodity row
    row = [placed.component(n).x for n in ("Cup", "Tea", "Water")]
    assert row == pytest.approx([0.815, 0.875, 0.935])

    points = [(round(c.x, 6), round(c.y, 6)) for c in placed.components]
    assert len(set(points)) == len(points)


def test_value_chain_x_stays_within_widened_band(tea_shop_placed):
    for c in tea_shop_placed.components:
        assert abs(c.x - c.stage.center) <= 0.125 + BASE_SPREAD / 2 + 1e-9


def test_empty_graph_lays_out_to_nothing():
    placed = layout(DeclaredGraph())
    assert placed.components == ()
    assert placed.max_layer == 0


def test_tracer_observes_without_changing_output(tea_shop_graph):
    tracer = RecordingTracer()
    traced = layout(tea_shop_graph, tracer)
    assert traced.positions() == layout(tea_shop_graph).positions()
    assert ("layered", 4) in tracer.events
    assert ("aligned", "Kettle", "Electric Kettle") in tracer.events
    assert ("spread", Stage.COMMODITY, ("Cup", "Tea", "Water")) in tracer.events


def test_cycle_built_by_hand_still_lays_out():
    a = DeclaredComponent("A", Stage.GENESIS)
    b = DeclaredComponent("B", Stage.CUSTOM)
    c = DeclaredComponent("C", Stage.PRODUCT)
    graph = DeclaredGraph(
        components=(a, b, c),
        dependencies=(
            DependencyEdge("A", "B"),
            DependencyEdge("B", "A"),
            DependencyEdge("C", "A"),
        ),
    )
    tracer = RecordingTracer()
    placed = layout(graph, tracer)
    assert len(placed.components) == 3
    assert all(0.0 <= p.y <= 1.0 for p in placed.components)
    assert ("unresolved", ("A", "B", "C")) in tracer.events


def test_dangling_reference_is_a_programming_error():
    graph = DeclaredGraph(
        components=(DeclaredComponent("A", Stage.GENESIS),),
        dependencies=(DependencyEdge("A", "Ghost"),),
    )
    with pytest.raises(ValueError, match="Ghost"):
        layout(graph)


def test_long_chain_lays_out_one_layer_per_component():
    names = [f"C{i}" for i in range(1200)]
    source = "".join(f"component {n} [custom]\n" for n in names) + " -> ".join(names) + "\n"
    graph, errors = parse(source)
    assert errors == []
    placed = layout(graph)
    assert placed.max_layer == 1199
    assert placed.component("C0").y == 0.0
    assert placed.component("C1199").layer == 0
