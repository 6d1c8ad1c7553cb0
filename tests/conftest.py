"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

from wardley.map import layout, parse
from wardley.models import DeclaredGraph, PlacedGraph

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_path() -> Path:
    return FIXTURES


@pytest.fixture
def tea_shop_path() -> Path:
    """Ten-component value chain: 2 anchors, 8 components, 8 dependencies, 1 evolution."""
    return FIXTURES / "tea_shop.wardley"


@pytest.fixture
def tea_shop_graph(tea_shop_path: Path) -> DeclaredGraph:
    graph, errors = parse(tea_shop_path.read_text(encoding="utf-8"))
    assert errors == []
    return graph


@pytest.fixture
def tea_shop_placed(tea_shop_graph: DeclaredGraph) -> PlacedGraph:
    return layout(tea_shop_graph)


@pytest.fixture
def strategy_note_path() -> Path:
    """Markdown note with frontmatter, one valid and one broken map block."""
    return FIXTURES / "strategy.md"
