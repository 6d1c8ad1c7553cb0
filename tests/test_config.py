from pathlib import Path

import pytest

from wardley.config import ConfigError, RenderOptions, find_config, load_render_options
from wardley.models import Stage


def test_defaults_without_file():
    options = load_render_options(None)
    assert options == RenderOptions()
    assert (options.width, options.height, options.padding) == (800, 600, 60)
    assert options.colors_for(Stage.GENESIS)["fill"] == "#FF6B6B"


def test_load_render_section(tmp_path: Path):
    path = tmp_path / "wardley.yml"
    path.write_text(
        "\n".join(
            [
                "render:",
                "  width: 1000",
                "  node_radius: 10",
                "  stage_colors:",
                "    genesis:",
                "      fill: \"#FFAAAA\"",
                "",
            ]
        ),
        encoding="utf-8",
    )
    options = load_render_options(path)
    assert options.width == 1000
    assert options.height == 600
    assert options.node_radius == 10
    assert options.colors_for(Stage.GENESIS) == {"fill": "#FFAAAA", "stroke": "#C92A2A"}
    # Defaults are not mutated by overrides
    assert RenderOptions().colors_for(Stage.GENESIS)["fill"] == "#FF6B6B"


def test_top_level_mapping_without_render_key(tmp_path: Path):
    path = tmp_path / "wardley.yml"
    path.write_text("font_size: 14\n", encoding="utf-8")
    assert load_render_options(path).font_size == 14


@pytest.mark.parametrize(
    "text, message",
    [
        ("render:\n  colour: red\n", "unknown option"),
        ("render:\n  width: -5\n", "positive integer"),
        ("render:\n  width: wide\n", "positive integer"),
        ("render:\n  padding: 400\n", "no room"),
        ("render:\n  stage_colors:\n    mature: {fill: red}\n", "unknown stage"),
        ("render:\n  stage_colors:\n    custom: {glow: red}\n", "fill"),
        ("- just\n- a list\n", "mapping"),
        ("render: [1, 2\n", "invalid YAML"),
    ],
)
def test_invalid_config(tmp_path: Path, text: str, message: str):
    path = tmp_path / "wardley.yml"
    path.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError, match=message):
        load_render_options(path)


def test_find_config_beside_input(tmp_path: Path):
    source = tmp_path / "map.wardley"
    source.write_text("", encoding="utf-8")
    assert find_config(source) is None

    (tmp_path / "wardley.yml").write_text("render: {}\n", encoding="utf-8")
    assert find_config(source) == tmp_path / "wardley.yml"
    assert find_config(tmp_path) == tmp_path / "wardley.yml"
