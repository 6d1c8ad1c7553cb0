"""Tests for the command-line interface."""

import json
from pathlib import Path

from click.testing import CliRunner

from wardley import __version__
from wardley.cli import cli


def _run(*args: str):
    return CliRunner().invoke(cli, list(args))


def test_version():
    result = _run("--version")
    assert result.exit_code == 0
    assert __version__ in result.output


def test_render_svg_to_file(tea_shop_path: Path, tmp_path: Path):
    out = tmp_path / "tea.svg"
    result = _run("render", str(tea_shop_path), "--out", str(out))
    assert result.exit_code == 0, result.output
    svg = out.read_text(encoding="utf-8")
    assert svg.startswith("<svg")
    assert "Tea Shop" in svg


def test_render_json_to_stdout(tea_shop_path: Path):
    result = _run("render", str(tea_shop_path), "--format", "json")
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert len(payload["components"]) == 10


def test_render_html(tea_shop_path: Path, tmp_path: Path):
    out = tmp_path / "tea.html"
    result = _run("render", str(tea_shop_path), "--format", "html", "-o", str(out))
    assert result.exit_code == 0
    assert "<title>Tea Shop</title>" in out.read_text(encoding="utf-8")


def test_render_markdown_block_uses_frontmatter_title(strategy_note_path: Path):
    result = _run("render", str(strategy_note_path), "--format", "json")
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["title"] == "Kettle Strategy"
    assert [c["name"] for c in payload["components"]] == ["Kettle", "Power"]


def test_render_reports_parse_errors_with_file_lines(strategy_note_path: Path):
    result = _run("render", str(strategy_note_path), "--block", "2")
    assert result.exit_code == 1
    assert "Line 2 (file line 18): [DuplicateComponent]" in result.stderr
    assert "Line 3 (file line 19): [UndeclaredComponentReference]" in result.stderr


def test_render_block_out_of_range(strategy_note_path: Path):
    result = _run("render", str(strategy_note_path), "--block", "3")
    assert result.exit_code != 0
    assert "out of range" in result.output


def test_render_markdown_without_blocks(tmp_path: Path):
    note = tmp_path / "empty.md"
    note.write_text("# Nothing here\n", encoding="utf-8")
    result = _run("render", str(note))
    assert result.exit_code != 0
    assert "No ```wardley code blocks" in result.output


def test_render_uses_config_beside_input(tea_shop_path: Path, tmp_path: Path):
    source = tmp_path / "tea.wardley"
    source.write_text(tea_shop_path.read_text(encoding="utf-8"), encoding="utf-8")
    (tmp_path / "wardley.yml").write_text("render:\n  width: 1200\n", encoding="utf-8")
    result = _run("render", str(source))
    assert result.exit_code == 0
    assert 'viewBox="0 0 1200 600"' in result.stdout


def test_render_invalid_config(tea_shop_path: Path, tmp_path: Path):
    config = tmp_path / "bad.yml"
    config.write_text("render:\n  width: 0\n", encoding="utf-8")
    result = _run("render", str(tea_shop_path), "--config", str(config))
    assert result.exit_code != 0
    assert "positive integer" in result.output


def test_layout_table(tea_shop_path: Path):
    result = _run("layout", str(tea_shop_path))
    assert result.exit_code == 0
    assert "Electric Kettle" in result.stdout
    assert "0.6000" in result.stdout


def test_layout_json(tea_shop_path: Path):
    result = _run("layout", str(tea_shop_path), "--json")
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["max_layer"] == 4


def test_check_clean_map(tea_shop_path: Path):
    result = _run("check", str(tea_shop_path))
    assert result.exit_code == 0
    assert "10 components" in result.stderr


def test_check_all_blocks_json(strategy_note_path: Path):
    result = _run("check", str(strategy_note_path), "--json")
    assert result.exit_code == 1
    payload = json.loads(result.stdout)
    first, second = payload["blocks"]
    assert first["valid"] is True
    assert first["findings"] == []
    assert second["valid"] is False
    assert [e["kind"] for e in second["errors"]] == ["DuplicateComponent", "UndeclaredComponentReference"]


def test_check_single_valid_block(strategy_note_path: Path):
    result = _run("check", str(strategy_note_path), "--block", "1")
    assert result.exit_code == 0


def test_check_reports_label_overlap_as_warning(tmp_path: Path):
    source = tmp_path / "crm.wardley"
    source.write_text(
        "component Enterprise Resource Planning [product]\n"
        "component Customer Relationship Management [product]\n",
        encoding="utf-8",
    )
    result = _run("check", str(source), "--json")
    assert result.exit_code == 0
    (block,) = json.loads(result.stdout)["blocks"]
    assert [f["rule"] for f in block["findings"]] == ["label-overlap"]


def test_check_invalid_config(tea_shop_path: Path, tmp_path: Path):
    config = tmp_path / "bad.yml"
    config.write_text("render:\n  colour: red\n", encoding="utf-8")
    result = _run("check", str(tea_shop_path), "--config", str(config))
    assert result.exit_code != 0
    assert "unknown option" in result.output
