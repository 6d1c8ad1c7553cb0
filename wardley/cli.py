"""CLI entrypoint for wardley."""

import logging
import sys
from pathlib import Path

import click

from . import __version__
from .config import ConfigError

_INPUT = click.Path(exists=True, dir_okay=False, path_type=Path)


@click.group()
@click.version_option(__version__, prog_name="wardley")
@click.option("--verbose", "-V", is_flag=True, help="Log parser and layout steps to stderr")
def cli(verbose: bool) -> None:
    """wardley - render value-chain maps from a small text language.

    Input is either a raw map file or a Markdown note containing
    ```wardley code blocks.
    """
    if verbose:
        from rich.console import Console
        from rich.logging import RichHandler

        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )


@cli.command()
@click.argument("input_path", metavar="INPUT", type=_INPUT)
@click.option(
    "--out",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write output to a file (default: stdout)",
)
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["svg", "html", "json"]),
    default="svg",
    show_default=True,
    help="Output format",
)
@click.option("--block", type=int, default=1, show_default=True, help="Which ```wardley block to render")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Render options YAML (default: wardley.yml beside INPUT, if present)",
)
@click.option("--trace", is_flag=True, help="Log each layout step (implies log output at debug level)")
def render(
    input_path: Path,
    out: Path | None,
    fmt: str,
    block: int,
    config_path: Path | None,
    trace: bool,
) -> None:
    """Render a map as SVG, HTML or JSON.

    Examples:

        wardley render tea-shop.wardley --out tea-shop.svg

        wardley render notes/Strategy.md --block 2 --format html -o strategy.html
    """
    from .commands.render_cmd import run_render

    if trace and not logging.getLogger().handlers:
        logging.basicConfig(level=logging.DEBUG, format="%(message)s")

    try:
        exit_code = run_render(
            input_path,
            out=out,
            fmt=fmt,
            block=block,
            config_path=config_path,
            trace=trace,
        )
    except ConfigError as e:
        raise click.ClickException(str(e)) from e
    sys.exit(exit_code)


@cli.command()
@click.argument("input_path", metavar="INPUT", type=_INPUT)
@click.option("--block", type=int, default=1, show_default=True, help="Which ```wardley block to lay out")
@click.option("--json", "output_json", is_flag=True, help="Output positions as JSON")
def layout(input_path: Path, block: int, output_json: bool) -> None:
    """Show computed positions for each component.

    Examples:

        wardley layout tea-shop.wardley

        wardley layout tea-shop.wardley --json
    """
    from .commands.layout_cmd import run_layout

    sys.exit(run_layout(input_path, block=block, output_json=output_json))


@cli.command()
@click.argument("input_path", metavar="INPUT", type=_INPUT)
@click.option("--block", type=int, default=None, help="Only check this block (default: all blocks)")
@click.option("--json", "output_json", is_flag=True, help="Output results as JSON")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Render options YAML for label checks (default: wardley.yml beside INPUT, if present)",
)
def check(input_path: Path, block: int | None, output_json: bool, config_path: Path | None) -> None:
    """Report parse errors and layout problems.

    Every error is listed with its line number. Exits with status 1 if any
    block fails to parse or its layout breaks a placement rule.
    """
    from .commands.check_cmd import run_check

    try:
        exit_code = run_check(input_path, block=block, output_json=output_json, config_path=config_path)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e
    sys.exit(exit_code)


@cli.command()
@click.argument(
    "directory",
    type=click.Path(exists=True, file_okay=False, dir_okay=True, path_type=Path),
)
@click.option(
    "--out-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory for rendered SVGs (default: beside each source)",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Render options YAML (default: wardley.yml beside each source, if present)",
)
def watch(directory: Path, out_dir: Path | None, config_path: Path | None) -> None:
    """Re-render maps whenever their source files change.

    Runs until interrupted (Ctrl+C).
    """
    from .commands.watch_cmd import run_watch

    run_watch(directory, out_dir=out_dir, config_path=config_path)


@cli.command()
@click.option("--tcp", is_flag=True, help="Use TCP transport on localhost:2087 instead of stdio")
def lsp(tcp: bool) -> None:
    """Start the language server for map diagnostics and hover."""
    from .lsp import start_server

    start_server(transport="tcp" if tcp else "stdio")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
