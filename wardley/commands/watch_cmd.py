"""Watch command - re-render maps as their sources change."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from rich.console import Console

from ..watcher import run_watch_loop
from .render_cmd import render_file


def run_watch(directory: Path, *, out_dir: Path | None = None, config_path: Path | None = None) -> None:
    """
    Watch ``directory`` and write an SVG for every map in each changed file.

    This is a blocking command that runs until interrupted (Ctrl+C).
    SVGs go to ``out_dir`` (default: beside each source).
    """
    console = Console(stderr=True)

    console.print(f"[bold]Watching[/bold] {directory}")
    console.print(f"  Output: {out_dir or 'beside each source'}")
    console.print()
    console.print("[dim]Press Ctrl+C to stop watching[/dim]")
    console.print()

    render_count = 0

    def on_change(path: Path) -> None:
        nonlocal render_count
        timestamp = datetime.now().strftime("%H:%M:%S")
        written = render_file(path, out_dir or path.parent, config_path=config_path)
        render_count += len(written)
        if written:
            names = ", ".join(p.name for p in written)
            console.print(f"[dim]{timestamp}[/dim] {path.name} → {names}")
        else:
            console.print(f"[dim]{timestamp}[/dim] [yellow]{path.name}: no valid maps[/yellow]")

    try:
        run_watch_loop(directory, on_change)
    except KeyboardInterrupt:
        pass
    console.print()
    console.print(f"[bold]Stopped.[/bold] Rendered {render_count} maps.")
