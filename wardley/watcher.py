"""
File system watcher that re-renders maps when their source changes.

This module provides:
- Watchdog-based file monitoring
- Debounced change handling (editor save cycles produce one render)
- Filtering to map sources (.wardley and Markdown notes)
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Callable

from watchdog.events import (
    FileCreatedEvent,
    FileModifiedEvent,
    FileMovedEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

logger = logging.getLogger(__name__)


class MapSourceHandler(FileSystemEventHandler):
    """
    Collects changed map sources and hands them to a callback once quiet.

    Key behaviors:
    - Debounces rapid modifications of the same file
    - Ignores hidden files, directories and unrelated extensions
    - Treats a move into the watched tree as a change of the destination
    """

    RELEVANT_EXTENSIONS = {".wardley", ".md", ".markdown"}
    DEBOUNCE_SECONDS = 0.5

    def __init__(self, on_change: Callable[[Path], None], clock: Callable[[], float] = time.time):
        """
        Args:
            on_change: Called with each changed path after the debounce window
            clock: Time source (injectable for tests)
        """
        super().__init__()
        self.on_change = on_change
        self.clock = clock
        self.pending: dict[str, float] = {}  # path -> last event time

    def _is_relevant(self, path: str) -> bool:
        p = Path(path)
        # Editors write hidden swap and temp files next to the source
        if p.name.startswith("."):
            return False
        return p.suffix.lower() in self.RELEVANT_EXTENSIONS

    def _touch(self, path: str) -> None:
        if self._is_relevant(path):
            self.pending[path] = self.clock()

    def flush_pending(self) -> list[Path]:
        """Hand settled paths to the callback; returns them in path order."""
        now = self.clock()
        ready = sorted(p for p, ts in self.pending.items() if now - ts >= self.DEBOUNCE_SECONDS)

        flushed = []
        for path_str in ready:
            del self.pending[path_str]
            path = Path(path_str)
            if not path.exists():
                continue
            try:
                self.on_change(path)
            except Exception as e:
                logger.warning("Failed to handle change to %s: %s", path, e)
                continue
            flushed.append(path)
        return flushed

    def on_created(self, event: FileCreatedEvent) -> None:
        if not event.is_directory:
            self._touch(event.src_path)

    def on_modified(self, event: FileModifiedEvent) -> None:
        if not event.is_directory:
            self._touch(event.src_path)

    def on_moved(self, event: FileMovedEvent) -> None:
        if not event.is_directory:
            self.pending.pop(event.src_path, None)
            self._touch(event.dest_path)


def watch_directory(
    directory: Path,
    on_change: Callable[[Path], None],
    recursive: bool = True,
) -> tuple[Observer, MapSourceHandler]:
    """
    Start watching a directory for map source changes.

    Returns:
        Tuple of (observer, handler) - caller should call observer.stop() to stop watching
    """
    handler = MapSourceHandler(on_change)

    observer = Observer()
    observer.schedule(handler, str(directory), recursive=recursive)
    observer.start()

    return observer, handler


def run_watch_loop(directory: Path, on_change: Callable[[Path], None]) -> None:
    """
    Run the watch loop until interrupted.

    This is a blocking function that flushes pending changes periodically.
    """
    observer, handler = watch_directory(directory, on_change)

    try:
        while True:
            time.sleep(0.25)
            handler.flush_pending()
    except KeyboardInterrupt:
        observer.stop()

    observer.join()
