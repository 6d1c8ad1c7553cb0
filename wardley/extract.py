"""Locate map source inside files.

``.md`` notes may hold any number of fenced ```` ```wardley ```` blocks and an
optional YAML frontmatter header; any other file is one raw map.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

import frontmatter

logger = logging.getLogger(__name__)

FENCE_LANGUAGE = "wardley"
MARKDOWN_SUFFIXES = {".md", ".markdown"}

# Opening fence, e.g. ```wardley or ~~~ wardley
_OPEN_FENCE = re.compile(rf"^(?P<fence>`{{3,}}|~{{3,}})\s*{FENCE_LANGUAGE}\s*$")


@dataclass
class MapBlock:
    """One map's source and where it starts in its file."""

    source: str
    start_line: int  # file line of the block's first source line (1-based)
    index: int = 1  # position among the file's blocks (1-based)

    def file_line(self, line: int) -> int:
        """Translate a block-relative line number to a file line number."""
        return self.start_line + line - 1


@dataclass
class MapDocument:
    path: Path
    blocks: list[MapBlock] = field(default_factory=list)
    metadata: dict = field(default_factory=dict)

    @property
    def title(self) -> str | None:
        value = self.metadata.get("title")
        return str(value).strip() if value else None


def extract_blocks(markdown: str, line_offset: int = 0) -> list[MapBlock]:
    """Extract fenced ``wardley`` blocks from Markdown.

    Args:
        markdown: Markdown text
        line_offset: Lines preceding ``markdown`` in its file (e.g. frontmatter)

    Returns:
        Blocks in document order. An unterminated block runs to end of text.
    """
    blocks: list[MapBlock] = []
    lines = markdown.split("\n")

    i = 0
    while i < len(lines):
        match = _OPEN_FENCE.match(lines[i].strip())
        if not match:
            i += 1
            continue

        fence = match.group("fence")
        start = i + 1
        end = start
        while end < len(lines) and not lines[end].strip().startswith(fence):
            end += 1

        blocks.append(
            MapBlock(
                source="\n".join(lines[start:end]),
                start_line=line_offset + start + 1,
                index=len(blocks) + 1,
            )
        )
        i = end + 1

    return blocks


def _frontmatter_lines(content: str) -> int:
    """Count lines taken by a leading frontmatter header, delimiters included."""
    if not content.startswith("---"):
        return 0
    parts = content.split("---", 2)
    if len(parts) < 3:
        return 0
    return parts[1].count("\n") + 1


def load_document(path: Path, content: str | None = None) -> MapDocument:
    """Read a file and split it into map blocks.

    Args:
        path: File to read; its suffix decides between Markdown and raw map
        content: Text to use instead of reading ``path``
    """
    if content is None:
        content = path.read_text(encoding="utf-8")

    if path.suffix.lower() not in MARKDOWN_SUFFIXES:
        return MapDocument(path=path, blocks=[MapBlock(source=content, start_line=1)])

    # A header that does not parse yet (mid-edit) is treated as plain text
    try:
        metadata = dict(frontmatter.loads(content).metadata)
    except Exception as e:
        logger.debug("Ignoring unreadable frontmatter in %s: %s", path, e)
        metadata = {}

    offset = _frontmatter_lines(content) if metadata else 0
    body = content.split("\n", offset)[-1] if offset else content

    return MapDocument(
        path=path,
        blocks=extract_blocks(body, line_offset=offset),
        metadata=metadata,
    )
