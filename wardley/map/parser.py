"""Line-oriented parser for the map language.

Statements, tried in this order on each stripped line:

    title <text>
    component <name> [<stage>]
    anchor <name> [<stage>]
    evolve <name> -> <name> [<stage>]
    evolve <name> [<stage>]
    <name> -> <name>[; label] -> ...
    annotation <id> <text>
    note <text>

Blank lines and lines starting with ``#`` are skipped. A bad statement is
recorded as an error and skipped; any error at all discards the whole map.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum

from ..models import (
    Annotation,
    DeclaredComponent,
    DeclaredGraph,
    DependencyEdge,
    EvolutionEdge,
    Stage,
    StageMarker,
)
from .graph import MapGraph

logger = logging.getLogger(__name__)

# Component names: anything but brackets and semicolons, never containing "->",
# starting with a non-space character
_NAME = r"(?:(?!->)[^\[\];\s])(?:(?!->)[^\[\];])*?"
_STAGE = r"\[(?P<stage>[^\[\]]*)\]"

TITLE_PATTERN = re.compile(r"^title\s+(?P<text>.+)$")
COMPONENT_PATTERN = re.compile(rf"^(?P<kind>component|anchor)\s+(?P<name>{_NAME})\s*{_STAGE}$")
EVOLVE_EDGE_PATTERN = re.compile(
    rf"^evolve\s+(?P<source>{_NAME})\s*->\s*(?P<target>{_NAME})\s*{_STAGE}$"
)
EVOLVE_STAGE_PATTERN = re.compile(rf"^evolve\s+(?P<name>{_NAME})\s*{_STAGE}$")
ANNOTATION_PATTERN = re.compile(r"^annotation\s+(?P<id>\S+)\s+(?P<text>.+)$")
NOTE_PATTERN = re.compile(r"^note\s+(?P<text>.+)$")


class ErrorKind(str, Enum):
    INVALID_STAGE = "InvalidStage"
    DUPLICATE_COMPONENT = "DuplicateComponent"
    UNDECLARED_REFERENCE = "UndeclaredComponentReference"
    UNKNOWN_SYNTAX = "UnknownSyntax"
    CIRCULAR_DEPENDENCY = "CircularDependency"


@dataclass(frozen=True)
class ParseError:
    """A single parse finding, tagged with its 1-based source line."""

    line: int
    kind: ErrorKind
    message: str

    def __str__(self) -> str:
        return f"Line {self.line}: [{self.kind.value}] {self.message}"


class _MapBuilder:
    """Accumulates statements for one parse call."""

    def __init__(self) -> None:
        self.title: str | None = None
        self.components: list[DeclaredComponent] = []
        self.declared_at: dict[str, int] = {}  # name -> line
        self.dependencies: list[tuple[int, DependencyEdge]] = []
        self.evolutions: list[tuple[int, EvolutionEdge]] = []
        self.stage_markers: list[tuple[int, StageMarker]] = []
        self.annotations: list[Annotation] = []
        self.notes: list[str] = []
        self.errors: list[ParseError] = []

    def error(self, line: int, kind: ErrorKind, message: str) -> None:
        self.errors.append(ParseError(line=line, kind=kind, message=message))

    def stage(self, token: str, line: int) -> Stage | None:
        try:
            return Stage(token.strip())
        except ValueError:
            self.error(
                line,
                ErrorKind.INVALID_STAGE,
                f"Invalid evolution stage '{token.strip()}'. Must be: {', '.join(Stage.names())}",
            )
            return None

    def statement(self, line: str, line_num: int) -> None:
        match = TITLE_PATTERN.match(line)
        if match:
            if self.title is None:
                self.title = match.group("text").strip()
            return

        match = COMPONENT_PATTERN.match(line)
        if match:
            self.declare(match, line_num)
            return

        match = EVOLVE_EDGE_PATTERN.match(line)
        if match:
            stage = self.stage(match.group("stage"), line_num)
            if stage is not None:
                edge = EvolutionEdge(
                    source=match.group("source").strip(),
                    target=match.group("target").strip(),
                    stage=stage,
                )
                self.evolutions.append((line_num, edge))
            return

        match = EVOLVE_STAGE_PATTERN.match(line)
        if match:
            stage = self.stage(match.group("stage"), line_num)
            if stage is not None:
                marker = StageMarker(name=match.group("name").strip(), stage=stage)
                self.stage_markers.append((line_num, marker))
            return

        if "->" in line:
            self.chain(line, line_num)
            return

        match = ANNOTATION_PATTERN.match(line)
        if match:
            self.annotations.append(Annotation(id=match.group("id"), text=match.group("text").strip()))
            return

        match = NOTE_PATTERN.match(line)
        if match:
            self.notes.append(match.group("text").strip())
            return

        self.error(line_num, ErrorKind.UNKNOWN_SYNTAX, f"Unknown syntax: {line}")

    def declare(self, match: re.Match, line_num: int) -> None:
        """Record a component. A bad stage is reported instead of a duplicate name."""
        stage = self.stage(match.group("stage"), line_num)
        if stage is None:
            return

        name = match.group("name").strip()
        if name in self.declared_at:
            self.error(
                line_num,
                ErrorKind.DUPLICATE_COMPONENT,
                f"Component '{name}' declared multiple times (first declared on line {self.declared_at[name]})",
            )
            return

        self.declared_at[name] = line_num
        self.components.append(
            DeclaredComponent(name=name, stage=stage, is_anchor=match.group("kind") == "anchor")
        )

    def chain(self, line: str, line_num: int) -> None:
        """Split ``A -> B; label -> C`` into one edge per adjacent pair."""
        segments = []
        for part in line.split("->"):
            name, _, label = part.partition(";")
            segments.append((name.strip(), label.strip() or None))

        if any(not name for name, _ in segments):
            self.error(line_num, ErrorKind.UNKNOWN_SYNTAX, f"Empty component name in dependency chain: {line}")
            return

        for (source, _), (target, label) in zip(segments, segments[1:]):
            self.dependencies.append((line_num, DependencyEdge(source=source, target=target, label=label)))

    def check_references(self) -> None:
        """Report every edge endpoint that was never declared."""
        references: list[tuple[int, str]] = []
        for line_num, dep in self.dependencies:
            references.extend([(line_num, dep.source), (line_num, dep.target)])
        for line_num, evo in self.evolutions:
            references.extend([(line_num, evo.source), (line_num, evo.target)])
        for line_num, marker in self.stage_markers:
            references.append((line_num, marker.name))

        for line_num, name in references:
            if name not in self.declared_at:
                self.error(
                    line_num,
                    ErrorKind.UNDECLARED_REFERENCE,
                    f"Component '{name}' referenced but not declared",
                )

    def check_cycles(self) -> None:
        valid = [
            (line_num, dep)
            for line_num, dep in self.dependencies
            if dep.source in self.declared_at and dep.target in self.declared_at
        ]
        graph = MapGraph.from_components(self.components, [dep for _, dep in valid])

        for cycle in graph.find_cycles():
            members = set(cycle)
            line_num = next(
                line_num for line_num, dep in valid if dep.source in members and dep.target in members
            )
            self.error(
                line_num,
                ErrorKind.CIRCULAR_DEPENDENCY,
                f"Circular dependency between components: {', '.join(cycle)}",
            )

    def build(self) -> DeclaredGraph:
        return DeclaredGraph(
            title=self.title,
            components=tuple(self.components),
            dependencies=tuple(dep for _, dep in self.dependencies),
            evolutions=tuple(evo for _, evo in self.evolutions),
            stage_markers=tuple(marker for _, marker in self.stage_markers),
            annotations=tuple(self.annotations),
            notes=tuple(self.notes),
        )


def parse(text: str) -> tuple[DeclaredGraph | None, list[ParseError]]:
    """Parse map source into a declared graph.

    Returns ``(graph, [])`` on success and ``(None, errors)`` otherwise, with
    errors ordered by line. Every error in the text is reported, not just the
    first one.
    """
    builder = _MapBuilder()

    for i, raw in enumerate(text.splitlines()):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        builder.statement(line, i + 1)

    builder.check_references()
    builder.check_cycles()

    errors = sorted(builder.errors, key=lambda e: e.line)
    if errors:
        logger.debug("Rejected map with %d error(s)", len(errors))
        return None, errors

    graph = builder.build()
    logger.debug(
        "Parsed map: %d components, %d dependencies, %d evolutions",
        len(graph.components),
        len(graph.dependencies),
        len(graph.evolutions),
    )
    return graph, []
