"""Data models for value-chain maps."""

from dataclasses import dataclass, field
from enum import Enum


class Stage(str, Enum):
    """Evolution stage, ordered from least to most mature."""

    GENESIS = "genesis"
    CUSTOM = "custom"
    PRODUCT = "product"
    COMMODITY = "commodity"

    @property
    def index(self) -> int:
        return _STAGE_ORDER.index(self)

    @property
    def center(self) -> float:
        """Centre of this stage's quarter band on the evolution axis."""
        return STAGE_CENTERS[self]

    @property
    def label(self) -> str:
        return STAGE_LABELS[self]

    @classmethod
    def names(cls) -> list[str]:
        return [stage.value for stage in cls]


_STAGE_ORDER = list(Stage)

STAGE_CENTERS = {
    Stage.GENESIS: 0.125,
    Stage.CUSTOM: 0.375,
    Stage.PRODUCT: 0.625,
    Stage.COMMODITY: 0.875,
}

STAGE_LABELS = {
    Stage.GENESIS: "Genesis",
    Stage.CUSTOM: "Custom Built",
    Stage.PRODUCT: "Product",
    Stage.COMMODITY: "Commodity",
}

# Width of each stage band on the unit evolution axis
STAGE_BAND_WIDTH = 0.25


@dataclass(frozen=True)
class DeclaredComponent:
    """A component as written in the map source, before layout."""

    name: str  # unique, case-sensitive, may contain spaces
    stage: Stage
    is_anchor: bool = False


@dataclass(frozen=True)
class DependencyEdge:
    """`source` requires `target`; the source sits above the target."""

    source: str
    target: str
    label: str | None = None


@dataclass(frozen=True)
class EvolutionEdge:
    """`source` transforms into `target`. Horizontal only."""

    source: str
    target: str
    stage: Stage


@dataclass(frozen=True)
class StageMarker:
    """An `evolve <name> [<stage>]` statement. Recorded, never laid out."""

    name: str
    stage: Stage


@dataclass(frozen=True)
class Annotation:
    id: str
    text: str


@dataclass(frozen=True)
class DeclaredGraph:
    """Parsed map: components in declaration order plus edges and decorations."""

    components: tuple[DeclaredComponent, ...] = ()
    dependencies: tuple[DependencyEdge, ...] = ()
    evolutions: tuple[EvolutionEdge, ...] = ()
    stage_markers: tuple[StageMarker, ...] = ()
    annotations: tuple[Annotation, ...] = ()
    notes: tuple[str, ...] = ()
    title: str | None = None
    _index: dict[str, DeclaredComponent] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        self._index.update((c.name, c) for c in self.components)

    def component(self, name: str) -> DeclaredComponent | None:
        """Look up a component by its exact name."""
        return self._index.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._index

    @property
    def anchors(self) -> list[DeclaredComponent]:
        return [c for c in self.components if c.is_anchor]


@dataclass(frozen=True)
class PlacedComponent:
    """A declared component with its computed position in the unit square."""

    component: DeclaredComponent
    x: float
    y: float
    layer: int

    @property
    def name(self) -> str:
        return self.component.name

    @property
    def stage(self) -> Stage:
        return self.component.stage

    @property
    def is_anchor(self) -> bool:
        return self.component.is_anchor


@dataclass(frozen=True)
class PlacedGraph:
    """Output of the layout engine. Every component carries a position."""

    components: tuple[PlacedComponent, ...] = ()
    dependencies: tuple[DependencyEdge, ...] = ()
    evolutions: tuple[EvolutionEdge, ...] = ()
    annotations: tuple[Annotation, ...] = ()
    notes: tuple[str, ...] = ()
    title: str | None = None
    max_layer: int = 0
    _index: dict[str, PlacedComponent] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        self._index.update((c.name, c) for c in self.components)

    def component(self, name: str) -> PlacedComponent | None:
        return self._index.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def positions(self) -> dict[str, tuple[float, float]]:
        """Name -> (x, y) in declaration order."""
        return {c.name: (c.x, c.y) for c in self.components}
