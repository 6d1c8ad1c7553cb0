"""Observer hooks for the layout engine.

The engine calls these hooks at each stage but never reads anything back,
so a tracer cannot change a layout. The base class is a no-op.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..models import PlacedComponent, Stage

logger = logging.getLogger(__name__)


class LayoutTracer:
    """No-op tracer. Subclass and override the hooks you need."""

    def layered(self, layers: dict[str, int], max_layer: int) -> None:
        pass

    def unresolved(self, names: list[str]) -> None:
        pass

    def pinned(self, name: str) -> None:
        pass

    def aligned(self, source: str, target: str, y: float) -> None:
        pass

    def spread(self, stage: "Stage", y: float, names: list[str]) -> None:
        pass

    def placed(self, component: "PlacedComponent") -> None:
        pass


class LoggingTracer(LayoutTracer):
    """Forward layout events to the module logger."""

    def __init__(self, log: logging.Logger | None = None):
        self.log = log or logger

    def layered(self, layers: dict[str, int], max_layer: int) -> None:
        self.log.debug("Assigned %d layers (max layer %d)", len(layers), max_layer)

    def unresolved(self, names: list[str]) -> None:
        self.log.warning(
            "Dependency cycle left %d component(s) unresolved: %s", len(names), ", ".join(names)
        )

    def pinned(self, name: str) -> None:
        self.log.debug("Pinned anchor %r to top", name)

    def aligned(self, source: str, target: str, y: float) -> None:
        self.log.debug("Aligned %r with %r at y=%.3f", target, source, y)

    def spread(self, stage: "Stage", y: float, names: list[str]) -> None:
        self.log.debug("Spread %d components at y=%.3f in %s", len(names), y, stage.value)

    def placed(self, component: "PlacedComponent") -> None:
        self.log.debug(
            "Component: %s, x: %.4f, y: %.4f, stage: %s, anchor: %s",
            component.name,
            component.x,
            component.y,
            component.stage.value,
            component.is_anchor,
        )
