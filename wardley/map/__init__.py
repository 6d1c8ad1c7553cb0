"""Map parsing and layout."""

from .graph import MapGraph
from .layout import assign_layers, layout
from .parser import ErrorKind, ParseError, parse
from .trace import LayoutTracer, LoggingTracer

__all__ = [
    "parse",
    "ParseError",
    "ErrorKind",
    "MapGraph",
    "layout",
    "assign_layers",
    "LayoutTracer",
    "LoggingTracer",
]
