"""wardley - value-chain maps from a small text language."""

__version__ = "0.1.0"

from .map import ParseError, layout, parse  # noqa: E402

__all__ = ["__version__", "parse", "layout", "ParseError"]
