"""Markup and data output for placed maps."""

from .data import parse_errors_to_list, placed_graph_to_dict
from .svg import render_svg, wrap_html

__all__ = ["render_svg", "wrap_html", "placed_graph_to_dict", "parse_errors_to_list"]
