"""
LSP server for map sources.

This module provides:
- Parse-error diagnostics as you type
- Hover information for components
"""

from .server import create_server, start_server

__all__ = ["create_server", "start_server"]
