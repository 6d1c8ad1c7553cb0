"""
LSP server implementation for map sources.

Provides:
- Parse-error diagnostics for .wardley files and ```wardley blocks in notes
- Hover info for declared components (stage, layer, position)
"""

from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import unquote, urlparse

from lsprotocol import types as lsp
from pygls.lsp.server import LanguageServer

from .. import __version__
from ..extract import MARKDOWN_SUFFIXES
from .diagnostics import diagnostics_for_document, hover_for_position

logger = logging.getLogger(__name__)

MAP_SUFFIXES = {".wardley"} | MARKDOWN_SUFFIXES


def uri_to_path(uri: str) -> Path:
    """Convert a file URI to a Path."""
    parsed = urlparse(uri)
    path = unquote(parsed.path)
    if path.startswith("/") and len(path) > 2 and path[2] == ":":
        path = path[1:]  # Remove leading slash for Windows paths
    return Path(path)


def create_server() -> LanguageServer:
    """Create and configure the LSP server."""
    server = LanguageServer(name="wardley-lsp", version=__version__)

    @server.feature(lsp.TEXT_DOCUMENT_DID_OPEN)
    def did_open(params: lsp.DidOpenTextDocumentParams) -> None:
        _validate_document(server, params.text_document.uri)

    @server.feature(lsp.TEXT_DOCUMENT_DID_CHANGE)
    def did_change(params: lsp.DidChangeTextDocumentParams) -> None:
        _validate_document(server, params.text_document.uri)

    @server.feature(lsp.TEXT_DOCUMENT_DID_SAVE)
    def did_save(params: lsp.DidSaveTextDocumentParams) -> None:
        _validate_document(server, params.text_document.uri)

    @server.feature(lsp.TEXT_DOCUMENT_HOVER)
    def hover(params: lsp.HoverParams) -> lsp.Hover | None:
        path = uri_to_path(params.text_document.uri)
        if path.suffix.lower() not in MAP_SUFFIXES:
            return None

        document = server.workspace.get_text_document(params.text_document.uri)
        info = hover_for_position(path, document.source, params.position.line, params.position.character)
        if info is None:
            return None
        return lsp.Hover(contents=lsp.MarkupContent(kind=lsp.MarkupKind.Markdown, value=info))

    return server


def _validate_document(server: LanguageServer, uri: str) -> None:
    """Parse the open document and publish its diagnostics."""
    path = uri_to_path(uri)
    if path.suffix.lower() not in MAP_SUFFIXES:
        return

    document = server.workspace.get_text_document(uri)
    diagnostics = diagnostics_for_document(path, document.source)
    logger.debug("Publishing %d diagnostic(s) for %s", len(diagnostics), path)

    server.text_document_publish_diagnostics(
        lsp.PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


def start_server(transport: str = "stdio") -> None:
    """Start the LSP server.

    Args:
        transport: Transport method ("stdio" or "tcp")
    """
    server = create_server()

    if transport == "stdio":
        server.start_io()
    else:
        # TCP transport for debugging
        server.start_tcp("localhost", 2087)
