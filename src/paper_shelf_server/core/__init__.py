"""
Core paper discovery module.

This module contains the pure Python business logic with NO MCP dependencies.
It can be used directly by web applications or other Python code.

Example usage:
    from paper_shelf_server.core import DiscoveryService, build_export, highlight

    service = DiscoveryService()
    result = await service.search("protein folding")
    spans = highlight(result.papers[0].title, ["protein"])
    export = build_export(result.papers, "bibtex", list_name="Folding")
"""

from .models import (
    PaperSource,
    PaperRecord,
    SearchPaper,
    SavedPaper,
    PaperList,
    SearchFilters,
    SearchResult,
    SearchHistoryEntry,
    ChatRole,
    ChatMessage,
    ChatSession,
    ChatHistoryEntry,
    SpanKind,
    HighlightSpan,
    CitationFormat,
    CitationExport,
)
from .highlight import highlight, normalize_terms, query_terms, render_spans, truncate
from .citations import (
    build_export,
    export_filename,
    format_citations,
    to_apa,
    to_bibtex,
    to_ris,
)
from .chat import ChatCompletionClient, ChatCompletionError
from .client import OpenAlexClient, SemanticScholarClient
from .service import DiscoveryService

__all__ = [
    # Models
    "PaperSource",
    "PaperRecord",
    "SearchPaper",
    "SavedPaper",
    "PaperList",
    "SearchFilters",
    "SearchResult",
    "SearchHistoryEntry",
    "ChatRole",
    "ChatMessage",
    "ChatSession",
    "ChatHistoryEntry",
    "SpanKind",
    "HighlightSpan",
    "CitationFormat",
    "CitationExport",
    # Highlighting
    "highlight",
    "normalize_terms",
    "query_terms",
    "render_spans",
    "truncate",
    # Citations
    "build_export",
    "export_filename",
    "format_citations",
    "to_apa",
    "to_bibtex",
    "to_ris",
    # Clients
    "ChatCompletionClient",
    "ChatCompletionError",
    "OpenAlexClient",
    "SemanticScholarClient",
    # Service
    "DiscoveryService",
]
