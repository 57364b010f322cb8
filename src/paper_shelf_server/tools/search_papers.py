"""
MCP Tool: search_papers

Search Semantic Scholar or OpenAlex, with query terms highlighted
in titles and abstracts.
"""

from __future__ import annotations

import logging
from typing import Any

import mcp.types as types

from ..core import PaperSource, SearchFilters, SearchPaper, highlight, query_terms, render_spans
from ._runtime import (
    error_result,
    get_history_manager,
    get_service,
    get_settings,
    json_result,
)

logger = logging.getLogger("paper-shelf-server")

# Tool definition
search_papers_tool = types.Tool(
    name="search_papers",
    description="""Search academic paper indexes.

Sources:
- semantic_scholar (default): relevance-ranked, paged with `page`
- openalex: citation-ranked, paged with `cursor`; an empty query lists the newest works

Filters: year range, author, field of study, journal/venue, PDF availability.

Query terms are highlighted (**bold**) in titles and abstract previews.
Each search is recorded in the recent-search history.
Use the returned `external_id` and `source` with add_paper_to_list.""",
    inputSchema={
        "type": "object",
        "properties": {
            "query": {
                "type": "string",
                "description": "Search query",
            },
            "source": {
                "type": "string",
                "enum": ["semantic_scholar", "openalex"],
                "description": "Paper index to search (default: semantic_scholar)",
                "default": "semantic_scholar",
            },
            "page": {
                "type": "integer",
                "description": "Page number for Semantic Scholar (default: 1)",
                "default": 1,
                "minimum": 1,
            },
            "cursor": {
                "type": "string",
                "description": "Cursor from a previous OpenAlex result",
            },
            "per_page": {
                "type": "integer",
                "description": "Results per page (default: 25, max: 100)",
                "default": 25,
                "minimum": 1,
                "maximum": 100,
            },
            "year_from": {"type": "integer", "description": "Earliest publication year"},
            "year_to": {"type": "integer", "description": "Latest publication year"},
            "author": {"type": "string", "description": "Author name filter"},
            "field_of_study": {"type": "string", "description": "Field of study filter"},
            "journal": {"type": "string", "description": "Journal or venue filter"},
            "has_pdf": {"type": "boolean", "description": "Only papers with an open PDF"},
        },
        "required": ["query"],
    },
)

FILTER_KEYS = ("year_from", "year_to", "author", "field_of_study", "journal", "has_pdf")


def _format_paper(paper: SearchPaper, terms: list[str], abstract_length: int) -> dict[str, Any]:
    """Summarise a search hit with highlighted title and abstract."""
    return {
        "external_id": paper.external_id,
        "source": paper.source.value,
        "title": render_spans(highlight(paper.title, terms)),
        "authors": paper.authors[:5],
        "author_count": len(paper.authors),
        "year": paper.publication_year,
        "journal": paper.journal,
        "abstract": (
            render_spans(highlight(paper.abstract, terms, max_length=abstract_length))
            if paper.abstract
            else None
        ),
        "citation_count": paper.citation_count,
        "doi": paper.doi,
        "url": paper.url,
        "pdf_url": paper.pdf_url,
        "topics": paper.topics,
    }


async def handle_search_papers(arguments: dict[str, Any]) -> list[types.TextContent]:
    """Handle the search_papers tool call."""
    try:
        settings = get_settings()
        service = get_service()

        query = arguments["query"]
        source = PaperSource(arguments.get("source", PaperSource.SEMANTIC_SCHOLAR.value))
        per_page = min(arguments.get("per_page", settings.SEARCH_PAGE_SIZE), settings.MAX_SEARCH_RESULTS)
        filters = SearchFilters(**{k: arguments[k] for k in FILTER_KEYS if arguments.get(k) is not None})

        logger.info(f"Searching {source.value}: {query} (per_page: {per_page})")

        result = await service.search(
            query,
            source=source,
            page=arguments.get("page", 1),
            cursor=arguments.get("cursor"),
            per_page=per_page,
            filters=filters,
        )

        await get_history_manager().record(
            query,
            filters=filters.model_dump(exclude_none=True),
            results_count=len(result.papers),
        )

        terms = query_terms(query)
        response = {
            "query": query,
            "source": source.value,
            "total_results": result.total,
            "returned": len(result.papers),
            "has_more": result.has_more,
            "next_cursor": result.next_cursor,
            "papers": [
                _format_paper(paper, terms, settings.ABSTRACT_PREVIEW_LENGTH)
                for paper in result.papers
            ],
        }

        if not result.papers:
            response["message"] = "No papers found matching your query."

        return json_result(response)

    except Exception as e:
        logger.error(f"Search error: {e}")
        return error_result(e)
