"""
MCP Tool: find_similar_papers

Find papers Semantic Scholar recommends alongside a given paper.
"""

from __future__ import annotations

import logging
from typing import Any

import mcp.types as types

from ._runtime import error_result, get_service, json_result

logger = logging.getLogger("paper-shelf-server")

# Tool definition
find_similar_tool = types.Tool(
    name="find_similar_papers",
    description="""Find papers similar to a given paper.

Uses Semantic Scholar's recommendations for the paper. Pass the
`external_id` of a Semantic Scholar search result.

Use this to:
- Discover related work you may have missed
- Grow a list from one good paper""",
    inputSchema={
        "type": "object",
        "properties": {
            "paper_id": {
                "type": "string",
                "description": "Semantic Scholar paper ID",
            },
            "limit": {
                "type": "integer",
                "description": "Number of papers to return (default: 10)",
                "default": 10,
                "minimum": 1,
                "maximum": 100,
            },
        },
        "required": ["paper_id"],
    },
)


async def handle_find_similar(arguments: dict[str, Any]) -> list[types.TextContent]:
    """Handle the find_similar_papers tool call."""
    try:
        paper_id = arguments["paper_id"]
        limit = max(1, min(arguments.get("limit", 10), 100))

        logger.info(f"Finding papers similar to {paper_id} (limit: {limit})")
        papers = await get_service().get_recommendations(paper_id, limit=limit)

        result: dict[str, Any] = {
            "paper_id": paper_id,
            "returned": len(papers),
            "papers": [
                {
                    "external_id": paper.external_id,
                    "source": paper.source.value,
                    "title": paper.title,
                    "authors": paper.authors[:5],
                    "year": paper.publication_year,
                    "journal": paper.journal,
                    "citation_count": paper.citation_count,
                    "url": paper.url,
                }
                for paper in papers
            ],
        }
        if not papers:
            result["message"] = "No similar papers found."

        return json_result(result)

    except Exception as e:
        logger.error(f"Find similar error: {e}")
        return error_result(e)
