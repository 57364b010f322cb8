"""
MCP Tool: generate_literature_review

Write a literature review for a list and store it on the list.
"""

from __future__ import annotations

import logging
from typing import Any

import mcp.types as types

from ._runtime import error_result, get_list_manager, get_service, json_result

logger = logging.getLogger("paper-shelf-server")

# Tool definition
literature_review_tool = types.Tool(
    name="generate_literature_review",
    description="""Generate a literature review from the papers in a list.

The review covers background, key themes, methods, gaps and future
directions. It is saved on the list and shown by get_list.""",
    inputSchema={
        "type": "object",
        "properties": {
            "list_id": {"type": "string", "description": "List identifier"},
        },
        "required": ["list_id"],
    },
)


async def handle_literature_review(arguments: dict[str, Any]) -> list[types.TextContent]:
    """Handle the generate_literature_review tool call."""
    try:
        manager = get_list_manager()
        paper_list = await manager.get_list(arguments["list_id"])
        papers = await manager.list_papers(paper_list.id)

        review = await get_service().generate_literature_review(paper_list.name, papers)
        await manager.save_literature_review(paper_list.id, review)

        return json_result({
            "list_id": paper_list.id,
            "paper_count": len(papers),
            "literature_review": review,
        })

    except Exception as e:
        logger.error(f"Literature review error: {e}")
        return error_result(e)
