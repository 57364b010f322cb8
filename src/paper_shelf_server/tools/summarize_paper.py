"""
MCP Tool: summarize_paper

Summarise a saved paper and store the summary with it.
"""

from __future__ import annotations

import logging
from typing import Any

import mcp.types as types

from ._runtime import error_result, get_list_manager, get_service, json_result

logger = logging.getLogger("paper-shelf-server")

# Tool definition
summarize_paper_tool = types.Tool(
    name="summarize_paper",
    description="""Summarise a saved paper from its metadata and abstract.

The summary is stored with the paper and used as extra context by
chat_with_list.""",
    inputSchema={
        "type": "object",
        "properties": {
            "paper_id": {"type": "string", "description": "Saved paper identifier"},
        },
        "required": ["paper_id"],
    },
)


async def handle_summarize_paper(arguments: dict[str, Any]) -> list[types.TextContent]:
    """Handle the summarize_paper tool call."""
    try:
        manager = get_list_manager()
        paper = await manager.get_paper(arguments["paper_id"])

        summary = await get_service().summarize_paper(paper)
        await manager.save_summary(paper.id, summary)

        return json_result({
            "paper_id": paper.id,
            "title": paper.title,
            "summary": summary,
        })

    except Exception as e:
        logger.error(f"Summary error: {e}")
        return error_result(e)
