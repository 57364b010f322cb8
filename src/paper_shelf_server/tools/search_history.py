"""
MCP Tool: recent_searches

Show or clear the recent-search history.
"""

from __future__ import annotations

import logging
from typing import Any

import mcp.types as types

from ._runtime import error_result, get_history_manager, json_result

logger = logging.getLogger("paper-shelf-server")

# Tool definition
recent_searches_tool = types.Tool(
    name="recent_searches",
    description="""Show recent paper searches, newest first, or clear them.

Useful for re-running a previous query with the same filters.""",
    inputSchema={
        "type": "object",
        "properties": {
            "clear": {
                "type": "boolean",
                "description": "Clear the history instead of listing it",
                "default": False,
            },
        },
    },
)


async def handle_recent_searches(arguments: dict[str, Any]) -> list[types.TextContent]:
    """Handle the recent_searches tool call."""
    try:
        manager = get_history_manager()

        if arguments.get("clear", False):
            removed = await manager.clear()
            return json_result({"cleared": removed, "message": "Search history cleared."})

        entries = await manager.recent()
        return json_result({
            "total": len(entries),
            "searches": [
                {
                    "query": entry.search_query,
                    "filters": entry.filters_applied,
                    "results_count": entry.results_count,
                    "searched_at": entry.created_at,
                }
                for entry in entries
            ],
        })

    except Exception as e:
        logger.error(f"Search history error: {e}")
        return error_result(e)
