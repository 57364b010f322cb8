"""
MCP Tool: chat_with_list

Ask questions answered only from the papers in a list.
"""

from __future__ import annotations

import logging
from typing import Any

import mcp.types as types

from ._runtime import (
    error_result,
    get_chat_manager,
    get_list_manager,
    get_service,
    json_result,
)

logger = logging.getLogger("paper-shelf-server")

# Tool definition
chat_with_list_tool = types.Tool(
    name="chat_with_list",
    description="""Chat with an AI assistant about the papers in a list.

The assistant only answers from the titles, abstracts and stored summaries
of the list's papers. The conversation is kept per list: later messages
continue the same session unless `new_session` is true.""",
    inputSchema={
        "type": "object",
        "properties": {
            "list_id": {"type": "string", "description": "List identifier"},
            "message": {"type": "string", "description": "Your question"},
            "new_session": {
                "type": "boolean",
                "description": "Start a fresh conversation",
                "default": False,
            },
        },
        "required": ["list_id", "message"],
    },
)


async def handle_chat_with_list(arguments: dict[str, Any]) -> list[types.TextContent]:
    """Handle the chat_with_list tool call."""
    try:
        lists = get_list_manager()
        chats = get_chat_manager()

        paper_list = await lists.get_list(arguments["list_id"])
        papers = await lists.list_papers(paper_list.id)

        if arguments.get("new_session", False):
            session = await chats.new_session(paper_list.id, paper_list.name)
        else:
            session = await chats.get_or_create_session(paper_list.id, paper_list.name)

        reply = await chats.send_message(
            session.id,
            arguments["message"],
            papers,
            get_service().chat,
        )

        return json_result({
            "session_id": session.id,
            "list_id": paper_list.id,
            "paper_count": len(papers),
            "reply": reply.content,
        })

    except Exception as e:
        logger.error(f"Chat error: {e}")
        return error_result(e)
