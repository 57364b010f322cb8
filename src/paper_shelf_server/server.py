"""
Paper Shelf MCP Server
======================

This module implements an MCP server for discovering research papers,
organising them into lists, chatting about them and exporting citations.
"""

import logging
import sys
from typing import Any, Awaitable, Callable, Dict, List

import mcp.types as types
from mcp.server import NotificationOptions, Server
from mcp.server.models import InitializationOptions
from mcp.server.stdio import stdio_server

from .prompts.handlers import get_prompt as handler_get_prompt
from .prompts.handlers import list_prompts as handler_list_prompts
from .tools import (
    # Discovery tools
    search_papers_tool,
    handle_search_papers,
    recent_searches_tool,
    handle_recent_searches,
    highlight_text_tool,
    handle_highlight_text,
    find_similar_tool,
    handle_find_similar,
    # List tools
    create_list_tool,
    handle_create_list,
    list_lists_tool,
    handle_list_lists,
    get_list_tool,
    handle_get_list,
    update_list_tool,
    handle_update_list,
    delete_list_tool,
    handle_delete_list,
    add_paper_tool,
    handle_add_paper,
    remove_paper_tool,
    handle_remove_paper,
    # Output tools
    export_citations_tool,
    handle_export_citations,
    chat_with_list_tool,
    handle_chat_with_list,
    literature_review_tool,
    handle_literature_review,
    summarize_paper_tool,
    handle_summarize_paper,
    # Chat history tools
    get_chat_messages_tool,
    handle_get_chat_messages,
    list_chat_history_tool,
    handle_list_chat_history,
    get_chat_history_tool,
    handle_get_chat_history,
    save_chat_history_tool,
    handle_save_chat_history,
    delete_chat_history_tool,
    handle_delete_chat_history,
)
from .tools._runtime import get_settings

# Initialize settings and server
settings = get_settings()

# Configure logging to stderr (stdout is reserved for MCP JSON-RPC)
logging.basicConfig(
    level=logging.WARNING,
    format="%(name)s - %(levelname)s - %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger("paper-shelf-server")

# Create MCP server
server = Server(settings.APP_NAME)

ToolHandler = Callable[[Dict[str, Any]], Awaitable[List[types.TextContent]]]

TOOLS: List[types.Tool] = [
    # Discovery tools
    search_papers_tool,
    recent_searches_tool,
    highlight_text_tool,
    find_similar_tool,
    # List tools
    create_list_tool,
    list_lists_tool,
    get_list_tool,
    update_list_tool,
    delete_list_tool,
    add_paper_tool,
    remove_paper_tool,
    # Output tools
    export_citations_tool,
    chat_with_list_tool,
    literature_review_tool,
    summarize_paper_tool,
    # Chat history tools
    get_chat_messages_tool,
    list_chat_history_tool,
    get_chat_history_tool,
    save_chat_history_tool,
    delete_chat_history_tool,
]

TOOL_HANDLERS: Dict[str, ToolHandler] = {
    "search_papers": handle_search_papers,
    "recent_searches": handle_recent_searches,
    "highlight_text": handle_highlight_text,
    "find_similar_papers": handle_find_similar,
    "create_list": handle_create_list,
    "list_lists": handle_list_lists,
    "get_list": handle_get_list,
    "update_list": handle_update_list,
    "delete_list": handle_delete_list,
    "add_paper_to_list": handle_add_paper,
    "remove_paper_from_list": handle_remove_paper,
    "export_citations": handle_export_citations,
    "chat_with_list": handle_chat_with_list,
    "generate_literature_review": handle_literature_review,
    "summarize_paper": handle_summarize_paper,
    "get_chat_messages": handle_get_chat_messages,
    "list_chat_history": handle_list_chat_history,
    "get_chat_history": handle_get_chat_history,
    "save_chat_history": handle_save_chat_history,
    "delete_chat_history": handle_delete_chat_history,
}


@server.list_prompts()
async def list_prompts() -> List[types.Prompt]:
    """List available research workflow prompts."""
    return await handler_list_prompts()


@server.get_prompt()
async def get_prompt(
    name: str,
    arguments: Dict[str, str] | None = None,
) -> types.GetPromptResult:
    """Get a specific prompt with arguments."""
    return await handler_get_prompt(name, arguments)


@server.list_tools()
async def list_tools() -> List[types.Tool]:
    """List available discovery, list and export tools."""
    return TOOLS


@server.call_tool()
async def call_tool(
    name: str,
    arguments: Dict[str, Any],
) -> List[types.TextContent]:
    """Dispatch a tool call to its handler."""
    logger.debug(f"Calling tool {name} with arguments {arguments}")

    handler = TOOL_HANDLERS.get(name)
    if handler is None:
        return [
            types.TextContent(
                type="text",
                text=f"Error: Unknown tool '{name}'",
            )
        ]

    try:
        return await handler(arguments or {})
    except Exception as e:
        logger.error(f"Tool error: {str(e)}")
        return [
            types.TextContent(
                type="text",
                text=f"Error: {str(e)}",
            )
        ]


async def _async_main():
    """Async entry point for the MCP server."""
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Records path: {settings.STORAGE_PATH}")
    logger.info(f"Exports path: {settings.EXPORTS_PATH}")

    async with stdio_server() as streams:
        await server.run(
            streams[0],
            streams[1],
            InitializationOptions(
                server_name=settings.APP_NAME,
                server_version=settings.APP_VERSION,
                capabilities=server.get_capabilities(
                    notification_options=NotificationOptions(),
                    experimental_capabilities={},
                ),
            ),
        )


def main():
    """Run the MCP server (synchronous entry point)."""
    import asyncio
    asyncio.run(_async_main())
