"""
MCP Tools: chat history

Read back a chat session, and list, load, save or delete saved
conversations.
"""

from __future__ import annotations

import logging
from typing import Any

import mcp.types as types

from ..core import ChatHistoryEntry, ChatMessage
from ._runtime import error_result, get_chat_manager, json_result

logger = logging.getLogger("paper-shelf-server")

HISTORY_ID_PROPERTY = {"type": "string", "description": "Saved conversation identifier"}


def _message_dict(message: ChatMessage) -> dict[str, Any]:
    return {
        "role": message.role.value,
        "content": message.content,
        "created_at": message.created_at,
    }


def _history_dict(entry: ChatHistoryEntry, include_messages: bool = False) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": entry.id,
        "list_id": entry.list_id,
        "title": entry.title,
        "message_count": len(entry.messages),
        "updated_at": entry.updated_at,
    }
    if include_messages:
        data["messages"] = [_message_dict(message) for message in entry.messages]
    return data


# Tool definitions
get_chat_messages_tool = types.Tool(
    name="get_chat_messages",
    description="""Show the messages of a chat session, oldest first.

Use the `session_id` returned by chat_with_list.""",
    inputSchema={
        "type": "object",
        "properties": {
            "session_id": {"type": "string", "description": "Chat session identifier"},
        },
        "required": ["session_id"],
    },
)

list_chat_history_tool = types.Tool(
    name="list_chat_history",
    description="List saved conversations, most recently updated first.",
    inputSchema={
        "type": "object",
        "properties": {
            "list_id": {"type": "string", "description": "Only conversations about this list"},
        },
    },
)

get_chat_history_tool = types.Tool(
    name="get_chat_history",
    description="Load a saved conversation with its messages.",
    inputSchema={
        "type": "object",
        "properties": {"history_id": HISTORY_ID_PROPERTY},
        "required": ["history_id"],
    },
)

save_chat_history_tool = types.Tool(
    name="save_chat_history",
    description="""Save a chat session's messages as a conversation snapshot.

Without `history_id` a new snapshot is created (titled `title`, or the
session name). With `history_id` that snapshot's messages are replaced.""",
    inputSchema={
        "type": "object",
        "properties": {
            "session_id": {"type": "string", "description": "Chat session to save"},
            "history_id": HISTORY_ID_PROPERTY,
            "title": {"type": "string", "description": "Title for a new snapshot"},
        },
        "required": ["session_id"],
    },
)

delete_chat_history_tool = types.Tool(
    name="delete_chat_history",
    description="Delete a saved conversation. The chat session itself is kept.",
    inputSchema={
        "type": "object",
        "properties": {"history_id": HISTORY_ID_PROPERTY},
        "required": ["history_id"],
    },
)


async def handle_get_chat_messages(arguments: dict[str, Any]) -> list[types.TextContent]:
    """Handle the get_chat_messages tool call."""
    try:
        chats = get_chat_manager()
        session = await chats.get_session(arguments["session_id"])
        messages = await chats.load_messages(session.id)

        return json_result({
            "session_id": session.id,
            "list_id": session.list_id,
            "name": session.name,
            "messages": [_message_dict(message) for message in messages],
        })
    except Exception as e:
        logger.error(f"Chat messages error: {e}")
        return error_result(e)


async def handle_list_chat_history(arguments: dict[str, Any]) -> list[types.TextContent]:
    """Handle the list_chat_history tool call."""
    try:
        entries = await get_chat_manager().list_history(arguments.get("list_id"))
        return json_result({
            "total": len(entries),
            "conversations": [_history_dict(entry) for entry in entries],
        })
    except Exception as e:
        logger.error(f"Chat history error: {e}")
        return error_result(e)


async def handle_get_chat_history(arguments: dict[str, Any]) -> list[types.TextContent]:
    """Handle the get_chat_history tool call."""
    try:
        entry = await get_chat_manager().get_history(arguments["history_id"])
        return json_result({"conversation": _history_dict(entry, include_messages=True)})
    except Exception as e:
        logger.error(f"Chat history error: {e}")
        return error_result(e)


async def handle_save_chat_history(arguments: dict[str, Any]) -> list[types.TextContent]:
    """Handle the save_chat_history tool call."""
    try:
        chats = get_chat_manager()
        session = await chats.get_session(arguments["session_id"])
        messages = await chats.load_messages(session.id)

        history_id = arguments.get("history_id")
        if history_id is None:
            entry = await chats.create_history(session.list_id, arguments.get("title") or session.name)
            history_id = entry.id

        if not await chats.update_history(history_id, messages):
            return error_result(f"Chat history {history_id} not found.")

        entry = await chats.get_history(history_id)
        return json_result({"conversation": _history_dict(entry), "message": "Conversation saved."})
    except Exception as e:
        logger.error(f"Save chat history error: {e}")
        return error_result(e)


async def handle_delete_chat_history(arguments: dict[str, Any]) -> list[types.TextContent]:
    """Handle the delete_chat_history tool call."""
    try:
        history_id = arguments["history_id"]
        if not await get_chat_manager().delete_history(history_id):
            return error_result(f"Chat history {history_id} not found.")
        return json_result({"deleted": history_id, "message": "Conversation deleted."})
    except Exception as e:
        logger.error(f"Delete chat history error: {e}")
        return error_result(e)
