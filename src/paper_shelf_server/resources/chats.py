"""
Chat session management.

List-scoped conversations with the chat-completion API. Messages live in
`chat_sessions`/`chat_messages`; saved conversation snapshots live in
`chat_history`.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from ..core.chat import ChatCompletionClient
from ..core.models import (
    ChatHistoryEntry,
    ChatMessage,
    ChatRole,
    ChatSession,
    PaperRecord,
    utcnow,
)
from .store import RecordStore

logger = logging.getLogger("paper-shelf-server")

CONVERSATION_ROLES = (ChatRole.USER.value, ChatRole.ASSISTANT.value)


def _message_from_row(row: dict[str, Any]) -> ChatMessage:
    """Stored messages with an unexpected role are read back as user turns."""
    role = row.get("role") if row.get("role") in CONVERSATION_ROLES else ChatRole.USER.value
    return ChatMessage(
        id=row.get("id"),
        role=role,
        content=row.get("content") or "",
        created_at=row.get("created_at"),
    )


def _history_messages(raw: Any) -> list[ChatMessage]:
    """Keep only well-formed role/content objects from a stored snapshot."""
    if not isinstance(raw, list):
        return []
    messages = []
    for item in raw:
        if (
            isinstance(item, dict)
            and item.get("role") in CONVERSATION_ROLES
            and isinstance(item.get("content"), str)
        ):
            messages.append(ChatMessage(role=item["role"], content=item["content"]))
    return messages


class ChatManager:
    """
    Manages chat sessions, messages and saved chat history.

    Example usage:
        chats = ChatManager(store)
        session = await chats.get_or_create_session(list_id, "Transformers")
        reply = await chats.send_message(session.id, "Summarise", papers, client)
    """

    def __init__(self, store: RecordStore):
        self.store = store

    # ==================== Sessions ====================

    async def get_or_create_session(
        self,
        list_id: str,
        list_name: Optional[str] = None,
    ) -> ChatSession:
        """Return the most recent session for a list, creating one if needed."""
        rows = await self.store.select(
            "chat_sessions", {"list_id": list_id}, order_by="updated_at", descending=True, limit=1
        )
        if rows:
            return ChatSession(**rows[0])

        row = await self.store.insert("chat_sessions", {
            "list_id": list_id,
            "name": f"Chat with {list_name or 'Papers'}",
        })
        return ChatSession(**row)

    async def new_session(
        self,
        list_id: str,
        list_name: Optional[str] = None,
    ) -> ChatSession:
        """Start a fresh session for a list."""
        row = await self.store.insert("chat_sessions", {
            "list_id": list_id,
            "name": f"New Chat with {list_name or 'Papers'}",
        })
        return ChatSession(**row)

    async def get_session(self, session_id: str) -> ChatSession:
        """
        Get one session.

        Raises:
            ValueError: If the session does not exist.
        """
        row = await self.store.get("chat_sessions", session_id)
        if row is None:
            raise ValueError(f"Chat session {session_id} not found.")
        return ChatSession(**row)

    async def load_messages(self, session_id: str) -> list[ChatMessage]:
        """Messages of a session, oldest first."""
        rows = await self.store.select(
            "chat_messages", {"session_id": session_id}, order_by="created_at"
        )
        return [_message_from_row(row) for row in rows]

    async def _save_message(self, session_id: str, role: ChatRole, content: str) -> ChatMessage:
        row = await self.store.insert("chat_messages", {
            "session_id": session_id,
            "role": role.value,
            "content": content,
        })
        return _message_from_row(row)

    async def send_message(
        self,
        session_id: str,
        content: str,
        papers: Sequence[PaperRecord],
        client: ChatCompletionClient,
    ) -> ChatMessage:
        """
        Send a user message and store the assistant's reply.

        The whole conversation plus the list's papers goes to the API.
        If the API fails, the user message stays saved and the error
        propagates.

        Returns:
            The stored assistant message.

        Raises:
            ValueError: If the message is blank or the session does not exist.
            ChatCompletionError: If the chat API fails.
        """
        if not content or not content.strip():
            raise ValueError("Message cannot be empty.")

        await self.get_session(session_id)
        await self._save_message(session_id, ChatRole.USER, content)
        history = await self.load_messages(session_id)

        reply = await client.complete(history, papers=papers)
        assistant = await self._save_message(session_id, ChatRole.ASSISTANT, reply)

        await self.store.update(
            "chat_sessions",
            {"updated_at": utcnow().isoformat(), "name": f"Chat about {len(papers)} papers"},
            {"id": session_id},
        )
        logger.info(f"Chat session {session_id} now has {len(history) + 1} messages")
        return assistant

    # ==================== History ====================

    async def list_history(self, list_id: Optional[str] = None) -> list[ChatHistoryEntry]:
        """Saved conversations, most recently updated first."""
        filters = {"list_id": list_id} if list_id else None
        rows = await self.store.select(
            "chat_history", filters, order_by="updated_at", descending=True
        )
        return [
            ChatHistoryEntry(**{**row, "messages": _history_messages(row.get("messages"))})
            for row in rows
        ]

    async def get_history(self, history_id: str) -> ChatHistoryEntry:
        """
        Get one saved conversation.

        Raises:
            ValueError: If the snapshot does not exist.
        """
        row = await self.store.get("chat_history", history_id)
        if row is None:
            raise ValueError(f"Chat history {history_id} not found.")
        return ChatHistoryEntry(**{**row, "messages": _history_messages(row.get("messages"))})

    async def create_history(self, list_id: str, title: str = "New Chat") -> ChatHistoryEntry:
        """Create an empty saved conversation."""
        row = await self.store.insert("chat_history", {
            "list_id": list_id,
            "title": title,
            "messages": [],
        })
        return ChatHistoryEntry(**row)

    async def update_history(
        self,
        history_id: str,
        messages: Sequence[ChatMessage],
    ) -> bool:
        """Replace the messages of a saved conversation."""
        changed = await self.store.update(
            "chat_history",
            {
                "messages": [message.to_api() for message in messages],
                "updated_at": utcnow().isoformat(),
            },
            {"id": history_id},
        )
        return changed > 0

    async def delete_history(self, history_id: str) -> bool:
        """Delete a saved conversation."""
        return await self.store.delete("chat_history", {"id": history_id}) > 0
