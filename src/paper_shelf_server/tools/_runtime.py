"""
Shared lazily-created services for the MCP tools.

Every tool talks to the same record store so table writes go through
one lock.
"""

from __future__ import annotations

import json
from typing import Any

import mcp.types as types

from ..config import Settings
from ..core import ChatCompletionClient, DiscoveryService
from ..resources import (
    ChatManager,
    ExportWriter,
    JsonRecordStore,
    ListManager,
    SearchHistoryManager,
)

_settings: Settings | None = None
_store: JsonRecordStore | None = None
_service: DiscoveryService | None = None


def get_settings() -> Settings:
    """Get or create the settings."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def get_store() -> JsonRecordStore:
    """Get or create the record store."""
    global _store
    if _store is None:
        _store = JsonRecordStore(get_settings().STORAGE_PATH)
    return _store


def get_service() -> DiscoveryService:
    """Get or create the discovery service."""
    global _service
    if _service is None:
        settings = get_settings()
        chat_client = ChatCompletionClient(
            api_key=settings.CHAT_API_KEY,
            base_url=settings.CHAT_API_BASE,
            model=settings.CHAT_MODEL,
            temperature=settings.CHAT_TEMPERATURE,
            max_tokens=settings.CHAT_MAX_TOKENS,
            timeout=settings.REQUEST_TIMEOUT,
        )
        _service = DiscoveryService(
            s2_api_key=settings.S2_API_KEY,
            openalex_mailto=settings.OPENALEX_MAILTO,
            chat_client=chat_client,
            timeout=settings.REQUEST_TIMEOUT,
        )
    return _service


def get_list_manager() -> ListManager:
    return ListManager(get_store())


def get_chat_manager() -> ChatManager:
    return ChatManager(get_store())


def get_history_manager() -> SearchHistoryManager:
    return SearchHistoryManager(get_store(), limit=get_settings().RECENT_SEARCH_LIMIT)


def get_export_writer() -> ExportWriter:
    return ExportWriter(get_settings().EXPORTS_PATH)


def json_result(data: Any) -> list[types.TextContent]:
    """Wrap a JSON-serialisable result as MCP text content."""
    return [types.TextContent(type="text", text=json.dumps(data, indent=2, default=str))]


def error_result(error: Exception | str) -> list[types.TextContent]:
    """Report a tool failure."""
    return json_result({"error": str(error)})
