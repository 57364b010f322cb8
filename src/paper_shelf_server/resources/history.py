"""
Recent search history, stored in the `search_history` table.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from ..core.models import SearchHistoryEntry
from .store import RecordStore

logger = logging.getLogger("paper-shelf-server")


class SearchHistoryManager:
    """Records searches and returns the most recent ones."""

    def __init__(self, store: RecordStore, limit: int = 5):
        self.store = store
        self.limit = limit

    async def record(
        self,
        query: str,
        filters: Optional[dict[str, Any]] = None,
        results_count: int = 0,
    ) -> SearchHistoryEntry:
        row = await self.store.insert("search_history", {
            "search_query": query,
            "filters_applied": filters or {},
            "results_count": results_count,
        })
        return SearchHistoryEntry(**row)

    async def recent(self) -> list[SearchHistoryEntry]:
        rows = await self.store.select(
            "search_history", order_by="created_at", descending=True, limit=self.limit
        )
        return [SearchHistoryEntry(**row) for row in rows]

    async def clear(self) -> int:
        removed = await self.store.delete("search_history", {})
        logger.info(f"Cleared {removed} searches from history")
        return removed
