"""
Paper list management.

Named lists of saved papers, stored in the `paper_lists` and `papers`
tables of a RecordStore.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from ..core.models import PaperList, PaperRecord, SavedPaper, utcnow
from .store import RecordStore

logger = logging.getLogger("paper-shelf-server")


class ListManager:
    """
    Manages paper lists and the papers saved in them.

    Example usage:
        manager = ListManager(store)
        reading = await manager.create_list("Transformers")
        await manager.add_paper(reading.id, paper)
    """

    def __init__(self, store: RecordStore):
        self.store = store

    async def _require_list(self, list_id: str) -> dict[str, Any]:
        row = await self.store.get("paper_lists", list_id)
        if row is None:
            raise ValueError(f"List {list_id} not found.")
        return row

    # ==================== Lists ====================

    async def create_list(self, name: str, description: Optional[str] = None) -> PaperList:
        """
        Create a new list.

        Raises:
            ValueError: If the name is blank.
        """
        if not name or not name.strip():
            raise ValueError("List name cannot be empty.")

        row = await self.store.insert("paper_lists", {
            "name": name.strip(),
            "description": (description or "").strip() or None,
            "literature_review": None,
        })
        logger.info(f"Created list '{row['name']}' ({row['id']})")
        return PaperList(**row)

    async def get_list(self, list_id: str) -> PaperList:
        """
        Get one list.

        Raises:
            ValueError: If the list does not exist.
        """
        return PaperList(**await self._require_list(list_id))

    async def list_lists(self) -> list[tuple[PaperList, int]]:
        """All lists, newest first, each with its paper count."""
        rows = await self.store.select("paper_lists", order_by="created_at", descending=True)
        papers = await self.store.select("papers")

        counts: dict[str, int] = {}
        for paper in papers:
            counts[paper["list_id"]] = counts.get(paper["list_id"], 0) + 1

        return [(PaperList(**row), counts.get(row["id"], 0)) for row in rows]

    async def update_list(
        self,
        list_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> PaperList:
        """
        Rename a list or change its description.

        Raises:
            ValueError: If the list does not exist or the new name is blank.
        """
        await self._require_list(list_id)

        values: dict[str, Any] = {"updated_at": utcnow().isoformat()}
        if name is not None:
            if not name.strip():
                raise ValueError("List name cannot be empty.")
            values["name"] = name.strip()
        if description is not None:
            values["description"] = description.strip() or None

        await self.store.update("paper_lists", values, {"id": list_id})
        return await self.get_list(list_id)

    async def delete_list(self, list_id: str) -> int:
        """
        Delete a list together with its papers and chats.

        Returns:
            Number of papers removed with the list.

        Raises:
            ValueError: If the list does not exist.
        """
        await self._require_list(list_id)

        removed = await self.store.delete("papers", {"list_id": list_id})
        sessions = await self.store.select("chat_sessions", {"list_id": list_id})
        for session in sessions:
            await self.store.delete("chat_messages", {"session_id": session["id"]})
        await self.store.delete("chat_sessions", {"list_id": list_id})
        await self.store.delete("chat_history", {"list_id": list_id})
        await self.store.delete("paper_lists", {"id": list_id})

        logger.info(f"Deleted list {list_id} and {removed} papers")
        return removed

    async def save_literature_review(self, list_id: str, review: str) -> None:
        """Store a generated literature review on the list."""
        await self._require_list(list_id)
        await self.store.update(
            "paper_lists",
            {"literature_review": review, "updated_at": utcnow().isoformat()},
            {"id": list_id},
        )

    # ==================== Papers ====================

    async def add_paper(
        self,
        list_id: str,
        paper: PaperRecord,
        external_id: Optional[str] = None,
    ) -> SavedPaper:
        """
        Save a paper into a list.

        Args:
            list_id: Target list.
            paper: The paper. A SearchPaper carries its own external_id.
            external_id: Index identifier, overriding the paper's own.

        Raises:
            ValueError: If the list does not exist or already holds
                        a paper with the same external_id.
        """
        await self._require_list(list_id)

        external_id = external_id or getattr(paper, "external_id", None)
        record = {
            "list_id": list_id,
            "title": paper.title,
            "authors": list(paper.authors),
            "abstract": paper.abstract,
            "publication_year": paper.publication_year,
            "journal": paper.journal,
            "external_id": external_id,
            "summary": None,
        }

        if external_id:
            row = await self.store.insert_unique(
                "papers", record, {"list_id": list_id, "external_id": external_id}
            )
            if row is None:
                raise ValueError(f"Paper '{paper.title}' is already in this list.")
        else:
            row = await self.store.insert("papers", record)

        logger.info(f"Saved paper '{paper.title}' to list {list_id}")
        return SavedPaper(**row)

    async def get_paper(self, paper_id: str) -> SavedPaper:
        """
        Get one saved paper.

        Raises:
            ValueError: If the paper does not exist.
        """
        row = await self.store.get("papers", paper_id)
        if row is None:
            raise ValueError(f"Paper {paper_id} not found.")
        return SavedPaper(**row)

    async def list_papers(self, list_id: str) -> list[SavedPaper]:
        """Papers in a list, in the order they were saved."""
        rows = await self.store.select("papers", {"list_id": list_id}, order_by="created_at")
        return [SavedPaper(**row) for row in rows]

    async def remove_paper(self, paper_id: str) -> bool:
        """Remove a saved paper. Returns False if it did not exist."""
        return await self.store.delete("papers", {"id": paper_id}) > 0

    async def save_summary(self, paper_id: str, summary: str) -> SavedPaper:
        """
        Store a generated summary on a saved paper.

        Raises:
            ValueError: If the paper does not exist.
        """
        await self.get_paper(paper_id)
        await self.store.update(
            "papers",
            {"summary": {"content": summary, "generated_at": utcnow().isoformat()}},
            {"id": paper_id},
        )
        return await self.get_paper(paper_id)
