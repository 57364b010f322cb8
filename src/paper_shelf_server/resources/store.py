"""
Record storage.

A small relational-style record store: named tables of JSON objects
with equality-filtered select, insert, update and delete. Managers
receive a store handle instead of reaching into global state, so any
backend implementing RecordStore can be swapped in.

Storage structure:
    ~/.paper-shelf-server/records/
    ├── paper_lists.json
    ├── papers.json
    ├── chat_sessions.json
    ├── chat_messages.json
    ├── chat_history.json
    └── search_history.json
"""

from __future__ import annotations

import asyncio
import json
import logging
import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

import aiofiles
import aiofiles.os

from ..core.models import utcnow

logger = logging.getLogger("paper-shelf-server")

TABLES = frozenset({
    "paper_lists",
    "papers",
    "chat_sessions",
    "chat_messages",
    "chat_history",
    "search_history",
})

Record = dict[str, Any]


def _matches(record: Record, filters: Optional[dict[str, Any]]) -> bool:
    """Equality match on every filter key."""
    if not filters:
        return True
    return all(record.get(key) == value for key, value in filters.items())


class RecordStore(ABC):
    """Interface for table-oriented persistence."""

    def _check_table(self, table: str) -> None:
        if table not in TABLES:
            raise ValueError(f"Unknown table: {table}")

    @abstractmethod
    async def select(
        self,
        table: str,
        filters: Optional[dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[Record]:
        """Return records matching all filters."""

    @abstractmethod
    async def insert(self, table: str, record: Record) -> Record:
        """Insert a record and return it with id and timestamps filled in."""

    @abstractmethod
    async def insert_unique(
        self,
        table: str,
        record: Record,
        unique_on: dict[str, Any],
    ) -> Optional[Record]:
        """
        Insert a record unless a row already matches unique_on.

        The check and the insert happen as one operation.

        Returns:
            The inserted record, or None if a matching row exists.
        """

    @abstractmethod
    async def update(
        self,
        table: str,
        values: Record,
        filters: dict[str, Any],
    ) -> int:
        """Update matching records and return how many changed."""

    @abstractmethod
    async def delete(self, table: str, filters: dict[str, Any]) -> int:
        """Delete matching records and return how many were removed."""

    async def get(self, table: str, record_id: str) -> Optional[Record]:
        """Fetch a single record by id."""
        rows = await self.select(table, {"id": record_id}, limit=1)
        return rows[0] if rows else None


class JsonRecordStore(RecordStore):
    """
    Record store backed by one JSON file per table.

    Files are human-readable and safe to inspect or version control.
    Writes are serialised with a lock; each operation reads the table,
    applies the change and writes it back.
    """

    def __init__(self, path: Path):
        """
        Initialize the store.

        Args:
            path: Directory holding the table files.
        """
        self.path = Path(path)
        self.path.mkdir(parents=True, exist_ok=True)
        self._lock = asyncio.Lock()

    def _table_path(self, table: str) -> Path:
        self._check_table(table)
        return self.path / f"{table}.json"

    async def _read(self, table: str) -> list[Record]:
        table_path = self._table_path(table)
        if not table_path.exists():
            return []

        async with aiofiles.open(table_path, "r", encoding="utf-8") as f:
            content = await f.read()

        if not content.strip():
            return []
        return json.loads(content)

    async def _write(self, table: str, records: list[Record]) -> None:
        table_path = self._table_path(table)
        # Readers only ever see the old or the new table
        tmp_path = table_path.with_name(f".{table_path.name}.tmp")
        async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
            await f.write(json.dumps(records, indent=2, default=str))
        await aiofiles.os.replace(tmp_path, table_path)

    async def select(
        self,
        table: str,
        filters: Optional[dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[Record]:
        async with self._lock:
            rows = [r for r in await self._read(table) if _matches(r, filters)]

        if order_by:
            # Ties come out oldest first ascending and newest first descending
            if descending:
                rows.reverse()
            # Missing values sort first; ISO timestamps sort chronologically
            rows.sort(
                key=lambda r: (r.get(order_by) is not None, r.get(order_by) or ""),
                reverse=descending,
            )
        if limit is not None:
            rows = rows[:limit]
        return rows

    @staticmethod
    def _new_row(record: Record) -> Record:
        now = utcnow().isoformat()
        return {
            "id": uuid.uuid4().hex,
            "created_at": now,
            "updated_at": now,
            **record,
        }

    async def insert(self, table: str, record: Record) -> Record:
        row = self._new_row(record)

        async with self._lock:
            rows = await self._read(table)
            rows.append(row)
            await self._write(table, rows)

        logger.info(f"Inserted {table} row {row['id']}")
        return dict(row)

    async def insert_unique(
        self,
        table: str,
        record: Record,
        unique_on: dict[str, Any],
    ) -> Optional[Record]:
        row = self._new_row(record)

        async with self._lock:
            rows = await self._read(table)
            if any(_matches(existing, unique_on) for existing in rows):
                return None
            rows.append(row)
            await self._write(table, rows)

        logger.info(f"Inserted {table} row {row['id']}")
        return dict(row)

    async def update(
        self,
        table: str,
        values: Record,
        filters: dict[str, Any],
    ) -> int:
        async with self._lock:
            rows = await self._read(table)
            changed = 0
            for row in rows:
                if _matches(row, filters):
                    row.update(values)
                    changed += 1
            if changed:
                await self._write(table, rows)

        return changed

    async def delete(self, table: str, filters: dict[str, Any]) -> int:
        async with self._lock:
            rows = await self._read(table)
            kept = [row for row in rows if not _matches(row, filters)]
            removed = len(rows) - len(kept)
            if removed:
                await self._write(table, kept)

        if removed:
            logger.info(f"Deleted {removed} {table} row(s)")
        return removed
