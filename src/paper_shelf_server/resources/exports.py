"""
Citation export storage.

Saves rendered citation files to disk.

Storage structure:
    ~/.paper-shelf-server/exports/{list name}-citations.{bib,ris,txt}
"""

from __future__ import annotations

import logging
from pathlib import Path

import aiofiles

from ..core.models import CitationExport

logger = logging.getLogger("paper-shelf-server")


class ExportWriter:
    """Writes CitationExport objects as named text files."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self.path.mkdir(parents=True, exist_ok=True)

    def _get_export_path(self, filename: str) -> Path:
        """Get the file path for an export."""
        # Sanitize filename for filesystem
        safe_name = filename.replace("/", "_").replace(":", "_").replace("\\", "_")
        return self.path / safe_name

    async def save(self, export: CitationExport) -> Path:
        """
        Write an export, replacing any earlier file of the same name.

        Returns:
            Path to the written file.
        """
        export_path = self._get_export_path(export.filename)

        async with aiofiles.open(export_path, "w", encoding="utf-8") as f:
            await f.write(export.content)

        logger.info(f"Exported {export.paper_count} citations: {export_path}")
        return export_path
