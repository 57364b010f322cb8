"""
MCP Tool: export_citations

Export the papers of a list as a BibTeX, RIS or APA file.
"""

from __future__ import annotations

import logging
from typing import Any

import mcp.types as types

from ..core import CitationFormat, build_export
from ._runtime import (
    error_result,
    get_export_writer,
    get_list_manager,
    get_settings,
    json_result,
)

logger = logging.getLogger("paper-shelf-server")

# Tool definition
export_citations_tool = types.Tool(
    name="export_citations",
    description="""Export a list's papers as citations.

Formats:
- bibtex: @article entries (.bib)
- ris: RIS records for reference managers (.ris)
- apa: APA-style references (.txt)

The file is saved as `<list name>-citations.<ext>` in the exports directory
and its content is returned. Lists without papers produce no file.""",
    inputSchema={
        "type": "object",
        "properties": {
            "list_id": {"type": "string", "description": "List identifier"},
            "format": {
                "type": "string",
                "enum": [f.value for f in CitationFormat],
                "description": "Citation format (default: bibtex)",
            },
        },
        "required": ["list_id"],
    },
)


async def handle_export_citations(arguments: dict[str, Any]) -> list[types.TextContent]:
    """Handle the export_citations tool call."""
    try:
        fmt = CitationFormat.parse(arguments.get("format") or get_settings().DEFAULT_CITATION_FORMAT)
        manager = get_list_manager()

        paper_list = await manager.get_list(arguments["list_id"])
        papers = await manager.list_papers(paper_list.id)

        export = build_export(papers, fmt, list_name=paper_list.name)
        if export is None:
            return json_result({
                "list_id": paper_list.id,
                "paper_count": 0,
                "message": "No papers to export. Add papers to this list first.",
            })

        path = await get_export_writer().save(export)

        return json_result({
            "list_id": paper_list.id,
            "format": fmt.value,
            "paper_count": export.paper_count,
            "filename": export.filename,
            "media_type": export.media_type,
            "stored_at": str(path),
            "content": export.content,
        })

    except Exception as e:
        logger.error(f"Export error: {e}")
        return error_result(e)
