"""
MCP Tools: paper lists

Create, inspect, rename and delete paper lists, and add or remove papers.
"""

from __future__ import annotations

import logging
from typing import Any

import mcp.types as types

from ..core import PaperList, PaperRecord, PaperSource, SavedPaper
from ._runtime import error_result, get_list_manager, get_service, json_result

logger = logging.getLogger("paper-shelf-server")

LIST_ID_PROPERTY = {"type": "string", "description": "List identifier"}


def _list_dict(paper_list: PaperList, paper_count: int | None = None) -> dict[str, Any]:
    data = {
        "id": paper_list.id,
        "name": paper_list.name,
        "description": paper_list.description,
        "has_literature_review": bool(paper_list.literature_review),
        "created_at": paper_list.created_at,
    }
    if paper_count is not None:
        data["paper_count"] = paper_count
    return data


def _paper_dict(paper: SavedPaper) -> dict[str, Any]:
    return {
        "id": paper.id,
        "title": paper.title,
        "authors": paper.authors,
        "year": paper.publication_year,
        "journal": paper.journal,
        "external_id": paper.external_id,
        "has_summary": bool(paper.summary),
    }


# Tool definitions
create_list_tool = types.Tool(
    name="create_list",
    description="Create a named list for collecting papers.",
    inputSchema={
        "type": "object",
        "properties": {
            "name": {"type": "string", "description": "List name"},
            "description": {"type": "string", "description": "Optional description"},
        },
        "required": ["name"],
    },
)

list_lists_tool = types.Tool(
    name="list_lists",
    description="List all paper lists, newest first, with paper counts.",
    inputSchema={"type": "object", "properties": {}},
)

get_list_tool = types.Tool(
    name="get_list",
    description="""Show a list with its papers.

Includes the stored literature review when one has been generated.""",
    inputSchema={
        "type": "object",
        "properties": {"list_id": LIST_ID_PROPERTY},
        "required": ["list_id"],
    },
)

update_list_tool = types.Tool(
    name="update_list",
    description="Rename a list or change its description.",
    inputSchema={
        "type": "object",
        "properties": {
            "list_id": LIST_ID_PROPERTY,
            "name": {"type": "string", "description": "New name"},
            "description": {"type": "string", "description": "New description"},
        },
        "required": ["list_id"],
    },
)

delete_list_tool = types.Tool(
    name="delete_list",
    description="""Delete a list.

This also deletes all papers in the list and its chats. It cannot be undone.""",
    inputSchema={
        "type": "object",
        "properties": {"list_id": LIST_ID_PROPERTY},
        "required": ["list_id"],
    },
)

add_paper_tool = types.Tool(
    name="add_paper_to_list",
    description="""Save a paper into a list.

Either pass `external_id` and `source` from search_papers (the paper is
fetched from the index), or pass the paper's details directly with
`title` and optional `authors`, `year`, `journal`, `abstract`.""",
    inputSchema={
        "type": "object",
        "properties": {
            "list_id": LIST_ID_PROPERTY,
            "external_id": {"type": "string", "description": "Paper ID in the index"},
            "source": {
                "type": "string",
                "enum": ["semantic_scholar", "openalex"],
                "default": "semantic_scholar",
            },
            "title": {"type": "string"},
            "authors": {"type": "array", "items": {"type": "string"}},
            "year": {"type": "integer"},
            "journal": {"type": "string"},
            "abstract": {"type": "string"},
        },
        "required": ["list_id"],
    },
)

remove_paper_tool = types.Tool(
    name="remove_paper_from_list",
    description="Remove a saved paper from its list.",
    inputSchema={
        "type": "object",
        "properties": {"paper_id": {"type": "string", "description": "Saved paper identifier"}},
        "required": ["paper_id"],
    },
)


async def handle_create_list(arguments: dict[str, Any]) -> list[types.TextContent]:
    """Handle the create_list tool call."""
    try:
        paper_list = await get_list_manager().create_list(
            arguments["name"], arguments.get("description")
        )
        return json_result({"list": _list_dict(paper_list, 0)})
    except Exception as e:
        logger.error(f"Create list error: {e}")
        return error_result(e)


async def handle_list_lists(arguments: dict[str, Any]) -> list[types.TextContent]:
    """Handle the list_lists tool call."""
    try:
        lists = await get_list_manager().list_lists()
        result: dict[str, Any] = {
            "total_lists": len(lists),
            "lists": [_list_dict(paper_list, count) for paper_list, count in lists],
        }
        if not lists:
            result["message"] = "No lists yet. Use create_list to start one."
        return json_result(result)
    except Exception as e:
        logger.error(f"List lists error: {e}")
        return error_result(e)


async def handle_get_list(arguments: dict[str, Any]) -> list[types.TextContent]:
    """Handle the get_list tool call."""
    try:
        manager = get_list_manager()
        paper_list = await manager.get_list(arguments["list_id"])
        papers = await manager.list_papers(paper_list.id)

        return json_result({
            "list": _list_dict(paper_list, len(papers)),
            "papers": [_paper_dict(paper) for paper in papers],
            "literature_review": paper_list.literature_review,
        })
    except Exception as e:
        logger.error(f"Get list error: {e}")
        return error_result(e)


async def handle_update_list(arguments: dict[str, Any]) -> list[types.TextContent]:
    """Handle the update_list tool call."""
    try:
        paper_list = await get_list_manager().update_list(
            arguments["list_id"],
            name=arguments.get("name"),
            description=arguments.get("description"),
        )
        return json_result({"list": _list_dict(paper_list)})
    except Exception as e:
        logger.error(f"Update list error: {e}")
        return error_result(e)


async def handle_delete_list(arguments: dict[str, Any]) -> list[types.TextContent]:
    """Handle the delete_list tool call."""
    try:
        removed = await get_list_manager().delete_list(arguments["list_id"])
        return json_result({
            "deleted": arguments["list_id"],
            "papers_removed": removed,
            "message": "List deleted successfully.",
        })
    except Exception as e:
        logger.error(f"Delete list error: {e}")
        return error_result(e)


async def handle_add_paper(arguments: dict[str, Any]) -> list[types.TextContent]:
    """Handle the add_paper_to_list tool call."""
    try:
        list_id = arguments["list_id"]
        external_id = arguments.get("external_id")

        if arguments.get("title"):
            paper = PaperRecord(
                title=arguments["title"],
                authors=arguments.get("authors") or [],
                abstract=arguments.get("abstract"),
                publication_year=arguments.get("year"),
                journal=arguments.get("journal"),
            )
        elif external_id:
            source = PaperSource(arguments.get("source", PaperSource.SEMANTIC_SCHOLAR.value))
            paper = await get_service().get_paper(external_id, source=source)
            if paper is None:
                return error_result(f"Paper {external_id} not found on {source.value}.")
        else:
            return error_result("Provide either external_id or title.")

        saved = await get_list_manager().add_paper(list_id, paper, external_id=external_id)
        return json_result({"paper": _paper_dict(saved), "message": "Paper added to list."})

    except Exception as e:
        logger.error(f"Add paper error: {e}")
        return error_result(e)


async def handle_remove_paper(arguments: dict[str, Any]) -> list[types.TextContent]:
    """Handle the remove_paper_from_list tool call."""
    try:
        paper_id = arguments["paper_id"]
        removed = await get_list_manager().remove_paper(paper_id)
        if not removed:
            return error_result(f"Paper {paper_id} not found.")
        return json_result({"removed": paper_id, "message": "Paper removed from list."})
    except Exception as e:
        logger.error(f"Remove paper error: {e}")
        return error_result(e)
