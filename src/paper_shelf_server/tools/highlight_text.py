"""
MCP Tool: highlight_text

Mark search terms in a piece of text.
"""

from __future__ import annotations

import logging
from typing import Any

import mcp.types as types

from ..core import highlight, render_spans
from ._runtime import error_result, json_result

logger = logging.getLogger("paper-shelf-server")

# Tool definition
highlight_text_tool = types.Tool(
    name="highlight_text",
    description="""Highlight search terms in text.

Matching is case-insensitive and finds terms inside longer words.
With max_length, the text is cut (and '...' appended) before highlighting.

Returns the rendered text (markdown **bold** or HTML <mark>) and the
plain/match spans it was built from.""",
    inputSchema={
        "type": "object",
        "properties": {
            "text": {"type": "string", "description": "Text to highlight"},
            "terms": {
                "type": "array",
                "items": {"type": "string"},
                "description": "Terms to highlight",
            },
            "max_length": {
                "type": "integer",
                "description": "Truncate to this many characters first",
            },
            "style": {
                "type": "string",
                "enum": ["markdown", "html"],
                "default": "markdown",
            },
        },
        "required": ["text", "terms"],
    },
)


async def handle_highlight_text(arguments: dict[str, Any]) -> list[types.TextContent]:
    """Handle the highlight_text tool call."""
    try:
        spans = highlight(
            arguments["text"],
            arguments.get("terms") or [],
            max_length=arguments.get("max_length"),
        )
        style = arguments.get("style", "markdown")

        return json_result({
            "rendered": render_spans(spans, style=style),
            "match_count": sum(1 for span in spans if span.is_match),
            "spans": [span.model_dump(mode="json") for span in spans],
        })

    except Exception as e:
        logger.error(f"Highlight error: {e}")
        return error_result(e)
