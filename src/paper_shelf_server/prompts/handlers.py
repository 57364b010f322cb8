"""
Handlers for prompt-related requests.

These handlers process prompt requests and generate the guidance
text for each research workflow.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from mcp.types import (
    GetPromptResult,
    Prompt,
    PromptMessage,
    TextContent,
)

from .prompts import PROMPTS


RESEARCH_CHAT_GUIDANCE = """
## Research Chat for list {list_id}

First, review what the list holds using `get_list` with:
- list_id: "{list_id}"

Then use `chat_with_list` to ask questions. Answers come only from the
papers in the list; if the papers do not cover a question the assistant
will say so.

Good questions to ask:

1. **Scope**
   - What problems do these papers address?
   - Which datasets or settings do they use?

2. **Methods**
   - How do the approaches differ?
   - Which methods are shared across papers?

3. **Findings**
   - Where do the results agree or conflict?
   - What limitations do the authors report?

{opening}

When the conversation is done, offer to export the list with
`export_citations`.
"""

LITERATURE_REVIEW_GUIDANCE = """
## Literature Review: {topic}

1. **Search**
   Use `search_papers` with query "{topic}". Try both sources
   (`semantic_scholar` and `openalex`) and narrow with year or field
   filters if the results are broad.

2. **Collect**
   Create a list with `create_list` named "{topic}", then add the
   {paper_count} most relevant papers with `add_paper_to_list`, using the
   `external_id` and `source` from the search results.

3. **Review**
   Run `generate_literature_review` on the list and present the result.

4. **Cite**
   Export the list with `export_citations` in `{citation_format}` format
   and report where the file was saved.
"""

CITATION_FORMATS = ("bibtex", "ris", "apa")


async def list_prompts() -> List[Prompt]:
    """List all available prompts."""
    return list(PROMPTS.values())


async def get_prompt(
    name: str,
    arguments: Optional[Dict[str, str]] = None,
) -> GetPromptResult:
    """
    Get a specific prompt with arguments.

    Args:
        name: The name of the prompt to get.
        arguments: Arguments for the prompt.

    Returns:
        GetPromptResult with the prompt messages.

    Raises:
        ValueError: If prompt not found or required arguments missing.
    """
    if name not in PROMPTS:
        raise ValueError(f"Prompt not found: {name}")

    prompt = PROMPTS[name]
    arguments = arguments or {}

    # Validate required arguments
    for arg in prompt.arguments or []:
        if arg.required and arg.name not in arguments:
            raise ValueError(f"Missing required argument: {arg.name}")

    if name == "research-chat":
        content = _generate_research_chat_prompt(arguments)
    elif name == "literature-review":
        content = _generate_literature_review_prompt(arguments)
    else:
        raise ValueError(f"No handler for prompt: {name}")

    return GetPromptResult(
        messages=[
            PromptMessage(
                role="user",
                content=TextContent(type="text", text=content),
            )
        ]
    )


def _generate_research_chat_prompt(arguments: Dict[str, str]) -> str:
    """Generate research chat prompt content."""
    question = arguments.get("question", "").strip()
    opening = f'Start with this question: "{question}"' if question else ""

    return RESEARCH_CHAT_GUIDANCE.format(
        list_id=arguments["list_id"],
        opening=opening,
    )


def _generate_literature_review_prompt(arguments: Dict[str, str]) -> str:
    """Generate literature review prompt content."""
    paper_count = arguments.get("paper_count", "10")
    citation_format = arguments.get("citation_format", "bibtex").lower()

    if citation_format not in CITATION_FORMATS:
        citation_format = "bibtex"

    return LITERATURE_REVIEW_GUIDANCE.format(
        topic=arguments["topic"],
        paper_count=paper_count,
        citation_format=citation_format,
    )
