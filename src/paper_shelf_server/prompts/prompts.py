"""
Prompt definitions for working with paper lists.

These prompts guide users through common research workflows.
"""

import mcp.types as types

# Prompt definitions
PROMPTS = {
    "research-chat": types.Prompt(
        name="research-chat",
        description="""Question a list of papers through the list-grounded chat.

This prompt guides a question-answering session where every answer
comes only from the papers saved in a list:
- Checking which papers the list holds
- Asking focused questions about methods, findings and disagreements
- Exporting the papers cited in the answers""",
        arguments=[
            types.PromptArgument(
                name="list_id",
                description="List to chat about",
                required=True,
            ),
            types.PromptArgument(
                name="question",
                description="Opening question (optional)",
                required=False,
            ),
        ],
    ),

    "literature-review": types.Prompt(
        name="literature-review",
        description="""Build a literature review for a research topic.

This prompt walks through the full workflow:
- Searching paper indexes for the topic
- Collecting relevant papers into a new list
- Generating the review and exporting citations""",
        arguments=[
            types.PromptArgument(
                name="topic",
                description="Research topic to review",
                required=True,
            ),
            types.PromptArgument(
                name="paper_count",
                description="How many papers to collect (default: 10)",
                required=False,
            ),
            types.PromptArgument(
                name="citation_format",
                description="Export format: 'bibtex', 'ris' or 'apa' (default: bibtex)",
                required=False,
            ),
        ],
    ),
}
