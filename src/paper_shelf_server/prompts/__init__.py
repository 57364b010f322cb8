"""
MCP Prompts for guided research workflows.

Prompts provide structured interactions for chatting with
a paper list and building a literature review.
"""

from .prompts import PROMPTS
from .handlers import list_prompts, get_prompt

__all__ = ["PROMPTS", "list_prompts", "get_prompt"]
