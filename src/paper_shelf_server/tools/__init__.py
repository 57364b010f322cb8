"""
MCP Tools for paper discovery and list operations.

Provides tools for:
- Discovery: search papers, recent searches, highlight text, similar papers
- Lists: create, list, get, update, delete, add paper, remove paper
- Output: export citations, chat with a list, literature review, paper summary
- Chat history: session messages, saved conversations
"""

# Discovery tools
from .search_papers import search_papers_tool, handle_search_papers
from .search_history import recent_searches_tool, handle_recent_searches
from .highlight_text import highlight_text_tool, handle_highlight_text
from .find_similar import find_similar_tool, handle_find_similar

# List tools
from .paper_lists import (
    create_list_tool,
    handle_create_list,
    list_lists_tool,
    handle_list_lists,
    get_list_tool,
    handle_get_list,
    update_list_tool,
    handle_update_list,
    delete_list_tool,
    handle_delete_list,
    add_paper_tool,
    handle_add_paper,
    remove_paper_tool,
    handle_remove_paper,
)

# Output tools
from .export_citations import export_citations_tool, handle_export_citations
from .research_chat import chat_with_list_tool, handle_chat_with_list
from .literature_review import literature_review_tool, handle_literature_review
from .summarize_paper import summarize_paper_tool, handle_summarize_paper

# Chat history tools
from .chat_history import (
    get_chat_messages_tool,
    handle_get_chat_messages,
    list_chat_history_tool,
    handle_list_chat_history,
    get_chat_history_tool,
    handle_get_chat_history,
    save_chat_history_tool,
    handle_save_chat_history,
    delete_chat_history_tool,
    handle_delete_chat_history,
)

__all__ = [
    # Discovery tools
    "search_papers_tool",
    "handle_search_papers",
    "recent_searches_tool",
    "handle_recent_searches",
    "highlight_text_tool",
    "handle_highlight_text",
    "find_similar_tool",
    "handle_find_similar",
    # List tools
    "create_list_tool",
    "handle_create_list",
    "list_lists_tool",
    "handle_list_lists",
    "get_list_tool",
    "handle_get_list",
    "update_list_tool",
    "handle_update_list",
    "delete_list_tool",
    "handle_delete_list",
    "add_paper_tool",
    "handle_add_paper",
    "remove_paper_tool",
    "handle_remove_paper",
    # Output tools
    "export_citations_tool",
    "handle_export_citations",
    "chat_with_list_tool",
    "handle_chat_with_list",
    "literature_review_tool",
    "handle_literature_review",
    "summarize_paper_tool",
    "handle_summarize_paper",
    # Chat history tools
    "get_chat_messages_tool",
    "handle_get_chat_messages",
    "list_chat_history_tool",
    "handle_list_chat_history",
    "get_chat_history_tool",
    "handle_get_chat_history",
    "save_chat_history_tool",
    "handle_save_chat_history",
    "delete_chat_history_tool",
    "handle_delete_chat_history",
]
