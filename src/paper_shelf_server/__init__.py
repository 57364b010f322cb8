"""
Paper Shelf Server
==================

Research paper discovery, lists, chat and citation export over MCP.

This package provides:
- core: Pure Python search, highlighting, citation and chat logic (no MCP dependencies)
- resources: Record storage for lists, papers, chats, search history and exports
- tools: MCP tools for discovery, list and export operations
- prompts: MCP prompts for guided research workflows
"""

__version__ = "0.1.0"
__all__ = ["main"]


def main():
    """Run the MCP server."""
    from .server import main as server_main

    server_main()
