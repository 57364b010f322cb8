"""
Discovery service - main business logic.

This is the core service that can be used by both MCP tools
and web applications. It has NO MCP dependencies.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence, Union

from .chat import (
    ChatCompletionClient,
    build_literature_review_messages,
    build_summary_messages,
)
from .client import OpenAlexClient, SemanticScholarClient
from .models import PaperRecord, PaperSource, SearchFilters, SearchPaper, SearchResult

logger = logging.getLogger("paper-shelf-server")


class DiscoveryService:
    """
    Paper search and AI writing assistance.

    This class wraps the paper indexes and the chat-completion API
    without any MCP dependencies. It can be used directly by:
    - MCP tools (via the tools layer)
    - Web applications (import directly)
    - CLI tools
    - Jupyter notebooks

    Example usage:
        service = DiscoveryService(chat_api_key="...")
        result = await service.search("graph neural networks")
        for paper in result.papers:
            print(f"{paper.title} ({paper.publication_year})")
    """

    def __init__(
        self,
        s2_api_key: Optional[str] = None,
        openalex_mailto: Optional[str] = None,
        chat_client: Optional[ChatCompletionClient] = None,
        timeout: int = 60,
    ):
        """
        Initialize the discovery service.

        Args:
            s2_api_key: Optional Semantic Scholar API key for higher rate limits.
            openalex_mailto: Optional contact address for OpenAlex.
            chat_client: Chat-completion client used for reviews and summaries.
            timeout: Request timeout in seconds.
        """
        self.semantic_scholar = SemanticScholarClient(api_key=s2_api_key, timeout=timeout)
        self.openalex = OpenAlexClient(timeout=timeout, mailto=openalex_mailto)
        self.chat = chat_client or ChatCompletionClient(timeout=timeout)

    async def search(
        self,
        query: str,
        source: Union[PaperSource, str] = PaperSource.SEMANTIC_SCHOLAR,
        page: int = 1,
        cursor: Optional[str] = None,
        per_page: int = 25,
        filters: Optional[SearchFilters] = None,
    ) -> SearchResult:
        """
        Search an external paper index.

        Args:
            query: Free-text query.
            source: 'semantic_scholar' (page based) or 'openalex' (cursor based).
            page: 1-based page for Semantic Scholar.
            cursor: Cursor for OpenAlex; ignored by Semantic Scholar.
            per_page: Results per page.
            filters: Optional year/author/field/journal/PDF filters.

        Returns:
            SearchResult ranked by the index.

        Raises:
            ValueError: If the source is unknown or a Semantic Scholar
                        query is blank.
        """
        source = PaperSource(source)

        if source is PaperSource.OPENALEX:
            return await self.openalex.search_papers(
                query, cursor=cursor, per_page=per_page, filters=filters
            )

        if not query.strip():
            raise ValueError("Semantic Scholar searches need a query.")
        return await self.semantic_scholar.search_papers(
            query, page=page, per_page=per_page, filters=filters
        )

    async def get_paper(
        self,
        external_id: str,
        source: Union[PaperSource, str] = PaperSource.SEMANTIC_SCHOLAR,
    ) -> Optional[SearchPaper]:
        """Fetch a paper from the index it came from."""
        source = PaperSource(source)
        if source is PaperSource.OPENALEX:
            return await self.openalex.get_paper(external_id)
        return await self.semantic_scholar.get_paper(external_id)

    async def get_recommendations(self, paper_id: str, limit: int = 10) -> list[SearchPaper]:
        """Papers Semantic Scholar recommends alongside the given one."""
        return await self.semantic_scholar.get_recommendations(paper_id, limit=limit)

    async def generate_literature_review(
        self,
        list_name: str,
        papers: Sequence[PaperRecord],
    ) -> str:
        """
        Write a literature review synthesising the given papers.

        Raises:
            ValueError: If there are no papers.
            ChatCompletionError: If the chat API fails.
        """
        if not papers:
            raise ValueError("Add some papers to this list before generating a literature review.")

        logger.info(f"Generating literature review for '{list_name}' ({len(papers)} papers)")
        return await self.chat.complete(build_literature_review_messages(list_name, papers))

    async def summarize_paper(self, paper: PaperRecord) -> str:
        """
        Summarise one paper.

        Raises:
            ChatCompletionError: If the chat API fails.
        """
        logger.info(f"Summarising paper '{paper.title}'")
        return await self.chat.complete(build_summary_messages(paper))

    async def close(self) -> None:
        """Clean up resources."""
        await self.semantic_scholar.close()
        await self.openalex.close()
        await self.chat.close()
