"""
Paper index API clients.

Direct HTTP clients for Semantic Scholar and OpenAlex using httpx.
Ranking is left entirely to the index; these clients only translate
queries and filters into requests and responses into models.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional

import httpx

from .models import PaperSource, SearchFilters, SearchPaper, SearchResult

logger = logging.getLogger("paper-shelf-server")

S2_BASE_URL = "https://api.semanticscholar.org/graph/v1"
OPENALEX_BASE_URL = "https://api.openalex.org"

NO_TITLE = "No title available"
UNKNOWN_AUTHOR = "Unknown Author"
MAX_TOPICS = 5
EARLIEST_YEAR = 1900


def _contains(haystack: Optional[str], needle: str) -> bool:
    """Case-insensitive substring test that tolerates missing values."""
    return bool(haystack) and needle.lower() in haystack.lower()


class SemanticScholarClient:
    """
    Async client for the Semantic Scholar Graph API.

    Only the year range is supported server-side by the search endpoint;
    author, journal and PDF filters are applied to each returned page.
    """

    # Fields to request for paper metadata
    PAPER_FIELDS = [
        "paperId",
        "title",
        "authors",
        "year",
        "abstract",
        "venue",
        "url",
        "externalIds",
        "citationCount",
        "openAccessPdf",
        "publicationDate",
        "journal",
        "s2FieldsOfStudy",
    ]

    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout: int = 60,
    ):
        """
        Initialize the Semantic Scholar client.

        Args:
            api_key: Optional API key for higher rate limits.
            timeout: Request timeout in seconds.
        """
        self.api_key = api_key
        self.timeout = timeout
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None:
            headers = {}
            if self.api_key:
                headers["x-api-key"] = self.api_key
            self._client = httpx.AsyncClient(
                base_url=S2_BASE_URL,
                headers=headers,
                timeout=self.timeout,
            )
        return self._client

    def _parse_paper_dict(self, data: dict[str, Any]) -> SearchPaper:
        """Convert API response dict to SearchPaper model."""
        external_ids = data.get("externalIds") or {}
        journal = data.get("journal") or {}
        pdf = data.get("openAccessPdf") or {}

        authors = []
        for author in data.get("authors") or []:
            if isinstance(author, dict):
                authors.append(author.get("name") or UNKNOWN_AUTHOR)
            else:
                authors.append(str(author))

        topics = []
        for field in data.get("s2FieldsOfStudy") or []:
            category = field.get("category") if isinstance(field, dict) else None
            if category and category not in topics:
                topics.append(category)

        return SearchPaper(
            external_id=data.get("paperId") or data.get("id") or "unknown",
            source=PaperSource.SEMANTIC_SCHOLAR,
            title=data.get("title") or NO_TITLE,
            authors=authors,
            abstract=data.get("abstract"),
            publication_year=data.get("year"),
            journal=journal.get("name") or data.get("venue") or None,
            doi=external_ids.get("DOI"),
            url=data.get("url"),
            pdf_url=pdf.get("url"),
            citation_count=data.get("citationCount") or 0,
            topics=topics[:MAX_TOPICS],
        )

    def _apply_local_filters(
        self,
        items: list[dict[str, Any]],
        filters: SearchFilters,
    ) -> list[dict[str, Any]]:
        """Apply the filters the search endpoint cannot."""
        if filters.author and filters.author.strip():
            author = filters.author.strip()
            items = [
                item for item in items
                if any(
                    _contains(a.get("name"), author)
                    for a in item.get("authors") or []
                    if isinstance(a, dict)
                )
            ]

        if filters.journal and filters.journal.strip():
            journal = filters.journal.strip()
            items = [
                item for item in items
                if _contains(item.get("venue"), journal)
                or _contains((item.get("journal") or {}).get("name"), journal)
            ]

        if filters.has_pdf:
            items = [item for item in items if (item.get("openAccessPdf") or {}).get("url")]

        return items

    async def search_papers(
        self,
        query: str,
        page: int = 1,
        per_page: int = 25,
        filters: Optional[SearchFilters] = None,
    ) -> SearchResult:
        """
        Search for papers.

        Args:
            query: Search query string.
            page: 1-based page number.
            per_page: Results per page (max 100).
            filters: Optional filters.

        Returns:
            SearchResult for the page. Empty on API failure.
        """
        client = await self._get_client()
        per_page = max(1, min(per_page, 100))
        page = max(page, 1)
        offset = (page - 1) * per_page

        params: dict[str, Any] = {
            "query": query.strip(),
            "offset": offset,
            "limit": per_page,
            "fields": ",".join(self.PAPER_FIELDS),
        }

        if filters and filters.has_year_range:
            year_from = filters.year_from or EARLIEST_YEAR
            year_to = filters.year_to or date.today().year
            params["year"] = f"{year_from}-{year_to}"
        if filters and filters.field_of_study:
            params["fieldsOfStudy"] = filters.field_of_study

        empty = SearchResult(query=query, source=PaperSource.SEMANTIC_SCHOLAR)

        try:
            response = await client.get("/paper/search", params=params)
            response.raise_for_status()
            data = response.json()

            items = data.get("data") or []
            raw_count = len(items)
            if filters:
                items = self._apply_local_filters(items, filters)

            papers = [self._parse_paper_dict(item) for item in items]
            has_more = raw_count == per_page

            logger.info(f"Semantic Scholar returned {len(papers)} papers for query: {query}")
            return SearchResult(
                query=query,
                source=PaperSource.SEMANTIC_SCHOLAR,
                papers=papers,
                total=data.get("total") or len(papers),
                next_cursor=str(page + 1) if has_more else None,
                has_more=has_more,
            )

        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error searching Semantic Scholar for '{query}': {e}")
            return empty
        except Exception as e:
            logger.error(f"Semantic Scholar search failed for query '{query}': {e}")
            return empty

    async def get_paper(self, paper_id: str) -> Optional[SearchPaper]:
        """
        Get paper metadata.

        Args:
            paper_id: Semantic Scholar paper ID (or a prefixed ID such as DOI:...).

        Returns:
            SearchPaper or None if not found.
        """
        client = await self._get_client()

        try:
            response = await client.get(
                f"/paper/{paper_id.strip()}",
                params={"fields": ",".join(self.PAPER_FIELDS)},
            )

            if response.status_code == 404:
                logger.warning(f"Paper not found: {paper_id}")
                return None

            response.raise_for_status()
            return self._parse_paper_dict(response.json())

        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error fetching paper {paper_id}: {e}")
            return None
        except Exception as e:
            logger.error(f"Failed to fetch paper {paper_id}: {e}")
            return None

    async def get_recommendations(
        self,
        paper_id: str,
        limit: int = 10,
    ) -> list[SearchPaper]:
        """
        Get papers recommended alongside the given paper.

        Args:
            paper_id: Semantic Scholar paper ID.
            limit: Maximum number of recommendations.

        Returns:
            List of SearchPaper objects, empty on failure.
        """
        client = await self._get_client()

        try:
            response = await client.get(
                f"/paper/{paper_id.strip()}/recommendations",
                params={"limit": limit, "fields": ",".join(self.PAPER_FIELDS)},
            )
            response.raise_for_status()
            data = response.json()
            return [self._parse_paper_dict(item) for item in data.get("data") or []]

        except Exception as e:
            logger.error(f"Failed to fetch recommendations for {paper_id}: {e}")
            return []

    async def close(self) -> None:
        """Close the client and release resources."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None


class OpenAlexClient:
    """
    Async client for the OpenAlex works API.

    All filters are sent server-side in the `filter` parameter.
    Pagination uses OpenAlex cursors.
    """

    SELECT_FIELDS = [
        "id",
        "doi",
        "title",
        "authorships",
        "publication_year",
        "primary_location",
        "abstract_inverted_index",
        "cited_by_count",
        "concepts",
        "best_oa_location",
    ]

    def __init__(
        self,
        timeout: int = 60,
        mailto: Optional[str] = None,
    ):
        """
        Initialize the OpenAlex client.

        Args:
            timeout: Request timeout in seconds.
            mailto: Optional contact address for the OpenAlex polite pool.
        """
        self.timeout = timeout
        self.mailto = mailto
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=OPENALEX_BASE_URL,
                timeout=self.timeout,
            )
        return self._client

    @staticmethod
    def reconstruct_abstract(inverted_index: Optional[dict[str, list[int]]]) -> str:
        """Rebuild abstract text from OpenAlex's word -> positions index."""
        if not inverted_index:
            return ""

        positioned: dict[int, str] = {}
        for word, positions in inverted_index.items():
            if isinstance(positions, list):
                for pos in positions:
                    positioned[pos] = word

        return " ".join(positioned[pos] for pos in sorted(positioned))

    def _build_filter(self, filters: Optional[SearchFilters]) -> Optional[str]:
        """Encode filters as an OpenAlex filter string."""
        if filters is None:
            return None

        parts = []
        if filters.has_year_range:
            year_from = filters.year_from or EARLIEST_YEAR
            year_to = filters.year_to or date.today().year
            parts.append(f"publication_year:{year_from}-{year_to}")
        if filters.author:
            parts.append(f"author.display_name.search:{filters.author.strip()}")
        if filters.field_of_study:
            parts.append(f"concepts.display_name.search:{filters.field_of_study.strip()}")
        if filters.journal:
            parts.append(f"primary_location.source.display_name.search:{filters.journal.strip()}")
        if filters.has_pdf is not None:
            parts.append(f"has_fulltext:{str(filters.has_pdf).lower()}")

        return ",".join(parts) if parts else None

    def _parse_work(self, data: dict[str, Any]) -> SearchPaper:
        """Convert an OpenAlex work dict to SearchPaper model."""
        authors = []
        for authorship in data.get("authorships") or []:
            author = authorship.get("author") or {}
            authors.append(author.get("display_name") or UNKNOWN_AUTHOR)

        source = (data.get("primary_location") or {}).get("source") or {}
        best_oa = data.get("best_oa_location") or {}
        inverted = data.get("abstract_inverted_index")

        topics = [
            concept.get("display_name")
            for concept in data.get("concepts") or []
            if concept.get("display_name")
        ]

        return SearchPaper(
            external_id=data.get("id") or "unknown",
            source=PaperSource.OPENALEX,
            title=data.get("title") or NO_TITLE,
            authors=authors,
            abstract=self.reconstruct_abstract(inverted) if inverted else None,
            publication_year=data.get("publication_year"),
            journal=source.get("display_name"),
            doi=data.get("doi"),
            url=data.get("id"),
            pdf_url=best_oa.get("pdf_url"),
            citation_count=data.get("cited_by_count") or 0,
            topics=topics[:MAX_TOPICS],
        )

    async def search_papers(
        self,
        query: str,
        cursor: Optional[str] = None,
        per_page: int = 25,
        filters: Optional[SearchFilters] = None,
    ) -> SearchResult:
        """
        Search OpenAlex works.

        Args:
            query: Search query string. An empty query lists newest works.
            cursor: Cursor from a previous SearchResult.next_cursor.
            per_page: Results per page (max 200).
            filters: Optional filters.

        Returns:
            SearchResult for the page. Empty on API failure.
        """
        client = await self._get_client()
        per_page = max(1, min(per_page, 200))

        params: dict[str, Any] = {
            "per_page": per_page,
            "cursor": cursor or "*",
            "select": ",".join(self.SELECT_FIELDS),
        }
        if query.strip():
            params["search"] = query.strip()
        else:
            params["sort"] = "publication_date:desc"

        filter_str = self._build_filter(filters)
        if filter_str:
            params["filter"] = filter_str
        if self.mailto:
            params["mailto"] = self.mailto

        empty = SearchResult(query=query, source=PaperSource.OPENALEX)

        try:
            response = await client.get("/works", params=params)
            response.raise_for_status()
            data = response.json()

            papers = [self._parse_work(item) for item in data.get("results") or []]
            meta = data.get("meta") or {}
            next_cursor = meta.get("next_cursor")

            logger.info(f"OpenAlex returned {len(papers)} papers for query: {query}")
            return SearchResult(
                query=query,
                source=PaperSource.OPENALEX,
                papers=papers,
                total=meta.get("count") or len(papers),
                next_cursor=next_cursor,
                has_more=bool(next_cursor) and bool(papers),
            )

        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error searching OpenAlex for '{query}': {e}")
            return empty
        except Exception as e:
            logger.error(f"OpenAlex search failed for query '{query}': {e}")
            return empty

    async def get_paper(self, work_id: str) -> Optional[SearchPaper]:
        """
        Get a single work.

        Args:
            work_id: OpenAlex work ID ('W123...') or its full URL.

        Returns:
            SearchPaper or None if not found.
        """
        client = await self._get_client()
        short_id = work_id.strip().rstrip("/").rsplit("/", 1)[-1]

        try:
            response = await client.get(f"/works/{short_id}")

            if response.status_code == 404:
                logger.warning(f"Work not found: {work_id}")
                return None

            response.raise_for_status()
            return self._parse_work(response.json())

        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error fetching work {work_id}: {e}")
            return None
        except Exception as e:
            logger.error(f"Failed to fetch work {work_id}: {e}")
            return None

    async def close(self) -> None:
        """Close the client and release resources."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
