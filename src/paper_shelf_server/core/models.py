"""
Data models for paper discovery, lists, chat and citation export.

These models are pure Pydantic with no MCP dependencies,
making them usable by both MCP tools and web applications.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


# =============================================================================
# PAPERS
# =============================================================================


class PaperSource(str, Enum):
    """External indexes papers can come from."""

    SEMANTIC_SCHOLAR = "semantic_scholar"
    OPENALEX = "openalex"


class PaperRecord(BaseModel):
    """
    Minimal bibliographic record.

    Holds exactly what is needed to display, chat about, or cite a paper.
    Immutable: built by the caller from stored or fetched data and
    discarded after use.
    """

    model_config = ConfigDict(frozen=True)

    title: str = Field(..., description="Paper title")
    authors: list[str] = Field(default_factory=list, description="Author names, in order")
    abstract: Optional[str] = Field(default=None, description="Paper abstract")
    publication_year: Optional[int] = Field(default=None, description="Publication year")
    journal: Optional[str] = Field(default=None, description="Journal or venue name")


class SearchPaper(PaperRecord):
    """A paper returned by an external index search."""

    external_id: str = Field(..., description="Identifier in the source index")
    source: PaperSource = Field(..., description="Index the paper came from")
    doi: Optional[str] = Field(default=None, description="DOI")
    url: Optional[str] = Field(default=None, description="Landing page URL")
    pdf_url: Optional[str] = Field(default=None, description="Open access PDF URL")
    citation_count: int = Field(default=0, description="Citation count reported by the index")
    topics: list[str] = Field(default_factory=list, description="Top topics or concepts")


class SavedPaper(PaperRecord):
    """A paper saved into a list (a row of the `papers` table)."""

    id: str = Field(..., description="Row identifier")
    list_id: str = Field(..., description="List the paper belongs to")
    external_id: Optional[str] = Field(default=None, description="Identifier in the source index")
    summary: Optional[dict[str, Any]] = Field(default=None, description="Stored AI summary")
    created_at: Optional[datetime] = Field(default=None)


class PaperList(BaseModel):
    """A named list of saved papers (a row of the `paper_lists` table)."""

    id: str
    name: str
    description: Optional[str] = None
    literature_review: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# =============================================================================
# SEARCH
# =============================================================================


class SearchFilters(BaseModel):
    """Simple field filters applied to an index search."""

    year_from: Optional[int] = Field(default=None, description="Earliest publication year")
    year_to: Optional[int] = Field(default=None, description="Latest publication year")
    author: Optional[str] = Field(default=None, description="Author name substring")
    field_of_study: Optional[str] = Field(default=None, description="Field of study / concept")
    journal: Optional[str] = Field(default=None, description="Journal or venue substring")
    has_pdf: Optional[bool] = Field(default=None, description="Only papers with a PDF")

    @property
    def has_year_range(self) -> bool:
        return self.year_from is not None or self.year_to is not None


class SearchResult(BaseModel):
    """One page of results from an external index."""

    query: str = Field(..., description="Original search query")
    source: PaperSource
    papers: list[SearchPaper] = Field(default_factory=list)
    total: int = Field(default=0, description="Total matches reported by the index")
    next_cursor: Optional[str] = Field(default=None, description="For pagination")
    has_more: bool = Field(default=False)
    searched_at: datetime = Field(default_factory=utcnow)


class SearchHistoryEntry(BaseModel):
    """A recorded search (a row of the `search_history` table)."""

    id: str
    search_query: str
    filters_applied: dict[str, Any] = Field(default_factory=dict)
    results_count: int = 0
    created_at: Optional[datetime] = None


# =============================================================================
# CHAT
# =============================================================================


class ChatRole(str, Enum):
    """Roles understood by chat-completion APIs."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class ChatMessage(BaseModel):
    """A role-tagged chat message."""

    role: ChatRole
    content: str
    id: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_api(self) -> dict[str, str]:
        """Payload form for chat-completion requests."""
        return {"role": self.role.value, "content": self.content}


class ChatSession(BaseModel):
    """A chat conversation bound to a paper list."""

    id: str
    list_id: str
    name: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ChatHistoryEntry(BaseModel):
    """A saved snapshot of a conversation (a row of the `chat_history` table)."""

    id: str
    list_id: str
    title: str = "New Chat"
    messages: list[ChatMessage] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# =============================================================================
# HIGHLIGHTING
# =============================================================================


class SpanKind(str, Enum):
    """Whether a span of text matched a search term."""

    PLAIN = "plain"
    MATCH = "match"


class HighlightSpan(BaseModel):
    """A tagged segment of highlighted text."""

    model_config = ConfigDict(frozen=True)

    kind: SpanKind
    text: str

    @property
    def is_match(self) -> bool:
        return self.kind is SpanKind.MATCH


# =============================================================================
# CITATIONS
# =============================================================================


class CitationFormat(str, Enum):
    """
    Supported bibliography encodings.

    - BIBTEX: LaTeX bibliography entries (.bib)
    - RIS: Research Information Systems tagged format (.ris)
    - APA: APA-style reference paragraphs (.txt)
    """

    BIBTEX = "bibtex"
    RIS = "ris"
    APA = "apa"

    @property
    def extension(self) -> str:
        """File extension for exports in this format."""
        return _EXTENSIONS[self]

    @classmethod
    def parse(cls, value: Union[CitationFormat, str]) -> CitationFormat:
        """
        Resolve a format selector.

        Raises:
            ValueError: If the value does not name a supported format.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        supported = ", ".join(f.value for f in cls)
        raise ValueError(f"Unknown citation format: {value!r} (expected one of: {supported})")


_EXTENSIONS = {
    CitationFormat.BIBTEX: "bib",
    CitationFormat.RIS: "ris",
    CitationFormat.APA: "txt",
}


class CitationExport(BaseModel):
    """A rendered citation file ready to be saved."""

    model_config = ConfigDict(frozen=True)

    filename: str
    content: str
    media_type: str = "text/plain"
    paper_count: int = 0
