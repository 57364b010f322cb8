"""
Tests for core data models.
"""

import pytest

from paper_shelf_server.core.models import (
    ChatMessage,
    ChatRole,
    CitationFormat,
    HighlightSpan,
    PaperRecord,
    SearchFilters,
    SearchPaper,
    SpanKind,
)


class TestPaperRecord:
    """Tests for PaperRecord model."""

    def test_create_minimal(self):
        """Test creating paper with minimal fields."""
        paper = PaperRecord(title="Test Paper")
        assert paper.title == "Test Paper"
        assert paper.authors == []
        assert paper.abstract is None
        assert paper.publication_year is None
        assert paper.journal is None

    def test_create_full(self, sample_paper: PaperRecord):
        """Test creating paper with all fields."""
        assert sample_paper.title == "Attention Is All You Need"
        assert len(sample_paper.authors) == 3
        assert sample_paper.publication_year == 2017
        assert sample_paper.journal == "NeurIPS"

    def test_immutable(self, sample_paper: PaperRecord):
        """Test that PaperRecord is immutable (frozen)."""
        with pytest.raises(Exception):  # ValidationError
            sample_paper.title = "Changed Title"

    def test_search_paper_is_record(self, sample_search_paper: SearchPaper):
        """Test that search hits can be used wherever a record is expected."""
        assert isinstance(sample_search_paper, PaperRecord)
        assert sample_search_paper.source.value == "semantic_scholar"
        assert sample_search_paper.topics == []


class TestSearchFilters:
    """Tests for SearchFilters model."""

    def test_no_year_range(self):
        assert not SearchFilters().has_year_range

    def test_year_range_from_either_bound(self):
        assert SearchFilters(year_from=2020).has_year_range
        assert SearchFilters(year_to=2020).has_year_range


class TestChatMessage:
    """Tests for ChatMessage model."""

    def test_to_api(self):
        message = ChatMessage(role=ChatRole.USER, content="Hello")
        assert message.to_api() == {"role": "user", "content": "Hello"}

    def test_role_from_string(self):
        message = ChatMessage(role="assistant", content="Hi")
        assert message.role is ChatRole.ASSISTANT


class TestHighlightSpan:
    """Tests for HighlightSpan model."""

    def test_is_match(self):
        assert HighlightSpan(kind=SpanKind.MATCH, text="x").is_match
        assert not HighlightSpan(kind=SpanKind.PLAIN, text="x").is_match


class TestCitationFormat:
    """Tests for CitationFormat enum."""

    @pytest.mark.parametrize(
        "fmt, extension",
        [
            (CitationFormat.BIBTEX, "bib"),
            (CitationFormat.RIS, "ris"),
            (CitationFormat.APA, "txt"),
        ],
    )
    def test_extension(self, fmt: CitationFormat, extension: str):
        assert fmt.extension == extension

    def test_parse_is_case_insensitive(self):
        assert CitationFormat.parse(" BibTeX ") is CitationFormat.BIBTEX
        assert CitationFormat.parse(CitationFormat.RIS) is CitationFormat.RIS

    def test_parse_unknown(self):
        with pytest.raises(ValueError, match="Unknown citation format"):
            CitationFormat.parse("mla")

    def test_parse_non_string(self):
        with pytest.raises(ValueError):
            CitationFormat.parse(None)
