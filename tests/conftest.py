"""
Shared test fixtures for paper-shelf-server tests.
"""

from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from paper_shelf_server.config import Settings
from paper_shelf_server.core.models import (
    PaperRecord,
    PaperSource,
    SearchPaper,
    SearchResult,
)
from paper_shelf_server.resources.store import JsonRecordStore
from paper_shelf_server.tools import _runtime


@pytest.fixture
def sample_paper() -> PaperRecord:
    """Create a sample paper for testing."""
    return PaperRecord(
        title="Attention Is All You Need",
        authors=["Ashish Vaswani", "Noam Shazeer", "Niki Parmar"],
        abstract="The dominant sequence transduction models are based on complex recurrent networks.",
        publication_year=2017,
        journal="NeurIPS",
    )


@pytest.fixture
def sample_search_paper() -> SearchPaper:
    """Create a sample search hit for testing."""
    return SearchPaper(
        external_id="204e3073870fae3d05bcbc2f6a8e263d9b72e776",
        source=PaperSource.SEMANTIC_SCHOLAR,
        title="Attention Is All You Need",
        authors=["Ashish Vaswani", "Noam Shazeer"],
        abstract="We propose a new simple network architecture, the Transformer, based solely on attention.",
        publication_year=2017,
        journal="NeurIPS",
        doi="10.5555/3295222.3295349",
        citation_count=90000,
    )


@pytest.fixture
def sample_papers() -> list[PaperRecord]:
    """Create a list of sample papers for testing."""
    return [
        PaperRecord(
            title=f"Paper {i}",
            authors=[f"Author {i}"],
            publication_year=2020 + i,
            journal=f"Journal {i}",
        )
        for i in range(3)
    ]


@pytest.fixture
def temp_storage(tmp_path: Path) -> Path:
    """Create a temporary records directory."""
    storage_path = tmp_path / "records"
    storage_path.mkdir(parents=True)
    return storage_path


@pytest.fixture
def store(temp_storage: Path) -> JsonRecordStore:
    """Create a record store with temporary storage."""
    return JsonRecordStore(temp_storage)


@pytest.fixture
def mock_settings(tmp_path: Path, temp_storage: Path) -> Settings:
    """Create settings with temporary storage."""
    return Settings(STORAGE_PATH=temp_storage, EXPORTS_PATH=tmp_path / "exports")


@pytest.fixture
def mock_service(sample_search_paper: SearchPaper) -> MagicMock:
    """Create a mock DiscoveryService."""
    service = MagicMock()
    service.search = AsyncMock(
        return_value=SearchResult(
            query="attention",
            source=PaperSource.SEMANTIC_SCHOLAR,
            papers=[sample_search_paper],
            total=1,
        )
    )
    service.get_paper = AsyncMock(return_value=sample_search_paper)
    service.get_recommendations = AsyncMock(return_value=[sample_search_paper])
    service.generate_literature_review = AsyncMock(return_value="A review.")
    service.summarize_paper = AsyncMock(return_value="A summary.")
    service.chat = MagicMock()
    service.chat.complete = AsyncMock(return_value="An answer from the papers.")
    return service


@pytest.fixture
def runtime(
    monkeypatch: pytest.MonkeyPatch,
    mock_settings: Settings,
    store: JsonRecordStore,
    mock_service: MagicMock,
) -> SimpleNamespace:
    """Point the tool runtime at temporary storage and a mock service."""
    monkeypatch.setattr(_runtime, "_settings", mock_settings)
    monkeypatch.setattr(_runtime, "_store", store)
    monkeypatch.setattr(_runtime, "_service", mock_service)
    return SimpleNamespace(settings=mock_settings, store=store, service=mock_service)
