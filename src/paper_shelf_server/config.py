"""
Configuration for the paper-shelf-server.

Uses Pydantic Settings for environment variable support.
All settings can be overridden via environment variables with
the SHELF_ prefix.
"""

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    Environment variables are prefixed with SHELF_.
    Example: SHELF_CHAT_API_KEY=your-key

    Storage:
        Lists, papers, chats and search history are stored as JSON tables at:
        ~/.paper-shelf-server/records/{table}.json
        Citation exports are written to:
        ~/.paper-shelf-server/exports/
    """

    model_config = SettingsConfigDict(
        env_prefix="SHELF_",
        extra="ignore",
    )

    # Application info
    APP_NAME: str = "paper-shelf-server"
    APP_VERSION: str = "0.1.0"

    # Storage configuration
    STORAGE_PATH: Path = Path.home() / ".paper-shelf-server" / "records"
    EXPORTS_PATH: Path = Path.home() / ".paper-shelf-server" / "exports"

    # Paper indexes
    S2_API_KEY: Optional[str] = None  # Optional, for higher rate limits
    OPENALEX_MAILTO: Optional[str] = None  # Joins the OpenAlex polite pool
    REQUEST_TIMEOUT: int = 60  # Seconds

    # Chat completion (any OpenAI-compatible endpoint)
    CHAT_API_KEY: Optional[str] = None
    CHAT_API_BASE: str = "https://api.groq.com/openai/v1"
    CHAT_MODEL: str = "llama3-8b-8192"
    CHAT_TEMPERATURE: float = 0.7
    CHAT_MAX_TOKENS: int = 1000

    # Search settings
    SEARCH_PAGE_SIZE: int = 25  # Results per page
    MAX_SEARCH_RESULTS: int = 100  # Hard cap on page size
    RECENT_SEARCH_LIMIT: int = 5  # Searches shown in history
    ABSTRACT_PREVIEW_LENGTH: int = 300  # Characters before the ellipsis

    # Export
    DEFAULT_CITATION_FORMAT: str = "bibtex"

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Ensure storage directories exist
        self.STORAGE_PATH.mkdir(parents=True, exist_ok=True)
        self.EXPORTS_PATH.mkdir(parents=True, exist_ok=True)
