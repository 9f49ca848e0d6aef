"""Shared configuration loaded from environment / .env file."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings

DEFAULT_URLS = [
    "https://www.bitsathy.ac.in/",
    "https://www.bitsathy.ac.in/milestones/",
    "https://www.bitsathy.ac.in/department/",
    "https://www.bitsathy.ac.in/programmes-offered/",
    "https://www.bitsathy.ac.in/achievement/",
]


class Settings(BaseSettings):
    """Application-wide settings, populated from env vars or .env file."""

    # Google Generative AI (embeddings + chat)
    google_api_key: str = Field(default="", description="API key for the Gemini API")
    embedding_model: str = "models/embedding-001"
    embedding_dimension: int = Field(
        default=768,
        description="Expected vector length; must match the index. 0 disables the check.",
    )
    chat_model: str = "gemini-1.5-flash"

    # Vector store
    pinecone_api_key: str = ""
    pinecone_index: str = "bitsathy-data"

    # Ingestion
    ingest_urls: list[str] = Field(
        default_factory=lambda: list(DEFAULT_URLS),
        description="Pages to ingest, in order. JSON list when set through the environment.",
    )
    chunk_size: int = 1000
    upsert_batch_size: int = 10
    fetch_max_attempts: int = 3
    fetch_backoff_seconds: float = 2.0
    fetch_timeout_ms: int = 30_000

    # Retrieval / chat
    retrieval_top_k: int = 5
    retrieval_score_threshold: float = 0.7

    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


# Singleton — import `settings` wherever needed.
settings = Settings()
