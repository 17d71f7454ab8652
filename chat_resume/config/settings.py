"""Configuration management for the chat resume service."""

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _sanitize_secret(value: str) -> str:
    """Remove BOM characters and whitespace from secrets.

    Secrets mounted from a cloud secret manager or pasted into a .env file
    may carry a BOM that breaks HTTP headers.
    """
    if not value:
        return value
    return value.lstrip("\ufeff").strip()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Google AI API
    google_api_key: str = ""

    # Data directories
    data_dir: Path = Path("./data")
    database_path: Path = Path("./data/chat_resume.db")

    # Qdrant settings (local on-disk storage is used when no URL is set)
    qdrant_url: str = ""
    qdrant_api_key: str = ""
    qdrant_path: Path = Path("./data/qdrant")
    qdrant_collection: str = "document_chunks"

    # Admin routes are disabled while this is empty
    admin_api_key: str = ""

    @field_validator("google_api_key", "qdrant_api_key", "qdrant_url", "admin_api_key", mode="after")
    @classmethod
    def sanitize_secrets(cls, value: str) -> str:
        """Remove BOM and whitespace from secret values."""
        return _sanitize_secret(value)

    # Model settings
    llm_model: str = "gemini-2.0-flash"
    structured_model: str = "gemini-2.0-flash"
    embedding_model: str = "gemini-embedding-001"
    embedding_dimension: int = 768
    llm_requests_per_minute: int | None = 15
    embedding_requests_per_minute: int | None = 60
    embedding_max_retries: int = 0

    # RAG settings
    chunk_size: int = 1000
    chunk_overlap: int = 200
    top_k_results: int = 5

    # Conversation settings
    persona_name: str = "Mac Anderson"
    raw_text_min_length: int = 1000
    max_tool_rounds: int = 3
    intent_timeout_seconds: float = 15.0
    suggestion_timeout_seconds: float = 10.0
    suggestion_cache_ttl_seconds: float = 300.0

    # API settings
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:5173"]
    debug: bool = False

    # Logging
    log_level: str = "INFO"
    log_json: bool = False
    log_file: Path | None = None

    def ensure_directories(self) -> None:
        """Create all required directories if they don't exist."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.database_path.parent.mkdir(parents=True, exist_ok=True)
        if not self.qdrant_url:
            self.qdrant_path.mkdir(parents=True, exist_ok=True)


# Global settings instance
settings = Settings()
