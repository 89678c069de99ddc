"""Typed settings configuration - single source of truth."""

from functools import lru_cache

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Chunking (characters; overlap is converted to words as overlap // 10)
    chunk_size: int = 3000
    chunk_overlap: int = 500

    # Retrieval
    search_limit: int = 10
    max_total_context: int = 100_000

    # Uploads
    max_upload_size_mb: int = 20
    min_extracted_chars: int = 100
    extraction_model: str = "gpt-4o-mini"
    extraction_max_tokens: int = 16000

    # LLM
    openai_api_key: SecretStr | None = None
    openai_model: str = "gpt-4o-mini"
    llm_max_tokens: int = 2000
    llm_temperature: float = 0.3
    max_answer_chars: int = 10_000


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
