"""Typed settings configuration - single source of truth."""

from functools import lru_cache

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite+aiosqlite:///./doccraft.db"
    auto_create_schema: bool = True
    seed_sample_document: bool = True

    # UI
    ui_origin: str = "http://localhost:8501"
    backend_url: str = "http://localhost:8000"

    # Upstream LLM provider (request-level provider config wins over these)
    openai_api_key: SecretStr | None = None
    openai_base_url: str | None = None
    openai_model: str = "gpt-4o"

    # Chat turn shaping
    chat_history_limit: int = 10
    chat_max_tokens: int = 4096

    # Uploads (bytes)
    upload_max_bytes: int = 10 * 1024 * 1024


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
