"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # PostgreSQL (DATABASE_URL wins when set, e.g. a Supabase pooler URL)
    database_url: Optional[str] = None
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "cv_validator"
    postgres_password: str = "password"
    postgres_db: str = "cv_validator"
    db_pool_size: int = 5
    db_max_overflow: int = 10
    init_db_on_startup: bool = True

    # Generative AI provider (OpenAI or any OpenAI-compatible endpoint)
    openai_api_key: str = ""
    openai_base_url: Optional[str] = None
    openai_model: str = "gpt-3.5-turbo"
    llm_json_mode: bool = True
    llm_timeout_seconds: float = 60.0
    llm_max_retries: int = 0

    # Uploads
    upload_dir: str = "uploads"
    max_upload_size_mb: int = 10

    # App
    cors_origins: List[str] = ["http://localhost:3000"]
    debug: bool = False
    log_level: str = "INFO"

    @property
    def postgres_url(self) -> str:
        """Construct PostgreSQL connection URL"""
        if self.database_url:
            return self.database_url
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def max_upload_size_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
