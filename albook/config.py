"""Application configuration management."""
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Global application settings loaded from environment variables."""

    PROJECT_NAME: str = "albook"
    API_PREFIX: str = "/api"

    DATABASE_URL: str = Field(
        "sqlite:///./albook.db",
        description="SQLAlchemy database URL",
    )
    RUN_MIGRATIONS_ON_STARTUP: bool = Field(
        True, description="Apply pending schema migrations when the app starts"
    )

    PAGE_SIZE: int = Field(10, ge=1, description="Number of exercises per list page")
    TIMEZONE: Optional[str] = Field(
        None,
        description="IANA zone used to decide what 'today' means; host zone when unset",
    )

    STATIC_DIR: Optional[Path] = Field(
        None, description="Directory with the web client, mounted at / when set"
    )
    BACKEND_CORS_ORIGINS: List[str] = Field(
        default_factory=lambda: ["http://localhost", "http://localhost:2100"],
        description="Allowed CORS origins",
    )

    LOG_LEVEL: str = Field("INFO", description="Minimum level for the loguru sink")

    model_config = SettingsConfigDict(
        env_file=Path(__file__).resolve().parent.parent / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


settings = get_settings()
