"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache): one instance per process
    - Custom emoji are enabled only when emoji_store_path is set

Design Decisions:
    - Defaults provided for all settings: a local sqlite file works out-of-the-box
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = "sqlite+aiosqlite:///emoji.db"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting providers hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Emoji
    emoji_store_path: str | None = None
    emoji_mount_path: str = "/emoji"
    emoji_set_dirs: list[str] = []

    @field_validator("emoji_mount_path")
    @classmethod
    def normalize_mount_path(cls, v: str) -> str:
        v = "/" + v.strip("/")
        if v == "/":
            raise ValueError("emoji_mount_path cannot be the root path")
        return v

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
