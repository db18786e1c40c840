"""Service configuration.

Settings are read from the environment (prefix ``QUILL_``) and an optional
``.env`` file in the working directory.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings for the API process."""

    model_config = SettingsConfigDict(
        env_prefix="QUILL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_url: str = "sqlite:///data/quill.db"
    pool_max_size: int = Field(default=20, ge=1)
    pool_min_connections: int = Field(default=2, ge=0)
    port: int = Field(default=8000, ge=1, le=65535)
    log_level: str = "INFO"
    create_schema: bool = False
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"]
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings (cached)."""
    return Settings()


def configure_logging(level: str | None = None) -> None:
    """Configure root logging once for the process.

    Args:
        level: Log level name. Defaults to ``Settings.log_level``.
    """
    if level is None:
        level = get_settings().log_level
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
