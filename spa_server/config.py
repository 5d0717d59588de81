"""Server settings: listen address, asset directory, entry document and development mode."""

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# Project directory (where this file lives: spa_server/config.py)
_PROJECT_DIR = Path(__file__).resolve().parent.parent

DEFAULT_PORT = 5000


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = DEFAULT_PORT

    # "development" exposes exception messages in 500 responses
    APP_ENV: str = Field(
        default="production",
        validation_alias=AliasChoices("APP_ENV", "NODE_ENV"),
    )

    # Built client application – defaults to <project>/dist
    DIST_DIR: Path = _PROJECT_DIR / "dist"
    INDEX_FILE: str = "index.html"

    LOG_LEVEL: str = "INFO"

    @field_validator("PORT", mode="before")
    @classmethod
    def _fallback_port(cls, value):
        """Use the default port when the configured one is unusable."""
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_PORT
        try:
            port = int(value)
        except (TypeError, ValueError):
            logger.warning(f"Invalid PORT {value!r}, using {DEFAULT_PORT}")
            return DEFAULT_PORT
        if not 0 < port < 65536:
            logger.warning(f"PORT {port} out of range, using {DEFAULT_PORT}")
            return DEFAULT_PORT
        return port

    @field_validator("DIST_DIR", mode="after")
    @classmethod
    def _absolute_dist_dir(cls, value: Path) -> Path:
        # Relative paths are taken from the project directory, not the cwd
        if not value.is_absolute():
            value = _PROJECT_DIR / value
        return value.resolve()

    @property
    def is_development(self) -> bool:
        return self.APP_ENV.strip().lower() == "development"

    @property
    def index_path(self) -> Path:
        """Location of the SPA entry document."""
        return self.DIST_DIR / self.INDEX_FILE


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
