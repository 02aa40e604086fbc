"""Configuration module for the launcher settings core."""

from __future__ import annotations

import logging
from functools import cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from config.paths import APP_ID, get_project_root

logger = logging.getLogger(__name__)


class Config(BaseSettings):
    """Runtime configuration, read from LAUNCHER_* env vars or a .env file."""

    # Overrides the platform user data directory (settings, app data, database)
    data_dir: Path | None = Field(None, alias="LAUNCHER_DATA_DIR")

    # Reserved id; also the file-name prefix of the global legacy files
    app_id: str = Field(APP_ID, alias="LAUNCHER_APP_ID")

    # Runtime settings
    debug: bool = Field(False, alias="LAUNCHER_DEBUG")
    log_level: str = Field("INFO", alias="LAUNCHER_LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=get_project_root() / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def effective_log_level(self) -> int:
        """Logging level as an int, DEBUG when debug mode is on."""
        if self.debug:
            return logging.DEBUG
        level = logging.getLevelName(self.log_level.upper())
        if isinstance(level, int):
            return level
        logger.warning("Unknown log level %r, falling back to INFO", self.log_level)
        return logging.INFO


@cache
def get_config() -> Config:
    """Get the global configuration instance."""
    return Config()


def clear_config_cache() -> None:
    """Clear the cached configuration."""
    get_config.cache_clear()


__all__ = ["Config", "clear_config_cache", "get_config"]
