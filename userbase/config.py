import logging
import os
from pathlib import Path

from pydantic_settings import BaseSettings
from functools import lru_cache

_config_logger = logging.getLogger(__name__)

_ROOT_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _ROOT_DIR / ".env",
    ".env",
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_env: str = "development"
    active_profile: str = ""

    # Datasource
    database_url: str = "sqlite:///./userbase.db"
    database_username: str | None = None
    database_password: str | None = None
    database_use_tls: bool = False
    database_auth_token: str | None = None
    database_echo: bool = False

    # Attempts per registration when a generated id collides
    identity_retries: int = 3

    # Logging — per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_sql: str = "WARNING"           # sqlalchemy.engine — SQL queries
    log_level_containers: str = "WARNING"    # testcontainers / docker / ydb

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


def profile_env_files(profile: str) -> tuple[Path | str, ...]:
    """Env files for a profile: the base files, then ``.env.<profile>`` overrides."""
    if not profile:
        return _ENV_FILES
    return _ENV_FILES + (
        _ROOT_DIR / f".env.{profile}",
        f".env.{profile}",
    )


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance; reads .env and the active profile's file once."""
    profile = os.getenv("ACTIVE_PROFILE", "").strip()
    if profile:
        _config_logger.debug("Loading settings for profile '%s'", profile)
    return Settings(_env_file=profile_env_files(profile))
