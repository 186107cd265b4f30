"""Application configuration using pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    database_url: str

    debug: bool = False
    log_level: str | None = None  # Overrides the level derived from debug

    # Character service (remote collaborator)
    character_service_url: str
    internal_token: str
    character_service_timeout: float = 5.0  # Seconds per request

    # Duel rules
    duel_timeout_seconds: int = 300  # Duels expire 5 minutes after start
    elevated_role: str = "GameMaster"  # May act on behalf of any opponent


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
