"""Application configuration settings."""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="LIFTENGINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    debug: bool = False

    # Database
    database_url: str = "sqlite+aiosqlite:///./liftengine.db"
    database_echo: bool = False

    # Rest timer
    rest_timer_tick_seconds: float = 1.0

    # Performance defaults seeded into the log form
    default_rpe: int = 7

    # Progression analysis
    consecutive_successes_required: int = 2
    reps_tolerance: int = 0
    progression_history_window: int = 4


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
