"""Configuration for the drill engine and the application.

``DrillConfig`` holds the game constants the engine is built around.
``Settings`` reads process-level options (database location, logging) from
environment variables prefixed with ``TIMES_TUTOR_`` or a ``.env`` file.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from storage.connection import DEFAULT_DB_PATH


class DrillConfig(BaseModel):
    """Tunable constants of a drill session."""

    # Distinct facts asked per session
    session_length: int = Field(default=20, ge=1, le=121)

    # Missed facts carried into the next session
    missed_carryover_limit: int = Field(default=10, ge=0)

    # Number of distinct facts asked before a carried-over miss is injected
    missed_injection_at: int = Field(default=2, ge=0)

    # Achievement thresholds run from 1 correct answer per fact up to this
    achievement_levels: int = Field(default=10, ge=1)

    recent_profiles_limit: int = Field(default=10, ge=1)

    # How a fact is picked from the unmastered pool
    unmastered_policy: Literal["random", "first"] = "random"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TIMES_TUTOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    db_path: Path = Field(default=DEFAULT_DB_PATH, description="SQLite database file")
    log_level: str = Field(default="WARNING", description="stderr log level")
    log_file: Path | None = Field(default=None, description="Optional log file")
    seed: int | None = Field(default=None, description="Random seed")


def get_settings() -> Settings:
    return Settings()
