"""Storage layer for Times Tables Tutor.

Provides repository interfaces plus SQLite and in-memory implementations for
persisting profiles, the profile directory and legacy pre-profile data.
"""

from pathlib import Path

from .base import (
    ProfileRepository,
    ProfileDirectoryRepository,
    LegacyStateRepository,
)
from .sqlite import (
    SQLiteProfileRepository,
    SQLiteProfileDirectoryRepository,
    SQLiteLegacyStateRepository,
)
from .memory import (
    InMemoryProfileRepository,
    InMemoryProfileDirectoryRepository,
    InMemoryLegacyStateRepository,
)
from .migrations import migrate_legacy_profile, LEGACY_KEYS, LEGACY_PROFILE_NAME
from .connection import get_connection, init_schema, DEFAULT_DB_PATH

__all__ = [
    # Abstract interfaces
    "ProfileRepository",
    "ProfileDirectoryRepository",
    "LegacyStateRepository",
    # SQLite implementations
    "SQLiteProfileRepository",
    "SQLiteProfileDirectoryRepository",
    "SQLiteLegacyStateRepository",
    # In-memory implementations
    "InMemoryProfileRepository",
    "InMemoryProfileDirectoryRepository",
    "InMemoryLegacyStateRepository",
    # Migration
    "migrate_legacy_profile",
    "LEGACY_KEYS",
    "LEGACY_PROFILE_NAME",
    # Connection utilities
    "get_connection",
    "init_schema",
    "DEFAULT_DB_PATH",
    # Factory functions
    "get_profile_repo",
    "get_directory_repo",
    "get_legacy_repo",
]


def get_profile_repo(db_path: Path = DEFAULT_DB_PATH) -> ProfileRepository:
    """Get a ProfileRepository instance."""
    return SQLiteProfileRepository(db_path)


def get_directory_repo(db_path: Path = DEFAULT_DB_PATH) -> ProfileDirectoryRepository:
    """Get a ProfileDirectoryRepository instance."""
    return SQLiteProfileDirectoryRepository(db_path)


def get_legacy_repo(db_path: Path = DEFAULT_DB_PATH) -> LegacyStateRepository:
    """Get a LegacyStateRepository instance for pre-profile data."""
    return SQLiteLegacyStateRepository(db_path)
