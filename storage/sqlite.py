"""SQLite implementations of repository interfaces."""

import json
from datetime import datetime
from pathlib import Path
from typing import Any

from .base import (
    LegacyStateRepository,
    ProfileDirectoryRepository,
    ProfileRepository,
)
from .connection import get_connection, DEFAULT_DB_PATH

ACTIVE_PROFILE_KEY = "active_profile"


class SQLiteProfileRepository(ProfileRepository):
    """SQLite implementation of ProfileRepository."""

    def __init__(self, db_path: Path = DEFAULT_DB_PATH):
        self.db_path = db_path

    def load_record(self, name: str) -> Any | None:
        """Load the stored document for a profile.

        Raises:
            ValueError: If the stored text is not valid JSON.
        """
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                "SELECT record FROM profiles WHERE name = ?", (name,)
            )
            row = cursor.fetchone()
            return json.loads(row["record"]) if row else None
        finally:
            conn.close()

    def save_record(self, name: str, record: dict[str, Any]) -> None:
        """Create or replace the stored document for a profile."""
        conn = get_connection(self.db_path)
        try:
            conn.execute(
                """INSERT OR REPLACE INTO profiles (name, record, updated_at)
                VALUES (?, ?, ?)""",
                (name, json.dumps(record), datetime.now().isoformat()),
            )
            conn.commit()
        finally:
            conn.close()

    def delete(self, name: str) -> None:
        conn = get_connection(self.db_path)
        try:
            conn.execute("DELETE FROM profiles WHERE name = ?", (name,))
            conn.commit()
        finally:
            conn.close()

    def list_names(self) -> list[str]:
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute("SELECT name FROM profiles ORDER BY name")
            return [row["name"] for row in cursor.fetchall()]
        finally:
            conn.close()


class SQLiteProfileDirectoryRepository(ProfileDirectoryRepository):
    """SQLite implementation of ProfileDirectoryRepository."""

    def __init__(self, db_path: Path = DEFAULT_DB_PATH):
        self.db_path = db_path

    def recent(self, limit: int) -> list[str]:
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                "SELECT name FROM recent_profiles ORDER BY seq DESC LIMIT ?",
                (limit,),
            )
            return [row["name"] for row in cursor.fetchall()]
        finally:
            conn.close()

    def touch(self, name: str, limit: int) -> None:
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute("SELECT COALESCE(MAX(seq), 0) FROM recent_profiles")
            next_seq = cursor.fetchone()[0] + 1
            conn.execute(
                "INSERT OR REPLACE INTO recent_profiles (name, seq) VALUES (?, ?)",
                (name, next_seq),
            )
            # Keep only the newest `limit` entries
            conn.execute(
                """DELETE FROM recent_profiles WHERE name NOT IN (
                    SELECT name FROM recent_profiles ORDER BY seq DESC LIMIT ?
                )""",
                (limit,),
            )
            conn.commit()
        finally:
            conn.close()

    def forget(self, name: str) -> None:
        conn = get_connection(self.db_path)
        try:
            conn.execute("DELETE FROM recent_profiles WHERE name = ?", (name,))
            conn.commit()
        finally:
            conn.close()

    def get_active(self) -> str | None:
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                "SELECT value FROM app_state WHERE key = ?", (ACTIVE_PROFILE_KEY,)
            )
            row = cursor.fetchone()
            return row["value"] if row else None
        finally:
            conn.close()

    def set_active(self, name: str | None) -> None:
        conn = get_connection(self.db_path)
        try:
            conn.execute(
                "INSERT OR REPLACE INTO app_state (key, value) VALUES (?, ?)",
                (ACTIVE_PROFILE_KEY, name),
            )
            conn.commit()
        finally:
            conn.close()


class SQLiteLegacyStateRepository(LegacyStateRepository):
    """SQLite implementation of LegacyStateRepository.

    Values that fail to decode are skipped; the migration treats them as
    absent.
    """

    def __init__(self, db_path: Path = DEFAULT_DB_PATH):
        self.db_path = db_path

    def load_all(self) -> dict[str, Any]:
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute("SELECT key, value FROM legacy_store")
            result: dict[str, Any] = {}
            for row in cursor.fetchall():
                try:
                    result[row["key"]] = json.loads(row["value"])
                except ValueError:
                    continue
            return result
        finally:
            conn.close()
