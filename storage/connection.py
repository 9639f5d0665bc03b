"""SQLite connection helper and the schema for profiles and app state."""

import sqlite3
from pathlib import Path

DEFAULT_DB_PATH = Path(__file__).parent.parent / "data" / "tutor.db"

BUSY_TIMEOUT_SEC = 2.0

SCHEMA_SQL = """
-- One JSON document per named profile
CREATE TABLE IF NOT EXISTS profiles (
    name TEXT PRIMARY KEY,
    record TEXT NOT NULL,  -- JSON object, see models.Profile
    updated_at TEXT NOT NULL
);

-- Recently used profiles, highest seq first
CREATE TABLE IF NOT EXISTS recent_profiles (
    name TEXT PRIMARY KEY,
    seq INTEGER NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_recent_profiles_seq ON recent_profiles(seq);

-- Small key/value table for application state (active profile)
CREATE TABLE IF NOT EXISTS app_state (
    key TEXT PRIMARY KEY,
    value TEXT
);

-- Flat records written by versions that predate profiles
CREATE TABLE IF NOT EXISTS legacy_store (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL  -- JSON
);
"""


def get_connection(db_path: Path = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Open a connection to the tutor database.

    Rows are returned as ``sqlite3.Row`` so columns can be read by name. A
    locked database raises after ``BUSY_TIMEOUT_SEC``.

    Args:
        db_path: Path to the SQLite database file.
    """
    conn = sqlite3.connect(db_path, timeout=BUSY_TIMEOUT_SEC)
    conn.row_factory = sqlite3.Row
    return conn


def init_schema(db_path: Path = DEFAULT_DB_PATH) -> None:
    """Create the tutor tables, and the database file's directory, if missing.

    Args:
        db_path: Path to the SQLite database file.
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = get_connection(db_path)
    try:
        conn.executescript(SCHEMA_SQL)
        conn.commit()
    finally:
        conn.close()
