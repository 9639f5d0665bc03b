"""Tests for the storage layer repository implementations."""

import json

import pytest

from models import FactStat, Profile
from storage import (
    InMemoryProfileDirectoryRepository,
    InMemoryProfileRepository,
    SQLiteLegacyStateRepository,
    SQLiteProfileDirectoryRepository,
    SQLiteProfileRepository,
    get_connection,
    init_schema,
    migrate_legacy_profile,
)
from storage.migrations import build_legacy_record


class TestSchema:
    def test_init_creates_parent_directory(self, tmp_path):
        db_path = tmp_path / "nested" / "dir" / "tutor.db"
        init_schema(db_path)
        assert db_path.exists()

    def test_init_is_idempotent(self, test_db_path):
        init_schema(test_db_path)
        conn = get_connection(test_db_path)
        try:
            tables = {
                row["name"]
                for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
            }
        finally:
            conn.close()
        assert {"profiles", "recent_profiles", "app_state", "legacy_store"} <= tables


class TestSQLiteProfileRepository:
    """Tests for SQLiteProfileRepository."""

    def test_load_missing_returns_none(self, test_db_path):
        repo = SQLiteProfileRepository(test_db_path)
        assert repo.load_record("Ada") is None

    def test_save_and_load_record(self, test_db_path):
        repo = SQLiteProfileRepository(test_db_path)
        profile = Profile(name="Ada", fact_stats={"3x4": FactStat(correct=1)})
        repo.save_record("Ada", profile.to_record())

        record = repo.load_record("Ada")
        assert record["fact_stats"]["3x4"]["correct"] == 1
        assert Profile.from_record("Ada", record).fact_stats == profile.fact_stats

    def test_save_replaces_existing(self, test_db_path):
        repo = SQLiteProfileRepository(test_db_path)
        repo.save_record("Ada", {"total_games_played": 1})
        repo.save_record("Ada", {"total_games_played": 2})

        assert repo.load_record("Ada") == {"total_games_played": 2}
        assert repo.list_names() == ["Ada"]

    def test_list_names_sorted(self, test_db_path):
        repo = SQLiteProfileRepository(test_db_path)
        for name in ["Zoe", "Ada", "Max"]:
            repo.save_record(name, {})
        assert repo.list_names() == ["Ada", "Max", "Zoe"]

    def test_delete(self, test_db_path):
        repo = SQLiteProfileRepository(test_db_path)
        repo.save_record("Ada", {})
        repo.delete("Ada")
        assert repo.load_record("Ada") is None

    def test_corrupt_json_raises_value_error(self, test_db_path):
        conn = get_connection(test_db_path)
        try:
            conn.execute(
                "INSERT INTO profiles (name, record, updated_at) VALUES (?, ?, ?)",
                ("Ada", "{not json", "2024-01-01"),
            )
            conn.commit()
        finally:
            conn.close()

        with pytest.raises(ValueError):
            SQLiteProfileRepository(test_db_path).load_record("Ada")


class TestSQLiteProfileDirectoryRepository:
    def test_recent_most_recent_first(self, test_db_path):
        repo = SQLiteProfileDirectoryRepository(test_db_path)
        for name in ["Ada", "Bob", "Cy", "Bob"]:
            repo.touch(name, limit=10)
        assert repo.recent(10) == ["Bob", "Cy", "Ada"]

    def test_touch_trims_to_limit(self, test_db_path):
        repo = SQLiteProfileDirectoryRepository(test_db_path)
        for i in range(5):
            repo.touch(f"P{i}", limit=3)
        assert repo.recent(10) == ["P4", "P3", "P2"]

    def test_forget(self, test_db_path):
        repo = SQLiteProfileDirectoryRepository(test_db_path)
        repo.touch("Ada", 10)
        repo.touch("Bob", 10)
        repo.forget("Ada")
        assert repo.recent(10) == ["Bob"]

    def test_active_profile(self, test_db_path):
        repo = SQLiteProfileDirectoryRepository(test_db_path)
        assert repo.get_active() is None
        repo.set_active("Ada")
        assert repo.get_active() == "Ada"
        repo.set_active(None)
        assert repo.get_active() is None


class TestSQLiteLegacyStateRepository:
    def test_skips_undecodable_values(self, test_db_path):
        conn = get_connection(test_db_path)
        try:
            conn.execute(
                "INSERT INTO legacy_store (key, value) VALUES (?, ?)",
                ("mf_best_v1", json.dumps({"bestStreak": 3})),
            )
            conn.execute(
                "INSERT INTO legacy_store (key, value) VALUES (?, ?)",
                ("mf_previous_v1", "{broken"),
            )
            conn.commit()
        finally:
            conn.close()

        records = SQLiteLegacyStateRepository(test_db_path).load_all()
        assert records == {"mf_best_v1": {"bestStreak": 3}}

    def test_migrates_from_sqlite(self, test_db_path):
        conn = get_connection(test_db_path)
        try:
            conn.execute(
                "INSERT INTO legacy_store (key, value) VALUES (?, ?)",
                ("mf_fact_stats_v1", json.dumps({"2x3": {"correct": 1, "wrong": 0}})),
            )
            conn.commit()
        finally:
            conn.close()

        profiles = SQLiteProfileRepository(test_db_path)
        assert migrate_legacy_profile(profiles, SQLiteLegacyStateRepository(test_db_path))
        assert profiles.list_names() == ["Player"]


class TestInMemoryRepositories:
    def test_stored_records_are_copies(self):
        repo = InMemoryProfileRepository()
        record = {"achievements": [1]}
        repo.save_record("Ada", record)
        record["achievements"].append(2)

        loaded = repo.load_record("Ada")
        loaded["achievements"].append(3)
        assert repo.load_record("Ada") == {"achievements": [1]}

    def test_directory_matches_sqlite_behaviour(self):
        repo = InMemoryProfileDirectoryRepository()
        for i in range(5):
            repo.touch(f"P{i}", limit=3)
        repo.touch("P3", limit=3)
        assert repo.recent(10) == ["P3", "P4", "P2"]


class TestBuildLegacyRecord:
    def test_translates_field_names(self):
        record = build_legacy_record(
            {
                "mf_best_v1": {"bestStreak": 4, "bestPercent": 50, "bestAvgTimeSec": 2},
                "mf_previous_v1": {"percent": 40, "avgTimeSec": 6, "maxStreak": 2},
            }
        )
        assert record["best"] == {"best_streak": 4, "best_percent": 50, "best_avg_time_sec": 2}
        assert record["previous"] == {"percent": 40, "avg_time_sec": 6, "max_streak": 2}

    def test_passes_malformed_values_through(self):
        record = build_legacy_record({"mf_best_v1": "junk", "mf_fact_stats_v1": [1, 2]})
        assert record["best"] == "junk"
        assert "fact_stats" not in record
