"""Migration of pre-profile data into a profile record."""

from typing import Any

from loguru import logger

from .base import LegacyStateRepository, ProfileRepository

LEGACY_PROFILE_NAME = "Player"

LEGACY_KEYS = {
    "fact_stats": "mf_fact_stats_v1",
    "cycle_queue": "mf_cycle_queue_v1",
    "last_missed": "mf_last_missed_v1",
    "best": "mf_best_v1",
    "previous": "mf_previous_v1",
}


def migrate_legacy_profile(
    profiles: ProfileRepository,
    legacy: LegacyStateRepository,
    name: str = LEGACY_PROFILE_NAME,
) -> bool:
    """Create a profile from legacy flat records when no profiles exist yet.

    The migration is idempotent: once any profile exists it does nothing, and
    the legacy records are left in place.

    Args:
        profiles: Repository the new profile is written to.
        legacy: Repository holding the flat records.
        name: Name of the synthesized profile.

    Returns:
        True if a profile was created.
    """
    if profiles.list_names():
        return False

    records = legacy.load_all()
    if not any(key in records for key in LEGACY_KEYS.values()):
        return False

    profiles.save_record(name, build_legacy_record(records))
    logger.info(f"Migrated legacy progress into profile {name!r}")
    return True


def build_legacy_record(records: dict[str, Any]) -> dict[str, Any]:
    """Translate legacy flat records into a profile document.

    Only the shape is translated here. Values are validated when the profile
    is loaded, so anything malformed falls back to defaults there.
    """
    record: dict[str, Any] = {}

    stats = records.get(LEGACY_KEYS["fact_stats"])
    if isinstance(stats, dict):
        record["fact_stats"] = {
            key: _translate(value, {"lastSeenMs": "last_seen_ms"})
            for key, value in stats.items()
        }

    cycle = records.get(LEGACY_KEYS["cycle_queue"])
    if cycle is not None:
        record["cycle_queue"] = cycle

    missed = records.get(LEGACY_KEYS["last_missed"])
    if missed is not None:
        record["last_missed_keys"] = missed

    best = records.get(LEGACY_KEYS["best"])
    if best is not None:
        record["best"] = _translate(
            best,
            {
                "bestStreak": "best_streak",
                "bestPercent": "best_percent",
                "bestAvgTimeSec": "best_avg_time_sec",
            },
        )

    previous = records.get(LEGACY_KEYS["previous"])
    if previous is not None:
        record["previous"] = _translate(
            previous,
            {"avgTimeSec": "avg_time_sec", "maxStreak": "max_streak"},
        )

    return record


def _translate(value: Any, renames: dict[str, str]) -> Any:
    if not isinstance(value, dict):
        return value
    return {renames.get(key, key): item for key, item in value.items()}
