"""Profile loading and saving with best-effort durability.

Storage failures never escape this module: reads fall back to a fresh
profile, writes are logged and dropped. Loaded records are validated field by
field and the queues are always rebuilt from the fact stats.
"""

import sqlite3
from datetime import datetime

from loguru import logger

from config import DrillConfig
from mastery import MasteryStore
from models import Profile
from queues import QueueManager
from storage import (
    LegacyStateRepository,
    ProfileDirectoryRepository,
    ProfileRepository,
    migrate_legacy_profile,
)

STORAGE_ERRORS = (sqlite3.Error, OSError, ValueError)


class ProfileStore:
    """Owns the stored copy of every profile plus the profile directory."""

    def __init__(
        self,
        profiles: ProfileRepository,
        directory: ProfileDirectoryRepository,
        legacy: LegacyStateRepository | None = None,
        config: DrillConfig | None = None,
    ):
        self.profiles = profiles
        self.directory = directory
        self.config = config or DrillConfig()

        if legacy is not None:
            try:
                migrate_legacy_profile(profiles, legacy)
            except STORAGE_ERRORS as e:
                logger.warning(f"Legacy migration skipped: {e}")

        # Every process start requires an explicit profile choice
        self._set_active_quietly(None)

    def load(self, name: str) -> Profile:
        """Load a profile, or start a fresh one if it is missing or unreadable."""
        try:
            record = self.profiles.load_record(name)
        except STORAGE_ERRORS as e:
            logger.warning(f"Could not read profile {name!r}, starting fresh: {e}")
            record = None

        if record is None:
            profile = Profile(name=name)
        else:
            profile = Profile.from_record(
                name, record, max_level=self.config.achievement_levels
            )

        QueueManager(
            profile,
            MasteryStore(profile.fact_stats),
            self.config.missed_carryover_limit,
        ).recompute()
        return profile

    def save(self, profile: Profile) -> bool:
        """Persist a profile. Returns False if the write failed."""
        profile.updated_at = datetime.now()
        try:
            self.profiles.save_record(profile.name, profile.to_record())
        except STORAGE_ERRORS as e:
            logger.warning(f"Could not save profile {profile.name!r}: {e}")
            return False
        return True

    def exists(self, name: str) -> bool:
        return name in self.list_names()

    def list_names(self) -> list[str]:
        try:
            return self.profiles.list_names()
        except STORAGE_ERRORS as e:
            logger.warning(f"Could not list profiles: {e}")
            return []

    def recent(self) -> list[str]:
        try:
            return self.directory.recent(self.config.recent_profiles_limit)
        except STORAGE_ERRORS as e:
            logger.warning(f"Could not read recent profiles: {e}")
            return []

    def activate(self, name: str) -> None:
        """Mark a profile as the active one and move it to the recent front."""
        try:
            self.directory.touch(name, self.config.recent_profiles_limit)
            self.directory.set_active(name)
        except STORAGE_ERRORS as e:
            logger.warning(f"Could not update profile directory: {e}")

    @property
    def active_name(self) -> str | None:
        try:
            return self.directory.get_active()
        except STORAGE_ERRORS as e:
            logger.warning(f"Could not read active profile: {e}")
            return None

    def delete(self, name: str) -> None:
        try:
            self.profiles.delete(name)
            self.directory.forget(name)
            if self.directory.get_active() == name:
                self.directory.set_active(None)
        except STORAGE_ERRORS as e:
            logger.warning(f"Could not delete profile {name!r}: {e}")

    def _set_active_quietly(self, name: str | None) -> None:
        try:
            self.directory.set_active(name)
        except STORAGE_ERRORS as e:
            logger.warning(f"Could not reset active profile: {e}")
