"""In-memory implementations of repository interfaces.

Used by the simulator, which never touches disk. Records are stored as JSON
text so callers cannot mutate stored state through shared references.
"""

import json
from typing import Any

from .base import (
    LegacyStateRepository,
    ProfileDirectoryRepository,
    ProfileRepository,
)


class InMemoryProfileRepository(ProfileRepository):
    def __init__(self):
        self._records: dict[str, str] = {}

    def load_record(self, name: str) -> Any | None:
        raw = self._records.get(name)
        return json.loads(raw) if raw is not None else None

    def save_record(self, name: str, record: dict[str, Any]) -> None:
        self._records[name] = json.dumps(record)

    def delete(self, name: str) -> None:
        self._records.pop(name, None)

    def list_names(self) -> list[str]:
        return sorted(self._records)


class InMemoryProfileDirectoryRepository(ProfileDirectoryRepository):
    def __init__(self):
        self._recent: list[str] = []
        self._active: str | None = None

    def recent(self, limit: int) -> list[str]:
        return self._recent[:limit]

    def touch(self, name: str, limit: int) -> None:
        if name in self._recent:
            self._recent.remove(name)
        self._recent.insert(0, name)
        del self._recent[limit:]

    def forget(self, name: str) -> None:
        if name in self._recent:
            self._recent.remove(name)

    def get_active(self) -> str | None:
        return self._active

    def set_active(self, name: str | None) -> None:
        self._active = name


class InMemoryLegacyStateRepository(LegacyStateRepository):
    def __init__(self, records: dict[str, Any] | None = None):
        self._records = dict(records or {})

    def load_all(self) -> dict[str, Any]:
        return json.loads(json.dumps(self._records))
