"""Abstract repository interfaces for the storage layer.

Repositories move raw documents in and out of storage and raise on failure.
Validating those documents and deciding what to do when storage fails is the
job of ``profiles.ProfileStore``.
"""

from abc import ABC, abstractmethod
from typing import Any


class ProfileRepository(ABC):
    """Abstract interface for per-profile record storage."""

    @abstractmethod
    def load_record(self, name: str) -> Any | None:
        """Load the stored document for a profile.

        Args:
            name: The profile name.

        Returns:
            The decoded document (not validated), or None if not found.
        """
        pass

    @abstractmethod
    def save_record(self, name: str, record: dict[str, Any]) -> None:
        """Create or replace the stored document for a profile.

        Args:
            name: The profile name.
            record: A JSON-compatible document.
        """
        pass

    @abstractmethod
    def delete(self, name: str) -> None:
        pass

    @abstractmethod
    def list_names(self) -> list[str]:
        """Get the names of all stored profiles, sorted."""
        pass


class ProfileDirectoryRepository(ABC):
    """Abstract interface for the recency list and the active profile."""

    @abstractmethod
    def recent(self, limit: int) -> list[str]:
        """Get recently used profile names, most recent first.

        Args:
            limit: Maximum number of names to return.
        """
        pass

    @abstractmethod
    def touch(self, name: str, limit: int) -> None:
        """Move a profile to the front of the recency list.

        Args:
            name: The profile name.
            limit: Entries beyond this many are dropped.
        """
        pass

    @abstractmethod
    def forget(self, name: str) -> None:
        pass

    @abstractmethod
    def get_active(self) -> str | None:
        pass

    @abstractmethod
    def set_active(self, name: str | None) -> None:
        pass


class LegacyStateRepository(ABC):
    """Abstract interface for flat records from before profiles existed."""

    @abstractmethod
    def load_all(self) -> dict[str, Any]:
        """Get every legacy record, decoded, keyed by its storage key."""
        pass
