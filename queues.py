"""The unmastered queue, the mastered cycle queue and the missed carryover.

Invariant after ``recompute()``: every key of the fact space is in exactly one
of the two queues, and it is in the cycle queue iff its fact is mastered.
"""

from loguru import logger

from facts import ALL_KEYS, is_valid_key
from mastery import MasteryStore
from models import Profile


class QueueManager:
    """Maintains the queues stored on a profile."""

    def __init__(self, profile: Profile, store: MasteryStore, missed_limit: int = 10):
        self.profile = profile
        self.store = store
        self.missed_limit = missed_limit

    @property
    def unmastered(self) -> list[str]:
        return self.profile.unmastered_queue

    @property
    def cycle(self) -> list[str]:
        return self.profile.cycle_queue

    @property
    def last_missed(self) -> list[str]:
        return self.profile.last_missed_keys

    def both_empty(self) -> bool:
        return not self.unmastered and not self.cycle

    def recompute(self) -> None:
        """Rebuild both queues from the fact stats.

        Keys already queued keep their relative order so the cycle rotation
        survives a rebuild; keys that are missing are appended in fact-space
        order. Invalid and duplicate entries are dropped, including from the
        missed carryover list, which is then cut to ``missed_limit`` entries.
        """
        unmastered = _dedupe(
            k for k in self.unmastered
            if is_valid_key(k) and not self.store.is_mastered(k)
        )
        cycle = _dedupe(
            k for k in self.cycle
            if is_valid_key(k) and self.store.is_mastered(k)
        )

        queued = set(unmastered) | set(cycle)
        for key in ALL_KEYS:
            if key in queued:
                continue
            if self.store.is_mastered(key):
                cycle.append(key)
            else:
                unmastered.append(key)

        missed = _dedupe(k for k in self.last_missed if is_valid_key(k))
        if len(missed) != len(self.last_missed):
            logger.warning(
                f"Dropped {len(self.last_missed) - len(missed)} bad missed-fact entries"
            )
        if len(missed) > self.missed_limit:
            logger.info(f"Trimmed missed carryover from {len(missed)} to {self.missed_limit}")
            missed = missed[: self.missed_limit]

        self.profile.unmastered_queue = unmastered
        self.profile.cycle_queue = cycle
        self.profile.last_missed_keys = missed
        logger.debug(
            f"Recomputed queues: {len(unmastered)} unmastered, {len(cycle)} mastered"
        )

    def promote(self, key: str) -> None:
        """Move a newly mastered fact from the unmastered queue to the cycle."""
        if key in self.unmastered:
            self.unmastered.remove(key)
        if key not in self.cycle:
            self.cycle.append(key)
            logger.debug(f"Promoted {key} to the mastered cycle")

    def pop_missed(self) -> str | None:
        """Remove and return the oldest carried-over missed fact."""
        if not self.last_missed:
            return None
        return self.last_missed.pop(0)

    def set_missed(self, keys: list[str], limit: int) -> None:
        self.profile.last_missed_keys = list(keys[:limit])

    def rotate_cycle(self, exclude: set[str] | dict[str, None]) -> str | None:
        """Rotate the cycle queue until a key outside `exclude` reaches the back.

        Each examined key moves from the front to the back. Returns the first
        key not in `exclude`, or None after one full turn.
        """
        for _ in range(len(self.cycle)):
            key = self.cycle.pop(0)
            self.cycle.append(key)
            if key not in exclude:
                return key
        return None


def _dedupe(keys) -> list[str]:
    seen: set[str] = set()
    result = []
    for key in keys:
        if key not in seen:
            seen.add(key)
            result.append(key)
    return result
