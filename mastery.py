"""Per-fact attempt counters, the source of truth for mastery state."""

from loguru import logger

from facts import ALL_KEYS
from models import FactStat


class MasteryStore:
    """Wraps a profile's fact stats map.

    Stats are created lazily on a fact's first attempt and never deleted;
    resets zero the counters but keep the entries.
    """

    def __init__(self, fact_stats: dict[str, FactStat]):
        self.fact_stats = fact_stats

    def get(self, key: str) -> FactStat | None:
        return self.fact_stats.get(key)

    def correct_count(self, key: str) -> int:
        stat = self.fact_stats.get(key)
        return stat.correct if stat else 0

    def is_mastered(self, key: str) -> bool:
        stat = self.fact_stats.get(key)
        return stat is not None and stat.is_mastered

    def record(self, key: str, is_correct: bool, now_ms: int) -> bool:
        """Record one attempt on a fact.

        Returns True only when this attempt is the fact's first correct
        answer since its last reset, i.e. the unmastered -> mastered edge.
        """
        stat = self.fact_stats.get(key)
        if stat is None:
            stat = FactStat()
            self.fact_stats[key] = stat

        stat.last_seen_ms = now_ms
        if not is_correct:
            stat.wrong += 1
            return False

        stat.correct += 1
        return stat.correct == 1

    def reset_counters(self) -> None:
        """Zero correct and wrong counts on every fact."""
        for stat in self.fact_stats.values():
            stat.correct = 0
            stat.wrong = 0
        logger.debug(f"Reset counters on {len(self.fact_stats)} facts")

    def count_at_least(self, threshold: int) -> int:
        """Number of facts in the fact space with at least `threshold` correct."""
        return sum(1 for key in ALL_KEYS if self.correct_count(key) >= threshold)

    @property
    def mastered_count(self) -> int:
        return self.count_at_least(1)
