"""Detection and award of full-mastery achievement levels.

Level N is complete when every one of the 121 facts has at least N correct
answers. Correct counts are shared across levels, so an award zeroes them and
the climb toward the next level starts from scratch.
"""

from loguru import logger

from facts import FACT_COUNT
from mastery import MasteryStore
from messages import achievement_message
from models import AchievementEvent, Profile
from queues import QueueManager


class AchievementEvaluator:
    def __init__(
        self,
        profile: Profile,
        store: MasteryStore,
        queues: QueueManager,
        levels: int = 10,
    ):
        self.profile = profile
        self.store = store
        self.queues = queues
        self.levels = levels

    def complete_levels(self) -> list[int]:
        """All thresholds currently met by every fact, ascending."""
        return [
            level
            for level in range(1, self.levels + 1)
            if self.store.count_at_least(level) == FACT_COUNT
        ]

    def check_and_award(self) -> AchievementEvent | None:
        """Award the highest complete level not yet earned, if any.

        At most one level is awarded per call. On award the level is recorded,
        every fact's counters are reset and the queues are rebuilt so all
        facts count as unmastered again. The caller persists the profile.
        """
        earned = set(self.profile.achievements)
        pending = [lvl for lvl in self.complete_levels() if lvl not in earned]
        if not pending:
            return None

        level = max(pending)
        self.profile.achievements = sorted(earned | {level})
        self.store.reset_counters()
        self.queues.recompute()

        logger.info(f"Profile {self.profile.name!r} earned achievement level {level}")
        return AchievementEvent(level=level, message=achievement_message(level))
