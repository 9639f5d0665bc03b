"""The drill engine: one explicit context object per active profile.

The presentation layer drives a session through three calls:

    action = engine.start_session()          # SHOW_QUESTION
    result = engine.submit_answer(42)        # AttemptResult, or None if ignored
    action = engine.advance()                # SHOW_QUESTION or SHOW_SUMMARY

Every attempt flows session tracker -> mastery store -> queue manager ->
achievement evaluator, and the profile is persisted before the call returns.
"""

import random
import time
from collections.abc import Callable

from loguru import logger

from achievements import AchievementEvaluator
from config import DrillConfig
from facts import FACT_COUNT, Fact, parse_key
from mastery import MasteryStore
from messages import feedback_message, random_tip
from models import (
    AttemptResult,
    BestRecords,
    LiveStats,
    NextAction,
    NextActionKind,
    Profile,
    SessionEndEvent,
    SessionSummary,
)
from profiles import ProfileStore
from queues import QueueManager
from scheduler import FactSelector
from session import SessionPhase, SessionTracker


def system_clock_ms() -> int:
    return int(time.time() * 1000)


class DrillEngine:
    """Runs drill sessions for a single profile."""

    def __init__(
        self,
        profile: Profile,
        store: ProfileStore,
        config: DrillConfig | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], int] | None = None,
    ):
        self.profile = profile
        self.store = store
        self.config = config or DrillConfig()
        self.rng = rng or random.Random()
        self.clock = clock or system_clock_ms

        self.mastery = MasteryStore(profile.fact_stats)
        self.queues = QueueManager(
            profile, self.mastery, self.config.missed_carryover_limit
        )
        self.selector = FactSelector(self.queues, self.config, self.rng)
        self.achievements = AchievementEvaluator(
            profile, self.mastery, self.queues, self.config.achievement_levels
        )
        self.session = SessionTracker(self.config.session_length)

        self.current_tip = ""
        self._open_modals = 0

    @classmethod
    def open(
        cls,
        store: ProfileStore,
        name: str,
        config: DrillConfig | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], int] | None = None,
    ) -> "DrillEngine":
        """Load (or create) a profile, make it active and build its engine."""
        profile = store.load(name)
        store.activate(name)
        store.save(profile)
        logger.info(f"Opened profile {name!r}")
        return cls(profile, store, config or store.config, rng, clock)

    def switch_profile(self, name: str) -> "DrillEngine":
        """Flush this profile and return a fresh engine for another one."""
        self.persist()
        return DrillEngine.open(self.store, name, self.config, self.rng, self.clock)

    def persist(self) -> None:
        self.store.save(self.profile)

    # ------------------------------------------------------------------
    # Session flow
    # ------------------------------------------------------------------

    def start_session(self) -> NextAction:
        """Begin a new session and select its first question."""
        self.session.reset()
        self._open_modals = 0
        self.queues.recompute()
        return self._next_question()

    def get_current_question(self) -> Fact | None:
        if self.session.phase != SessionPhase.QUESTION_ACTIVE:
            return None
        return self.session.current

    def submit_answer(self, value: int) -> AttemptResult | None:
        """Score an answer to the current question.

        Returns None, changing nothing, when input is not allowed: no active
        question, a result still awaiting acknowledgement, or an open dialog.
        """
        if not self.is_input_allowed():
            logger.debug("Answer ignored: input not allowed")
            return None

        now = self.clock()
        result = self.session.record_attempt(value, now)
        if result is None:
            return None

        key = result.fact.key
        if self.mastery.record(key, result.is_correct, now):
            self.queues.promote(key)

        achievement = None
        if result.is_correct:
            self.profile.global_streak += 1
            self.profile.best.best_streak = max(
                self.profile.best.best_streak, self.profile.global_streak
            )
            achievement = self.achievements.check_and_award()
        else:
            self.profile.global_streak = 0

        self.persist()
        return result.model_copy(
            update={
                "message": feedback_message(result.fact, result.is_correct, self.rng),
                "achievement": achievement,
            }
        )

    def advance(self) -> NextAction | None:
        """Acknowledge the last result and move on.

        Returns None unless a result is awaiting acknowledgement.
        """
        if self.session.phase != SessionPhase.AWAITING_ACKNOWLEDGEMENT:
            return None

        self.session.acknowledge()
        if self.session.is_complete:
            return self._end_session()
        return self._next_question()

    def _next_question(self) -> NextAction:
        key = self.selector.pick_next(self.session)
        # Selection can pop the missed list or rotate the cycle
        self.persist()
        if key is None:
            return self._end_session()

        fact = parse_key(key)
        assert fact is not None, f"queues produced an invalid key {key!r}"
        self.session.present(fact, self.clock())
        self.current_tip = random_tip(self.rng)
        return NextAction(kind=NextActionKind.SHOW_QUESTION, question=fact)

    def _end_session(self) -> NextAction:
        session = self.session
        summary = session.summary()
        earlier = self.profile.previous.model_copy()

        best = self.profile.best
        best.best_streak = max(best.best_streak, summary.max_streak)
        best.best_percent = max(best.best_percent, summary.percent)
        if summary.avg_time_sec and (
            best.best_avg_time_sec is None or summary.avg_time_sec < best.best_avg_time_sec
        ):
            best.best_avg_time_sec = summary.avg_time_sec

        self.profile.previous = summary
        self.profile.total_games_played += 1

        missed_keys = list(session.missed)
        self.queues.set_missed(missed_keys, self.config.missed_carryover_limit)

        # Covers a threshold crossed on the session's last answer
        achievement = self.achievements.check_and_award()

        session.finish()
        self.persist()
        logger.info(
            f"Session over for {self.profile.name!r}: "
            f"{session.correct_count}/{session.asked_count} correct"
        )

        event = SessionEndEvent(
            summary=summary,
            asked_count=session.asked_count,
            correct_count=session.correct_count,
            missed=[fact for fact in map(parse_key, missed_keys) if fact is not None],
            best=best.model_copy(),
            previous=earlier,
        )
        return NextAction(
            kind=NextActionKind.SHOW_SUMMARY,
            session_end=event,
            achievement=achievement,
        )

    # ------------------------------------------------------------------
    # Queries and input gating
    # ------------------------------------------------------------------

    def get_live_stats(self) -> LiveStats:
        session = self.session
        active = 1 if session.phase == SessionPhase.QUESTION_ACTIVE else 0
        return LiveStats(
            percent=session.percent,
            streak=session.current_streak,
            avg_time_sec=session.avg_time_sec,
            games_played=self.profile.total_games_played,
            question_number=min(session.asked_count + active, self.config.session_length),
            total_questions=self.config.session_length,
        )

    def next_level_progress(self) -> tuple[int, int, int] | None:
        """(level, facts at that level, total facts) for the next unearned level."""
        earned = set(self.profile.achievements)
        for level in range(1, self.config.achievement_levels + 1):
            if level not in earned:
                return level, self.mastery.count_at_least(level), FACT_COUNT
        return None

    def open_modal(self) -> None:
        self._open_modals += 1

    def close_modal(self) -> None:
        self._open_modals = max(0, self._open_modals - 1)

    def is_input_allowed(self) -> bool:
        return (
            self._open_modals == 0
            and self.session.phase == SessionPhase.QUESTION_ACTIVE
        )

    # ------------------------------------------------------------------
    # Profile maintenance
    # ------------------------------------------------------------------

    def set_theme(self, theme: str) -> None:
        self.profile.theme = theme
        self.persist()

    def reset_progress(self) -> None:
        """Explicit profile reset: counters, queues, records and levels."""
        self.mastery.reset_counters()
        self.profile.unmastered_queue = []
        self.profile.cycle_queue = []
        self.profile.last_missed_keys = []
        self.profile.best = BestRecords()
        self.profile.previous = SessionSummary()
        self.profile.achievements = []
        self.profile.total_games_played = 0
        self.profile.global_streak = 0
        self.queues.recompute()
        self.session.reset()
        self.persist()
        logger.info(f"Reset progress for profile {self.profile.name!r}")
