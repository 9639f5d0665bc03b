"""Per-session bookkeeping: what was asked, how it went, and whose turn it is."""

from enum import Enum

from loguru import logger

from facts import Fact
from models import AttemptResult, SessionSummary


class SessionPhase(str, Enum):
    """Where the session is in the question / feedback cycle.

    Answers are only accepted in QUESTION_ACTIVE; the phase replaces ad-hoc
    "is a dialog open" flags as the double-submission guard.
    """

    IDLE = "idle"
    QUESTION_ACTIVE = "question_active"
    AWAITING_ACKNOWLEDGEMENT = "awaiting_acknowledgement"
    SESSION_COMPLETE = "session_complete"


def parse_answer(raw: str) -> int | None:
    """Parse typed input into an integer answer.

    Returns None for empty or non-numeric input. Such input never becomes an
    attempt and is not counted as wrong.
    """
    text = raw.strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        return None


def _round_half_up(value: float) -> int:
    return int(value + 0.5)


class SessionTracker:
    """Counters for a single drill session. Nothing here is persisted."""

    def __init__(self, session_length: int):
        self.session_length = session_length
        self.reset()

    def reset(self) -> None:
        # dicts double as insertion-ordered sets
        self.asked: dict[str, None] = {}
        self.missed: dict[str, None] = {}
        self.asked_count = 0
        self.correct_count = 0
        self.current_streak = 0
        self.max_streak = 0
        self.total_answer_time_ms = 0
        self.current: Fact | None = None
        self.question_started_ms: int | None = None
        self.missed_checkpoint_done = False
        self.phase = SessionPhase.IDLE

    @property
    def distinct_asked(self) -> int:
        return len(self.asked)

    @property
    def is_complete(self) -> bool:
        return self.distinct_asked >= self.session_length

    def present(self, fact: Fact, now_ms: int) -> None:
        """Make `fact` the active question and start its timer."""
        self.current = fact
        self.question_started_ms = now_ms
        self.phase = SessionPhase.QUESTION_ACTIVE

    def record_attempt(self, user_value: int, now_ms: int) -> AttemptResult | None:
        """Score an answer to the active question.

        Returns None without touching any counter when no question is active
        or the previous result has not been acknowledged yet.
        """
        if self.phase != SessionPhase.QUESTION_ACTIVE or self.current is None:
            logger.debug(f"Ignoring answer in phase {self.phase.value}")
            return None

        fact = self.current
        started = self.question_started_ms if self.question_started_ms is not None else now_ms
        elapsed_ms = max(0, now_ms - started)
        is_correct = user_value == fact.answer

        self.asked_count += 1
        self.asked[fact.key] = None
        self.total_answer_time_ms += elapsed_ms

        if is_correct:
            self.correct_count += 1
            self.current_streak += 1
            self.max_streak = max(self.max_streak, self.current_streak)
        else:
            self.current_streak = 0
            self.missed[fact.key] = None

        self.phase = SessionPhase.AWAITING_ACKNOWLEDGEMENT
        return AttemptResult(
            fact=fact,
            user_value=user_value,
            is_correct=is_correct,
            correct_answer=fact.answer,
            elapsed_ms=elapsed_ms,
            session_complete=self.is_complete,
        )

    def acknowledge(self) -> None:
        self.current = None
        self.question_started_ms = None

    def finish(self) -> None:
        self.acknowledge()
        self.phase = SessionPhase.SESSION_COMPLETE

    @property
    def percent(self) -> float:
        if self.asked_count == 0:
            return 0.0
        return 100 * self.correct_count / self.asked_count

    @property
    def avg_time_sec(self) -> int:
        if self.asked_count == 0:
            return 0
        return _round_half_up(self.total_answer_time_ms / self.asked_count / 1000)

    def summary(self) -> SessionSummary:
        return SessionSummary(
            percent=self.percent,
            avg_time_sec=self.avg_time_sec,
            max_streak=self.max_streak,
        )
