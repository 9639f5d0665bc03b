from datetime import datetime
from enum import Enum
from typing import Any

from loguru import logger
from pydantic import BaseModel, Field, ValidationError

from facts import Fact, is_valid_key


# ============================================================================
# Persisted Profile Models
# ============================================================================


class FactStat(BaseModel):
    """Attempt counters for a single fact.

    A fact is mastered once it has at least one correct answer since its last
    reset.
    """

    correct: int = Field(default=0, ge=0)
    wrong: int = Field(default=0, ge=0)
    last_seen_ms: int | None = None

    @property
    def is_mastered(self) -> bool:
        return self.correct > 0


class BestRecords(BaseModel):
    best_streak: int = Field(default=0, ge=0)
    best_percent: float = Field(default=0.0, ge=0.0, le=100.0)
    best_avg_time_sec: int | None = None


class SessionSummary(BaseModel):
    """End-of-session figures, also kept as the profile's previous game."""

    percent: float = Field(default=0.0, ge=0.0, le=100.0)
    avg_time_sec: int | None = None
    max_streak: int = Field(default=0, ge=0)


class Profile(BaseModel):
    """Everything persisted for one named user."""

    name: str
    theme: str = "classic"
    fact_stats: dict[str, FactStat] = Field(default_factory=dict)
    unmastered_queue: list[str] = Field(default_factory=list)
    cycle_queue: list[str] = Field(default_factory=list)
    last_missed_keys: list[str] = Field(default_factory=list)
    best: BestRecords = Field(default_factory=BestRecords)
    previous: SessionSummary = Field(default_factory=SessionSummary)
    achievements: list[int] = Field(default_factory=list)
    total_games_played: int = Field(default=0, ge=0)
    global_streak: int = Field(default=0, ge=0)
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    def to_record(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible document."""
        return self.model_dump(mode="json")

    @classmethod
    def from_record(cls, name: str, data: Any, max_level: int = 10) -> "Profile":
        """Build a Profile from an untrusted stored document.

        Every field is optional. Each one is validated on its own and replaced
        by its default when missing or malformed, so one bad field never costs
        the rest of the profile. Fact stats are checked entry by entry and
        entries with invalid fact keys are dropped, and so are achievement
        levels outside 1..``max_level``. Queue contents are kept
        as-is here; the queue manager rebuilds them from the stats on load.
        """
        if not isinstance(data, dict):
            if data is not None:
                logger.warning(f"Profile {name!r}: record is not a mapping, using defaults")
            data = {}

        values: dict[str, Any] = {"name": name}
        for field_name in cls.model_fields:
            if field_name == "name" or field_name not in data:
                continue

            if field_name == "fact_stats":
                values[field_name] = _load_fact_stats(name, data[field_name])
                continue

            try:
                probe = cls.model_validate({"name": name, field_name: data[field_name]})
                values[field_name] = getattr(probe, field_name)
            except ValidationError:
                logger.warning(f"Profile {name!r}: invalid {field_name}, using default")

        profile = cls(**values)
        profile.achievements = sorted(
            {lvl for lvl in profile.achievements if 1 <= lvl <= max_level}
        )
        return profile


def _load_fact_stats(profile_name: str, raw: Any) -> dict[str, FactStat]:
    if not isinstance(raw, dict):
        logger.warning(f"Profile {profile_name!r}: fact stats are not a mapping")
        return {}

    stats: dict[str, FactStat] = {}
    for key, value in raw.items():
        if not is_valid_key(key):
            logger.warning(f"Profile {profile_name!r}: dropping stats for bad key {key!r}")
            continue
        try:
            stats[key] = FactStat.model_validate(value)
        except ValidationError:
            logger.warning(f"Profile {profile_name!r}: dropping malformed stats for {key}")
    return stats


# ============================================================================
# Engine Results and Events
# ============================================================================


class AchievementEvent(BaseModel):
    level: int
    message: str


class AttemptResult(BaseModel):
    """Outcome of one submitted answer, consumed by the presentation layer."""

    fact: Fact
    user_value: int
    is_correct: bool
    correct_answer: int
    elapsed_ms: int
    message: str = ""
    achievement: AchievementEvent | None = None
    session_complete: bool = False


class SessionEndEvent(BaseModel):
    summary: SessionSummary
    asked_count: int
    correct_count: int
    missed: list[Fact] = Field(default_factory=list)
    best: BestRecords
    previous: SessionSummary


class NextActionKind(str, Enum):
    SHOW_QUESTION = "show_question"
    SHOW_SUMMARY = "show_summary"


class NextAction(BaseModel):
    kind: NextActionKind
    question: Fact | None = None
    session_end: SessionEndEvent | None = None
    achievement: AchievementEvent | None = None


class LiveStats(BaseModel):
    percent: float
    streak: int
    avg_time_sec: int
    games_played: int
    question_number: int
    total_questions: int
