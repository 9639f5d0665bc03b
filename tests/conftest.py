"""Shared pytest fixtures for the Times Tables Tutor test suite."""

import random
import pytest

import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from config import DrillConfig
from engine import DrillEngine
from facts import ALL_KEYS
from models import FactStat, Profile
from profiles import ProfileStore
from simulate import SimulatedLearnerConfig
from storage import (
    InMemoryProfileDirectoryRepository,
    InMemoryProfileRepository,
    init_schema,
)


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start_ms: int = 1_000_000):
        self.now_ms = start_ms

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, ms: int) -> None:
        self.now_ms += ms


def answer_current(engine: DrillEngine, correct: bool = True, elapsed_ms: int = 0):
    """Answer the engine's current question and acknowledge the result."""
    fact = engine.get_current_question()
    assert fact is not None
    if elapsed_ms and isinstance(engine.clock, FakeClock):
        engine.clock.advance(elapsed_ms)
    value = fact.answer if correct else fact.answer + 1
    result = engine.submit_answer(value)
    assert result is not None
    return result, engine.advance()


def stats_with_correct(count: int, keys: list[str] | None = None) -> dict[str, FactStat]:
    """Fact stats where every given key (all 121 by default) has `count` correct."""
    return {key: FactStat(correct=count) for key in (keys or ALL_KEYS)}


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def drill_config() -> DrillConfig:
    """Default drill constants."""
    return DrillConfig()


@pytest.fixture
def memory_store() -> ProfileStore:
    """A profile store backed by in-memory repositories."""
    return ProfileStore(
        InMemoryProfileRepository(),
        InMemoryProfileDirectoryRepository(),
    )


@pytest.fixture
def engine(memory_store, rng, fake_clock) -> DrillEngine:
    """A seeded engine for a fresh profile."""
    return DrillEngine.open(memory_store, "Ada", rng=rng, clock=fake_clock)


@pytest.fixture
def fresh_profile() -> Profile:
    return Profile(name="Ada")


@pytest.fixture
def test_db_path(tmp_path) -> Path:
    """Create a temporary database path for testing."""
    db_path = tmp_path / "test_tutor.db"
    init_schema(db_path)
    return db_path


@pytest.fixture
def default_learner_config() -> SimulatedLearnerConfig:
    return SimulatedLearnerConfig(base_accuracy=0.6, learning_rate=0.3)


@pytest.fixture
def perfect_learner_config() -> SimulatedLearnerConfig:
    """A learner who never misses."""
    return SimulatedLearnerConfig(base_accuracy=1.0, learning_rate=0.0)
