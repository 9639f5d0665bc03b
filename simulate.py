"""Simulated learner driving the drill engine.

Useful for studying how many sessions the scheduling takes to reach each
achievement level for a given kind of learner. Runs entirely in memory.
"""

import json
import random
from datetime import datetime
from pathlib import Path

from loguru import logger
from pydantic import BaseModel, Field
from rich import box
from rich.console import Console
from rich.table import Table

from config import DrillConfig
from engine import DrillEngine
from facts import Fact
from models import NextActionKind
from profiles import ProfileStore
from storage import InMemoryProfileDirectoryRepository, InMemoryProfileRepository

SIMULATED_PROFILE_NAME = "Simulated"


# ============================================================================
# Simulation Models
# ============================================================================


class SimulatedLearnerConfig(BaseModel):
    """Configuration for a simulated learner's behaviour."""

    # Chance of answering a fact correctly before any practice
    base_accuracy: float = Field(default=0.6, ge=0.0, le=1.0)

    # How fast recall improves per correct answer
    # Formula: k_new = k + learning_rate * (1 - k)
    learning_rate: float = Field(default=0.3, ge=0.0, le=1.0)

    # Time taken for every answer
    answer_time_ms: int = Field(default=3000, ge=0)


class SimulatedLearner(BaseModel):
    """A learner with a hidden per-fact chance of answering correctly."""

    config: SimulatedLearnerConfig
    knowledge: dict[str, float] = Field(default_factory=dict)

    def get_knowledge(self, key: str) -> float:
        return self.knowledge.get(key, self.config.base_accuracy)

    def answer(self, fact: Fact, rng: random.Random) -> int:
        if rng.random() < self.get_knowledge(fact.key):
            return fact.answer
        # Off-by-one slips are the most common wrong answer
        return fact.answer + rng.choice([-1, 1]) if fact.answer > 0 else 1

    def update(self, key: str, correct: bool) -> None:
        current = self.get_knowledge(key)
        if correct:
            new_knowledge = current + self.config.learning_rate * (1.0 - current)
        else:
            new_knowledge = current * 0.95
        self.knowledge[key] = min(1.0, max(0.0, new_knowledge))


class SessionResult(BaseModel):
    """Outcome of one simulated session."""

    session: int  # 1-indexed
    asked_count: int
    correct_count: int
    percent: float
    avg_time_sec: int | None
    max_streak: int
    mastered_after: int  # facts with at least one correct answer at session end
    achievements_earned: list[int] = Field(default_factory=list)


class SimulationResults(BaseModel):
    """Complete results of a simulation run."""

    config: SimulatedLearnerConfig
    drill_config: DrillConfig
    sessions_simulated: int
    random_seed: int | None
    start_time: datetime
    end_time: datetime

    total_attempts: int
    total_correct: int
    overall_accuracy: float

    session_results: list[SessionResult]

    # Achievement level -> session in which it was earned
    achievements: dict[int, int]
    final_mastered: int


# ============================================================================
# Simulator
# ============================================================================


class Simulator:
    """Runs a simulated learner through consecutive drill sessions."""

    def __init__(
        self,
        config: SimulatedLearnerConfig,
        drill_config: DrillConfig | None = None,
        seed: int | None = None,
    ):
        self.config = config
        self.drill_config = drill_config or DrillConfig()
        self.seed = seed
        self.rng = random.Random(seed)
        self.learner = SimulatedLearner(config=config)

        self._now_ms = 0
        store = ProfileStore(
            InMemoryProfileRepository(),
            InMemoryProfileDirectoryRepository(),
            config=self.drill_config,
        )
        self.engine = DrillEngine.open(
            store,
            SIMULATED_PROFILE_NAME,
            config=self.drill_config,
            rng=self.rng,
            clock=lambda: self._now_ms,
        )

        self.session_results: list[SessionResult] = []
        self.achievements: dict[int, int] = {}

    def run(
        self,
        sessions: int,
        verbose: bool = False,
        console: Console | None = None,
    ) -> SimulationResults:
        """Run the full simulation."""
        start_time = datetime.now()

        for number in range(1, sessions + 1):
            result = self._simulate_session(number)
            if verbose:
                self._print_session_result(result, console or Console())

        end_time = datetime.now()
        return self._compile_results(sessions, start_time, end_time)

    def _simulate_session(self, number: int) -> SessionResult:
        earned: list[int] = []
        action = self.engine.start_session()

        while action.kind == NextActionKind.SHOW_QUESTION:
            fact = action.question
            value = self.learner.answer(fact, self.rng)
            self._now_ms += self.config.answer_time_ms

            attempt = self.engine.submit_answer(value)
            assert attempt is not None
            self.learner.update(fact.key, attempt.is_correct)
            if attempt.achievement is not None:
                earned.append(attempt.achievement.level)

            action = self.engine.advance()

        if action.achievement is not None:
            earned.append(action.achievement.level)
        for level in earned:
            self.achievements.setdefault(level, number)
            logger.info(f"Simulated learner reached level {level} in session {number}")

        event = action.session_end
        result = SessionResult(
            session=number,
            asked_count=event.asked_count,
            correct_count=event.correct_count,
            percent=event.summary.percent,
            avg_time_sec=event.summary.avg_time_sec,
            max_streak=event.summary.max_streak,
            mastered_after=self.engine.mastery.mastered_count,
            achievements_earned=earned,
        )
        self.session_results.append(result)
        return result

    def _print_session_result(self, result: SessionResult, console: Console) -> None:
        levels = ""
        if result.achievements_earned:
            levels = f" | level {', '.join(map(str, result.achievements_earned))}!"
        console.print(
            f"  Session {result.session}: {result.correct_count}/{result.asked_count} "
            f"({result.percent:.0f}%) | mastered={result.mastered_after}{levels}"
        )

    def _compile_results(
        self,
        sessions: int,
        start_time: datetime,
        end_time: datetime,
    ) -> SimulationResults:
        total_attempts = sum(r.asked_count for r in self.session_results)
        total_correct = sum(r.correct_count for r in self.session_results)

        return SimulationResults(
            config=self.config,
            drill_config=self.drill_config,
            sessions_simulated=sessions,
            random_seed=self.seed,
            start_time=start_time,
            end_time=end_time,
            total_attempts=total_attempts,
            total_correct=total_correct,
            overall_accuracy=total_correct / total_attempts if total_attempts > 0 else 0.0,
            session_results=self.session_results,
            achievements=self.achievements,
            final_mastered=self.engine.mastery.mastered_count,
        )


# ============================================================================
# Reporting
# ============================================================================


def print_console_summary(results: SimulationResults, console: Console) -> None:
    """Print formatted console summary of simulation results."""
    console.print()
    console.print("SIMULATION COMPLETE", style="bold blue")
    console.print()
    console.print("Learner Parameters:")
    console.print(f"  Base accuracy:      {results.config.base_accuracy:.2f}")
    console.print(f"  Learning rate:      {results.config.learning_rate:.2f}")
    console.print(f"  Answer time:        {results.config.answer_time_ms} ms")
    console.print()
    console.print(
        f"Total correct:        {results.total_correct} / {results.total_attempts} "
        f"({results.overall_accuracy * 100:.1f}%)"
    )
    console.print(f"Facts mastered now:   {results.final_mastered}")
    console.print()

    table = Table(title="Sessions", box=box.ROUNDED, header_style="bold")
    table.add_column("Session", justify="right")
    table.add_column("Correct", justify="right")
    table.add_column("Accuracy", justify="right")
    table.add_column("Best streak", justify="right")
    table.add_column("Mastered", justify="right")
    table.add_column("Levels", justify="center")

    for r in results.session_results:
        table.add_row(
            str(r.session),
            f"{r.correct_count}/{r.asked_count}",
            f"{r.percent:.1f}%",
            str(r.max_streak),
            str(r.mastered_after),
            ", ".join(map(str, r.achievements_earned)),
        )
    console.print(table)

    if results.achievements:
        console.print()
        console.print("Achievements:")
        for level, session in sorted(results.achievements.items()):
            console.print(f"  Level {level}: session {session}")
    console.print()


def save_json_results(results: SimulationResults, output_path: Path) -> None:
    """Save simulation results to JSON file."""
    data = json.loads(results.model_dump_json())

    with open(output_path, "w") as f:
        json.dump(data, f, indent=2, default=str)


def run_simulation_and_report(
    config: SimulatedLearnerConfig,
    sessions: int,
    output_path: Path,
    seed: int | None = None,
    drill_config: DrillConfig | None = None,
    verbose: bool = False,
    console: Console | None = None,
) -> SimulationResults:
    """Run simulation and generate all outputs."""
    console = console or Console()

    simulator = Simulator(config, drill_config, seed)
    results = simulator.run(sessions, verbose, console)

    print_console_summary(results, console)

    save_json_results(results, output_path)
    console.print(f"Results saved to: {output_path}")

    return results
