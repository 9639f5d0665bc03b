"""Integration tests using the learner simulator."""

import json
import random

from rich.console import Console

from config import DrillConfig
from facts import Fact
from simulate import (
    SimulatedLearner,
    SimulatedLearnerConfig,
    Simulator,
    run_simulation_and_report,
)


class TestSimulatedLearner:
    def test_perfect_learner_always_correct(self, perfect_learner_config):
        learner = SimulatedLearner(config=perfect_learner_config)
        rng = random.Random(0)
        assert all(learner.answer(Fact(a=6, b=7), rng) == 42 for _ in range(20))

    def test_hopeless_learner_always_wrong(self):
        learner = SimulatedLearner(config=SimulatedLearnerConfig(base_accuracy=0.0))
        rng = random.Random(0)
        for fact in [Fact(a=0, b=5), Fact(a=6, b=7)]:
            assert learner.answer(fact, rng) != fact.answer

    def test_learning_moves_toward_one(self):
        learner = SimulatedLearner(
            config=SimulatedLearnerConfig(base_accuracy=0.5, learning_rate=0.5)
        )
        learner.update("3x4", True)
        assert learner.get_knowledge("3x4") == 0.75
        learner.update("3x4", False)
        assert learner.get_knowledge("3x4") < 0.75


class TestSimulator:
    def test_sessions_have_twenty_distinct_questions(self, default_learner_config):
        results = Simulator(default_learner_config, seed=7).run(sessions=5)

        assert results.sessions_simulated == 5
        assert len(results.session_results) == 5
        assert all(r.asked_count == 20 for r in results.session_results)
        assert results.total_attempts == 100

    def test_perfect_learner_reaches_level_one(self, perfect_learner_config):
        results = Simulator(perfect_learner_config, seed=1).run(sessions=7)

        assert results.overall_accuracy == 1.0
        assert results.achievements == {1: 7}
        assert results.session_results[6].achievements_earned == [1]

    def test_seed_makes_runs_reproducible(self, default_learner_config):
        first = Simulator(default_learner_config, seed=11).run(sessions=3)
        second = Simulator(default_learner_config, seed=11).run(sessions=3)

        assert [r.correct_count for r in first.session_results] == [
            r.correct_count for r in second.session_results
        ]

    def test_custom_session_length(self, perfect_learner_config):
        drill_config = DrillConfig(session_length=5)
        results = Simulator(perfect_learner_config, drill_config, seed=3).run(sessions=2)

        assert [r.asked_count for r in results.session_results] == [5, 5]
        assert results.final_mastered == 10

    def test_average_time_uses_answer_time(self):
        config = SimulatedLearnerConfig(base_accuracy=1.0, answer_time_ms=2500)
        results = Simulator(config, seed=0).run(sessions=1)
        assert results.session_results[0].avg_time_sec == 3


class TestReport:
    def test_writes_json_results(self, tmp_path, default_learner_config):
        output = tmp_path / "results.json"
        console = Console(record=True, width=120)

        results = run_simulation_and_report(
            config=default_learner_config,
            sessions=2,
            output_path=output,
            seed=5,
            verbose=True,
            console=console,
        )

        data = json.loads(output.read_text())
        assert data["sessions_simulated"] == 2
        assert data["random_seed"] == 5
        assert len(data["session_results"]) == 2
        assert data["total_correct"] == results.total_correct

        text = console.export_text()
        assert "SIMULATION COMPLETE" in text
        assert "Session 1:" in text
