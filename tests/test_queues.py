"""Tests for QueueManager."""

from facts import ALL_KEYS
from mastery import MasteryStore
from models import FactStat, Profile
from queues import QueueManager


def make_queues(profile: Profile) -> QueueManager:
    return QueueManager(profile, MasteryStore(profile.fact_stats))


def assert_partitioned(profile: Profile) -> None:
    """Every key sits in exactly one queue, and in the cycle iff mastered."""
    unmastered, cycle = profile.unmastered_queue, profile.cycle_queue
    assert len(unmastered) + len(cycle) == 121
    assert set(unmastered) | set(cycle) == set(ALL_KEYS)
    assert not set(unmastered) & set(cycle)
    for key in cycle:
        assert profile.fact_stats[key].correct > 0
    for key in unmastered:
        stat = profile.fact_stats.get(key)
        assert stat is None or stat.correct == 0


class TestRecompute:
    def test_fresh_profile_is_all_unmastered(self):
        profile = Profile(name="Ada")
        make_queues(profile).recompute()

        assert profile.unmastered_queue == ALL_KEYS
        assert profile.cycle_queue == []
        assert_partitioned(profile)

    def test_places_mastered_facts_in_cycle(self):
        profile = Profile(
            name="Ada",
            fact_stats={"3x4": FactStat(correct=1), "5x5": FactStat(wrong=3)},
        )
        make_queues(profile).recompute()

        assert profile.cycle_queue == ["3x4"]
        assert "5x5" in profile.unmastered_queue
        assert_partitioned(profile)

    def test_repairs_corrupt_queues(self):
        profile = Profile(
            name="Ada",
            fact_stats={"3x4": FactStat(correct=1)},
            unmastered_queue=["3x4", "bogus", "2x2", "2x2"],
            cycle_queue=["7x7", "3x4", "12x1"],
        )
        make_queues(profile).recompute()

        assert profile.cycle_queue == ["3x4"]
        assert profile.unmastered_queue[0] == "2x2"
        assert_partitioned(profile)

    def test_keeps_cycle_order(self):
        profile = Profile(
            name="Ada",
            fact_stats={k: FactStat(correct=1) for k in ["1x1", "2x2", "3x3"]},
            cycle_queue=["3x3", "1x1"],
        )
        make_queues(profile).recompute()

        assert profile.cycle_queue == ["3x3", "1x1", "2x2"]

    def test_sanitizes_missed_list(self):
        profile = Profile(name="Ada", last_missed_keys=["3x4", "nope", "3x4", "6x7"])
        make_queues(profile).recompute()
        assert profile.last_missed_keys == ["3x4", "6x7"]

    def test_caps_missed_list_after_dedupe(self):
        keys = ["3x4", "3x4", *ALL_KEYS[:12]]
        profile = Profile(name="Ada", last_missed_keys=keys)
        QueueManager(profile, MasteryStore(profile.fact_stats), missed_limit=4).recompute()
        assert profile.last_missed_keys == ["3x4", *ALL_KEYS[:3]]


class TestPromote:
    def test_moves_key_to_back_of_cycle(self):
        profile = Profile(name="Ada", fact_stats={"1x1": FactStat(correct=1)})
        queues = make_queues(profile)
        queues.recompute()

        profile.fact_stats["3x4"] = FactStat(correct=1)
        queues.promote("3x4")

        assert "3x4" not in profile.unmastered_queue
        assert profile.cycle_queue == ["1x1", "3x4"]
        assert_partitioned(profile)

    def test_is_idempotent(self):
        profile = Profile(name="Ada")
        queues = make_queues(profile)
        queues.recompute()
        queues.promote("3x4")
        queues.promote("3x4")
        assert profile.cycle_queue == ["3x4"]


class TestRotateCycle:
    def test_moves_returned_key_to_back(self):
        profile = Profile(name="Ada", cycle_queue=["1x1", "2x2", "3x3"])
        key = make_queues(profile).rotate_cycle(set())

        assert key == "1x1"
        assert profile.cycle_queue == ["2x2", "3x3", "1x1"]

    def test_skips_excluded_keys(self):
        profile = Profile(name="Ada", cycle_queue=["1x1", "2x2", "3x3"])
        key = make_queues(profile).rotate_cycle({"1x1"})

        assert key == "2x2"
        assert profile.cycle_queue == ["3x3", "1x1", "2x2"]

    def test_returns_none_when_all_excluded(self):
        profile = Profile(name="Ada", cycle_queue=["1x1", "2x2"])
        assert make_queues(profile).rotate_cycle({"1x1", "2x2"}) is None
        assert profile.cycle_queue == ["1x1", "2x2"]

    def test_visits_every_key_before_repeating(self):
        keys = ["1x1", "2x2", "3x3", "4x4"]
        profile = Profile(name="Ada", cycle_queue=list(keys))
        queues = make_queues(profile)

        served = [queues.rotate_cycle(set()) for _ in range(8)]
        assert served == keys + keys


class TestMissed:
    def test_pop_returns_oldest_first(self):
        profile = Profile(name="Ada", last_missed_keys=["3x4", "6x7"])
        queues = make_queues(profile)

        assert queues.pop_missed() == "3x4"
        assert queues.pop_missed() == "6x7"
        assert queues.pop_missed() is None

    def test_set_missed_truncates(self):
        profile = Profile(name="Ada")
        make_queues(profile).set_missed(ALL_KEYS[:15], limit=10)
        assert profile.last_missed_keys == ALL_KEYS[:10]
