"""
Unit tests for topic ranking, session sizing and slot lists.
"""

import pytest

from conftest import make_topic
from models.plan_models import LearningPace, Priority, StudyTime
from scheduler.ranking import (
    PACE_MULTIPLIERS,
    PRIORITY_WEIGHTS,
    REVISION_FREQUENCY,
    ensure_complete,
    rank_topics,
    round_half_up,
    session_duration,
)
from scheduler.time_slots import TIME_SLOTS, get_time_slots


class TestRankTopics:
    """Tests for priority/difficulty ordering."""

    def test_priority_orders_first(self):
        low = make_topic("1", "Math", "Sets", difficulty=5, priority="low")
        critical = make_topic("2", "Math", "Limits", difficulty=1, priority="critical")
        medium = make_topic("3", "Art", "Colour", difficulty=3, priority="medium")
        high = make_topic("4", "Art", "Form", difficulty=2, priority="high")

        ranked = rank_topics([low, critical, medium, high])

        assert [t.id for t in ranked] == ["2", "4", "3", "1"]

    def test_difficulty_breaks_priority_ties(self):
        easy = make_topic("easy", "Math", "Sets", difficulty=1, priority="high")
        hard = make_topic("hard", "Math", "Proofs", difficulty=5, priority="high")
        middle = make_topic("mid", "Math", "Graphs", difficulty=3, priority="high")

        ranked = rank_topics([easy, hard, middle])

        assert [t.id for t in ranked] == ["hard", "mid", "easy"]

    def test_full_ties_keep_input_order(self):
        first = make_topic("a", "Math", "Sets", difficulty=3, priority="medium")
        second = make_topic("b", "Art", "Form", difficulty=3, priority="medium")

        assert [t.id for t in rank_topics([first, second])] == ["a", "b"]
        assert [t.id for t in rank_topics([second, first])] == ["b", "a"]

    def test_empty_input(self):
        assert rank_topics([]) == []

    def test_input_is_not_mutated(self, mixed_topics):
        before = [t.id for t in mixed_topics]
        rank_topics(mixed_topics)
        assert [t.id for t in mixed_topics] == before


class TestSessionDuration:
    """Tests for pace and difficulty scaling with clamping."""

    @pytest.mark.parametrize("base,pace,difficulty,expected", [
        (45, LearningPace.MEDIUM, 3, 45),
        (50, LearningPace.MEDIUM, 4, 60),
        (30, LearningPace.MEDIUM, 2, 24),
        (45, LearningPace.FAST, 5, 70),
        (40, LearningPace.SLOW, 3, 28),
        (60, LearningPace.SLOW, 1, 34),
    ])
    def test_scaling(self, base, pace, difficulty, expected):
        assert session_duration(base, pace, difficulty) == expected

    def test_clamps_to_maximum(self):
        assert session_duration(100, LearningPace.FAST, 5) == 90
        assert session_duration(10_000, LearningPace.FAST, 5) == 90

    def test_huge_base_stays_finite(self):
        assert session_duration(10**400, LearningPace.FAST, 5) == 90
        assert session_duration(-(10**400), LearningPace.SLOW, 1) == 20

    def test_clamps_to_minimum(self):
        assert session_duration(20, LearningPace.SLOW, 1) == 20
        assert session_duration(1, LearningPace.SLOW, 1) == 20

    def test_halves_round_up(self):
        # 35 * 1.3 = 45.5
        assert round_half_up(17.5) == 18
        assert session_duration(35, LearningPace.FAST, 3) == 46


class TestLookupTables:
    """Every enum member must have a table entry."""

    def test_tables_cover_their_enums(self):
        assert set(PRIORITY_WEIGHTS) == set(Priority)
        assert set(PACE_MULTIPLIERS) == set(LearningPace)
        assert set(REVISION_FREQUENCY) == set(LearningPace)
        assert set(TIME_SLOTS) == set(StudyTime)

    def test_incomplete_table_is_rejected(self):
        with pytest.raises(RuntimeError, match="critical"):
            ensure_complete({Priority.LOW: 1}, Priority, "weights")

    def test_revision_is_more_frequent_for_slower_pace(self):
        assert REVISION_FREQUENCY[LearningPace.SLOW] == 2
        assert REVISION_FREQUENCY[LearningPace.MEDIUM] == 3
        assert REVISION_FREQUENCY[LearningPace.FAST] == 4


class TestTimeSlots:

    def test_slots_follow_preferred_time(self):
        assert get_time_slots(StudyTime.MORNING)[0] == "06:00"
        assert get_time_slots(StudyTime.AFTERNOON)[0] == "12:00"
        assert get_time_slots(StudyTime.EVENING) == ["17:00", "18:00", "19:00", "20:00"]
        assert get_time_slots(StudyTime.NIGHT) == ["20:00", "21:00", "22:00"]

    def test_returns_a_copy(self):
        slots = get_time_slots(StudyTime.EVENING)
        slots.append("23:00")
        assert "23:00" not in get_time_slots(StudyTime.EVENING)
