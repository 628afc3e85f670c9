"""Tests for streaks, achievements and trends."""

import pytest

from geoquiz.config.settings import ProgressConfig
from geoquiz.state.progress import ProgressAnalyzer, StreakType, Trend

MIXED_HISTORY = [
    ("France", 0, True),
    ("Germany", 1, True),
    ("Italy", 2, False),
    ("Spain", 0, True),
    ("United Kingdom", 1, True),
    ("United States", 0, True),
    ("Japan", 2, True),
]


@pytest.fixture
def analyzer(ledger):
    return ProgressAnalyzer(ledger)


class TestStreak:
    def test_empty(self, analyzer):
        streak = analyzer.streak()
        assert streak.current == 0
        assert streak.best == 0
        assert streak.type is StreakType.NONE

    def test_perfect_streak(self, analyzer, record_entries):
        record_entries([("France", 0, True), ("Germany", 0, True), ("Italy", 0, True)])
        streak = analyzer.streak()
        assert streak.type is StreakType.PERFECT
        assert streak.current == 3
        assert streak.best == 3

    def test_hinted_answer_makes_correct_streak(self, analyzer, record_entries):
        record_entries([("France", 0, True), ("Germany", 1, True)])
        streak = analyzer.streak()
        assert streak.type is StreakType.CORRECT
        assert streak.current == 2

    def test_earlier_hint_breaks_perfect_run(self, analyzer, record_entries):
        # A hinted answer anywhere in the current run disqualifies a perfect streak
        record_entries([("France", 1, True), ("Germany", 0, True)])
        streak = analyzer.streak()
        assert streak.type is StreakType.CORRECT
        assert streak.current == 2

    def test_hint_in_middle_of_run(self, analyzer, record_entries):
        record_entries([("France", 0, True), ("Germany", 1, True), ("Italy", 0, True)])
        streak = analyzer.streak()
        assert streak.type is StreakType.CORRECT
        assert streak.current == 3

    def test_miss_ends_streak(self, analyzer, record_entries):
        record_entries([("France", 0, True), ("Germany", 0, False)])
        assert analyzer.streak().type is StreakType.NONE
        assert analyzer.streak().current == 0

    def test_best_correct_streak(self, analyzer, record_entries):
        record_entries(MIXED_HISTORY)
        streak = analyzer.streak()
        assert streak.type is StreakType.CORRECT
        assert streak.current == 4
        assert streak.best == 4

    def test_best_outlasts_current(self, analyzer, record_entries):
        record_entries([
            ("France", 0, True), ("Germany", 0, True), ("Italy", 0, True),
            ("Spain", 0, False), ("Japan", 0, True),
        ])
        streak = analyzer.streak()
        assert streak.type is StreakType.PERFECT
        assert streak.current == 1
        assert streak.best == 3

    def test_no_hint_streak(self, analyzer, record_entries):
        record_entries([
            ("France", 0, True), ("Germany", 0, True), ("Italy", 1, True),
            ("Spain", 0, True),
        ])
        assert analyzer.no_hint_streak() == 2

    def test_notable_streak(self, analyzer, record_entries):
        record_entries([("France", 0, True), ("Germany", 0, True)])
        assert not analyzer.has_notable_streak()
        record_entries([("Italy", 0, True)])
        assert analyzer.has_notable_streak()


class TestAchievements:
    def test_none_before_first_answer(self, analyzer):
        assert analyzer.achievements() == []

    def test_perfect_answer(self, analyzer, record_entries):
        record_entries([("France", 0, True)])
        assert analyzer.achievements() == ["🎯 Perfect Answer! No hints needed!"]

    def test_perfect_streak(self, analyzer, record_entries):
        record_entries([("France", 0, True), ("Germany", 0, True), ("Italy", 0, True)])
        assert analyzer.achievements() == [
            "🎯 Perfect Answer! No hints needed!",
            "🔥 Perfect Streak: 3 in a row!",
        ]

    def test_correct_streak(self, analyzer, record_entries):
        record_entries([(name, 1, True) for name in ["A", "B", "C", "D", "E"]])
        assert analyzer.achievements() == ["⭐ Correct Streak: 5 in a row!"]

    def test_high_efficiency(self, analyzer, record_entries):
        record_entries([(name, 0, True) for name in ["A", "B", "C", "D", "E"]])
        notes = analyzer.achievements()
        assert "💎 High Efficiency: 90%+ score rate!" in notes
        assert "🔥 Perfect Streak: 5 in a row!" in notes

    def test_milestone_fires_only_on_exact_count(self, analyzer, record_entries):
        record_entries([(f"C{i}", 0, False) for i in range(10)])
        assert analyzer.achievements() == ["🏆 Milestone: 10 questions completed!"]
        record_entries([("C10", 0, False)])
        assert analyzer.achievements() == []

    def test_milestone_once_over_perfect_run(self, analyzer, ledger):
        fired_at = []
        for i in range(1, 13):
            ledger.record(f"C{i}", 0, True)
            if any(note.startswith("🏆") for note in analyzer.achievements()):
                fired_at.append(i)
        assert fired_at == [10]

    def test_custom_milestones(self, ledger, record_entries):
        analyzer = ProgressAnalyzer(ledger, ProgressConfig(milestones=[2]))
        record_entries([("A", 0, False), ("B", 0, False)])
        assert analyzer.achievements() == ["🏆 Milestone: 2 questions completed!"]


class TestTrend:
    def test_insufficient_data(self, analyzer, record_entries):
        record_entries([(name, 0, True) for name in ["A", "B", "C", "D", "E"]])
        assert analyzer.trend() is Trend.INSUFFICIENT_DATA

    def test_improving(self, analyzer, record_entries):
        record_entries([
            ("A", 0, True), ("B", 0, True), ("C", 1, True),
            ("D", 0, True), ("E", 0, True), ("F", 0, True),
        ])
        assert analyzer.trend() is Trend.IMPROVING

    def test_declining(self, analyzer, record_entries):
        record_entries([
            ("A", 0, True), ("B", 0, True), ("C", 0, True),
            ("D", 0, True), ("E", 0, True), ("F", 1, True),
        ])
        assert analyzer.trend() is Trend.DECLINING

    def test_stable(self, analyzer, record_entries):
        record_entries([(name, 0, True) for name in ["A", "B", "C", "D", "E", "F"]])
        assert analyzer.trend() is Trend.STABLE

    def test_only_last_two_windows_count(self, analyzer, record_entries):
        record_entries([("Z", 0, False)] * 3)
        record_entries([(name, 0, True) for name in ["A", "B", "C", "D", "E", "F"]])
        assert analyzer.trend() is Trend.STABLE


class TestDisplay:
    def test_empty(self, analyzer):
        progress = analyzer.display()
        assert progress.questions_answered == 0
        assert progress.last_question_points is None
        assert progress.streak.type is StreakType.NONE

    def test_zero_points_is_reported(self, analyzer, record_entries):
        record_entries([("France", 0, False)])
        assert analyzer.display().last_question_points == 0

    def test_display(self, analyzer, record_entries):
        record_entries([("France", 0, True), ("Germany", 1, True)])
        progress = analyzer.display()
        assert progress.current_score == 5
        assert progress.max_possible_score == 6
        assert progress.score_percentage == 83.33
        assert progress.last_question_points == 2

    def test_detailed(self, analyzer, record_entries):
        record_entries(MIXED_HISTORY)
        detailed = analyzer.detailed()
        assert [e.country_name for e in detailed.recent.last_questions] == [
            "Italy", "Spain", "United Kingdom", "United States", "Japan",
        ]
        assert detailed.recent.recent_accuracy == 80.0
        assert detailed.recent.recent_average_hints == 1.0
        assert detailed.achievements.perfect_answers == 3
        assert detailed.achievements.total_correct == 6
        assert detailed.achievements.no_hint_streak == 1
        assert detailed.achievements.efficiency == 66.67

    def test_detailed_empty(self, analyzer):
        detailed = analyzer.detailed()
        assert detailed.recent.last_questions == ()
        assert detailed.recent.recent_accuracy == 0.0


class TestSummary:
    def test_ready(self, analyzer):
        assert analyzer.summary() == "Ready to start! Answer questions to track your progress."

    def test_after_perfect_answer(self, analyzer, record_entries):
        record_entries([("France", 0, True)])
        assert analyzer.summary() == (
            "Score: 3/3 (100%) | Questions: 1 | Last Question: +3 points | Perfect Streak: 1"
        )

    def test_after_miss(self, analyzer, record_entries):
        record_entries([("France", 0, False)])
        assert analyzer.summary() == "Score: 0/3 (0%) | Questions: 1 | Last Question: +0 points"
