"""Streaks, achievements and trends derived from the score ledger.

Nothing here is stored: every value is recomputed from the ledger history on
each call, so the analyzer never drifts from the record it describes.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from geoquiz.config.settings import ProgressConfig
from geoquiz.state.ledger import ScoreEntry, ScoreLedger


class StreakType(str, Enum):
    PERFECT = "perfect"
    CORRECT = "correct"
    NONE = "none"


class Trend(str, Enum):
    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"
    INSUFFICIENT_DATA = "insufficient_data"


@dataclass(frozen=True)
class StreakInfo:
    current: int = 0
    best: int = 0
    type: StreakType = StreakType.NONE


@dataclass(frozen=True)
class ProgressDisplay:
    current_score: int
    max_possible_score: int
    questions_answered: int
    score_percentage: float
    last_question_points: Optional[int]
    streak: StreakInfo


@dataclass(frozen=True)
class RecentPerformance:
    last_questions: tuple[ScoreEntry, ...]
    recent_accuracy: float
    recent_average_hints: float


@dataclass(frozen=True)
class AchievementStats:
    perfect_answers: int
    no_hint_streak: int
    total_correct: int
    efficiency: float


@dataclass(frozen=True)
class DetailedProgress:
    overall: ProgressDisplay
    recent: RecentPerformance
    achievements: AchievementStats


class ProgressAnalyzer:
    def __init__(self, ledger: ScoreLedger, config: Optional[ProgressConfig] = None):
        self.ledger = ledger
        self.config = config or ProgressConfig()

    def streak(self) -> StreakInfo:
        history = self.ledger.history()
        if not history:
            return StreakInfo()

        # Walk back from the most recent entry until the first miss.
        current_correct = 0
        current_perfect = 0
        perfect_intact = True
        for entry in reversed(history):
            if not entry.is_correct:
                break
            current_correct += 1
            if entry.hints_used > 0:
                current_perfect = 0
                perfect_intact = False
            elif perfect_intact:
                current_perfect += 1

        best_correct = best_perfect = 0
        run_correct = run_perfect = 0
        for entry in history:
            if entry.is_correct:
                run_correct += 1
                best_correct = max(best_correct, run_correct)
                if entry.hints_used == 0:
                    run_perfect += 1
                    best_perfect = max(best_perfect, run_perfect)
                else:
                    run_perfect = 0
            else:
                run_correct = run_perfect = 0

        if current_perfect > 0 and current_perfect == current_correct:
            return StreakInfo(current=current_perfect, best=best_perfect, type=StreakType.PERFECT)
        if current_correct > 0:
            return StreakInfo(current=current_correct, best=best_correct, type=StreakType.CORRECT)
        return StreakInfo()

    def no_hint_streak(self) -> int:
        """Longest run of perfect answers anywhere in the history."""
        longest = run = 0
        for entry in self.ledger.history():
            if entry.is_perfect:
                run += 1
                longest = max(longest, run)
            else:
                run = 0
        return longest

    def has_notable_streak(self) -> bool:
        streak = self.streak()
        return (
            (streak.type is StreakType.PERFECT and streak.current >= self.config.perfect_streak)
            or (streak.type is StreakType.CORRECT and streak.current >= self.config.correct_streak)
        )

    def achievements(self) -> list[str]:
        """Notifications earned by the most recent answer."""
        notifications: list[str] = []
        last = self.ledger.last_entry()
        if last is None:
            return notifications

        if last.is_perfect:
            notifications.append("🎯 Perfect Answer! No hints needed!")

        streak = self.streak()
        if streak.type is StreakType.PERFECT and streak.current >= self.config.perfect_streak:
            notifications.append(f"🔥 Perfect Streak: {streak.current} in a row!")
        elif streak.type is StreakType.CORRECT and streak.current >= self.config.correct_streak:
            notifications.append(f"⭐ Correct Streak: {streak.current} in a row!")

        stats = self.ledger.stats()
        # Exact match so each milestone fires once
        if stats.total_questions in self.config.milestones:
            notifications.append(f"🏆 Milestone: {stats.total_questions} questions completed!")

        if (
            stats.total_questions >= self.config.efficiency_min_questions
            and stats.score_percentage >= self.config.efficiency_threshold
        ):
            notifications.append(
                f"💎 High Efficiency: {self.config.efficiency_threshold:g}%+ score rate!"
            )

        return notifications

    def trend(self) -> Trend:
        window = self.config.trend_window
        history = self.ledger.history()
        if len(history) < window * 2:
            return Trend.INSUFFICIENT_DATA

        recent = history[-window:]
        previous = history[-2 * window:-window]
        recent_avg = sum(e.points_awarded for e in recent) / len(recent)
        previous_avg = sum(e.points_awarded for e in previous) / len(previous)

        difference = recent_avg - previous_avg
        if abs(difference) < self.config.trend_band:
            return Trend.STABLE
        return Trend.IMPROVING if difference > 0 else Trend.DECLINING

    def display(self) -> ProgressDisplay:
        stats = self.ledger.stats()
        last = self.ledger.last_entry()
        return ProgressDisplay(
            current_score=stats.total_score,
            max_possible_score=self.ledger.max_possible_score(),
            questions_answered=stats.total_questions,
            score_percentage=stats.score_percentage,
            last_question_points=last.points_awarded if last else None,
            streak=self.streak(),
        )

    def detailed(self) -> DetailedProgress:
        stats = self.ledger.stats()
        recent = self.ledger.history()[-self.config.recent_window:]

        if recent:
            accuracy = sum(1 for e in recent if e.is_correct) / len(recent) * 100
            average_hints = sum(e.hints_used for e in recent) / len(recent)
        else:
            accuracy = average_hints = 0.0

        return DetailedProgress(
            overall=self.display(),
            recent=RecentPerformance(
                last_questions=recent,
                recent_accuracy=round(accuracy, 2),
                recent_average_hints=round(average_hints, 2),
            ),
            achievements=AchievementStats(
                perfect_answers=stats.perfect_answers,
                no_hint_streak=self.no_hint_streak(),
                total_correct=stats.correct_answers,
                efficiency=round(self.ledger.efficiency(), 2),
            ),
        )

    def summary(self) -> str:
        progress = self.display()
        if progress.questions_answered == 0:
            return "Ready to start! Answer questions to track your progress."

        parts = [
            f"Score: {progress.current_score}/{progress.max_possible_score} "
            f"({progress.score_percentage:g}%)",
            f"Questions: {progress.questions_answered}",
        ]
        if progress.last_question_points is not None:
            parts.append(f"Last Question: +{progress.last_question_points} points")
        if progress.streak.current > 0:
            parts.append(f"{progress.streak.type.value.title()} Streak: {progress.streak.current}")
        return " | ".join(parts)
