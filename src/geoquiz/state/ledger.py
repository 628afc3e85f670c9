"""Append-only score history with derived statistics."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from geoquiz.engine.scoring import ScoringPolicy, TieredScoring


@dataclass(frozen=True)
class ScoreEntry:
    question_number: int
    country_name: str
    hints_used: int
    points_awarded: int
    is_correct: bool
    time_used: float = 0.0

    @property
    def is_perfect(self) -> bool:
        return self.is_correct and self.hints_used == 0


@dataclass(frozen=True)
class ScoreStats:
    total_score: int
    total_questions: int
    correct_answers: int
    average_hints_used: float
    perfect_answers: int
    score_percentage: float


@dataclass(frozen=True)
class ScoreBreakdown:
    no_hints: int = 0
    one_hint: int = 0
    multiple_hints: int = 0
    incorrect: int = 0


class ScoreLedger:
    def __init__(self, policy: Optional[ScoringPolicy] = None):
        self.policy = policy or TieredScoring()
        self._entries: list[ScoreEntry] = []
        self._total = 0

    def record(
        self,
        country_name: str,
        hints_used: int,
        is_correct: bool,
        time_used: float = 0.0,
    ) -> int:
        """Score a completed question, append it, and return the points."""
        points = self.policy.points(hints_used=hints_used, is_correct=is_correct, time_used=time_used)
        self._entries.append(ScoreEntry(
            question_number=len(self._entries) + 1,
            country_name=country_name,
            hints_used=hints_used,
            points_awarded=points,
            is_correct=is_correct,
            time_used=time_used,
        ))
        self._total += points
        return points

    @property
    def total_score(self) -> int:
        return self._total

    @property
    def total_questions(self) -> int:
        return len(self._entries)

    def history(self) -> tuple[ScoreEntry, ...]:
        return tuple(self._entries)

    def last_entry(self) -> Optional[ScoreEntry]:
        return self._entries[-1] if self._entries else None

    def max_possible_score(self) -> int:
        return len(self._entries) * self.policy.max_points

    def efficiency(self) -> float:
        """Unrounded score as a percentage of the maximum."""
        max_possible = self.max_possible_score()
        return self._total / max_possible * 100 if max_possible > 0 else 0.0

    def stats(self) -> ScoreStats:
        if not self._entries:
            return ScoreStats(
                total_score=0, total_questions=0, correct_answers=0,
                average_hints_used=0.0, perfect_answers=0, score_percentage=0.0,
            )

        count = len(self._entries)
        return ScoreStats(
            total_score=self._total,
            total_questions=count,
            correct_answers=sum(1 for e in self._entries if e.is_correct),
            average_hints_used=sum(e.hints_used for e in self._entries) / count,
            perfect_answers=sum(1 for e in self._entries if e.is_perfect),
            score_percentage=round(self.efficiency(), 2),
        )

    def breakdown(self) -> ScoreBreakdown:
        no_hints = one_hint = multiple = incorrect = 0
        for entry in self._entries:
            if not entry.is_correct:
                incorrect += 1
            elif entry.hints_used == 0:
                no_hints += 1
            elif entry.hints_used == 1:
                one_hint += 1
            else:
                multiple += 1
        return ScoreBreakdown(
            no_hints=no_hints, one_hint=one_hint, multiple_hints=multiple, incorrect=incorrect,
        )

    def is_perfect_score(self) -> bool:
        return bool(self._entries) and self._total == self.max_possible_score()

    def summary_text(self) -> str:
        stats = self.stats()
        if stats.total_questions == 0:
            return "No questions answered yet."

        return "\n".join([
            f"Final Score: {stats.total_score}/{self.max_possible_score()} ({stats.score_percentage:g}%)",
            f"Questions Answered: {stats.total_questions}",
            f"Correct Answers: {stats.correct_answers}",
            f"Perfect Answers: {stats.perfect_answers}",
            f"Average Hints Used: {round(stats.average_hints_used, 2):g}",
        ])

    def reset(self) -> None:
        self._entries = []
        self._total = 0
