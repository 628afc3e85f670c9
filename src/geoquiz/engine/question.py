"""Question state machine: create → (hint | attempt)* → complete."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from geoquiz.data.registry import Country
from geoquiz.engine.categories import QuizCategory
from geoquiz.engine.hints import hint_provider_for
from geoquiz.engine.scoring import ScoringPolicy, TieredScoring
from geoquiz.errors import AlreadyCompletedError, NotActiveError

logger = logging.getLogger(__name__)


class QuestionStatus(str, Enum):
    CREATED = "created"  # Accepting hints and attempts
    COMPLETED = "completed"  # Outcome final, points fixed


@dataclass
class Question:
    country: Country
    category: QuizCategory
    question_text: str
    correct_answer: str
    hints_available: tuple[str, ...]
    hints_revealed: list[str] = field(default_factory=list)
    attempts: list[str] = field(default_factory=list)
    status: QuestionStatus = QuestionStatus.CREATED
    points_awarded: int = 0
    time_used: float = 0.0

    @property
    def is_completed(self) -> bool:
        return self.status is QuestionStatus.COMPLETED

    @property
    def hints_used(self) -> int:
        return len(self.hints_revealed)

    @property
    def hints_remaining(self) -> int:
        return len(self.hints_available) - len(self.hints_revealed)


@dataclass(frozen=True)
class QuestionStats:
    hints_used: int
    hints_remaining: int
    attempts: int
    is_completed: bool


def build_prompt(country: Country, category: QuizCategory) -> tuple[str, str, object]:
    """Return (question text, correct answer, hint subject) for a category."""
    if category is QuizCategory.COUNTRY_TO_CAPITAL:
        return f"What is the capital of {country.name}?", country.capital, country.capital
    if category is QuizCategory.CAPITAL_TO_COUNTRY:
        return f"Which country has the capital {country.capital}?", country.name, country.name
    if category is QuizCategory.FLAG_TO_COUNTRY:
        return f"Which country does this flag belong to? {country.flag}", country.name, country
    raise ValueError(f"Category must be concrete, got: {category.value}")


class QuestionState:
    """Holds the single live question and its hint/attempt history."""

    def __init__(self, max_hints: int = 3, policy: Optional[ScoringPolicy] = None):
        self.max_hints = max_hints
        self.policy = policy or TieredScoring()
        self._question: Optional[Question] = None

    @property
    def current(self) -> Optional[Question]:
        return self._question

    @property
    def is_active(self) -> bool:
        """A question exists and is still open."""
        return self._question is not None and not self._question.is_completed

    def create(self, country: Country, category: QuizCategory) -> Question:
        if self.is_active:
            # Replacing an open question drops its hints and attempts
            logger.debug("Replacing unfinished question about %s", self._question.country.name)

        text, answer, subject = build_prompt(country, category)
        provider = hint_provider_for(category)
        self._question = Question(
            country=country,
            category=category,
            question_text=text,
            correct_answer=answer,
            hints_available=tuple(provider.generate_up_to(subject, self.max_hints)),
        )
        return self._question

    def _require_open(self, action: str) -> Question:
        if self._question is None:
            raise NotActiveError(f"No active question to {action}")
        if self._question.is_completed:
            raise AlreadyCompletedError(f"Cannot {action}: question is already completed")
        return self._question

    def request_hint(self) -> Optional[str]:
        """Reveal the next hint, or return None once the catalog is exhausted."""
        question = self._require_open("request a hint for")
        if question.hints_remaining <= 0:
            return None
        hint = question.hints_available[question.hints_used]
        question.hints_revealed.append(hint)
        return hint

    def add_attempt(self, attempt: str) -> None:
        question = self._require_open("add an attempt to")
        question.attempts.append(attempt)

    def complete(self, is_correct: bool, time_used: float = 0.0) -> int:
        question = self._require_open("complete")
        question.status = QuestionStatus.COMPLETED
        question.time_used = time_used
        question.points_awarded = self.policy.points(
            hints_used=question.hints_used, is_correct=is_correct, time_used=time_used,
        )
        return question.points_awarded

    @property
    def hints_used(self) -> int:
        return self._question.hints_used if self._question else 0

    @property
    def hints_remaining(self) -> int:
        return self._question.hints_remaining if self._question else 0

    def has_more_hints(self) -> bool:
        return self.hints_remaining > 0

    def revealed_hints(self) -> list[str]:
        return list(self._question.hints_revealed) if self._question else []

    def stats(self) -> QuestionStats:
        if self._question is None:
            return QuestionStats(hints_used=0, hints_remaining=0, attempts=0, is_completed=False)
        return QuestionStats(
            hints_used=self._question.hints_used,
            hints_remaining=self._question.hints_remaining,
            attempts=len(self._question.attempts),
            is_completed=self._question.is_completed,
        )

    def reset(self) -> None:
        self._question = None
