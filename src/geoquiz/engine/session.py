"""Session orchestration: question selection, answers, hints, skips, timer."""

from __future__ import annotations

import dataclasses
import logging
import random
import time
import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, Optional

from geoquiz.config.settings import Settings
from geoquiz.data.registry import Country, CountryRegistry
from geoquiz.engine.categories import CONCRETE_CATEGORIES, QuizCategory
from geoquiz.engine.matcher import AnswerMatcher
from geoquiz.engine.question import Question, QuestionState
from geoquiz.engine.scoring import build_policy
from geoquiz.engine.timer import CountdownTimer, Scheduler
from geoquiz.errors import (
    AlreadyCompletedError,
    AlreadyEndedError,
    DataError,
    NotActiveError,
    NotPlayingError,
)
from geoquiz.state.ledger import ScoreLedger
from geoquiz.state.progress import DetailedProgress, ProgressAnalyzer, ProgressDisplay

logger = logging.getLogger(__name__)

INVALID_INPUT_MESSAGE = "Please enter a valid answer."


class GameStatus(str, Enum):
    WAITING = "waiting"
    PLAYING = "playing"
    ENDED = "ended"


@dataclass
class GameState:
    current_country: Optional[Country] = None
    current_score: int = 0
    hints_used: int = 0
    status: GameStatus = GameStatus.WAITING
    total_questions: int = 0
    category: QuizCategory = QuizCategory.COUNTRY_TO_CAPITAL
    time_remaining: Optional[int] = None


@dataclass(frozen=True)
class SubmissionResult:
    is_correct: bool
    is_close: bool
    message: str
    suggestion: Optional[str] = None
    points_awarded: int = 0


@dataclass(frozen=True)
class QuestionView:
    country: Country
    category: QuizCategory
    question_text: str
    correct_answer: str
    hints_revealed: tuple[str, ...]
    hints_remaining: int
    attempts: tuple[str, ...]
    is_completed: bool


@dataclass(frozen=True)
class QuestionSummary:
    question_number: int
    country_name: str
    hints_used: int
    points_awarded: int
    is_correct: bool


@dataclass(frozen=True)
class SessionSummary:
    session_id: str
    started_at: datetime
    completed_at: datetime
    questions: tuple[QuestionSummary, ...]
    final_score: int
    max_possible_score: int


class SessionController:
    """Drives one play session. Create one per session and pass it around."""

    def __init__(
        self,
        registry: CountryRegistry,
        settings: Optional[Settings] = None,
        rng: Optional[random.Random] = None,
        scheduler: Optional[Scheduler] = None,
        clock: Callable[[], float] = time.monotonic,
        on_tick: Optional[Callable[[int], None]] = None,
        on_timeout: Optional[Callable[[QuestionView], None]] = None,
    ):
        self.registry = registry
        self.settings = settings or Settings.load()
        self.rng = rng or random.Random()
        self.scheduler = scheduler
        self.clock = clock
        self.on_tick = on_tick
        self.on_timeout = on_timeout

        policy = build_policy(self.settings.scoring)
        self.matcher = AnswerMatcher(self.settings.matching)
        self.questions = QuestionState(max_hints=self.settings.max_hints, policy=policy)
        self.ledger = ScoreLedger(policy)
        self.analyzer = ProgressAnalyzer(self.ledger, self.settings.progress)

        if self.settings.timer.enabled and scheduler is None:
            logger.warning("Timer enabled but no scheduler supplied; questions are untimed")

        self.continent: Optional[str] = None
        self._state = GameState()
        self._recent: set[str] = set()
        self._timer: Optional[CountdownTimer] = None
        self._question_started = 0.0
        self._session_id: Optional[str] = None
        self._started_at: Optional[datetime] = None

    # --- Lifecycle ---

    @property
    def timed(self) -> bool:
        return self.settings.timer.enabled and self.scheduler is not None

    def start(
        self,
        category: QuizCategory = QuizCategory.COUNTRY_TO_CAPITAL,
        continent: Optional[str] = None,
    ) -> None:
        category = QuizCategory(category)
        if continent and not self.registry.by_continent(continent):
            raise DataError(f"No countries for continent '{continent}'")

        self.reset()
        self.continent = continent or None
        self._state.category = category
        self._state.status = GameStatus.PLAYING
        self._session_id = str(uuid.uuid4())
        self._started_at = datetime.now()
        logger.info(
            "Session %s started (category=%s, continent=%s)",
            self._session_id, category.value, self.continent or "all",
        )
        self.next_question()

    def reset(self) -> None:
        self._cancel_timer()
        self._state = GameState()
        self.questions.reset()
        self.ledger.reset()
        self._recent.clear()
        self.continent = None
        self._session_id = None
        self._started_at = None

    def end_game(self) -> SessionSummary:
        if self._state.status is GameStatus.ENDED:
            raise AlreadyEndedError("Game is already ended")

        self._cancel_timer()
        self._state.status = GameStatus.ENDED
        completed_at = datetime.now()

        summary = SessionSummary(
            session_id=self._session_id or str(uuid.uuid4()),
            started_at=self._started_at or completed_at,
            completed_at=completed_at,
            questions=tuple(
                QuestionSummary(
                    question_number=e.question_number,
                    country_name=e.country_name,
                    hints_used=e.hints_used,
                    points_awarded=e.points_awarded,
                    is_correct=e.is_correct,
                )
                for e in self.ledger.history()
            ),
            final_score=self.ledger.total_score,
            max_possible_score=self.ledger.max_possible_score(),
        )
        logger.info(
            "Session %s ended: %d/%d over %d questions",
            summary.session_id, summary.final_score, summary.max_possible_score,
            len(summary.questions),
        )
        return summary

    # --- Questions ---

    def next_question(self) -> QuestionView:
        self._require_playing("load next question")
        self._cancel_timer()

        country = self._select_next_country()
        category = self._resolve_category()
        self._state.current_country = country
        self._state.total_questions += 1
        self._state.hints_used = 0
        self._state.time_remaining = None

        self.questions.create(country, category)
        self._question_started = self.clock()
        logger.info(
            "Question %d: %s (%s)", self._state.total_questions, country.name, category.value,
        )

        if self.timed:
            self._timer = CountdownTimer(
                self.scheduler,
                self.settings.timer.seconds,
                on_tick=self._on_timer_tick,
                on_expire=self._on_timer_expire,
            )
            self._state.time_remaining = self._timer.remaining
            self._timer.start()

        return self.current_question()

    def submit_answer(self, user_input: str) -> SubmissionResult:
        self._require_playing("submit answer")
        question = self._require_open_question("answer")

        if not self.matcher.is_valid_input(user_input):
            return SubmissionResult(is_correct=False, is_close=False, message=INVALID_INPUT_MESSAGE)

        result = self.matcher.validate(user_input, question.correct_answer)
        self.questions.add_attempt(user_input)

        if result.is_correct:
            points = self._finalize(is_correct=True)
            return SubmissionResult(
                is_correct=True, is_close=False, message=result.message, points_awarded=points,
            )

        return SubmissionResult(
            is_correct=False,
            is_close=result.is_close,
            message=result.message,
            suggestion=result.suggestion,
        )

    def request_hint(self) -> Optional[str]:
        self._require_playing("request hint")
        hint = self.questions.request_hint()
        if hint is not None:
            self._state.hints_used = self.questions.hints_used
        return hint

    def skip_question(self) -> str:
        """Give up on the current question; returns the answer that was expected."""
        self._require_playing("skip question")
        question = self._require_open_question("skip")
        self._finalize(is_correct=False)
        return question.correct_answer

    # --- Snapshots ---

    def game_state(self) -> GameState:
        state = dataclasses.replace(self._state)
        if self._timer is not None:
            state.time_remaining = self._timer.remaining
        return state

    def current_question(self) -> Optional[QuestionView]:
        question = self.questions.current
        if question is None:
            return None
        return QuestionView(
            country=question.country,
            category=question.category,
            question_text=question.question_text,
            correct_answer=question.correct_answer,
            hints_revealed=tuple(question.hints_revealed),
            hints_remaining=question.hints_remaining,
            attempts=tuple(question.attempts),
            is_completed=question.is_completed,
        )

    def progress(self) -> ProgressDisplay:
        return self.analyzer.display()

    def detailed_progress(self) -> DetailedProgress:
        return self.analyzer.detailed()

    def achievements(self) -> list[str]:
        return self.analyzer.achievements()

    def progress_summary(self) -> str:
        return self.analyzer.summary()

    def is_playing(self) -> bool:
        return self._state.status is GameStatus.PLAYING

    def has_ended(self) -> bool:
        return self._state.status is GameStatus.ENDED

    def has_more_hints(self) -> bool:
        return self.questions.has_more_hints()

    # --- Internals ---

    def _require_playing(self, action: str) -> None:
        if self._state.status is not GameStatus.PLAYING:
            raise NotPlayingError(f"Cannot {action} when game is not in playing state")

    def _require_open_question(self, action: str) -> Question:
        question = self.questions.current
        if question is None:
            raise NotActiveError(f"No current question to {action}")
        if question.is_completed:
            raise AlreadyCompletedError(f"Cannot {action}: question is already completed")
        return question

    def _finalize(self, is_correct: bool) -> int:
        time_used = self._time_used()
        self._cancel_timer()

        question = self.questions.current
        points = self.questions.complete(is_correct, time_used=time_used)
        self.ledger.record(
            question.country.name, question.hints_used, is_correct, time_used=time_used,
        )
        self._state.current_score = self.ledger.total_score
        logger.info(
            "Question %d finished: %s, %d hints, +%d points",
            self._state.total_questions,
            "correct" if is_correct else "incorrect",
            question.hints_used,
            points,
        )
        return points

    def _time_used(self) -> float:
        if self._timer is not None:
            return float(self._timer.elapsed)
        return max(0.0, self.clock() - self._question_started)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._state.time_remaining = self._timer.remaining
            self._timer = None

    def _on_timer_tick(self, remaining: int) -> None:
        self._state.time_remaining = remaining
        if self.on_tick:
            self.on_tick(remaining)

    def _on_timer_expire(self) -> None:
        if not self.is_playing() or not self.questions.is_active:
            return
        logger.info("Question %d timed out", self._state.total_questions)
        self._finalize(is_correct=False)
        if self.on_timeout:
            self.on_timeout(self.current_question())

    def _resolve_category(self) -> QuizCategory:
        category = self._state.category
        if category is QuizCategory.RANDOM:
            return self.rng.choice(CONCRETE_CATEGORIES)
        return category

    def _select_next_country(self) -> Country:
        """Random draw that avoids countries served recently."""
        cap = self.settings.selection.recent_cap
        max_attempts = self.settings.selection.max_draw_attempts

        attempts = 0
        while True:
            country = self.registry.random_country(self.rng, continent=self.continent)
            attempts += 1
            if len(self._recent) > cap or attempts > max_attempts:
                logger.debug(
                    "Clearing %d recently used countries after %d draws", len(self._recent), attempts,
                )
                self._recent.clear()
                break
            if country.name not in self._recent:
                break

        self._recent.add(country.name)
        return country
