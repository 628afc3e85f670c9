"""Server handler: dispatches JSON-lines commands to a SessionController."""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Callable, Optional

from geoquiz.config.settings import Settings
from geoquiz.data.registry import Country, CountryRegistry
from geoquiz.engine.categories import QuizCategory
from geoquiz.engine.session import (
    GameState,
    QuestionView,
    SessionController,
    SessionSummary,
    SubmissionResult,
)
from geoquiz.state.progress import DetailedProgress, ProgressDisplay, StreakInfo

from .protocol import Notification

logger = logging.getLogger(__name__)


def _country_to_dict(country: Optional[Country]) -> Optional[dict]:
    if country is None:
        return None
    return {
        "name": country.name,
        "capital": country.capital,
        "continent": country.continent,
        "subRegion": country.sub_region,
        "population": country.population,
        "language": country.language,
        "currency": country.currency,
        "area": country.area,
        "flag": country.flag,
        "airport": country.airport,
    }


def _question_to_dict(view: Optional[QuestionView]) -> Optional[dict]:
    """Front-end view of a question. The answer is withheld until it is completed."""
    if view is None:
        return None
    return {
        "category": view.category.value,
        "questionText": view.question_text,
        "flag": view.country.flag,
        "hintsRevealed": list(view.hints_revealed),
        "hintsRemaining": view.hints_remaining,
        "attempts": list(view.attempts),
        "isCompleted": view.is_completed,
        "correctAnswer": view.correct_answer if view.is_completed else None,
        "country": _country_to_dict(view.country) if view.is_completed else None,
    }


def _str_param(params: dict, key: str) -> Optional[str]:
    value = params.get(key)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"Parameter '{key}' must be a string, got {type(value).__name__}")
    return value


def _state_to_dict(state: GameState) -> dict:
    return {
        "status": state.status.value,
        "currentScore": state.current_score,
        "hintsUsed": state.hints_used,
        "totalQuestions": state.total_questions,
        "category": state.category.value,
        "timeRemaining": state.time_remaining,
    }


def _streak_to_dict(streak: StreakInfo) -> dict:
    return {"current": streak.current, "best": streak.best, "type": streak.type.value}


def _progress_to_dict(progress: ProgressDisplay) -> dict:
    return {
        "currentScore": progress.current_score,
        "maxPossibleScore": progress.max_possible_score,
        "questionsAnswered": progress.questions_answered,
        "scorePercentage": progress.score_percentage,
        "lastQuestionPoints": progress.last_question_points,
        "streak": _streak_to_dict(progress.streak),
    }


def _detailed_to_dict(detailed: DetailedProgress) -> dict:
    return {
        "overall": _progress_to_dict(detailed.overall),
        "recentPerformance": {
            "lastQuestions": [
                {
                    "questionNumber": e.question_number,
                    "countryName": e.country_name,
                    "hintsUsed": e.hints_used,
                    "pointsAwarded": e.points_awarded,
                    "isCorrect": e.is_correct,
                }
                for e in detailed.recent.last_questions
            ],
            "recentAccuracy": detailed.recent.recent_accuracy,
            "recentAverageHints": detailed.recent.recent_average_hints,
        },
        "achievements": {
            "perfectAnswers": detailed.achievements.perfect_answers,
            "noHintStreak": detailed.achievements.no_hint_streak,
            "totalCorrect": detailed.achievements.total_correct,
            "efficiency": detailed.achievements.efficiency,
        },
    }


def _submission_to_dict(result: SubmissionResult) -> dict:
    return {
        "isCorrect": result.is_correct,
        "isClose": result.is_close,
        "message": result.message,
        "suggestion": result.suggestion,
        "pointsAwarded": result.points_awarded,
    }


def _summary_to_dict(summary: SessionSummary) -> dict:
    return {
        "sessionId": summary.session_id,
        "startedAt": summary.started_at.isoformat(),
        "completedAt": summary.completed_at.isoformat(),
        "questions": [
            {
                "questionNumber": q.question_number,
                "countryName": q.country_name,
                "hintsUsed": q.hints_used,
                "pointsAwarded": q.points_awarded,
                "isCorrect": q.is_correct,
            }
            for q in summary.questions
        ],
        "finalScore": summary.final_score,
        "maxPossibleScore": summary.max_possible_score,
    }


class GameHandler:
    """Routes incoming requests to a SessionController and returns result dicts.

    A new controller is built on every ``startGame``; the handler holds no
    state of its own beyond that reference.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        registry: Optional[CountryRegistry] = None,
        write_notification: Optional[Callable[[Notification], None]] = None,
    ):
        self.settings = settings or Settings.load()
        self.registry = registry or CountryRegistry(self.settings.data_file)
        self._write_notification = write_notification or (lambda n: None)
        self._controller: Optional[SessionController] = None

    @property
    def controller(self) -> SessionController:
        if self._controller is None:
            raise ValueError("No game started")
        return self._controller

    async def dispatch(self, msg: dict) -> dict:
        """Route a request message to the appropriate handler method."""
        method = msg.get("method", "")
        params = msg.get("params") or {}

        handler_map = {
            "listCategories": self._list_categories,
            "listContinents": self._list_continents,
            "listCountries": self._list_countries,
            "getCountry": self._get_country,
            "startGame": self._start_game,
            "nextQuestion": self._next_question,
            "submitAnswer": self._submit_answer,
            "requestHint": self._request_hint,
            "skipQuestion": self._skip_question,
            "endGame": self._end_game,
            "getState": self._get_state,
            "getQuestion": self._get_question,
            "getProgress": self._get_progress,
            "getDetailedProgress": self._get_detailed_progress,
            "getAchievements": self._get_achievements,
        }

        handler = handler_map.get(method)
        if handler is None:
            raise ValueError(f"Unknown method: {method}")

        return await handler(params)

    async def _list_categories(self, params: dict) -> dict:
        return {"categories": [c.value for c in QuizCategory]}

    async def _list_continents(self, params: dict) -> dict:
        return {"continents": self.registry.continents()}

    async def _list_countries(self, params: dict) -> dict:
        continent = _str_param(params, "continent")
        search = _str_param(params, "search")
        countries = self.registry.search(search) if search else self.registry.all()
        if continent:
            wanted = continent.lower()
            countries = [c for c in countries if c.continent.lower() == wanted]
        return {"countries": [_country_to_dict(c) for c in countries]}

    async def _get_country(self, params: dict) -> dict:
        name = _str_param(params, "name")
        country = self.registry.get(name) if name else None
        if country is None:
            raise ValueError(f"Unknown country: {name}")
        return {"country": _country_to_dict(country)}

    async def _start_game(self, params: dict) -> dict:
        category_value = _str_param(params, "category") or QuizCategory.COUNTRY_TO_CAPITAL.value
        try:
            category = QuizCategory(category_value)
        except ValueError:
            raise ValueError(f"Unknown category: {category_value}") from None
        continent = _str_param(params, "continent")

        settings = self.settings
        if "timed" in params:
            settings = settings.model_copy(deep=True)
            settings.timer.enabled = bool(params["timed"])

        seed = params.get("seed")
        if self._controller is not None:
            self._controller.reset()
        self._controller = SessionController(
            registry=self.registry,
            settings=settings,
            rng=random.Random(seed) if seed is not None else None,
            scheduler=asyncio.get_running_loop() if settings.timer.enabled else None,
            on_tick=self._notify_tick,
            on_timeout=self._notify_timeout,
        )
        self._controller.start(category, continent=continent)
        return {
            "state": _state_to_dict(self._controller.game_state()),
            "question": _question_to_dict(self._controller.current_question()),
        }

    async def _next_question(self, params: dict) -> dict:
        view = self.controller.next_question()
        return {
            "state": _state_to_dict(self.controller.game_state()),
            "question": _question_to_dict(view),
        }

    async def _submit_answer(self, params: dict) -> dict:
        result = self.controller.submit_answer(_str_param(params, "answer") or "")
        payload = {
            "result": _submission_to_dict(result),
            "state": _state_to_dict(self.controller.game_state()),
        }
        if result.is_correct:
            payload["achievements"] = self.controller.achievements()
            payload["question"] = _question_to_dict(self.controller.current_question())
        return payload

    async def _request_hint(self, params: dict) -> dict:
        hint = self.controller.request_hint()
        return {
            "hint": hint,
            "hintsRemaining": self.controller.current_question().hints_remaining,
            "exhausted": hint is None,
        }

    async def _skip_question(self, params: dict) -> dict:
        answer = self.controller.skip_question()
        return {
            "correctAnswer": answer,
            "state": _state_to_dict(self.controller.game_state()),
            "question": _question_to_dict(self.controller.current_question()),
        }

    async def _end_game(self, params: dict) -> dict:
        summary = self.controller.end_game()
        return {
            "summary": _summary_to_dict(summary),
            "scoreSummary": self.controller.ledger.summary_text(),
        }

    async def _get_state(self, params: dict) -> dict:
        return {"state": _state_to_dict(self.controller.game_state())}

    async def _get_question(self, params: dict) -> dict:
        return {"question": _question_to_dict(self.controller.current_question())}

    async def _get_progress(self, params: dict) -> dict:
        return {
            "progress": _progress_to_dict(self.controller.progress()),
            "summary": self.controller.progress_summary(),
            "trend": self.controller.analyzer.trend().value,
        }

    async def _get_detailed_progress(self, params: dict) -> dict:
        return {"progress": _detailed_to_dict(self.controller.detailed_progress())}

    async def _get_achievements(self, params: dict) -> dict:
        return {"achievements": self.controller.achievements()}

    def _notify_tick(self, remaining: int) -> None:
        self._write_notification(Notification("timerTick", {"timeRemaining": remaining}))

    def _notify_timeout(self, view: Optional[QuestionView]) -> None:
        logger.info("Question timed out: %s", view.correct_answer if view else "?")
        self._write_notification(Notification("questionTimedOut", {
            "question": _question_to_dict(view),
            "state": _state_to_dict(self.controller.game_state()),
        }))
