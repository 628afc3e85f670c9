"""Free-text answer matching: exact, alias, then fuzzy."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from geoquiz.config.settings import MatchingConfig
from geoquiz.engine.normalizer import normalize_text, similarity

# Accepted alternatives, keyed by the lower-cased canonical answer.
ALTERNATIVE_NAMES: dict[str, list[str]] = {
    # Capitals
    "washington d.c.": ["washington", "dc", "washington dc"],
    "new delhi": ["delhi"],
    "cape town": ["capetown", "pretoria"],
    "buenos aires": ["buenos aires city"],
    "mexico city": ["ciudad de mexico", "cdmx"],
    "rio de janeiro": ["rio"],
    "sao paulo": ["são paulo"],
    "saint petersburg": ["st petersburg", "petersburg"],
    "los angeles": ["la", "los angeles city"],
    "new york": ["nyc", "new york city"],
    "kuala lumpur": ["kl"],
    "bern": ["berne"],
    "la paz": ["sucre"],
    "guatemala city": ["guatemala"],
    "panama city": ["panama"],
    # Countries
    "united states": ["usa", "us", "united states of america", "america"],
    "united kingdom": ["uk", "britain", "great britain"],
    "netherlands": ["holland", "the netherlands"],
    "south korea": ["korea", "republic of korea"],
    "czech republic": ["czechia"],
    "turkey": ["türkiye"],
}

CORRECT_MESSAGE = "Correct! Well done!"
INCORRECT_MESSAGE = "Incorrect. Try again or request a hint!"


@dataclass
class MatchResult:
    is_correct: bool
    is_close: bool
    message: str
    suggestion: Optional[str] = None


class AnswerMatcher:
    def __init__(
        self,
        config: Optional[MatchingConfig] = None,
        aliases: Optional[Mapping[str, list[str]]] = None,
    ):
        self.config = config or MatchingConfig()
        table = dict(ALTERNATIVE_NAMES)
        if aliases:
            table.update(aliases)
        self._aliases: dict[str, list[str]] = {}
        for canonical, alternatives in table.items():
            key = self._normalize(canonical)
            self._aliases.setdefault(key, [])
            self._aliases[key].extend(self._normalize(a) for a in alternatives)

    def _normalize(self, text: str) -> str:
        return normalize_text(
            text,
            fold=self.config.fold_diacritics,
            collapse=self.config.collapse_whitespace,
        )

    def aliases_for(self, correct_answer: str) -> list[str]:
        return list(self._aliases.get(self._normalize(correct_answer), []))

    def is_close_match(self, guess: str, correct: str) -> bool:
        """Both arguments are expected to be normalized already."""
        longest = max(len(guess), len(correct))
        return (
            longest >= self.config.min_length
            and similarity(guess, correct) >= self.config.close_threshold
        )

    def is_valid_input(self, text: str) -> bool:
        return len(text.strip()) > 0

    def validate(self, user_input: str, correct_answer: str) -> MatchResult:
        guess = self._normalize(user_input)
        canonical = self._normalize(correct_answer)
        alternatives = self.aliases_for(correct_answer)

        if guess == canonical or guess in alternatives:
            return MatchResult(is_correct=True, is_close=False, message=CORRECT_MESSAGE)

        if self.is_close_match(guess, canonical):
            return MatchResult(
                is_correct=False,
                is_close=True,
                suggestion=correct_answer,
                message=f'Very close! Did you mean "{correct_answer}"?',
            )

        for alternative in alternatives:
            if self.is_close_match(guess, alternative):
                return MatchResult(
                    is_correct=False,
                    is_close=True,
                    suggestion=correct_answer,
                    message=f'Close! The answer is "{correct_answer}".',
                )

        return MatchResult(is_correct=False, is_close=False, message=INCORRECT_MESSAGE)
