"""Progressive hint catalogs.

Each question category gets its own provider:
- country -> capital: structural hints about the capital's spelling
- capital -> country: structural hints about the country's spelling
- flag -> country: factual hints (continent, language, capital), since
  the answer string itself is what the flag is meant to test
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from geoquiz.engine.categories import QuizCategory
from geoquiz.errors import InvalidLevelError


@dataclass(frozen=True)
class HintLevel:
    level: int
    description: str
    generator: Callable[[Any], str]


class HintProvider:
    """An ordered, deterministic catalog of hint levels."""

    def __init__(self, levels: list[HintLevel]):
        self._levels = list(levels)

    @property
    def max_hints(self) -> int:
        return len(self._levels)

    def levels(self) -> list[HintLevel]:
        return list(self._levels)

    def is_valid_level(self, level: int) -> bool:
        return 1 <= level <= len(self._levels)

    def _check_level(self, level: int) -> None:
        if not self.is_valid_level(level):
            raise InvalidLevelError(level, len(self._levels))

    def description(self, level: int) -> str:
        self._check_level(level)
        return self._levels[level - 1].description

    def generate(self, target: Any, level: int) -> str:
        self._check_level(level)
        return self._levels[level - 1].generator(target)

    def generate_up_to(self, target: Any, max_level: int) -> list[str]:
        """All hints from level 1 to max_level, clamped to the catalog size."""
        top = min(max_level, len(self._levels))
        return [self.generate(target, level) for level in range(1, top + 1)]


def structural_provider(noun: str = "capital") -> HintProvider:
    """Hints that reveal the shape of the answer string."""

    def _length(target: str) -> str:
        return f"The {noun} has {len(target)} letters."

    def _first(target: str) -> str:
        return f'The {noun} starts with "{target[:1].upper()}".'

    def _first_last(target: str) -> str:
        return (
            f'The {noun} starts with "{target[:1].upper()}" '
            f'and ends with "{target[-1:].upper()}".'
        )

    return HintProvider([
        HintLevel(1, "Number of letters", _length),
        HintLevel(2, "First letter", _first),
        HintLevel(3, "First and last letters", _first_last),
    ])


def factual_provider() -> HintProvider:
    """Hints drawn from the country record rather than the answer's spelling."""
    return HintProvider([
        HintLevel(1, "Continent", lambda c: f"This country is in {c.continent}."),
        HintLevel(2, "Main language", lambda c: f"The main language is {c.language}."),
        HintLevel(3, "Capital", lambda c: f"Its capital is {c.capital}."),
    ])


def hint_provider_for(category: QuizCategory) -> HintProvider:
    if category is QuizCategory.COUNTRY_TO_CAPITAL:
        return structural_provider("capital")
    if category is QuizCategory.CAPITAL_TO_COUNTRY:
        return structural_provider("country")
    if category is QuizCategory.FLAG_TO_COUNTRY:
        return factual_provider()
    raise ValueError(f"No hint catalog for category: {category.value}")
