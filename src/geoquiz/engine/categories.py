"""Quiz categories: which attribute pairing a question tests."""

from __future__ import annotations

from enum import Enum


class QuizCategory(str, Enum):
    COUNTRY_TO_CAPITAL = "country_to_capital"
    CAPITAL_TO_COUNTRY = "capital_to_country"
    FLAG_TO_COUNTRY = "flag_to_country"
    RANDOM = "random"

    @property
    def is_concrete(self) -> bool:
        return self is not QuizCategory.RANDOM


CONCRETE_CATEGORIES: tuple[QuizCategory, ...] = tuple(
    c for c in QuizCategory if c.is_concrete
)
