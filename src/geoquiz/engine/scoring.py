"""Point award policies.

Two mutually incompatible schemes exist; a game runs exactly one of them.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Optional

from geoquiz.config.settings import ScoringConfig, ScoringPolicyName


class ScoringPolicy(ABC):
    @property
    @abstractmethod
    def max_points(self) -> int:
        """Most points a single question can award."""

    @abstractmethod
    def points(self, hints_used: int, is_correct: bool, time_used: float = 0.0) -> int:
        pass


class TieredScoring(ScoringPolicy):
    """Fixed tiers by hints used: 0 / 1 / 2+ hints, or incorrect."""

    def __init__(self, config: Optional[ScoringConfig] = None):
        self.config = config or ScoringConfig()

    @property
    def max_points(self) -> int:
        return self.config.first_try

    def points(self, hints_used: int, is_correct: bool, time_used: float = 0.0) -> int:
        if not is_correct:
            return self.config.incorrect
        if hints_used == 0:
            return self.config.first_try
        if hints_used == 1:
            return self.config.one_hint
        return self.config.multiple_hints


class TimeWeightedScoring(ScoringPolicy):
    """Base score plus a bonus for answering fast, minus a penalty per hint."""

    def __init__(self, config: Optional[ScoringConfig] = None):
        self.config = config or ScoringConfig(policy=ScoringPolicyName.TIME_WEIGHTED)

    @property
    def max_points(self) -> int:
        return self.config.base_score + self.config.max_time_bonus

    def points(self, hints_used: int, is_correct: bool, time_used: float = 0.0) -> int:
        if not is_correct:
            return 0

        limit = self.config.time_limit
        bonus = max(0.0, self.config.max_time_bonus * (limit - time_used) / limit)
        points = self.config.base_score + math.floor(bonus + 0.5)
        points -= hints_used * self.config.hint_penalty
        # Any correct answer is worth at least a point
        return max(1, points)


def build_policy(config: Optional[ScoringConfig] = None) -> ScoringPolicy:
    config = config or ScoringConfig()
    if config.policy is ScoringPolicyName.TIME_WEIGHTED:
        return TimeWeightedScoring(config)
    return TieredScoring(config)
