"""Configuration model for geoquiz."""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field


class ScoringPolicyName(str, Enum):
    TIERED = "tiered"
    TIME_WEIGHTED = "time_weighted"


class ScoringConfig(BaseModel):
    policy: ScoringPolicyName = ScoringPolicyName.TIERED
    # Fixed tiers
    first_try: int = 3
    one_hint: int = 2
    multiple_hints: int = 1
    incorrect: int = 0
    # Time-weighted variant
    base_score: int = 2
    max_time_bonus: int = 5
    hint_penalty: int = 1
    time_limit: int = Field(default=10, gt=0)


class MatchingConfig(BaseModel):
    close_threshold: float = 0.7
    min_length: int = 3
    fold_diacritics: bool = True
    collapse_whitespace: bool = False


class SelectionConfig(BaseModel):
    recent_cap: int = 15
    max_draw_attempts: int = 50


class ProgressConfig(BaseModel):
    milestones: list[int] = Field(default_factory=lambda: [10, 25, 50])
    perfect_streak: int = 3
    correct_streak: int = 5
    trend_band: float = 0.3
    trend_window: int = 3
    recent_window: int = 5
    efficiency_min_questions: int = 5
    efficiency_threshold: float = 90.0


class TimerConfig(BaseModel):
    enabled: bool = False
    seconds: int = Field(default=10, gt=0)


class Settings(BaseModel):
    max_hints: int = Field(default=3, ge=0)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    matching: MatchingConfig = Field(default_factory=MatchingConfig)
    selection: SelectionConfig = Field(default_factory=SelectionConfig)
    progress: ProgressConfig = Field(default_factory=ProgressConfig)
    timer: TimerConfig = Field(default_factory=TimerConfig)
    log_level: str = "INFO"
    data_file: Optional[Path] = None
    data_dir: Path = Path.home() / ".geoquiz"

    def get_log_level(self) -> str:
        return os.environ.get("GEOQUIZ_LOG_LEVEL") or self.log_level

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        env_path = os.environ.get("GEOQUIZ_CONFIG")
        if config_path is None:
            config_path = Path(env_path) if env_path else Path.home() / ".geoquiz" / "config.yaml"
        if config_path.exists():
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}
            return cls(**data)
        return cls()

    def save(self) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        config_path = self.data_dir / "config.yaml"
        with open(config_path, "w") as f:
            yaml.dump(self.model_dump(mode="json"), f, default_flow_style=False)
