"""geoquiz: geography trivia scoring and progress engine."""

__version__ = "0.1.0"
