"""Exception types raised by the geoquiz engine."""

from __future__ import annotations


class GameError(Exception):
    """Base class for all geoquiz errors."""


class PreconditionError(GameError):
    """An operation was attempted from a state that does not allow it.

    These signal an integration bug in the caller, not a runtime condition
    the engine can recover from.
    """


class NotPlayingError(PreconditionError):
    pass


class NotActiveError(PreconditionError):
    pass


class AlreadyCompletedError(PreconditionError):
    pass


class AlreadyEndedError(PreconditionError):
    pass


class InvalidLevelError(GameError, ValueError):
    def __init__(self, level: int, max_level: int):
        super().__init__(f"Invalid hint level: {level}. Must be between 1 and {max_level}.")
        self.level = level
        self.max_level = max_level


class DataError(GameError):
    """The country table is missing, empty or malformed."""
