"""Per-question countdown driven by a call_later-style scheduler.

Any object exposing ``call_later(delay, callback)`` that returns a handle
with ``cancel()`` works as a scheduler; an asyncio event loop is the usual
one. Everything runs on the scheduler's thread.
"""

from __future__ import annotations

from typing import Any, Callable, Optional, Protocol


class Cancellable(Protocol):
    def cancel(self) -> Any: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], Any]) -> Cancellable: ...


class CountdownTimer:
    def __init__(
        self,
        scheduler: Scheduler,
        seconds: int,
        on_tick: Optional[Callable[[int], None]] = None,
        on_expire: Optional[Callable[[], None]] = None,
        interval: float = 1.0,
    ):
        self.scheduler = scheduler
        self.seconds = seconds
        self.interval = interval
        self._on_tick = on_tick or (lambda remaining: None)
        self._on_expire = on_expire or (lambda: None)
        self._remaining = seconds
        self._handle: Optional[Cancellable] = None
        # Bumped on every start/cancel; a tick from an older generation is stale
        self._generation = 0

    @property
    def remaining(self) -> int:
        return self._remaining

    @property
    def elapsed(self) -> int:
        return self.seconds - self._remaining

    @property
    def running(self) -> bool:
        return self._handle is not None

    def start(self) -> None:
        self.cancel()
        self._remaining = self.seconds
        self._schedule()

    def cancel(self) -> None:
        self._generation += 1
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _schedule(self) -> None:
        generation = self._generation
        self._handle = self.scheduler.call_later(self.interval, lambda: self._tick(generation))

    def _tick(self, generation: int) -> None:
        if generation != self._generation or self._handle is None:
            return

        self._remaining -= 1
        self._handle = None
        self._on_tick(self._remaining)
        if generation != self._generation:
            # The tick callback cancelled or restarted us
            return

        if self._remaining <= 0:
            self._generation += 1
            self._on_expire()
        else:
            self._schedule()
