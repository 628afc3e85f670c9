"""Shared fixtures for geoquiz tests."""

from __future__ import annotations

import random

import pytest
import yaml

from geoquiz.config.settings import Settings
from geoquiz.data.registry import Country, CountryRegistry
from geoquiz.state.ledger import ScoreLedger

SAMPLE_COUNTRIES = [
    {
        "name": "France", "capital": "Paris", "continent": "Europe",
        "sub_region": "Western Europe", "population": 67750000, "language": "French",
        "currency": "Euro", "area": 643801, "flag": "🇫🇷",
    },
    {
        "name": "Germany", "capital": "Berlin", "continent": "Europe",
        "sub_region": "Central Europe", "population": 83200000, "language": "German",
        "currency": "Euro", "area": 357022, "flag": "🇩🇪",
    },
    {
        "name": "Italy", "capital": "Rome", "continent": "Europe",
        "sub_region": "Southern Europe", "population": 59110000, "language": "Italian",
        "currency": "Euro", "area": 301340, "flag": "🇮🇹",
    },
    {
        "name": "United States", "capital": "Washington D.C.", "continent": "North America",
        "sub_region": "Northern America", "population": 331900000, "language": "English",
        "currency": "US Dollar", "area": 9833517, "flag": "🇺🇸",
    },
    {
        "name": "Brazil", "capital": "Brasília", "continent": "South America",
        "sub_region": "South America", "population": 215300000, "language": "Portuguese",
        "currency": "Brazilian Real", "area": 8515767, "flag": "🇧🇷",
    },
    {
        "name": "Japan", "capital": "Tokyo", "continent": "Asia",
        "sub_region": "East Asia", "population": 125700000, "language": "Japanese",
        "currency": "Japanese Yen", "area": 377975, "flag": "🇯🇵",
    },
    {
        "name": "Australia", "capital": "Canberra", "continent": "Oceania",
        "sub_region": "Australia and New Zealand", "population": 25690000, "language": "English",
        "currency": "Australian Dollar", "area": 7692024, "flag": "🇦🇺",
    },
    {
        "name": "New Zealand", "capital": "Wellington", "continent": "Oceania",
        "sub_region": "Australia and New Zealand", "population": 5100000, "language": "English",
        "currency": "New Zealand Dollar", "area": 268021, "flag": "🇳🇿",
    },
]


class FakeHandle:
    def __init__(self, when: float, callback):
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Deterministic stand-in for an event loop's call_later."""

    def __init__(self):
        self.now = 0.0
        self.handles: list[FakeHandle] = []

    def call_later(self, delay: float, callback) -> FakeHandle:
        handle = FakeHandle(self.now + delay, callback)
        self.handles.append(handle)
        return handle

    @property
    def pending(self) -> list[FakeHandle]:
        return [h for h in self.handles if not h.cancelled]

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            due = [h for h in self.pending if h.when <= target]
            if not due:
                break
            handle = min(due, key=lambda h: h.when)
            self.handles.remove(handle)
            self.now = handle.when
            handle.callback()
        self.now = target


class ScriptedRandom(random.Random):
    """A Random whose choice() follows a script of country names first."""

    def __init__(self, names: list[str], seed: int = 0):
        super().__init__(seed)
        self.script = list(names)

    def choice(self, seq):
        if self.script:
            wanted = self.script.pop(0)
            for item in seq:
                if getattr(item, "name", item) == wanted:
                    return item
        return super().choice(seq)


class FakeClock:
    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def countries_file(tmp_path):
    path = tmp_path / "countries.yaml"
    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(SAMPLE_COUNTRIES, f, allow_unicode=True)
    return path


@pytest.fixture
def registry(countries_file):
    return CountryRegistry(countries_file)


@pytest.fixture
def france(registry) -> Country:
    return registry.get("France")


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def ledger():
    return ScoreLedger()


@pytest.fixture
def record_entries(ledger):
    """Append (country, hints, correct) tuples to the ledger fixture."""

    def _record(entries: list[tuple[str, int, bool]]) -> ScoreLedger:
        for name, hints, correct in entries:
            ledger.record(name, hints, correct)
        return ledger

    return _record


@pytest.fixture
def scripted_rng():
    return ScriptedRandom
