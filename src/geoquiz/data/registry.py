"""Country table loading and lookup."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

from geoquiz.errors import DataError

logger = logging.getLogger(__name__)

DEFAULT_DATA_FILE = Path(__file__).parent / "countries.yaml"


@dataclass(frozen=True)
class Country:
    name: str
    capital: str
    continent: str
    sub_region: str = ""
    population: int = 0
    language: str = ""
    currency: str = ""
    area: float = 0
    flag: str = ""
    airport: str = ""


def _parse_country(raw: dict) -> Country:
    try:
        return Country(
            name=raw["name"],
            capital=raw["capital"],
            continent=raw["continent"],
            sub_region=raw.get("sub_region", ""),
            population=raw.get("population", 0),
            language=raw.get("language", ""),
            currency=raw.get("currency", ""),
            area=raw.get("area", 0),
            flag=raw.get("flag", ""),
            airport=raw.get("airport", ""),
        )
    except (KeyError, TypeError) as e:
        raise DataError(f"Malformed country record {raw!r}: missing {e}") from e


def load_countries(data_file: Path) -> list[Country]:
    """Load country records from a YAML list."""
    try:
        with open(data_file, encoding="utf-8") as f:
            raw_records = yaml.safe_load(f)
    except OSError as e:
        raise DataError(f"Cannot read country table {data_file}: {e}") from e
    except yaml.YAMLError as e:
        raise DataError(f"Malformed country table {data_file}: {e}") from e

    if not isinstance(raw_records, list) or not raw_records:
        raise DataError(f"No country records found in {data_file}")

    return [_parse_country(raw) for raw in raw_records]


class CountryRegistry:
    """Read-only access to the country table."""

    def __init__(
        self,
        data_file: Optional[Path] = None,
        countries: Optional[list[Country]] = None,
    ):
        if countries is not None:
            if not countries:
                raise DataError("Country list is empty")
            self._countries = tuple(countries)
        else:
            self.data_file = data_file or DEFAULT_DATA_FILE
            self._countries = tuple(load_countries(self.data_file))
            logger.debug("Loaded %d countries from %s", len(self._countries), self.data_file)

    def __len__(self) -> int:
        return len(self._countries)

    def all(self) -> list[Country]:
        return list(self._countries)

    def get(self, name: str) -> Optional[Country]:
        """Case-insensitive lookup by country name."""
        wanted = name.lower()
        for country in self._countries:
            if country.name.lower() == wanted:
                return country
        return None

    def by_continent(self, continent: str) -> list[Country]:
        wanted = continent.lower()
        return [c for c in self._countries if c.continent.lower() == wanted]

    def search(self, term: str) -> list[Country]:
        """Substring match on name, capital, continent or language. A blank term matches all."""
        wanted = term.strip().lower()
        if not wanted:
            return self.all()
        return [
            c for c in self._countries
            if any(wanted in field.lower() for field in (c.name, c.capital, c.continent, c.language))
        ]

    def continents(self) -> list[str]:
        return sorted({c.continent for c in self._countries})

    def random_country(
        self, rng: Optional[random.Random] = None, continent: Optional[str] = None,
    ) -> Country:
        rng = rng or random
        pool = self.by_continent(continent) if continent else self._countries
        if not pool:
            raise DataError(f"No countries for continent '{continent}'")
        return rng.choice(pool)

    def sample(self, count: int, rng: Optional[random.Random] = None) -> list[Country]:
        rng = rng or random
        return rng.sample(self._countries, min(count, len(self._countries)))
