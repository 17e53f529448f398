"""
Region name generation.

Names are a prefix and a suffix drawn from fixed word lists, e.g.
"Ashford" or "Olde Brookvale". Generation is driven by an injectable random
source so a seeded ``random.Random`` reproduces the same names.
"""

from __future__ import annotations

import random
from typing import Iterable, List, Optional, Protocol, Set, Sequence

import structlog
from pydantic import BaseModel, Field

logger = structlog.get_logger()

VOWELS = "aeiou"

# Attempts allowed per requested name before giving up on uniqueness
ATTEMPTS_PER_NAME = 200

_ROMAN_NUMERALS = ["II", "III", "IV", "V", "VI", "VII", "VIII", "IX", "X"]


class RandomSource(Protocol):
    """What the generator needs from a random source (``random.Random`` fits)."""

    def random(self) -> float:
        ...

    def choice(self, seq: Sequence[str]) -> str:
        ...


class NameParts(BaseModel):
    """Word lists and modifier rate for region names."""

    prefixes: List[str] = Field(
        default=[
            "Ash", "Oak", "Elm", "Pine", "Birch", "Stone", "Flint", "Thorn", "Briar", "Mist", "Frost", "Wind",
            "Mill", "Market", "Cross", "Bridge", "Hall", "Court", "Farm", "Port", "Watch",
            "Brook", "River", "Silver", "Grey", "Salt", "Brine", "Still", "Deep", "Swift",
            "High", "Iron", "Red", "Black", "White", "Storm", "Wolf", "Bear", "Hawk",
        ],
        min_length=1,
        description="First half of a name",
    )
    suffixes: List[str] = Field(
        default=[
            "shire", "vale", "pine", "ford", "worth", "ville", "field", "hurst", "stone",
            "ton", "chapel", "dale", "mouth", "beck", "ness", "wich", "ridge", "ster",
        ],
        min_length=1,
        description="Second half of a name",
    )
    modifiers: List[str] = Field(
        default=["Olde ", "New ", "Great ", "Fort "],
        description="Optional words placed before the prefix",
    )
    modifier_rate: float = Field(default=0.2, ge=0.0, le=1.0, description="Chance of a modifier")


DEFAULT_PARTS = NameParts()


def _join_parts(prefix: str, suffix: str) -> str:
    """Join prefix and suffix, dropping the suffix's leading vowel after a vowel."""
    if prefix and suffix and prefix[-1].lower() in VOWELS and suffix[0].lower() in VOWELS:
        suffix = suffix[1:]
    return prefix + suffix


class RegionNameGenerator:
    """Generates region names from a random source."""

    def __init__(self, rng: Optional[RandomSource] = None, parts: Optional[NameParts] = None):
        self.rng = rng or random.Random()
        self.parts = parts or DEFAULT_PARTS

    def generate_name(self) -> str:
        prefix = self.rng.choice(self.parts.prefixes)
        suffix = self.rng.choice(self.parts.suffixes)

        name = _join_parts(prefix, suffix)

        if self.parts.modifiers and self.rng.random() < self.parts.modifier_rate:
            name = self.rng.choice(self.parts.modifiers) + name

        return name

    def generate_unique_names(self, count: int) -> Set[str]:
        """
        Generate up to ``count`` distinct names.

        Stops after ``count * 200`` attempts, so a small word list can
        return fewer names than requested. Callers must accept that.
        """
        names: Set[str] = set()
        attempts = 0
        budget = count * ATTEMPTS_PER_NAME

        while len(names) < count and attempts < budget:
            names.add(self.generate_name())
            attempts += 1

        if len(names) < count:
            logger.warning(
                "Name generation budget exhausted",
                requested=count,
                generated=len(names),
                attempts=attempts,
            )
        return names

    def generate_distinct_name(self, used: Iterable[str]) -> str:
        """
        Generate a name not present in ``used``.

        Falls back to a numbered variant ("Ashford II") once the attempt
        budget runs out, so the result is always distinct.
        """
        used = set(used)

        name = self.generate_name()
        for _ in range(ATTEMPTS_PER_NAME - 1):
            if name not in used:
                return name
            name = self.generate_name()
        if name not in used:
            return name

        for numeral in _ROMAN_NUMERALS:
            candidate = f"{name} {numeral}"
            if candidate not in used:
                return candidate

        n = len(_ROMAN_NUMERALS) + 2
        while f"{name} {n}" in used:
            n += 1
        return f"{name} {n}"


def generate_region_name(rng: Optional[RandomSource] = None) -> str:
    return RegionNameGenerator(rng).generate_name()


def generate_unique_names(count: int, rng: Optional[RandomSource] = None) -> Set[str]:
    return RegionNameGenerator(rng).generate_unique_names(count)


def generate_distinct_name(used: Iterable[str], rng: Optional[RandomSource] = None) -> str:
    return RegionNameGenerator(rng).generate_distinct_name(used)
