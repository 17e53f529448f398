"""Tests for region name generation."""

import random

import pytest
from pydantic import ValidationError

from py_frontline.core.name_generator import (
    ATTEMPTS_PER_NAME,
    DEFAULT_PARTS,
    NameParts,
    RegionNameGenerator,
    generate_distinct_name,
    generate_region_name,
    generate_unique_names,
)


class FirstChoice:
    """Random source that always picks the first option."""

    def __init__(self, roll: float = 0.99):
        self.roll = roll
        self.choices = 0

    def random(self):
        return self.roll

    def choice(self, seq):
        self.choices += 1
        return seq[0]


def single_parts(prefix="Oak", suffix="ford", **kwargs):
    return NameParts(prefixes=[prefix], suffixes=[suffix], **kwargs)


class TestGenerateName:
    """Single name generation."""

    def test_prefix_and_suffix(self):
        generator = RegionNameGenerator(random.Random(1), single_parts(modifier_rate=0.0))
        assert generator.generate_name() == "Oakford"

    def test_drops_adjacent_vowel(self):
        generator = RegionNameGenerator(
            random.Random(1), single_parts("Pine", "ash", modifier_rate=0.0)
        )
        assert generator.generate_name() == "Pinesh"

    def test_keeps_vowel_after_consonant(self):
        generator = RegionNameGenerator(
            random.Random(1), single_parts("Oak", "ash", modifier_rate=0.0)
        )
        assert generator.generate_name() == "Oakash"

    def test_modifier_applied(self):
        generator = RegionNameGenerator(
            random.Random(1), single_parts(modifiers=["Fort "], modifier_rate=1.0)
        )
        assert generator.generate_name() == "Fort Oakford"

    def test_modifier_below_rate_only(self):
        parts = single_parts(modifiers=["New "], modifier_rate=0.2)

        assert RegionNameGenerator(FirstChoice(roll=0.5), parts).generate_name() == "Oakford"
        assert RegionNameGenerator(FirstChoice(roll=0.1), parts).generate_name() == "New Oakford"

    def test_uses_injected_source(self):
        source = FirstChoice()
        name = RegionNameGenerator(source).generate_name()

        assert name == DEFAULT_PARTS.prefixes[0] + DEFAULT_PARTS.suffixes[0]
        assert source.choices == 2

    def test_seeded_sources_repeat(self):
        first = [generate_region_name(random.Random(99)) for _ in range(3)]
        second = [generate_region_name(random.Random(99)) for _ in range(3)]
        assert first == second

        a = RegionNameGenerator(random.Random(5))
        b = RegionNameGenerator(random.Random(5))
        assert [a.generate_name() for _ in range(20)] == [b.generate_name() for _ in range(20)]

    def test_names_come_from_word_lists(self, name_generator):
        for _ in range(50):
            name = name_generator.generate_name()
            words = name.split(" ")
            assert len(words) in (1, 2)
            assert any(name.startswith(p) or " " + p in name for p in DEFAULT_PARTS.prefixes)

    def test_parts_validated(self):
        with pytest.raises(ValidationError):
            NameParts(prefixes=[])
        with pytest.raises(ValidationError):
            NameParts(modifier_rate=1.5)


class TestUniqueNames:
    """Batches of distinct names."""

    def test_requested_count(self, rng):
        names = generate_unique_names(16, rng)
        assert isinstance(names, set)
        assert len(names) == 16

    def test_zero(self, name_generator):
        assert name_generator.generate_unique_names(0) == set()

    def test_budget_exhausted_returns_fewer(self):
        source = FirstChoice()
        generator = RegionNameGenerator(source, single_parts(modifier_rate=0.0))

        names = generator.generate_unique_names(3)

        assert names == {"Oakford"}
        # two choices per attempt
        assert source.choices == 2 * 3 * ATTEMPTS_PER_NAME


class TestDistinctName:
    """Names avoiding an existing set."""

    def test_avoids_used(self, rng):
        used = set(generate_unique_names(10, random.Random(3)))
        for _ in range(10):
            name = generate_distinct_name(used, rng)
            assert name not in used
            used.add(name)

    def test_numbered_fallback(self):
        generator = RegionNameGenerator(FirstChoice(), single_parts(modifier_rate=0.0))

        assert generator.generate_distinct_name([]) == "Oakford"
        assert generator.generate_distinct_name({"Oakford"}) == "Oakford II"
        assert generator.generate_distinct_name({"Oakford", "Oakford II"}) == "Oakford III"

    def test_fallback_past_numerals(self):
        generator = RegionNameGenerator(FirstChoice(), single_parts(modifier_rate=0.0))
        used = {"Oakford"} | {f"Oakford {n}" for n in ["II", "III", "IV", "V", "VI", "VII", "VIII", "IX", "X"]}

        assert generator.generate_distinct_name(used) == "Oakford 11"
