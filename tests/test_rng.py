"""Tests for the seeded random source."""

import pytest

from procgen.rng import SeededRandom


class TestDeterminism:
    """Same seed, same stream."""

    def test_same_seed_same_sequence(self) -> None:
        a = SeededRandom(123)
        b = SeededRandom(123)
        assert [a.random() for _ in range(20)] == [b.random() for _ in range(20)]

    def test_different_seed_different_sequence(self) -> None:
        a = SeededRandom(1)
        b = SeededRandom(2)
        assert [a.random() for _ in range(5)] != [b.random() for _ in range(5)]

    def test_callable_matches_random(self) -> None:
        a = SeededRandom(9)
        b = SeededRandom(9)
        assert a() == b.random()


class TestRanges:
    """Bounds of the helper draws."""

    def test_random_in_unit_interval(self) -> None:
        rng = SeededRandom(5)
        for _ in range(500):
            value = rng.random()
            assert 0.0 <= value < 1.0

    def test_randint_is_inclusive(self) -> None:
        rng = SeededRandom(5)
        values = {rng.randint(1, 3) for _ in range(300)}
        assert values == {1, 2, 3}

    def test_uniform_bounds(self) -> None:
        rng = SeededRandom(5)
        for _ in range(200):
            assert -2.0 <= rng.uniform(-2.0, 3.0) < 3.0


class TestCollections:
    """Choice and shuffle helpers."""

    def test_choice_from_empty_raises(self) -> None:
        with pytest.raises(IndexError):
            SeededRandom(1).choice([])

    def test_choices_without_duplicates(self) -> None:
        picked = SeededRandom(3).choices(list(range(10)), 10)
        assert sorted(picked) == list(range(10))

    def test_choices_stops_when_exhausted(self) -> None:
        assert len(SeededRandom(3).choices([1, 2], 5)) == 2

    def test_choices_with_duplicates_fills_count(self) -> None:
        assert len(SeededRandom(3).choices([1, 2], 5, allow_duplicates=True)) == 5

    def test_shuffle_returns_permutation_copy(self) -> None:
        items = list(range(20))
        shuffled = SeededRandom(4).shuffle(items)
        assert sorted(shuffled) == items
        assert items == list(range(20))
        assert shuffled != items

    def test_shuffle_in_place_matches_shuffle(self) -> None:
        items = list(range(15))
        expected = SeededRandom(8).shuffle(items)
        SeededRandom(8).shuffle_in_place(items)
        assert items == expected

    def test_weighted_choice_skips_zero_weight(self) -> None:
        rng = SeededRandom(11)
        picks = {rng.weighted_choice([("never", 0.0), ("always", 1.0)]) for _ in range(200)}
        assert picks == {"always"}

    def test_weighted_choice_follows_weights(self) -> None:
        rng = SeededRandom(11)
        picks = [rng.weighted_choice([("a", 9.0), ("b", 1.0)]) for _ in range(2000)]
        assert picks.count("a") > picks.count("b") * 4


class TestNormal:
    """Box-Muller normal draws."""

    def test_sample_mean_and_spread(self) -> None:
        rng = SeededRandom(21)
        samples = [rng.normal(10.0, 2.0) for _ in range(4000)]
        mean = sum(samples) / len(samples)
        variance = sum((s - mean) ** 2 for s in samples) / len(samples)
        assert mean == pytest.approx(10.0, abs=0.2)
        assert variance**0.5 == pytest.approx(2.0, abs=0.2)

    def test_spawn_seed_range(self) -> None:
        rng = SeededRandom(2)
        for _ in range(50):
            assert 0 <= rng.spawn_seed() < 1_000_000
