"""Seeded pseudo-random number generation.

Every generator draws from an explicitly passed ``SeededRandom`` so that a
fixed seed always reproduces the same output.
"""

import math
from typing import Sequence, TypeVar

import numpy as np

T = TypeVar("T")


class SeededRandom:
    """Deterministic random source backed by numpy's PCG64 generator.

    Usage:
        rng = SeededRandom(42)
        rng.random()          # float in [0, 1)
        rng.randint(1, 6)     # inclusive
        rng.shuffle(items)    # returns a shuffled copy
    """

    def __init__(self, seed: int):
        self.seed = int(seed)
        self._generator = np.random.default_rng(self.seed)

    def __call__(self) -> float:
        return self.random()

    def random(self) -> float:
        """Uniform float in [0, 1)."""
        return float(self._generator.random())

    def uniform(self, low: float = 0.0, high: float = 1.0) -> float:
        """Uniform float in [low, high)."""
        return low + self.random() * (high - low)

    def randint(self, low: int, high: int) -> int:
        """Uniform integer in [low, high], both ends inclusive."""
        return low + math.floor(self.random() * (high - low + 1))

    def index(self, length: int) -> int:
        """Uniform index into a sequence of the given length."""
        return math.floor(self.random() * length)

    def choice(self, items: Sequence[T]) -> T:
        """Pick one item uniformly."""
        if not items:
            raise IndexError("Cannot choose from an empty sequence")
        return items[self.index(len(items))]

    def choices(
        self, items: Sequence[T], count: int, allow_duplicates: bool = False
    ) -> list[T]:
        """Pick ``count`` items, without replacement unless allowed."""
        results: list[T] = []
        available = list(items)
        for _ in range(count):
            if not available:
                break
            idx = self.index(len(available))
            results.append(available[idx])
            if not allow_duplicates:
                available.pop(idx)
        return results

    def weighted_choice(self, items: Sequence[tuple[T, float]]) -> T:
        """Pick an item with probability proportional to its weight.

        Args:
            items: (item, weight) pairs.

        Returns:
            The chosen item; the last item when rounding leaves a remainder.
        """
        if not items:
            raise IndexError("Cannot choose from an empty sequence")
        total = sum(weight for _, weight in items)
        remaining = self.random() * total
        for item, weight in items:
            remaining -= weight
            if remaining <= 0:
                return item
        return items[-1][0]

    def shuffle(self, items: Sequence[T]) -> list[T]:
        """Fisher-Yates shuffle into a new list."""
        shuffled = list(items)
        for i in range(len(shuffled) - 1, 0, -1):
            j = self.index(i + 1)
            shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
        return shuffled

    def shuffle_in_place(self, items: list[T]) -> None:
        """Fisher-Yates shuffle of a list in place."""
        for i in range(len(items) - 1, 0, -1):
            j = self.index(i + 1)
            items[i], items[j] = items[j], items[i]

    def normal(self, mean: float = 0.0, std_dev: float = 1.0) -> float:
        """Normally distributed value using the Box-Muller transform."""
        # 1 - u keeps the log argument in (0, 1]
        u1 = 1.0 - self.random()
        u2 = self.random()
        z = math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)
        return z * std_dev + mean

    def spawn_seed(self) -> int:
        """Draw a seed for a derived generator."""
        return math.floor(self.random() * 1_000_000)
