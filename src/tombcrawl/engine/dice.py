"""Injectable random source for the simulation.

Every random decision in the core (room geometry, spawn counts and kinds,
corridor orientation, confused stumbling) goes through a single
DiceRoller, so a seeded roller makes a whole game reproducible.
"""

from __future__ import annotations

import random
from typing import Sequence, TypeVar

from tombcrawl.core.logging import get_logger


logger = get_logger(__name__)

T = TypeVar("T")


class DiceRoller:
    """Seedable wrapper around :class:`random.Random`.

    Example:
        >>> roller = DiceRoller(seed=42)
        >>> 1 <= roller.randint(1, 6) <= 6
        True
    """

    def __init__(self, *, seed: int | None = None) -> None:
        """Initialize the dice roller.

        Args:
            seed: Optional random seed for reproducible rolls.
        """
        self._seed = seed
        self._random = random.Random(seed)
        logger.debug("DiceRoller initialized", seed=seed)

    @property
    def seed(self) -> int | None:
        return self._seed

    def randint(self, low: int, high: int) -> int:
        """Uniform integer in the inclusive range ``[low, high]``."""
        return self._random.randint(low, high)

    def randrange(self, low: int, high: int) -> int:
        """Uniform integer in the half-open range ``[low, high)``."""
        return self._random.randrange(low, high)

    def coin_flip(self) -> bool:
        return self._random.random() < 0.5

    def delta(self) -> int:
        """A single step offset in ``{-1, 0, 1}``."""
        return self._random.randint(-1, 1)

    def weighted_choice(self, choices: Sequence[tuple[T, int]]) -> T:
        """Pick a value with probability proportional to its weight.

        Entries with a weight of zero are never picked.

        Args:
            choices: ``(value, weight)`` pairs.

        Returns:
            The chosen value.

        Raises:
            ValueError: If no entry has a positive weight.
        """
        total = sum(weight for _, weight in choices if weight > 0)
        if total <= 0:
            raise ValueError("weighted_choice needs at least one positive weight")

        roll = self._random.randint(1, total)
        running = 0
        for value, weight in choices:
            if weight <= 0:
                continue
            running += weight
            if roll <= running:
                return value
        # unreachable: roll never exceeds total
        raise AssertionError("weighted choice fell through")


__all__ = [
    "DiceRoller",
]
