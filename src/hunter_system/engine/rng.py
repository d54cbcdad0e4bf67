"""Injectable random source.

Every random draw in the engine (loot rarity, stat rolls, cosmetic drops,
upgrade outcomes) goes through a RandomSource handed in by the caller. The
global ``random`` module state is never touched, so a seeded source makes
a whole transition reproducible.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from typing import TypeVar

from hunter_system.core.logging import get_logger


logger = get_logger(__name__)

T = TypeVar("T")


class RandomSource:
    """Seedable random number source.

    Example:
        >>> rng = RandomSource(seed=42)
        >>> 0.0 <= rng.random() < 1.0
        True
    """

    def __init__(self, *, seed: int | None = None) -> None:
        """Initialize the random source.

        Args:
            seed: Optional random seed for reproducible draws.
        """
        self._seed = seed
        self._random = random.Random(seed)
        logger.debug("RandomSource initialized", seed=seed)

    @property
    def seed(self) -> int | None:
        return self._seed

    def random(self) -> float:
        """Draw a float in [0, 1)."""
        return self._random.random()

    def chance(self, probability: float) -> bool:
        """Return True with the given probability."""
        if probability <= 0:
            return False
        if probability >= 1:
            return True
        return self.random() < probability

    def randint(self, low: int, high: int) -> int:
        """Draw an integer in the inclusive range [low, high]."""
        return self._random.randint(low, high)

    def choice(self, options: Sequence[T]) -> T:
        """Pick one element uniformly."""
        return self._random.choice(options)

    def sample(self, options: Sequence[T], k: int) -> list[T]:
        """Pick ``k`` distinct elements."""
        return self._random.sample(list(options), k)


__all__ = [
    "RandomSource",
]
