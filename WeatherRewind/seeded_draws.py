"""Deterministic, ordered draw sequence for reproducible estimates and syntheses."""
import random
from typing import Sequence, TypeVar

T = TypeVar("T")


class DrawSequence:
    """
    A seeded stream of draws, consumed strictly in call order.

    Each estimate or synthesis builds its own instance, so no generator state
    is shared between calls or threads. The same seed and the same sequence
    of calls always yield the same values (Mersenne Twister via random.Random).
    """

    def __init__(self, seed: int):
        self.seed = seed
        self._rng = random.Random(seed)
        self.draws = 0

    def uniform(self, low: float, high: float) -> float:
        """Continuous draw in [low, high]."""
        self.draws += 1
        return self._rng.uniform(low, high)

    def integer(self, low: int, high: int) -> int:
        """Integer draw in [low, high], both ends inclusive."""
        self.draws += 1
        return self._rng.randint(low, high)

    def below(self, upper: int) -> int:
        """Integer draw in [0, upper)."""
        self.draws += 1
        return self._rng.randrange(upper)

    def choice(self, options: Sequence[T]) -> T:
        """Uniform pick; repeated entries weight the pick."""
        self.draws += 1
        return options[self._rng.randrange(len(options))]
