"""
Injectable random source for puzzle generation.

Every random decision of the generator (shape types, colours, ids, template
choice, tray order) goes through one ``RandomSource`` so a fixed seed
reproduces a puzzle exactly.
"""

from typing import List, Optional, Sequence, TypeVar

import numpy as np

T = TypeVar("T")

_ID_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"


class RandomSource:
    """Thin wrapper around ``numpy.random.Generator``."""

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._rng = np.random.default_rng(seed)

    def randint(self, upper: int) -> int:
        """Uniform integer in ``[0, upper)``."""
        return int(self._rng.integers(0, upper))

    def choice(self, items: Sequence[T]) -> T:
        """Uniformly pick one element."""
        if not items:
            raise ValueError("Cannot choose from an empty sequence")
        return items[self.randint(len(items))]

    def shuffle(self, items: Sequence[T]) -> List[T]:
        """Return a shuffled copy; the input is left untouched."""
        order = self._rng.permutation(len(items))
        return [items[int(i)] for i in order]

    def token(self, length: int = 7) -> str:
        """Random base-36 string."""
        return "".join(_ID_ALPHABET[self.randint(len(_ID_ALPHABET))] for _ in range(length))
