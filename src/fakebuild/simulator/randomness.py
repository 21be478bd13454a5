"""Injectable random source.

The simulator never touches the module-level ``random`` generator. Anything
with ``random()``, ``randint()`` and ``choice()`` works, which includes
``random.Random`` itself and the scripted doubles used in tests.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from typing import Protocol, TypeVar, runtime_checkable

T = TypeVar("T")


@runtime_checkable
class RandomSource(Protocol):
    """Source of randomness for outcomes and fake data."""

    def random(self) -> float:
        """Uniform float in [0, 1)."""
        ...

    def randint(self, a: int, b: int) -> int:
        """Uniform integer in [a, b], both inclusive."""
        ...

    def choice(self, seq: Sequence[T]) -> T:
        """Uniformly chosen element of a non-empty sequence."""
        ...


def create_random(seed: int | None = None) -> random.Random:
    """Create an independent generator, seeded for reproducible output."""
    return random.Random(seed)
