"""Piece randomizers.

The engine only asks for the next template index in ``range(count)``; any
object with a matching ``next_index`` method can be injected.
"""

from __future__ import annotations

import random
from typing import Iterable, List, Optional, Protocol


class PieceRandomizer(Protocol):
    def next_index(self, count: int) -> int: ...


class UniformRandomizer:
    """Uniform choice among templates, reproducible for a given seed."""

    def __init__(self, seed: Optional[int] = None) -> None:
        self.rng = random.Random(seed)

    def next_index(self, count: int) -> int:
        return self.rng.randrange(count)


class SequenceRandomizer:
    """Replays a fixed list of template indices, cycling when exhausted."""

    def __init__(self, indices: Iterable[int]) -> None:
        self.indices: List[int] = list(indices)
        if not self.indices:
            raise ValueError("SequenceRandomizer needs at least one index")
        self.position = 0

    def next_index(self, count: int) -> int:
        index = self.indices[self.position % len(self.indices)]
        self.position += 1
        if not 0 <= index < count:
            raise ValueError(f"template index {index} out of range for {count} templates")
        return index
