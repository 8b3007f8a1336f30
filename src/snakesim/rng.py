from __future__ import annotations

import random
from typing import Sequence, TypeVar

T = TypeVar("T")


class DeterministicRng:
    def __init__(self, seed: int):
        self._seed = seed
        self._random = random.Random(seed)

    def reset(self) -> None:
        self._random.seed(self._seed)

    def next_int(self, max_value: int) -> int:
        return self._random.randrange(max_value)

    def choice(self, items: Sequence[T]) -> T | None:
        if not items:
            return None
        return items[self.next_int(len(items))]
