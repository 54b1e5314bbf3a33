from __future__ import annotations

import random

from pygame.math import Vector2


class DeterministicRng:
    def __init__(self, seed: int):
        self._seed = seed
        self._random = random.Random(seed)

    def reset(self) -> None:
        self._random.seed(self._seed)

    def next_signed_unit(self) -> float:
        return self._random.uniform(-1.0, 1.0)

    def next_point_in_rect(self, min_x: float, min_y: float, max_x: float, max_y: float) -> Vector2:
        if max_x < min_x:
            min_x, max_x = max_x, min_x
        if max_y < min_y:
            min_y, max_y = max_y, min_y
        return Vector2(self._random.uniform(min_x, max_x), self._random.uniform(min_y, max_y))

    def spawn(self, salt: int) -> "DeterministicRng":
        return DeterministicRng((int(self._seed) ^ int(salt)) & 0xFFFFFFFFFFFFFFFF)
