from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque

from pygame.math import Vector2


@dataclass(slots=True)
class TrailPoint:
    position: Vector2
    time: float


@dataclass(slots=True)
class Trail:
    duration: float = 2.0
    min_point_distance: float = 0.1
    clock: float = 0.0
    points: Deque[TrailPoint] = field(default_factory=deque)

    def reset(self) -> None:
        self.points.clear()

    def record(self, position: Vector2, dt: float) -> None:
        self.clock += dt
        if not self.points or self.points[-1].position.distance_to(position) >= self.min_point_distance:
            self.points.append(TrailPoint(Vector2(position), self.clock))
        expiry = self.clock - self.duration
        while self.points and self.points[0].time < expiry:
            self.points.popleft()

    def polyline(self) -> list[tuple[float, float]]:
        return [(point.position.x, point.position.y) for point in self.points]
