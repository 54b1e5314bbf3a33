from __future__ import annotations

import math
from dataclasses import dataclass

from pygame.math import Vector2


@dataclass(frozen=True, slots=True)
class WorldBounds:
    min_x: float
    min_y: float
    width: float
    height: float

    @staticmethod
    def from_extents(width: float, height: float) -> "WorldBounds":
        return WorldBounds(-width * 0.5, -height * 0.5, width, height)

    @property
    def max_x(self) -> float:
        return self.min_x + self.width

    @property
    def max_y(self) -> float:
        return self.min_y + self.height

    @property
    def center(self) -> Vector2:
        return Vector2(self.min_x + self.width * 0.5, self.min_y + self.height * 0.5)

    def contains(self, point: Vector2) -> bool:
        return self.min_x <= point.x <= self.max_x and self.min_y <= point.y <= self.max_y


def _wrap_axis(delta: float, extent: float) -> float:
    if extent <= 0.0:
        return delta
    half = extent * 0.5
    if -half <= delta <= half:
        return delta
    wrapped = math.fmod(delta + half, extent)
    if wrapped < 0.0:
        wrapped += extent
    return wrapped - half


def shortest_displacement(origin: Vector2, target: Vector2, bounds: WorldBounds) -> Vector2:
    dx = _wrap_axis(target.x - origin.x, bounds.width)
    dy = _wrap_axis(target.y - origin.y, bounds.height)
    return Vector2(dx, dy)


def toroidal_distance(origin: Vector2, target: Vector2, bounds: WorldBounds) -> float:
    return shortest_displacement(origin, target, bounds).length()


def wrap_position(position: Vector2, bounds: WorldBounds) -> tuple[Vector2, bool]:
    if bounds.width <= 0.0 or bounds.height <= 0.0:
        return Vector2(position), False
    # normalized viewport coords: past 1 resets to 0, below 0 resets to 1
    u = (position.x - bounds.min_x) / bounds.width
    v = (position.y - bounds.min_y) / bounds.height
    wrapped = False
    if u > 1.0:
        u = 0.0
        wrapped = True
    elif u < 0.0:
        u = 1.0
        wrapped = True
    if v > 1.0:
        v = 0.0
        wrapped = True
    elif v < 0.0:
        v = 1.0
        wrapped = True
    if not wrapped:
        return Vector2(position), False
    return Vector2(bounds.min_x + u * bounds.width, bounds.min_y + v * bounds.height), True
