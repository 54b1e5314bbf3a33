from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List

from pygame.math import Vector2

from ..core.agent import AgentState
from ..core.config import PathConfig
from ..core.world import WorldBounds
from ..types.conditions import Condition
from .steering import SteeringOutcome, seek


class PathPolicy(str, Enum):
    PRECISE = "precise"
    SMOOTH = "smooth"
    PATROL = "patrol"


@dataclass(slots=True)
class Path:
    waypoints: List[Vector2] = field(default_factory=list)
    active_index: int = 0
    direction: int = 1
    keep_visible: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.waypoints

    @property
    def active_waypoint(self) -> Vector2 | None:
        if not self.waypoints:
            return None
        return self.waypoints[self.active_index]

    def invalidate(self) -> None:
        self.waypoints = []
        self.active_index = 0
        self.direction = 1

    def regenerate(self, waypoints: List[Vector2]) -> None:
        self.waypoints = [Vector2(point) for point in waypoints]
        self.active_index = 0
        self.direction = 1

    def points(self) -> list[tuple[float, float]]:
        return [(point.x, point.y) for point in self.waypoints]

    def polyline(self, closed: bool = True) -> list[tuple[float, float]]:
        points = self.points()
        if closed and len(points) > 2:
            points.append(points[0])
        return points


def generate_waypoints(bounds: WorldBounds, config: PathConfig) -> List[Vector2]:
    margin = max(0.0, config.path_generation_margin)
    sides = max(2, int(config.path_sides))
    if sides == 4:
        left = bounds.min_x + margin
        right = bounds.max_x - margin
        bottom = bounds.min_y + margin
        top = bounds.max_y - margin
        if right < left:
            left = right = bounds.center.x
        if top < bottom:
            bottom = top = bounds.center.y
        return [Vector2(left, bottom), Vector2(right, bottom), Vector2(right, top), Vector2(left, top)]
    center = bounds.center
    max_radius = max(0.0, min(bounds.width, bounds.height) * 0.5 - margin)
    radius = min(config.path_generation_radius, max_radius)
    waypoints = []
    for index in range(sides):
        theta = 2.0 * math.pi * index / sides
        waypoints.append(Vector2(center.x + math.cos(theta) * radius, center.y + math.sin(theta) * radius))
    return waypoints


def snap_radius(policy: PathPolicy, config: PathConfig) -> float:
    if policy == PathPolicy.PRECISE:
        return config.waypoint_radius
    return config.smooth_waypoint_radius


def advance_index(index: int, direction: int, count: int, policy: PathPolicy) -> tuple[int, int, bool]:
    if count <= 1:
        return 0, direction, False
    if policy != PathPolicy.PATROL:
        return (index + 1) % count, direction, False
    next_index = index + direction
    if next_index >= count:
        return count - 2, -1, True
    if next_index < 0:
        return 1, 1, True
    return next_index, direction, False


def follow_path(
    agent: AgentState,
    path: Path,
    policy: PathPolicy,
    bounds: WorldBounds,
    config: PathConfig,
    dt: float,
) -> SteeringOutcome:
    if path.is_empty:
        path.regenerate(generate_waypoints(bounds, config))
    if path.active_index >= len(path.waypoints) or path.active_index < 0:
        path.active_index = 0
    corrected = False
    if agent.position.distance_to(path.waypoints[path.active_index]) < snap_radius(policy, config):
        path.active_index, path.direction, corrected = advance_index(
            path.active_index, path.direction, len(path.waypoints), policy
        )
    outcome = seek(agent, path.waypoints[path.active_index], dt)
    if corrected:
        outcome.conditions.append(Condition.BOUNDARY_CORRECTION)
    return outcome
