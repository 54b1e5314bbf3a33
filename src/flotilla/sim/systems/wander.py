from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from pygame.math import Vector2

from ..core.agent import AgentState
from ..core.rng import DeterministicRng
from ..core.world import WorldBounds
from ..utils.math2d import _safe_normalize
from .integration import integrate
from .steering import SteeringOutcome, seek


@dataclass(slots=True)
class WanderMemory:
    circle_distance: float = 2.0
    circle_radius: float = 1.0
    jitter: float = 2.0
    angle: float = 0.0
    # last projection, relative to the agent, kept for drawing only
    circle_center: Vector2 = field(default_factory=Vector2)
    target_point: Vector2 = field(default_factory=Vector2)


def wander(agent: AgentState, memory: WanderMemory, rng: DeterministicRng, dt: float) -> SteeringOutcome:
    circle_center = agent.forward * memory.circle_distance
    target_point = Vector2(math.cos(memory.angle), math.sin(memory.angle)) * memory.circle_radius
    memory.angle += rng.next_signed_unit() * memory.jitter * dt
    memory.circle_center = circle_center
    memory.target_point = target_point
    desired = _safe_normalize(circle_center + target_point) * agent.max_speed
    outcome = SteeringOutcome(desired=desired)
    outcome.steering = integrate(agent, desired, dt)
    return outcome


def wander_circle_points(
    origin: Vector2, memory: WanderMemory, segments: int
) -> tuple[list[tuple[float, float]], list[tuple[float, float]]]:
    center = origin + memory.circle_center
    segments = max(3, int(segments))
    circle = []
    for index in range(segments + 1):
        theta = 2.0 * math.pi * index / segments
        circle.append(
            (
                center.x + math.cos(theta) * memory.circle_radius,
                center.y + math.sin(theta) * memory.circle_radius,
            )
        )
    target = center + memory.target_point
    return circle, [(center.x, center.y), (target.x, target.y)]


class WanderPhase(str, Enum):
    WANDERING = "Wandering"
    SEEKING = "Seeking"


@dataclass(slots=True)
class WanderStateMachine:
    map_bounds: tuple[float, float, float, float]
    arrival_threshold: float = 0.5
    state: WanderPhase = WanderPhase.WANDERING
    current_target: Optional[Vector2] = None

    def reset(self) -> None:
        self.state = WanderPhase.WANDERING
        self.current_target = None

    def _sample_target(self, rng: DeterministicRng, bounds: Optional[WorldBounds]) -> Vector2:
        left, bottom, right, top = self.map_bounds
        min_x, max_x = sorted((left, right))
        min_y, max_y = sorted((bottom, top))
        if bounds is not None:
            # keep destinations inside a world that shrank below the wander area
            min_x, max_x = max(min_x, bounds.min_x), min(max_x, bounds.max_x)
            min_y, max_y = max(min_y, bounds.min_y), min(max_y, bounds.max_y)
            if min_x > max_x or min_y > max_y:
                min_x, min_y, max_x, max_y = bounds.min_x, bounds.min_y, bounds.max_x, bounds.max_y
        return rng.next_point_in_rect(min_x, min_y, max_x, max_y)

    def update(
        self, agent: AgentState, rng: DeterministicRng, dt: float, bounds: Optional[WorldBounds] = None
    ) -> SteeringOutcome:
        if self.state == WanderPhase.WANDERING:
            if self.current_target is None:
                self.current_target = self._sample_target(rng, bounds)
            self.state = WanderPhase.SEEKING
        elif self.current_target is None:
            self.current_target = self._sample_target(rng, bounds)

        if agent.position.distance_to(self.current_target) < self.arrival_threshold:
            self.state = WanderPhase.WANDERING
            self.current_target = self._sample_target(rng, bounds)
        return seek(agent, self.current_target, dt)
