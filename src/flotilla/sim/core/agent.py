from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from pygame.math import Vector2

from ..utils.math2d import _forward_from_heading, _normalize_degrees


class Behavior(str, Enum):
    SEEK_BASIC = "seek-basic"
    SEEK_STEERING = "seek-steering"
    FLEE = "flee"
    ARRIVE = "arrive"
    WANDER = "wander"
    WANDER_STATE_BASED = "wander-state-based"
    PURSUIT_BASIC = "pursuit-basic"
    PURSUIT_IMPROVED = "pursuit-improved"
    EVADE = "evade"
    PATH_PRECISE = "path-precise"
    PATH_SMOOTH = "path-smooth"
    PATH_PATROL = "path-patrol"
    IDLE = "idle"

    @classmethod
    def parse(cls, value: "Behavior | str | None") -> "Behavior":
        if isinstance(value, Behavior):
            return value
        if value is None:
            return cls.IDLE
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.IDLE


@dataclass(slots=True)
class AgentState:
    position: Vector2 = field(default_factory=Vector2)
    velocity: Vector2 = field(default_factory=Vector2)
    heading_degrees: float = 0.0
    max_speed: float = 5.0
    max_force: float = 5.0
    mass: float = 1.0
    turn_rate_deg_per_sec: float = 180.0

    @property
    def forward(self) -> Vector2:
        return _forward_from_heading(self.heading_degrees)

    @property
    def speed(self) -> float:
        return self.velocity.length()

    @property
    def sprite_rotation_degrees(self) -> float:
        # sprites are drawn nose-up, so a bearing of 0 (facing +x) is a -90 rotation
        return _normalize_degrees(self.heading_degrees - 90.0)

    def snapshot(self) -> "AgentSnapshot":
        return AgentSnapshot(
            position=(self.position.x, self.position.y),
            velocity=(self.velocity.x, self.velocity.y),
        )

    def stop(self) -> None:
        self.velocity = Vector2()


@dataclass(frozen=True, slots=True)
class AgentSnapshot:
    position: tuple[float, float]
    velocity: tuple[float, float]

    @property
    def position_vector(self) -> Vector2:
        return Vector2(self.position)

    @property
    def velocity_vector(self) -> Vector2:
        return Vector2(self.velocity)
