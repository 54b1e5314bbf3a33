from __future__ import annotations

from pygame.math import Vector2

from ..core.agent import AgentState
from ..utils.math2d import _clamp_length, _heading_from_vector, _move_towards_angle


def integrate(agent: AgentState, desired: Vector2, dt: float) -> Vector2:
    steering = _clamp_length(desired - agent.velocity, agent.max_force)
    mass = agent.mass if agent.mass > 1e-6 else 1e-6
    velocity = _clamp_length(agent.velocity + steering / mass * dt, agent.max_speed)
    agent.velocity = velocity
    agent.position = agent.position + velocity * dt
    turn_towards(agent, velocity, dt)
    return steering


def turn_towards(agent: AgentState, direction: Vector2, dt: float) -> None:
    if direction.length_squared() <= 1e-8:
        return
    agent.heading_degrees = _move_towards_angle(
        agent.heading_degrees,
        _heading_from_vector(direction),
        agent.turn_rate_deg_per_sec * dt,
    )
