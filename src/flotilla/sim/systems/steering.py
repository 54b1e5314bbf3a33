from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Optional

from pygame.math import Vector2

from ..core.agent import AgentSnapshot, AgentState
from ..core.world import WorldBounds, shortest_displacement
from ..types.conditions import Condition
from ..utils.math2d import (
    _forward_from_heading,
    _heading_from_vector,
    _is_degenerate,
    _move_towards,
    _move_towards_angle,
    _safe_normalize,
)
from .integration import integrate, turn_towards

ARRIVAL_EPSILON = 0.1
EVADE_MIN_TIME = 0.1
EVADE_MAX_TIME = 2.0
EVADE_PERPENDICULAR_WEIGHT = 0.3
EVADE_MIN_PREDICTION = 0.1
# squared distance below which a target direction is too short to face
_FACING_EPSILON_SQ = 1e-3


@dataclass(slots=True)
class SteeringOutcome:
    desired: Vector2 = field(default_factory=Vector2)
    steering: Vector2 = field(default_factory=Vector2)
    prediction: Optional[Vector2] = None
    conditions: List[Condition] = field(default_factory=list)


def _missing_dependency(agent: AgentState) -> SteeringOutcome:
    agent.stop()
    return SteeringOutcome(conditions=[Condition.MISSING_DEPENDENCY])


def _seek_desired(agent: AgentState, offset: Vector2, outcome: SteeringOutcome) -> Vector2:
    if _is_degenerate(offset):
        outcome.conditions.append(Condition.DEGENERATE_VECTOR)
    return _safe_normalize(offset) * agent.max_speed


def seek_basic(agent: AgentState, target: Vector2, dt: float) -> SteeringOutcome:
    outcome = SteeringOutcome()
    offset = target - agent.position
    desired = _seek_desired(agent, offset, outcome)
    agent.velocity = Vector2(desired)
    agent.position = _move_towards(agent.position, target, agent.max_speed * dt)
    if offset.length_squared() > _FACING_EPSILON_SQ:
        turn_towards(agent, offset, dt)
    outcome.desired = desired
    outcome.steering = Vector2(desired)
    return outcome


def seek_steering(agent: AgentState, target: Vector2, dt: float) -> SteeringOutcome:
    outcome = SteeringOutcome()
    offset = target - agent.position
    distance_sq = offset.length_squared()
    if distance_sq <= _FACING_EPSILON_SQ:
        agent.stop()
        outcome.conditions.append(Condition.DEGENERATE_VECTOR)
        return outcome
    agent.heading_degrees = _move_towards_angle(
        agent.heading_degrees,
        _heading_from_vector(offset),
        agent.turn_rate_deg_per_sec * dt,
    )
    forward = _forward_from_heading(agent.heading_degrees)
    step = min(agent.max_speed * dt, math.sqrt(distance_sq))
    agent.velocity = forward * (step / dt) if dt > 0.0 else Vector2()
    agent.position = agent.position + forward * step
    outcome.desired = Vector2(agent.velocity)
    outcome.steering = Vector2(agent.velocity)
    return outcome


def seek(agent: AgentState, target: Vector2, dt: float) -> SteeringOutcome:
    outcome = SteeringOutcome()
    desired = _seek_desired(agent, target - agent.position, outcome)
    outcome.desired = desired
    outcome.steering = integrate(agent, desired, dt)
    return outcome


def flee(agent: AgentState, target: Vector2, dt: float) -> SteeringOutcome:
    outcome = SteeringOutcome()
    desired = -_seek_desired(agent, target - agent.position, outcome)
    outcome.desired = desired
    outcome.steering = integrate(agent, desired, dt)
    return outcome


def flee_from_agent(
    agent: AgentState, other: AgentSnapshot | None, bounds: WorldBounds, dt: float
) -> SteeringOutcome:
    if other is None:
        return _missing_dependency(agent)
    outcome = SteeringOutcome()
    offset = shortest_displacement(agent.position, other.position_vector, bounds)
    desired = -_seek_desired(agent, offset, outcome)
    outcome.desired = desired
    outcome.steering = integrate(agent, desired, dt)
    return outcome


def arrive(agent: AgentState, target: Vector2, dt: float, slowing_radius: float) -> SteeringOutcome:
    outcome = SteeringOutcome()
    offset = target - agent.position
    distance = offset.length()
    if distance < ARRIVAL_EPSILON:
        agent.stop()
        return outcome
    speed = agent.max_speed
    if slowing_radius > 0.0 and distance < slowing_radius:
        speed = agent.max_speed * (distance / slowing_radius)
    desired = offset / distance * speed
    outcome.desired = desired
    outcome.steering = integrate(agent, desired, dt)
    return outcome


def pursuit_basic(
    agent: AgentState, other: AgentSnapshot | None, bounds: WorldBounds, dt: float
) -> SteeringOutcome:
    if other is None:
        return _missing_dependency(agent)
    outcome = SteeringOutcome(prediction=other.position_vector)
    offset = shortest_displacement(agent.position, other.position_vector, bounds)
    desired = _seek_desired(agent, offset, outcome)
    outcome.desired = desired
    outcome.steering = integrate(agent, desired, dt)
    return outcome


def pursuit_intercept_time(distance: float, max_speed: float) -> float:
    # the pursuer's own top speed, not the closing speed
    if max_speed <= 1e-6:
        return 0.0
    return distance / max_speed


def pursuit_improved(
    agent: AgentState, other: AgentSnapshot | None, bounds: WorldBounds, dt: float
) -> SteeringOutcome:
    if other is None:
        return _missing_dependency(agent)
    target_position = other.position_vector
    target_velocity = other.velocity_vector
    distance = shortest_displacement(agent.position, target_position, bounds).length()
    predicted = target_position + target_velocity * pursuit_intercept_time(distance, agent.max_speed)
    outcome = SteeringOutcome(prediction=predicted)
    offset = shortest_displacement(agent.position, predicted, bounds)
    desired = _seek_desired(agent, offset, outcome)
    outcome.desired = desired
    outcome.steering = integrate(agent, desired, dt)
    return outcome


def evade_intercept_time(distance: float, max_speed: float, target_speed: float) -> float:
    closing_speed = max_speed + target_speed
    if closing_speed <= 1e-6:
        return EVADE_MAX_TIME
    return max(EVADE_MIN_TIME, min(EVADE_MAX_TIME, distance / closing_speed))


def evade(agent: AgentState, other: AgentSnapshot | None, bounds: WorldBounds, dt: float) -> SteeringOutcome:
    if other is None:
        return _missing_dependency(agent)
    target_position = other.position_vector
    target_velocity = other.velocity_vector
    current = shortest_displacement(agent.position, target_position, bounds)
    lookahead = evade_intercept_time(current.length(), agent.max_speed, target_velocity.length())
    predicted = target_position + target_velocity * lookahead
    outcome = SteeringOutcome(prediction=predicted)
    offset = shortest_displacement(agent.position, predicted, bounds)
    if offset.length() < EVADE_MIN_PREDICTION:
        offset = current
    if _is_degenerate(offset):
        outcome.conditions.append(Condition.DEGENERATE_VECTOR)
    away = -_safe_normalize(offset)
    sideways = _safe_normalize(Vector2(-offset.y, offset.x))
    desired = _safe_normalize(away + sideways * EVADE_PERPENDICULAR_WEIGHT) * agent.max_speed
    outcome.desired = desired
    outcome.steering = integrate(agent, desired, dt)
    return outcome
