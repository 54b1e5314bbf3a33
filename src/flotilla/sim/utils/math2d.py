from __future__ import annotations

import math

from pygame.math import Vector2

def _safe_normalize(vector: Vector2) -> Vector2:
    return _safe_normalize_xy(vector.x, vector.y)


def _safe_normalize_xy(x: float, y: float) -> Vector2:
    magnitude_sq = x * x + y * y
    if magnitude_sq < 1e-10:
        return Vector2()
    inv = 1.0 / math.sqrt(magnitude_sq)
    return Vector2(x * inv, y * inv)


def _is_degenerate(vector: Vector2) -> bool:
    return vector.length_squared() < 1e-10


def _clamp_length(vector: Vector2, max_length: float) -> Vector2:
    if max_length <= 0:
        return Vector2()
    magnitude_sq = vector.length_squared()
    if magnitude_sq <= max_length * max_length:
        return Vector2(vector)
    if magnitude_sq == 0:
        return Vector2()
    return vector.normalize() * max_length


def _normalize_degrees(angle: float) -> float:
    wrapped = math.fmod(angle, 360.0)
    if wrapped <= -180.0:
        wrapped += 360.0
    elif wrapped > 180.0:
        wrapped -= 360.0
    return wrapped


def _delta_angle(current: float, target: float) -> float:
    delta = math.fmod(target - current, 360.0)
    if delta > 180.0:
        delta -= 360.0
    elif delta <= -180.0:
        delta += 360.0
    return delta


def _move_towards_angle(current: float, target: float, max_delta: float) -> float:
    if max_delta <= 0.0:
        return _normalize_degrees(current)
    delta = _delta_angle(current, target)
    if -max_delta <= delta <= max_delta:
        return _normalize_degrees(current + delta)
    return _normalize_degrees(current + math.copysign(max_delta, delta))


def _heading_from_vector(vector: Vector2) -> float:
    if vector.length_squared() < 1e-12:
        return 0.0
    return math.degrees(math.atan2(vector.y, vector.x))


def _forward_from_heading(heading_degrees: float) -> Vector2:
    radians = math.radians(heading_degrees)
    return Vector2(math.cos(radians), math.sin(radians))


def _move_towards(current: Vector2, target: Vector2, max_distance: float) -> Vector2:
    offset = target - current
    distance_sq = offset.length_squared()
    if distance_sq == 0.0 or (max_distance >= 0.0 and distance_sq <= max_distance * max_distance):
        return Vector2(target)
    distance = math.sqrt(distance_sq)
    return current + offset / distance * max_distance
