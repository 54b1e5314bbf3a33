from __future__ import annotations

import random

import pytest
from pygame.math import Vector2
from pytest import approx

from flotilla.sim.core.world import WorldBounds, shortest_displacement, toroidal_distance, wrap_position


def test_direct_path_kept_when_shorter(bounds):
    offset = shortest_displacement(Vector2(0, 0), Vector2(3, -2), bounds)
    assert offset == Vector2(3, -2)


def test_displacement_crosses_the_seam(bounds):
    offset = shortest_displacement(Vector2(9, 0), Vector2(-9, 0), bounds)
    assert offset.x == approx(2.0)
    assert offset.y == approx(0.0)

    offset = shortest_displacement(Vector2(0, -4.5), Vector2(0, 4.5), bounds)
    assert offset.y == approx(-1.0)


def test_displacement_components_never_exceed_half_extent(bounds):
    rng = random.Random(3)
    for _ in range(500):
        origin = Vector2(rng.uniform(-40, 40), rng.uniform(-25, 25))
        target = Vector2(rng.uniform(-40, 40), rng.uniform(-25, 25))
        offset = shortest_displacement(origin, target, bounds)
        assert abs(offset.x) <= bounds.width / 2 + 1e-9
        assert abs(offset.y) <= bounds.height / 2 + 1e-9
        landed = origin + offset
        assert (landed.x - target.x) / bounds.width == approx(round((landed.x - target.x) / bounds.width), abs=1e-9)
        assert (landed.y - target.y) / bounds.height == approx(round((landed.y - target.y) / bounds.height), abs=1e-9)


def test_toroidal_distance_uses_wrapped_path(bounds):
    assert toroidal_distance(Vector2(-9.5, 0), Vector2(9.5, 0), bounds) == approx(1.0)


def test_wrap_resets_to_opposite_edge(bounds):
    position, wrapped = wrap_position(Vector2(10.5, 1.0), bounds)
    assert wrapped
    assert position.x == approx(bounds.min_x)
    assert position.y == approx(1.0)

    position, wrapped = wrap_position(Vector2(0.0, -5.2), bounds)
    assert wrapped
    assert position.y == approx(bounds.max_y)


def test_wrap_leaves_inside_points_alone(bounds):
    original = Vector2(3.25, -1.5)
    position, wrapped = wrap_position(original, bounds)
    assert not wrapped
    assert position == original
    assert position is not original


@pytest.mark.parametrize("width,height", [(0.0, 10.0), (10.0, -1.0)])
def test_degenerate_bounds_do_not_wrap(width, height):
    bounds = WorldBounds(0.0, 0.0, width, height)
    position, wrapped = wrap_position(Vector2(50, 50), bounds)
    assert not wrapped
    assert position == Vector2(50, 50)
