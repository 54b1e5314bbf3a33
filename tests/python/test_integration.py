from __future__ import annotations

import random

from pygame.math import Vector2
from pytest import approx

from conftest import make_agent
from flotilla.sim.systems.integration import integrate


def test_velocity_and_force_stay_within_limits():
    rng = random.Random(11)
    agent = make_agent(max_speed=3.0, max_force=2.0, mass=0.5)
    for _ in range(300):
        desired = Vector2(rng.uniform(-50, 50), rng.uniform(-50, 50))
        steering = integrate(agent, desired, rng.uniform(0.001, 0.5))
        assert steering.length() <= agent.max_force + 1e-9
        assert agent.velocity.length() <= agent.max_speed + 1e-9


def test_position_advances_by_new_velocity():
    agent = make_agent()
    steering = integrate(agent, Vector2(100, 0), 1.0)
    assert steering.x == approx(5.0)
    assert agent.velocity.x == approx(5.0)
    assert agent.position.x == approx(5.0)


def test_mass_scales_acceleration():
    light = make_agent(mass=1.0, max_speed=100.0)
    heavy = make_agent(mass=4.0, max_speed=100.0)
    integrate(light, Vector2(10, 0), 0.1)
    integrate(heavy, Vector2(10, 0), 0.1)
    assert heavy.velocity.x == approx(light.velocity.x / 4.0)


def test_heading_turns_at_bounded_rate():
    agent = make_agent(turn_rate_deg_per_sec=90.0)
    integrate(agent, Vector2(0, 5), 0.5)
    assert agent.heading_degrees == approx(45.0)
    integrate(agent, Vector2(0, 5), 0.5)
    assert agent.heading_degrees == approx(90.0)


def test_heading_kept_when_velocity_vanishes():
    agent = make_agent(heading_degrees=33.0)
    integrate(agent, Vector2(), 0.1)
    assert agent.velocity == Vector2()
    assert agent.heading_degrees == approx(33.0)
