from __future__ import annotations

from pygame.math import Vector2
from pytest import approx

from conftest import make_agent
from flotilla.sim.core.rng import DeterministicRng
from flotilla.sim.core.world import WorldBounds
from flotilla.sim.systems.wander import (
    WanderMemory,
    WanderPhase,
    WanderStateMachine,
    wander,
    wander_circle_points,
)


def test_wander_without_jitter_projects_straight_ahead():
    agent = make_agent()
    memory = WanderMemory(circle_distance=2.0, circle_radius=1.0, jitter=0.0)
    outcome = wander(agent, memory, DeterministicRng(1), 0.1)
    assert memory.angle == 0.0
    assert memory.circle_center == Vector2(2.0, 0.0)
    assert memory.target_point == Vector2(1.0, 0.0)
    assert outcome.desired.x == approx(5.0)
    assert outcome.desired.y == approx(0.0, abs=1e-9)


def test_wander_angle_accumulates_with_jitter():
    agent = make_agent()
    memory = WanderMemory(jitter=3.0)
    rng = DeterministicRng(5)
    angles = []
    for _ in range(20):
        wander(agent, memory, rng, 0.1)
        angles.append(memory.angle)
        assert agent.velocity.length() <= agent.max_speed + 1e-9
    assert len(set(angles)) > 1
    assert all(abs(b - a) <= 0.3 + 1e-9 for a, b in zip(angles, angles[1:]))


def test_wander_is_reproducible_for_a_seed():
    def run(seed: int) -> tuple[float, float]:
        agent = make_agent()
        memory = WanderMemory(jitter=4.0)
        rng = DeterministicRng(seed)
        for _ in range(50):
            wander(agent, memory, rng, 0.05)
        return agent.position.x, agent.position.y

    assert run(9) == run(9)


def test_wander_circle_points_are_closed():
    memory = WanderMemory(circle_radius=1.5, circle_center=Vector2(2, 0), target_point=Vector2(0, 1.5))
    circle, line = wander_circle_points(Vector2(1, 1), memory, 8)
    assert len(circle) == 9
    assert circle[0] == approx(circle[-1])
    assert line[0] == approx((3.0, 1.0))
    assert line[1] == approx((3.0, 2.5))


def test_state_machine_picks_target_immediately():
    machine = WanderStateMachine(map_bounds=(-1.0, -1.0, 1.0, 1.0), arrival_threshold=0.1)
    agent = make_agent(5.0, 5.0)
    machine.update(agent, DeterministicRng(2), 0.1)
    assert machine.state == WanderPhase.SEEKING
    target = machine.current_target
    assert -1.0 <= target.x <= 1.0
    assert -1.0 <= target.y <= 1.0


def test_state_machine_resamples_on_arrival():
    rng = DeterministicRng(3)
    machine = WanderStateMachine(map_bounds=(-40.0, -40.0, 40.0, 40.0), arrival_threshold=0.5)
    agent = make_agent(100.0, 100.0)
    machine.update(agent, rng, 0.1)
    reached = Vector2(machine.current_target)
    agent.position = Vector2(reached.x + 0.1, reached.y)

    machine.update(agent, rng, 0.1)
    assert machine.state == WanderPhase.WANDERING
    assert machine.current_target != reached
    fresh = Vector2(machine.current_target)

    machine.update(agent, rng, 0.1)
    assert machine.state == WanderPhase.SEEKING
    assert machine.current_target == fresh


def test_state_machine_keeps_full_speed_until_threshold():
    rng = DeterministicRng(4)
    machine = WanderStateMachine(map_bounds=(20.0, 0.0, 20.0, 0.0), arrival_threshold=0.5)
    agent = make_agent(max_force=100.0)
    for expected_x in (5.0, 10.0, 15.0):
        machine.update(agent, rng, 1.0)
        assert agent.velocity.length() == approx(agent.max_speed)
        assert agent.position.x == approx(expected_x)
        assert machine.state == WanderPhase.SEEKING


def test_state_machine_targets_stay_inside_shrunken_world():
    machine = WanderStateMachine(map_bounds=(-8.0, -4.0, 8.0, 4.0), arrival_threshold=0.5)
    world = WorldBounds.from_extents(4.0, 2.0)
    rng = DeterministicRng(11)
    agent = make_agent()
    for _ in range(25):
        machine.update(agent, rng, 0.1, world)
        assert world.contains(machine.current_target)
        agent.position = Vector2(machine.current_target)


def test_state_machine_uses_world_when_areas_do_not_overlap():
    machine = WanderStateMachine(map_bounds=(50.0, 50.0, 60.0, 60.0))
    world = WorldBounds.from_extents(10.0, 10.0)
    machine.update(make_agent(), DeterministicRng(12), 0.1, world)
    assert world.contains(machine.current_target)
