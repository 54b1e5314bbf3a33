from __future__ import annotations

import dataclasses

import pytest
from pygame.math import Vector2
from pytest import approx

from flotilla.sim.core.agent import AgentSnapshot, AgentState


def test_agent_uses_slots_and_isolates_defaults():
    agent_a = AgentState()
    agent_b = AgentState()

    assert not hasattr(agent_a, "__dict__")
    assert hasattr(AgentState, "__slots__")

    agent_a.position.x = 1.5
    assert agent_b.position.x == 0.0


def test_snapshot_is_a_detached_read_only_copy():
    agent = AgentState(position=Vector2(1, 2), velocity=Vector2(3, 4))
    snapshot = agent.snapshot()
    agent.position.x = 99.0
    assert snapshot.position == (1.0, 2.0)
    assert snapshot.velocity_vector.length() == approx(5.0)
    with pytest.raises(dataclasses.FrozenInstanceError):
        snapshot.position = (0.0, 0.0)  # type: ignore[misc]
    assert isinstance(snapshot, AgentSnapshot)


def test_forward_and_sprite_rotation_follow_heading():
    agent = AgentState(heading_degrees=90.0)
    assert agent.forward.y == approx(1.0)
    assert agent.sprite_rotation_degrees == approx(0.0)
