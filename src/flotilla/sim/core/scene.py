from __future__ import annotations

from typing import Any, Dict, List, Optional

from pygame.math import Vector2

from .agent import Behavior
from .config import SimulationConfig
from .engine import BehaviorEngine, Collaborators, TickResult
from .rng import DeterministicRng
from .world import WorldBounds
from ..systems.dispatch import complementary_behavior
from ..types.snapshot import Snapshot, SnapshotMetadata, SnapshotWorld

_SECONDARY_RNG_SALT = 0x5EC0DA5A1F0E11A5


class Scene:
    def __init__(self, config: SimulationConfig):
        self._config = config
        self._rng = DeterministicRng(config.seed)
        self.bounds = WorldBounds.from_extents(config.world.width, config.world.height)
        self.tick = 0
        self.behavior = Behavior.IDLE
        self.primary: BehaviorEngine
        self.secondary: Optional[BehaviorEngine]
        self.last_results: List[TickResult] = []
        self._build_engines()

    @property
    def engines(self) -> List[BehaviorEngine]:
        if self.secondary is None:
            return [self.primary]
        return [self.primary, self.secondary]

    def _build_engines(self) -> None:
        config = self._config
        self.primary = BehaviorEngine.from_ship_config(config.ship, config, self._rng, name="primary")
        self.secondary = None
        if config.two_agents:
            self.secondary = BehaviorEngine.from_ship_config(
                config.secondary_ship, config, self._rng.spawn(_SECONDARY_RNG_SALT), name="secondary"
            )

    def reset(self) -> None:
        self._rng.reset()
        self.tick = 0
        self.behavior = Behavior.IDLE
        self.last_results = []
        self._build_engines()

    def step(
        self,
        behavior: Behavior | str | None = None,
        target: Vector2 | None = None,
        bounds: WorldBounds | None = None,
        dt: float | None = None,
    ) -> List[TickResult]:
        if behavior is not None:
            self.behavior = Behavior.parse(behavior)
        if bounds is not None:
            self.bounds = bounds
        dt = self._config.time_step if dt is None else dt

        # both ships read each other as they were before this tick
        primary_view = self.primary.agent.snapshot()
        secondary_view = self.secondary.agent.snapshot() if self.secondary is not None else None

        results = [
            self.primary.advance(
                self.behavior, dt, self.bounds, Collaborators(target=target, other=secondary_view)
            )
        ]
        if self.secondary is not None:
            results.append(
                self.secondary.advance(
                    complementary_behavior(self.behavior), dt, self.bounds, Collaborators(other=primary_view)
                )
            )
        self.tick += 1
        self.last_results = results
        return results

    def snapshot(self) -> Snapshot:
        agents = [self._agent_payload(index, engine) for index, engine in enumerate(self.engines)]
        dt = self._config.time_step
        return Snapshot(
            tick=self.tick,
            behavior=self.behavior.value,
            agents=agents,
            world=SnapshotWorld(
                min_x=self.bounds.min_x,
                min_y=self.bounds.min_y,
                width=self.bounds.width,
                height=self.bounds.height,
            ),
            metadata=SnapshotMetadata(
                sim_dt=dt,
                tick_rate=0.0 if dt <= 0 else 1.0 / dt,
                seed=self._config.seed,
                config_version=self._config.config_version,
            ),
        )

    def _agent_payload(self, index: int, engine: BehaviorEngine) -> Dict[str, Any]:
        agent = engine.agent
        result = self.last_results[index] if index < len(self.last_results) else None
        return {
            "id": index,
            "name": engine.name,
            "x": agent.position.x,
            "y": agent.position.y,
            "vx": agent.velocity.x,
            "vy": agent.velocity.y,
            "speed": agent.speed,
            "heading": agent.heading_degrees,
            "rotation": agent.sprite_rotation_degrees,
            "behavior": engine.behavior.value,
            "wander_state": engine.wander_machine.state.value,
            "wrapped": bool(result.wrapped) if result else False,
            "conditions": [condition.value for condition in result.conditions] if result else [],
            "visuals": result.visuals.as_dict() if result else {},
        }
