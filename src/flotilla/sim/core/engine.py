from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from pygame.math import Vector2

from .agent import AgentSnapshot, AgentState, Behavior
from .config import ShipConfig, SimulationConfig
from .rng import DeterministicRng
from .world import WorldBounds, wrap_position
from ..systems import steering
from ..systems.dispatch import PATH_POLICIES, visual_channels
from ..systems.paths import Path, follow_path
from ..systems.steering import SteeringOutcome
from ..systems.trail import Trail
from ..systems.wander import WanderMemory, WanderStateMachine, wander, wander_circle_points
from ..types.conditions import Condition
from ..types.visuals import VisualChannel, VisualFrame

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Collaborators:
    # target is a fresh click, None when nothing was clicked this tick
    target: Optional[Vector2] = None
    other: Optional[AgentSnapshot] = None
    path: Optional[Path] = None


@dataclass(slots=True)
class TickResult:
    agent: AgentState
    behavior: Behavior
    desired: Vector2
    steering: Vector2
    wrapped: bool
    conditions: List[Condition] = field(default_factory=list)
    visuals: VisualFrame = field(default_factory=VisualFrame)
    prediction: Optional[Vector2] = None


class BehaviorEngine:
    def __init__(self, agent: AgentState, config: SimulationConfig, rng: DeterministicRng, name: str = "ship"):
        self.agent = agent
        self.name = name
        self._config = config
        self._rng = rng
        wander_config = config.wander
        self.wander_memory = WanderMemory(
            circle_distance=wander_config.circle_distance,
            circle_radius=wander_config.circle_radius,
            jitter=wander_config.jitter,
        )
        self.wander_machine = WanderStateMachine(
            map_bounds=wander_config.map_bounds,
            arrival_threshold=wander_config.arrival_threshold,
        )
        self.path = Path()
        self.trail = Trail(
            duration=config.trail.trail_duration,
            min_point_distance=config.trail.min_point_distance,
        )
        # the click target persists until the next click; ships start parked on it
        self.target = Vector2(agent.position)
        self._clicked = False
        self._behavior = Behavior.IDLE
        self._missing_reported = False
        self._handlers: Dict[Behavior, Callable[[float, WorldBounds, Collaborators, Path], SteeringOutcome]] = {
            Behavior.SEEK_BASIC: self._seek_basic,
            Behavior.SEEK_STEERING: self._seek_steering,
            Behavior.FLEE: self._flee,
            Behavior.ARRIVE: self._arrive,
            Behavior.WANDER: self._wander,
            Behavior.WANDER_STATE_BASED: self._wander_state_based,
            Behavior.PURSUIT_BASIC: self._pursuit_basic,
            Behavior.PURSUIT_IMPROVED: self._pursuit_improved,
            Behavior.EVADE: self._evade,
            Behavior.PATH_PRECISE: self._follow_path,
            Behavior.PATH_SMOOTH: self._follow_path,
            Behavior.PATH_PATROL: self._follow_path,
            Behavior.IDLE: self._idle,
        }
        missing = set(Behavior) - set(self._handlers)
        if missing:
            raise RuntimeError(f"No handler for behaviors: {sorted(b.value for b in missing)}")

    @classmethod
    def from_ship_config(
        cls, ship: ShipConfig, config: SimulationConfig, rng: DeterministicRng, name: str = "ship"
    ) -> "BehaviorEngine":
        agent = AgentState(
            position=Vector2(ship.start_position),
            velocity=Vector2(),
            heading_degrees=ship.start_heading,
            max_speed=ship.move_speed,
            max_force=ship.max_force,
            mass=ship.mass,
            turn_rate_deg_per_sec=ship.rotation_speed,
        )
        return cls(agent, config, rng, name=name)

    @property
    def behavior(self) -> Behavior:
        return self._behavior

    def advance(
        self,
        behavior: Behavior | str | None,
        dt: float,
        bounds: WorldBounds,
        collaborators: Collaborators | None = None,
    ) -> TickResult:
        behavior = Behavior.parse(behavior)
        collaborators = collaborators if collaborators is not None else Collaborators()
        path = collaborators.path if collaborators.path is not None else self.path
        if collaborators.target is not None:
            self.target = Vector2(collaborators.target)
            self._clicked = True
        if behavior != self._behavior:
            self._switch_behavior(behavior, path)

        outcome = self._handlers[behavior](dt, bounds, collaborators, path)
        self._report(behavior, outcome)

        position, wrapped = wrap_position(self.agent.position, bounds)
        self.agent.position = position
        if wrapped:
            self.trail.reset()
        self.trail.record(position, dt)

        return TickResult(
            agent=self.agent,
            behavior=behavior,
            desired=outcome.desired,
            steering=outcome.steering,
            wrapped=wrapped,
            conditions=list(outcome.conditions),
            visuals=self._visuals(behavior, outcome, path),
            prediction=outcome.prediction,
        )

    def _switch_behavior(self, behavior: Behavior, path: Path) -> None:
        previous = self._behavior
        logger.debug("%s behavior %s -> %s", self.name, previous.value, behavior.value)
        if previous in PATH_POLICIES and behavior not in PATH_POLICIES and not path.keep_visible:
            path.invalidate()
        if behavior == Behavior.WANDER_STATE_BASED:
            self.wander_machine.reset()
        self._behavior = behavior
        self._missing_reported = False

    def _report(self, behavior: Behavior, outcome: SteeringOutcome) -> None:
        if Condition.MISSING_DEPENDENCY not in outcome.conditions:
            self._missing_reported = False
            return
        if not self._missing_reported:
            logger.warning("%s cannot run %s: missing target or other agent, idling", self.name, behavior.value)
            self._missing_reported = True

    def _visuals(self, behavior: Behavior, outcome: SteeringOutcome, path: Path) -> VisualFrame:
        channels = visual_channels(behavior)
        frame = VisualFrame(trail=self.trail.polyline())
        position = self.agent.position
        if VisualChannel.WANDER_CIRCLE in channels:
            frame.wander_circle, frame.wander_target_line = wander_circle_points(
                position, self.wander_memory, self._config.wander.circle_segments
            )
        if VisualChannel.PREDICTION_LINE in channels and outcome.prediction is not None:
            frame.prediction_line = [(position.x, position.y), (outcome.prediction.x, outcome.prediction.y)]
        if (VisualChannel.PATH_LINES in channels or path.keep_visible) and not path.is_empty:
            frame.path_polyline = path.polyline(closed=behavior != Behavior.PATH_PATROL)
            frame.waypoint_markers = path.points()
        return frame

    def _idle(self, dt: float, bounds: WorldBounds, collaborators: Collaborators, path: Path) -> SteeringOutcome:
        self.agent.stop()
        return SteeringOutcome()

    def _seek_basic(self, dt: float, bounds: WorldBounds, collaborators: Collaborators, path: Path) -> SteeringOutcome:
        return steering.seek_basic(self.agent, self.target, dt)

    def _seek_steering(
        self, dt: float, bounds: WorldBounds, collaborators: Collaborators, path: Path
    ) -> SteeringOutcome:
        return steering.seek_steering(self.agent, self.target, dt)

    def _flee(self, dt: float, bounds: WorldBounds, collaborators: Collaborators, path: Path) -> SteeringOutcome:
        if self._clicked:
            return steering.flee(self.agent, self.target, dt)
        return steering.flee_from_agent(self.agent, collaborators.other, bounds, dt)

    def _arrive(self, dt: float, bounds: WorldBounds, collaborators: Collaborators, path: Path) -> SteeringOutcome:
        return steering.arrive(self.agent, self.target, dt, self._config.arrive.slowing_radius)

    def _wander(self, dt: float, bounds: WorldBounds, collaborators: Collaborators, path: Path) -> SteeringOutcome:
        return wander(self.agent, self.wander_memory, self._rng, dt)

    def _wander_state_based(
        self, dt: float, bounds: WorldBounds, collaborators: Collaborators, path: Path
    ) -> SteeringOutcome:
        return self.wander_machine.update(self.agent, self._rng, dt, bounds)

    def _pursuit_basic(
        self, dt: float, bounds: WorldBounds, collaborators: Collaborators, path: Path
    ) -> SteeringOutcome:
        return steering.pursuit_basic(self.agent, collaborators.other, bounds, dt)

    def _pursuit_improved(
        self, dt: float, bounds: WorldBounds, collaborators: Collaborators, path: Path
    ) -> SteeringOutcome:
        return steering.pursuit_improved(self.agent, collaborators.other, bounds, dt)

    def _evade(self, dt: float, bounds: WorldBounds, collaborators: Collaborators, path: Path) -> SteeringOutcome:
        return steering.evade(self.agent, collaborators.other, bounds, dt)

    def _follow_path(self, dt: float, bounds: WorldBounds, collaborators: Collaborators, path: Path) -> SteeringOutcome:
        return follow_path(self.agent, path, PATH_POLICIES[self._behavior], bounds, self._config.path, dt)


def advance(
    engine: BehaviorEngine,
    behavior: Behavior | str | None,
    dt: float,
    bounds: WorldBounds,
    collaborators: Collaborators | None = None,
) -> TickResult:
    return engine.advance(behavior, dt, bounds, collaborators)
